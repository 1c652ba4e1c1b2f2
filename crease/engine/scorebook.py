"""
Innings logs: ball history, over history, commentary and partnerships.

The processors append here; nothing in the rules reads these logs back.
"""
from typing import Optional

from crease.engine.state import Innings, Ball, Over, CommentaryEntry, Partnership


def current_over(innings: Innings, bowler_id: Optional[str]) -> Over:
    number = innings.overs + 1
    if innings.over_history and innings.over_history[-1].number == number:
        over = innings.over_history[-1]
        if over.bowler is None:
            over.bowler = bowler_id
        return over
    over = Over(number=number, bowler=bowler_id)
    innings.over_history.append(over)
    return over


def record_ball(innings: Innings, ball: Ball):
    """Append to the ball log and the over it belongs to. Call before counting the ball."""
    innings.ball_history.append(ball)
    over = current_over(innings, ball.bowler)
    over.balls.append(ball)
    over.runs += ball.runs
    if ball.is_extra:
        over.extras += ball.runs
    if ball.is_wicket and ball.dismissal_type and ball.dismissal_type.credits_bowler:
        over.wickets += 1
    innings.commentary.append(CommentaryEntry(
        over=ball.over,
        ball=ball.ball_number,
        text=ball.commentary,
        runs=ball.runs,
        is_wicket=ball.is_wicket,
        is_extra=ball.is_extra,
    ))


def start_partnership(innings: Innings):
    current = innings.current_partnership
    if current is not None:
        current.is_unbroken = False
        current.end_over = innings.overs_display
    innings.partnerships.append(Partnership(
        batsmen=[innings.striker_id, innings.non_striker_id],
        start_over=innings.overs_display,
    ))


def add_to_partnership(innings: Innings, runs: int, counted: bool):
    current = innings.current_partnership
    if current is None:
        return
    current.runs += runs
    if counted:
        current.balls += 1


def close_partnership(innings: Innings):
    current = innings.current_partnership
    if current is not None:
        current.is_unbroken = False
        current.end_over = innings.overs_display
