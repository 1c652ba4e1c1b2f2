"""
Wicket processor.

The dismissed player is the striker, except for a run out (either batsman,
named explicitly) and retired hurt (named explicitly, else the striker).
Retired hurt vacates the crease without marking the batsman out, but it still
adds to the innings wicket count.
"""
import logging
from typing import Optional, Union

from crease.engine.batsmen import require_striker
from crease.engine.calculations import strike_rate
from crease.engine.commentary import wicket_commentary, describe_ball
from crease.engine.overs import credit_bowler_ball, refresh_economy, advance_ball
from crease.engine.result import check_completion
from crease.engine.scorebook import record_ball, add_to_partnership, close_partnership
from crease.engine.state import Match, Innings, Ball, Player, DismissalKind

logger = logging.getLogger(__name__)


def dismissed_batsman_id(innings: Innings, kind: DismissalKind, out_batsman_id: Optional[str]) -> Optional[str]:
    if kind is DismissalKind.RUN_OUT:
        return out_batsman_id
    if kind is DismissalKind.RETIRED_HURT:
        return out_batsman_id or innings.striker_id
    return innings.striker_id


def _credit_fielder(fielder: Optional[Player], kind: DismissalKind):
    if fielder is None:
        return
    stats = fielder.fielding_stats
    if kind is DismissalKind.CAUGHT:
        stats.catches += 1
    elif kind is DismissalKind.RUN_OUT:
        stats.run_outs += 1
    elif kind is DismissalKind.STUMPED:
        stats.stumpings += 1


def apply_wicket(
    match: Match,
    dismissal_type: Union[DismissalKind, str],
    out_batsman_id: Optional[str] = None,
    fielder_id: Optional[str] = None,
) -> Innings:
    """Mutate `match` in place for one dismissal and return the innings it fell in"""
    innings = match.require_innings()
    batting = match.team(innings.batting_team_id)
    bowling = match.team(innings.bowling_team_id)
    kind = DismissalKind(dismissal_type)

    striker = require_striker(innings, batting)
    out_player = batting.get_player(dismissed_batsman_id(innings, kind, out_batsman_id))
    bowler = bowling.find_player(innings.current_bowler_id)
    fielder = bowling.find_player(fielder_id)

    free_hit = innings.free_hit
    counted = not (kind is DismissalKind.RUN_OUT and free_hit)
    credit_bowler = bowler is not None and kind.credits_bowler

    ball_number = innings.balls + 1
    line = wicket_commentary(kind, out_player.name, free_hit)
    if bowler is not None:
        text = describe_ball(innings.overs, ball_number, bowler.name, striker.name, line)
    else:
        text = f"{innings.overs}.{ball_number} {line}"
    record_ball(innings, Ball(
        over=innings.overs,
        ball_number=ball_number,
        bowler=bowler.id if bowler else None,
        batsman=striker.id,
        is_wicket=True,
        dismissal_type=kind,
        dismissed_player=out_player.id,
        commentary=text,
    ))

    stats = out_player.batting_stats
    if kind is DismissalKind.RETIRED_HURT:
        stats.is_retired_hurt = True
    else:
        stats.is_out = True
        stats.dismissal_type = kind
        if credit_bowler:
            stats.dismissed_by = bowler.id
        elif fielder is not None:
            stats.dismissed_by = fielder.id

    if counted and kind is not DismissalKind.RETIRED_HURT:
        striker.batting_stats.balls_faced += 1
        striker.batting_stats.strike_rate = strike_rate(
            striker.batting_stats.runs, striker.batting_stats.balls_faced
        )

    if credit_bowler:
        bowler.bowling_stats.wickets += 1
        if counted:
            credit_bowler_ball(bowler)
        refresh_economy(bowler)

    _credit_fielder(fielder, kind)

    innings.wickets += 1
    innings.free_hit = False
    add_to_partnership(innings, 0, counted)
    close_partnership(innings)

    innings.needs_new_batsman = True
    innings.vacated_batsman_id = out_player.id

    if counted:
        advance_ball(innings)

    logger.info(
        "Innings %d: %s %s, %d/%d (%s)",
        innings.number, out_player.name, kind.label,
        innings.score, innings.wickets, innings.overs_display,
    )
    check_completion(match, innings)
    return innings
