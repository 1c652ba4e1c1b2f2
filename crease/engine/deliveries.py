"""
Delivery processor: applies one scored ball (runs or an extra) to the
current innings.

    Category        counted  strike rotates on   batsman credited
    normal (0-6)    yes      odd runs            runs, faced +1
    wide            no       never               nothing
    no ball         no       odd runs - 1        runs - 1, faced +1
    bye / leg bye   yes      odd runs            faced +1 only

The caller is expected to have passed the action through the validation gate.
"""
import logging
from typing import Optional, Union

from crease.engine.batsmen import swap_strike, require_striker
from crease.engine.calculations import BOUNDARY_FOUR, BOUNDARY_SIX, strike_rate
from crease.engine.commentary import ball_commentary, describe_ball
from crease.engine.overs import credit_bowler_ball, refresh_economy, advance_ball
from crease.engine.result import check_completion
from crease.engine.scorebook import record_ball, add_to_partnership
from crease.engine.state import Match, Innings, Ball, Player, ExtraKind

logger = logging.getLogger(__name__)


def _credit_batsman(batsman: Player, runs: int, faced: bool):
    stats = batsman.batting_stats
    if faced:
        stats.balls_faced += 1
    if runs > 0:
        stats.runs += runs
        if runs == BOUNDARY_FOUR:
            stats.fours += 1
        elif runs == BOUNDARY_SIX:
            stats.sixes += 1
    stats.strike_rate = strike_rate(stats.runs, stats.balls_faced)


def _charge_bowler(bowler: Player, runs: int, extra: Optional[ExtraKind], counted: bool):
    stats = bowler.bowling_stats
    if extra is None or extra.charged_to_bowler:
        stats.runs += runs
    if extra is ExtraKind.WIDE:
        stats.wides += 1
    elif extra is ExtraKind.NO_BALL:
        stats.no_balls += 1
    if counted:
        credit_bowler_ball(bowler)
    refresh_economy(bowler)


def apply_delivery(
    match: Match,
    runs: int,
    is_extra: bool = False,
    extra_type: Optional[Union[ExtraKind, str]] = None,
) -> Innings:
    """Mutate `match` in place for one delivery and return the innings it was scored in"""
    innings = match.require_innings()
    batting = match.team(innings.batting_team_id)
    bowling = match.team(innings.bowling_team_id)
    extra = ExtraKind(extra_type) if is_extra else None

    striker = require_striker(innings, batting)
    bowler = bowling.get_player(innings.current_bowler_id)

    counted = extra is None or extra.counts_ball
    faced = extra is not ExtraKind.WIDE
    if extra is None:
        bat_runs = runs
    elif extra is ExtraKind.NO_BALL:
        bat_runs = runs - 1
    else:
        bat_runs = 0

    ball_number = innings.balls + 1
    record_ball(innings, Ball(
        over=innings.overs,
        ball_number=ball_number,
        bowler=bowler.id,
        batsman=striker.id,
        runs=runs,
        is_extra=extra is not None,
        extra_type=extra,
        extra_runs=runs if extra else 0,
        commentary=describe_ball(
            innings.overs, ball_number, bowler.name, striker.name, ball_commentary(runs, extra)
        ),
    ))

    innings.score += runs
    if extra is not None:
        innings.extras += runs

    _credit_batsman(striker, bat_runs, faced)
    _charge_bowler(bowler, runs, extra, counted)
    add_to_partnership(innings, runs, counted)

    if extra is ExtraKind.NO_BALL:
        innings.free_hit = True
    elif counted:
        innings.free_hit = False

    if extra is ExtraKind.NO_BALL:
        rotating_runs = bat_runs
    elif counted:
        rotating_runs = runs
    else:
        rotating_runs = 0
    if rotating_runs % 2 == 1:
        swap_strike(innings)

    if counted:
        advance_ball(innings)

    logger.debug(
        "Innings %d: %s%s -> %d/%d (%s)",
        innings.number, runs, f" {extra.value}" if extra else "",
        innings.score, innings.wickets, innings.overs_display,
    )
    check_completion(match, innings)
    return innings
