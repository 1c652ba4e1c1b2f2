"""
Over and bowler transitions.

A counted sixth ball closes the over: the batsmen swap ends regardless of the
runs taken, and the bowler who just finished sits out the next over only.
"""
import logging
from typing import List

from crease.engine.batsmen import swap_strike
from crease.engine.calculations import BALLS_PER_OVER, economy_rate
from crease.engine.state import Innings, Player, Team

logger = logging.getLogger(__name__)


def credit_bowler_ball(bowler: Player):
    stats = bowler.bowling_stats
    stats.balls += 1
    if stats.balls >= BALLS_PER_OVER:
        stats.overs += stats.balls // BALLS_PER_OVER
        stats.balls = stats.balls % BALLS_PER_OVER


def refresh_economy(bowler: Player):
    stats = bowler.bowling_stats
    stats.economy_rate = economy_rate(stats.runs, stats.overs, stats.balls)


def advance_ball(innings: Innings) -> bool:
    """Count a legal delivery. Returns True when it completed the over."""
    innings.balls += 1
    if innings.balls == BALLS_PER_OVER:
        complete_over(innings)
        return True
    return False


def complete_over(innings: Innings):
    innings.overs += 1
    innings.balls = 0
    swap_strike(innings)

    logger.debug("Innings %d: over %d complete, bowled by %s", innings.number, innings.overs, innings.current_bowler_id)
    if innings.current_bowler_id is not None:
        innings.last_bowler_id = innings.current_bowler_id
    innings.current_bowler_id = None
    innings.needs_new_bowler = True


def eligible_bowlers(innings: Innings, roster: Team) -> List[Player]:
    """Anyone in the fielding XI except the bowler of the previous over"""
    if innings.last_bowler_id is None:
        return list(roster.playing_xi)
    return [p for p in roster.playing_xi if p.id != innings.last_bowler_id]


def is_eligible_bowler(innings: Innings, roster: Team, bowler_id: str) -> bool:
    return any(p.id == bowler_id for p in eligible_bowlers(innings, roster))
