"""
Cricket constants and the arithmetic shared by the scoring engine.
"""
from typing import Optional

BALLS_PER_OVER = 6
BOUNDARY_FOUR = 4
BOUNDARY_SIX = 6

MAX_RUNS_PER_BALL = 6
MIN_EXTRA_RUNS = 1
MAX_EXTRAS_PER_BALL = 5

MIN_OVERS = 1
MAX_OVERS = 50
T20_OVERS = 20
ODI_OVERS = 50

# Share of the innings (in overs) that counts as powerplay / middle overs
POWERPLAY_SHARE = 0.30
MIDDLE_SHARE = 0.80

# Man of the match impact weights
IMPACT_PER_WICKET = 20
IMPACT_PER_CATCH = 10
IMPACT_PER_RUN_OUT = 15


def strike_rate(runs: int, balls_faced: int) -> float:
    if balls_faced == 0:
        return 0.0
    return (runs / balls_faced) * 100


def overs_as_decimal(overs: int, balls: int) -> float:
    """4 overs and 3 balls -> 4.5"""
    return overs + balls / BALLS_PER_OVER


def economy_rate(runs: int, overs: int, balls: int) -> float:
    total = overs_as_decimal(overs, balls)
    if total == 0:
        return 0.0
    return runs / total


def run_rate(runs: int, overs: int, balls: int) -> float:
    total = overs_as_decimal(overs, balls)
    if total == 0:
        return 0.0
    return runs / total


def balls_remaining(total_overs: int, overs: int, balls: int) -> int:
    return max(0, total_overs * BALLS_PER_OVER - (overs * BALLS_PER_OVER + balls))


def required_run_rate(target: int, score: int, total_overs: int, overs: int, balls: int) -> Optional[float]:
    """Runs still needed per over. None once no balls are left."""
    left = balls_remaining(total_overs, overs, balls)
    if left == 0:
        return None
    return max(0, target - score) / (left / BALLS_PER_OVER)


def format_overs(overs: int, balls: int) -> str:
    return f"{overs}.{balls}"


def max_wickets(team_size: int) -> int:
    """A side of N players is all out after N - 1 wickets."""
    return max(1, team_size - 1)


def match_phase(overs: int, total_overs: int) -> str:
    if total_overs <= 0:
        return "powerplay"
    share = overs / total_overs
    if share < POWERPLAY_SHARE:
        return "powerplay"
    if share < MIDDLE_SHARE:
        return "middle"
    return "death"


def pluralize(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"
