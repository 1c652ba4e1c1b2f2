"""
Innings/match completion and result calculation.
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional, List

from crease.engine.calculations import (
    pluralize, balls_remaining, overs_as_decimal,
    IMPACT_PER_WICKET, IMPACT_PER_CATCH, IMPACT_PER_RUN_OUT,
)
from crease.engine.scorebook import close_partnership
from crease.engine.state import Match, Innings, Player, Awards, CompletionReason

logger = logging.getLogger(__name__)

TIE = "Tie"
NO_RESULT = "No Result"


@dataclass
class MatchOutcome:
    winner: str
    result: str
    margin: Optional[int] = None
    margin_type: Optional[str] = None  # "runs" or "wickets"
    balls_remaining: Optional[int] = None


def innings_target(match: Match, innings: Innings) -> Optional[int]:
    if innings.number != 2:
        return None
    if innings.target is not None:
        return innings.target
    if match.first_innings is not None:
        return match.first_innings.score + 1
    return None


def completion_reason(match: Match, innings: Innings) -> Optional[CompletionReason]:
    """Why the innings is over, or None while it continues"""
    target = innings_target(match, innings)
    if target is not None and innings.score >= target:
        return CompletionReason.TARGET_REACHED
    if innings.wickets >= match.team(innings.batting_team_id).max_wickets:
        return CompletionReason.ALL_OUT
    if innings.overs >= match.total_overs:
        return CompletionReason.OVERS_COMPLETE
    return None


def check_completion(match: Match, innings: Innings) -> bool:
    """Close the innings (and possibly the match) if an end condition holds"""
    reason = completion_reason(match, innings)
    if reason is None:
        return False
    complete_innings(match, innings, reason)
    return True


def _close(innings: Innings, reason: CompletionReason):
    innings.is_complete = True
    innings.completion_reason = reason
    innings.free_hit = False
    innings.needs_new_bowler = False
    innings.needs_new_batsman = False
    innings.vacated_batsman_id = None
    close_partnership(innings)


def complete_innings(match: Match, innings: Innings, reason: CompletionReason):
    _close(innings, reason)
    logger.info(
        "Innings %d complete (%s): %d/%d in %s overs",
        innings.number, reason.value, innings.score, innings.wickets, innings.overs_display,
    )
    if innings.number == 1:
        match.current_innings = 2
        logger.info("Target for second innings: %d", innings.score + 1)
    else:
        finish_match(match)


def finish_match(match: Match):
    match.is_complete = True
    match.is_live = False
    outcome = calculate_result(match)
    match.winner = outcome.winner
    match.result = outcome.result
    match.awards = calculate_awards(match)
    logger.info("Match %s complete: %s", match.id, outcome.result)


def calculate_result(match: Match) -> MatchOutcome:
    first_team = match.team(match.batting_first)
    second_team = match.other_team(match.batting_first)
    first = match.first_innings
    second = match.second_innings
    first_score = first.score if first else 0
    second_score = second.score if second else 0

    if second_score > first_score:
        wickets_left = second_team.size - (second.wickets if second else 0)
        remaining = balls_remaining(match.total_overs, second.overs, second.balls) if second else None
        return MatchOutcome(
            winner=second_team.name,
            result=f"{second_team.name} won by {pluralize(wickets_left, 'wicket')}",
            margin=wickets_left,
            margin_type="wickets",
            balls_remaining=remaining,
        )
    if first_score > second_score:
        run_margin = first_score - second_score
        return MatchOutcome(
            winner=first_team.name,
            result=f"{first_team.name} won by {pluralize(run_margin, 'run')}",
            margin=run_margin,
            margin_type="runs",
        )
    return MatchOutcome(winner=TIE, result="Match tied")


def end_match_early(match: Match):
    """Force completion with whatever has been scored so far"""
    innings = match.innings
    if innings is not None and not innings.is_complete:
        _close(innings, CompletionReason.ENDED_EARLY)

    match.is_complete = True
    match.is_live = False

    if match.second_innings is None:
        match.winner = NO_RESULT
        if match.first_innings is not None and match.first_innings.is_complete:
            match.result = "Match abandoned at the innings break"
        else:
            match.result = "Match abandoned during the first innings"
    else:
        outcome = calculate_result(match)
        match.winner = outcome.winner
        match.result = f"{outcome.result} (match ended early)"

    match.awards = calculate_awards(match)
    logger.info("Match %s ended early: %s", match.id, match.result)


def _bowler_economy_key(player: Player) -> float:
    stats = player.bowling_stats
    if stats.overs == 0:
        return math.inf
    return stats.runs / overs_as_decimal(stats.overs, stats.balls)


def best_batsman(players: List[Player]) -> Optional[Player]:
    candidates = [p for p in players if p.batting_stats.runs > 0]
    if not candidates:
        return None
    return max(candidates, key=lambda p: (p.batting_stats.runs, p.batting_stats.strike_rate))


def best_bowler(players: List[Player]) -> Optional[Player]:
    candidates = [p for p in players if p.bowling_stats.wickets > 0 or p.bowling_stats.overs > 0]
    if not candidates:
        return None
    return min(candidates, key=lambda p: (-p.bowling_stats.wickets, _bowler_economy_key(p)))


def impact_score(player: Player) -> int:
    return (
        player.batting_stats.runs
        + player.bowling_stats.wickets * IMPACT_PER_WICKET
        + player.fielding_stats.catches * IMPACT_PER_CATCH
        + player.fielding_stats.run_outs * IMPACT_PER_RUN_OUT
    )


def man_of_the_match(players: List[Player]) -> Optional[Player]:
    if not players:
        return None
    top = max(players, key=impact_score)
    return top if impact_score(top) > 0 else None


def calculate_awards(match: Match) -> Awards:
    players = match.all_players()
    batsman = best_batsman(players)
    bowler = best_bowler(players)
    motm = man_of_the_match(players)
    return Awards(
        best_batsman_id=batsman.id if batsman else None,
        best_bowler_id=bowler.id if bowler else None,
        man_of_the_match_id=motm.id if motm else None,
    )
