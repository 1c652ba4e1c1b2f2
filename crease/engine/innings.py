"""
Innings lifecycle: starting the match and the second innings, and filling the
selections the processors leave open (new batsman, new bowler).

Every operation here returns a ValidationResult and only mutates the match
when it is valid.
"""
import logging
from typing import Optional, Tuple, Union

from crease.engine.batsmen import swap_strike
from crease.engine.overs import is_eligible_bowler
from crease.engine.scorebook import start_partnership
from crease.engine.state import Match, Innings, Team, TossDecision, MatchType
from crease.validators.scoring_validator import ValidationResult, validate_match_setup, validate_openers

logger = logging.getLogger(__name__)


def open_innings(number: int, batting: Team, bowling: Team, striker_id: str, non_striker_id: str,
                 bowler_id: Optional[str] = None, target: Optional[int] = None) -> Innings:
    innings = Innings(
        number=number,
        batting_team_id=batting.id,
        bowling_team_id=bowling.id,
        target=target,
        striker_id=striker_id,
        non_striker_id=non_striker_id,
        current_bowler_id=bowler_id,
        needs_new_bowler=bowler_id is None,
    )
    start_partnership(innings)
    return innings


def start_match(
    team1: Team,
    team2: Team,
    total_overs: int,
    toss_winner_id: str,
    toss_decision: Union[TossDecision, str],
    striker_id: str,
    non_striker_id: str,
    bowler_id: Optional[str] = None,
    match_type: Union[MatchType, str] = MatchType.T20,
    venue: Optional[str] = None,
) -> Tuple[Optional[Match], ValidationResult]:
    """
    Build a live match from the toss outcome and the opening selections.

    The team batting first follows from the toss: the winner bats when they
    chose to bat, otherwise the other side does.
    """
    try:
        decision = TossDecision(toss_decision)
        kind = MatchType(match_type)
    except ValueError as e:
        return None, ValidationResult.from_errors([str(e)])

    batting = None
    if toss_winner_id in (team1.id, team2.id):
        winner = team1 if toss_winner_id == team1.id else team2
        loser = team2 if winner is team1 else team1
        batting = winner if decision is TossDecision.BAT else loser

    result = validate_match_setup(
        team1, team2, total_overs, toss_winner_id, batting, striker_id, non_striker_id, bowler_id
    )
    if not result.valid:
        return None, result

    bowling = team2 if batting is team1 else team1
    match = Match(
        team1=team1,
        team2=team2,
        total_overs=total_overs,
        batting_first=batting.id,
        toss_winner=toss_winner_id,
        toss_decision=decision,
        is_live=True,
        match_type=kind,
        venue=venue,
    )
    match.first_innings = open_innings(1, batting, bowling, striker_id, non_striker_id, bowler_id)
    logger.info(
        "Match %s started: %s vs %s, %d overs, %s bat first",
        match.id, team1.name, team2.name, total_overs, batting.name,
    )
    return match, result


def start_second_innings(match: Match, striker_id: str, non_striker_id: str,
                         bowler_id: Optional[str] = None) -> ValidationResult:
    first = match.first_innings
    if match.is_complete:
        return ValidationResult.from_errors(["Match is already complete"])
    if first is None or not first.is_complete:
        return ValidationResult.from_errors(["First innings is not complete"])
    if match.second_innings is not None:
        return ValidationResult.from_errors(["Second innings has already started"])

    batting = match.other_team(match.batting_first)
    bowling = match.team(match.batting_first)
    result = validate_openers(batting, bowling, striker_id, non_striker_id, bowler_id)
    if not result.valid:
        return result

    target = first.score + 1
    match.current_innings = 2
    match.second_innings = open_innings(2, batting, bowling, striker_id, non_striker_id, bowler_id, target)
    logger.info("Second innings started: %s need %d", batting.name, target)
    return result


def _open_innings_errors(match: Match) -> Optional[ValidationResult]:
    if match.is_complete:
        return ValidationResult.from_errors(["Match is already complete"])
    innings = match.innings
    if innings is None:
        return ValidationResult.from_errors(["No active innings found"])
    if innings.is_complete:
        return ValidationResult.from_errors(["Innings is already complete"])
    return None


def _vacant_slot(innings: Innings) -> Optional[str]:
    """'striker' or 'non_striker', whichever the incoming batsman fills"""
    if innings.vacated_batsman_id is not None:
        if innings.striker_id == innings.vacated_batsman_id:
            return "striker"
        if innings.non_striker_id == innings.vacated_batsman_id:
            return "non_striker"
    if innings.striker_id is None:
        return "striker"
    if innings.non_striker_id is None:
        return "non_striker"
    return None


def assign_new_batsman(match: Match, batsman_id: str) -> ValidationResult:
    failure = _open_innings_errors(match)
    if failure:
        return failure
    innings = match.innings
    batting = match.team(innings.batting_team_id)

    slot = _vacant_slot(innings)
    if not innings.needs_new_batsman and slot is None:
        return ValidationResult.from_errors(["No batsman replacement is pending"])
    if slot is None:
        return ValidationResult.from_errors(["Cannot find the vacated batting position"])

    player = batting.find_player(batsman_id)
    errors = []
    if player is None:
        errors.append(f"Batsman {batsman_id} is not in the {batting.name} playing XI")
    elif batsman_id in (innings.striker_id, innings.non_striker_id):
        errors.append(f"{player.name} is already at the crease")
    elif player.is_dismissed:
        errors.append(f"{player.name} is already out")
    if errors:
        return ValidationResult.from_errors(errors)

    if player.batting_stats.is_retired_hurt:
        player.batting_stats.is_retired_hurt = False
        player.batting_stats.is_out = False
        logger.info("%s resumes their innings", player.name)

    setattr(innings, f"{slot}_id", batsman_id)
    innings.needs_new_batsman = False
    innings.vacated_batsman_id = None
    start_partnership(innings)
    return ValidationResult.from_errors([])


def assign_new_bowler(match: Match, bowler_id: str) -> ValidationResult:
    failure = _open_innings_errors(match)
    if failure:
        return failure
    innings = match.innings
    bowling = match.team(innings.bowling_team_id)

    player = bowling.find_player(bowler_id)
    if player is None:
        return ValidationResult.from_errors([f"Bowler {bowler_id} is not in the {bowling.name} playing XI"])
    if not is_eligible_bowler(innings, bowling, bowler_id):
        return ValidationResult.from_errors([f"{player.name} bowled the previous over"])

    innings.current_bowler_id = bowler_id
    innings.needs_new_bowler = False
    current = innings.over_history[-1] if innings.over_history else None
    if current is not None and current.number == innings.overs + 1 and not current.balls:
        current.bowler = bowler_id
    return ValidationResult.from_errors([])


def rotate_strike(match: Match) -> ValidationResult:
    failure = _open_innings_errors(match)
    if failure:
        return failure
    innings = match.innings
    if not innings.striker_id or not innings.non_striker_id:
        return ValidationResult.from_errors(["Both batsmen must be selected before scoring"])
    swap_strike(innings)
    return ValidationResult.from_errors([])
