from dataclasses import dataclass, field
from typing import Optional, Union, List

from crease.engine.calculations import (
    MAX_RUNS_PER_BALL, MIN_EXTRA_RUNS, MAX_EXTRAS_PER_BALL, MIN_OVERS, MAX_OVERS,
    BALLS_PER_OVER, max_wickets,
)
from crease.engine.state import Match, Team, Innings, DismissalKind, ExtraKind

STANDARD_TEAM_SIZE = 11


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[str], warnings: Optional[List[str]] = None) -> "ValidationResult":
        return cls(valid=len(errors) == 0, errors=errors, warnings=warnings or [])

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": self.errors, "warnings": self.warnings}


@dataclass
class ScoringAction:
    runs: int
    is_extra: bool = False
    extra_type: Optional[Union[ExtraKind, str]] = None


@dataclass
class WicketAction:
    dismissal_type: Union[DismissalKind, str]
    out_batsman_id: Optional[str] = None
    fielder_id: Optional[str] = None


def parse_dismissal(value) -> Optional[DismissalKind]:
    try:
        return DismissalKind(value)
    except ValueError:
        return None


def parse_extra(value) -> Optional[ExtraKind]:
    try:
        return ExtraKind(value)
    except ValueError:
        return None


def _check_runs(action: ScoringAction, errors: List[str]):
    if action.is_extra:
        if parse_extra(action.extra_type) is None:
            errors.append(f"Invalid extra type: {action.extra_type}")
        if action.runs < MIN_EXTRA_RUNS or action.runs > MAX_EXTRAS_PER_BALL:
            errors.append(
                f"Invalid extra runs: {action.runs}. Must be between {MIN_EXTRA_RUNS} and {MAX_EXTRAS_PER_BALL}"
            )
    else:
        if action.extra_type is not None:
            errors.append("Extra type given for a delivery that is not an extra")
        if action.runs < 0 or action.runs > MAX_RUNS_PER_BALL:
            errors.append(f"Invalid runs: {action.runs}. Must be between 0 and {MAX_RUNS_PER_BALL}")


def _check_batsmen(innings: Innings, batting: Team, errors: List[str]):
    if not innings.striker_id or not innings.non_striker_id:
        errors.append("Both batsmen must be selected before scoring")
        return
    if innings.needs_new_batsman:
        errors.append("A new batsman must be selected before scoring")
        return
    if innings.striker_id == innings.non_striker_id:
        errors.append("Striker and non-striker cannot be the same player")
    for player_id in (innings.striker_id, innings.non_striker_id):
        if batting.find_player(player_id) is None:
            errors.append(f"Batsman {player_id} is not in the {batting.name} playing XI")


def _check_wicket(action: WicketAction, kind: Optional[DismissalKind], innings: Innings,
                  batting: Team, bowling: Team, errors: List[str]):
    if kind is None:
        errors.append(f"Invalid dismissal type: {action.dismissal_type}")
        return

    at_crease = (innings.striker_id, innings.non_striker_id)
    if kind is DismissalKind.RUN_OUT and not action.out_batsman_id:
        errors.append("Must select which batsman is run out")
    elif action.out_batsman_id and action.out_batsman_id not in at_crease:
        errors.append(f"Batsman {action.out_batsman_id} is not at the crease")
    elif (action.out_batsman_id and kind not in (DismissalKind.RUN_OUT, DismissalKind.RETIRED_HURT)
          and action.out_batsman_id != innings.striker_id):
        errors.append(f"Only the striker can be out {kind.label}")

    if innings.free_hit and not kind.allowed_on_free_hit:
        errors.append(f"A batsman cannot be out {kind.label} on a free hit")

    limit = batting.max_wickets
    if kind is DismissalKind.RETIRED_HURT and innings.wickets >= limit - 1:
        errors.append(f"Cannot retire hurt: last wicket ({innings.wickets}/{limit})")

    if action.fielder_id and bowling.find_player(action.fielder_id) is None:
        errors.append(f"Fielder {action.fielder_id} is not in the {bowling.name} playing XI")


def validate(action: Union[ScoringAction, WicketAction], match: Match) -> ValidationResult:
    """
    Gate run before any scoring or wicket mutation.

    Checks, in order: match complete, match live, innings present and open,
    run range, batsmen assigned, bowler assigned, dismissal details, wicket
    limit. Nothing is mutated.
    """
    errors = []

    if match.is_complete:
        errors.append("Cannot score on a completed match")
    if not match.is_live:
        errors.append("Match is not currently live")

    innings = match.innings
    if innings is None:
        errors.append("No active innings found")
        return ValidationResult.from_errors(errors)
    if innings.is_complete:
        errors.append("Cannot score on a completed innings")

    batting = match.team(innings.batting_team_id)
    bowling = match.team(innings.bowling_team_id)

    if isinstance(action, ScoringAction):
        _check_runs(action, errors)

    _check_batsmen(innings, batting, errors)

    kind = parse_dismissal(action.dismissal_type) if isinstance(action, WicketAction) else None
    bowler_needed = kind is None or kind.requires_bowler
    if not innings.current_bowler_id:
        if bowler_needed:
            errors.append("Bowler must be selected before scoring")
    elif bowling.find_player(innings.current_bowler_id) is None:
        errors.append(f"Bowler {innings.current_bowler_id} is not in the {bowling.name} playing XI")

    if isinstance(action, WicketAction):
        _check_wicket(action, kind, innings, batting, bowling, errors)

    limit = batting.max_wickets
    if innings.wickets >= limit:
        errors.append(f"All wickets have already fallen ({innings.wickets}/{limit})")

    return ValidationResult.from_errors(errors)


def validate_team(team: Team) -> ValidationResult:
    errors = []
    warnings = []

    if not team.id:
        errors.append("Team must have a valid ID")
    if not team.name or not team.name.strip():
        errors.append("Team must have a valid name")
    if not team.playing_xi:
        errors.append(f"{team.name} must have players in the playing XI")
    elif len(team.playing_xi) != STANDARD_TEAM_SIZE:
        warnings.append(f"{team.name} playing XI has {len(team.playing_xi)} players, expected {STANDARD_TEAM_SIZE}")

    seen = set()
    for index, player in enumerate(team.playing_xi):
        if not player.id:
            errors.append(f"Player {index + 1}: must have a valid ID")
        if not player.name or not player.name.strip():
            errors.append(f"Player {index + 1}: must have a valid name")
        if player.id in seen:
            errors.append(f"Duplicate player ID in {team.name}: {player.id}")
        seen.add(player.id)

    return ValidationResult.from_errors(errors, warnings)


def validate_match_setup(
    team1: Team,
    team2: Team,
    total_overs: int,
    toss_winner_id: str,
    batting_team: Optional[Team],
    striker_id: Optional[str],
    non_striker_id: Optional[str],
    bowler_id: Optional[str] = None,
) -> ValidationResult:
    """Checks run before the first ball of a match can be scored"""
    errors = []
    warnings = []

    for team in (team1, team2):
        result = validate_team(team)
        errors.extend(result.errors)
        warnings.extend(result.warnings)

    if team1.id == team2.id:
        errors.append("Teams must have different IDs")
    if team1.name == team2.name:
        errors.append("Teams must have different names")
    if total_overs < MIN_OVERS or total_overs > MAX_OVERS:
        errors.append(f"Invalid match overs: {total_overs}. Must be between {MIN_OVERS} and {MAX_OVERS}")
    if toss_winner_id not in (team1.id, team2.id):
        errors.append(f"Toss winner {toss_winner_id} is not playing in this match")

    if batting_team is not None:
        bowling_team = team2 if batting_team is team1 else team1
        errors.extend(validate_openers(batting_team, bowling_team, striker_id, non_striker_id, bowler_id).errors)

    return ValidationResult.from_errors(errors, warnings)


def validate_openers(
    batting: Team,
    bowling: Team,
    striker_id: Optional[str],
    non_striker_id: Optional[str],
    bowler_id: Optional[str],
) -> ValidationResult:
    """An innings needs two distinct batsmen and (optionally at once) one bowler"""
    errors = []
    if len(batting.playing_xi) < 2:
        errors.append(f"{batting.name} needs at least 2 batsmen to start an innings")
    if not bowling.playing_xi:
        errors.append(f"{bowling.name} needs at least 1 bowler to start an innings")

    if not striker_id or not non_striker_id:
        errors.append("Both opening batsmen must be selected")
    else:
        if striker_id == non_striker_id:
            errors.append("Striker and non-striker cannot be the same player")
        for player_id in (striker_id, non_striker_id):
            player = batting.find_player(player_id)
            if player is None:
                errors.append(f"Batsman {player_id} is not in the {batting.name} playing XI")
            elif player.is_dismissed:
                errors.append(f"{player.name} is already out")

    if bowler_id and bowling.find_player(bowler_id) is None:
        errors.append(f"Bowler {bowler_id} is not in the {bowling.name} playing XI")

    return ValidationResult.from_errors(errors)


def validate_innings_state(innings: Innings, team_size: int) -> ValidationResult:
    """Consistency check of a stored or freshly mutated innings"""
    errors = []
    warnings = []

    if innings.score < 0:
        errors.append("Innings score cannot be negative")
    if innings.wickets < 0:
        errors.append("Wickets cannot be negative")
    if innings.overs < 0:
        errors.append("Overs cannot be negative")
    if innings.balls < 0 or innings.balls >= BALLS_PER_OVER:
        errors.append(f"Invalid balls count: {innings.balls}. Must be between 0 and {BALLS_PER_OVER - 1}")

    limit = max_wickets(team_size)
    if innings.wickets > limit:
        errors.append(f"Wickets ({innings.wickets}) cannot exceed maximum for team size ({limit})")

    if not innings.striker_id:
        warnings.append("No striker selected")
    if not innings.non_striker_id:
        warnings.append("No non-striker selected")
    if innings.striker_id and innings.striker_id == innings.non_striker_id:
        errors.append("Striker and non-striker cannot be the same player")
    if not innings.current_bowler_id and not innings.is_complete:
        warnings.append("No bowler selected")

    return ValidationResult.from_errors(errors, warnings)


FRIENDLY_ERRORS = {
    "Cannot score on a completed match": "This match has already finished. You cannot add more runs.",
    "Match is not currently live": "Please start the match before scoring.",
    "Both batsmen must be selected before scoring": "Please select both batsmen to begin scoring.",
    "A new batsman must be selected before scoring": "Please select the new batsman coming in.",
    "Bowler must be selected before scoring": "Please select a bowler to start the over.",
    "Cannot score on a completed innings": "This innings has already finished.",
    "No active innings found": "Start the next innings before scoring.",
    "Must select which batsman is run out": "Choose which batsman was run out.",
}


def user_friendly_error(error: str) -> str:
    """Translate a gate message into a prompt the scorer can act on"""
    if error.startswith("All wickets have already fallen"):
        return "The innings is complete - all batsmen are out."
    return FRIENDLY_ERRORS.get(error, error)
