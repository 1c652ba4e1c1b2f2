"""
Scoring engine facade.

Every mutating call runs the same pipeline:

    validate -> snapshot (undo) -> copy -> repair -> process -> state check

The input Match is never mutated. On success the result carries a new Match;
on a validation failure it carries the untouched input and the errors.
"""
import copy
import logging
from dataclasses import dataclass, field
from typing import Optional, List, Callable, Union

from crease.engine import innings as lifecycle
from crease.engine.batsmen import (
    CurrentBatsmen, resolve_current_batsmen, repair_current_batsmen, eligible_batsmen,
)
from crease.engine.calculations import balls_remaining, required_run_rate, match_phase
from crease.engine.commentary import chase_commentary
from crease.engine.deliveries import apply_delivery
from crease.engine.overs import eligible_bowlers
from crease.engine.result import end_match_early
from crease.engine.state import Match, Team, Player, DismissalKind, ExtraKind, TossDecision, MatchType
from crease.engine.undo import UndoManager
from crease.engine.wickets import apply_wicket
from crease.validators.scoring_validator import (
    ValidationResult, ScoringAction, WicketAction, validate, validate_innings_state, user_friendly_error,
)

logger = logging.getLogger(__name__)


@dataclass
class ScoringResult:
    ok: bool
    match: Optional[Match]
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def messages(self) -> List[str]:
        """Errors phrased as prompts for the scorer"""
        return [user_friendly_error(e) for e in self.errors]


class ScoringEngine:
    """
    Caller surface for scoring one match.

    Holds only the undo snapshot between calls; the Match itself is owned by
    the caller, who persists whatever comes back in ScoringResult.match.
    """

    def __init__(self, undo_manager: Optional[UndoManager] = None):
        self.undo_manager = undo_manager or UndoManager()

    @property
    def can_undo(self) -> bool:
        return self.undo_manager.can_undo

    def start_match(
        self,
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
    ) -> ScoringResult:
        match, result = lifecycle.start_match(
            copy.deepcopy(team1), copy.deepcopy(team2), total_overs, toss_winner_id, toss_decision,
            striker_id, non_striker_id, bowler_id, match_type, venue,
        )
        if not result.valid:
            return ScoringResult(False, None, result.errors, result.warnings)
        self.undo_manager.clear()
        return ScoringResult(True, match, [], result.warnings)

    def record_delivery(
        self,
        match: Match,
        runs: int,
        is_extra: bool = False,
        extra_type: Optional[Union[ExtraKind, str]] = None,
    ) -> ScoringResult:
        action = ScoringAction(runs=runs, is_extra=is_extra, extra_type=extra_type)
        return self._score(match, action, "delivery", lambda m: apply_delivery(m, runs, is_extra, extra_type))

    def record_wicket(
        self,
        match: Match,
        dismissal_type: Union[DismissalKind, str],
        out_batsman_id: Optional[str] = None,
        fielder_id: Optional[str] = None,
    ) -> ScoringResult:
        action = WicketAction(dismissal_type=dismissal_type, out_batsman_id=out_batsman_id, fielder_id=fielder_id)
        return self._score(
            match, action, "wicket", lambda m: apply_wicket(m, dismissal_type, out_batsman_id, fielder_id)
        )

    def undo(self, match: Match) -> ScoringResult:
        restored, reason = self.undo_manager.undo(match)
        if restored is None:
            return ScoringResult(False, match, [reason])
        return ScoringResult(True, restored)

    def assign_new_batsman(self, match: Match, batsman_id: str) -> ScoringResult:
        return self._apply(match, lambda m: lifecycle.assign_new_batsman(m, batsman_id))

    def assign_new_bowler(self, match: Match, bowler_id: str) -> ScoringResult:
        return self._apply(match, lambda m: lifecycle.assign_new_bowler(m, bowler_id))

    def start_second_innings(self, match: Match, striker_id: str, non_striker_id: str,
                             bowler_id: Optional[str] = None) -> ScoringResult:
        result = self._apply(
            match, lambda m: lifecycle.start_second_innings(m, striker_id, non_striker_id, bowler_id)
        )
        if result.ok:
            self.undo_manager.clear()
        return result

    def rotate_strike(self, match: Match) -> ScoringResult:
        return self._apply(match, lifecycle.rotate_strike)

    def end_match_early(self, match: Match) -> ScoringResult:
        if match.is_complete:
            return ScoringResult(False, match, ["Match is already complete"])
        working = copy.deepcopy(match)
        end_match_early(working)
        self.undo_manager.clear()
        return ScoringResult(True, working)

    # Queries for prompting the scorer

    def current_batsmen(self, match: Match) -> CurrentBatsmen:
        innings = match.require_innings()
        return resolve_current_batsmen(innings, match.team(innings.batting_team_id))

    def eligible_batsmen(self, match: Match) -> List[Player]:
        innings = match.require_innings()
        return eligible_batsmen(innings, match.team(innings.batting_team_id))

    def eligible_bowlers(self, match: Match) -> List[Player]:
        innings = match.require_innings()
        return eligible_bowlers(innings, match.team(innings.bowling_team_id))

    def chase_status(self, match: Match) -> Optional[dict]:
        """Runs and balls left in a chase, None outside the second innings"""
        innings = match.second_innings
        if innings is None or match.current_innings != 2 or innings.target is None:
            return None
        balls_left = balls_remaining(match.total_overs, innings.overs, innings.balls)
        runs_needed = max(0, innings.target - innings.score)
        return {
            "target": innings.target,
            "runs_needed": runs_needed,
            "balls_remaining": balls_left,
            "required_run_rate": required_run_rate(
                innings.target, innings.score, match.total_overs, innings.overs, innings.balls
            ),
            "phase": match_phase(innings.overs, match.total_overs),
            "summary": chase_commentary(runs_needed, balls_left),
        }

    def _score(self, match: Match, action: Union[ScoringAction, WicketAction], tag: str,
               process: Callable[[Match], object]) -> ScoringResult:
        gate = validate(action, match)
        if not gate.valid:
            logger.debug("Rejected %s: %s", tag, "; ".join(gate.errors))
            return ScoringResult(False, match, gate.errors, gate.warnings)

        self.undo_manager.snapshot(match, tag)
        working = copy.deepcopy(match)
        innings = working.require_innings()
        repair_current_batsmen(innings, working.team(innings.batting_team_id))
        process(working)
        self._check_state(working, innings)
        return ScoringResult(True, working, [], gate.warnings)

    def _apply(self, match: Match, operation: Callable[[Match], ValidationResult]) -> ScoringResult:
        working = copy.deepcopy(match)
        result = operation(working)
        if not result.valid:
            return ScoringResult(False, match, result.errors, result.warnings)
        return ScoringResult(True, working, [], result.warnings)

    def _check_state(self, match: Match, innings):
        state = validate_innings_state(innings, match.team(innings.batting_team_id).size)
        for error in state.errors:
            logger.error("Innings %d inconsistent after scoring: %s", innings.number, error)
