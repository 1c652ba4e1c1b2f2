"""
Tests for the validation gate and setup validators.
"""
from crease.validators.scoring_validator import (
    ScoringAction, WicketAction, validate, validate_team, validate_match_setup,
    validate_innings_state, user_friendly_error,
)
from crease.engine.state import Team, Player, Innings

from conftest import make_team


class TestScoringGate:
    """Checks before a delivery or wicket"""

    def test_valid_delivery(self, match):
        result = validate(ScoringAction(runs=4), match)
        assert result.valid
        assert result.errors == []

    def test_runs_out_of_range(self, match):
        assert not validate(ScoringAction(runs=7), match).valid
        assert not validate(ScoringAction(runs=-1), match).valid

    def test_extra_runs_range(self, match):
        assert not validate(ScoringAction(runs=0, is_extra=True, extra_type="wide"), match).valid
        assert not validate(ScoringAction(runs=6, is_extra=True, extra_type="bye"), match).valid
        assert validate(ScoringAction(runs=5, is_extra=True, extra_type="bye"), match).valid

    def test_unknown_extra_type(self, match):
        result = validate(ScoringAction(runs=1, is_extra=True, extra_type="penalty"), match)
        assert "Invalid extra type: penalty" in result.errors

    def test_match_not_live(self, match):
        match.is_live = False
        result = validate(ScoringAction(runs=1), match)
        assert result.errors == ["Match is not currently live"]

    def test_completed_match_reported_first(self, match):
        match.is_complete = True
        match.is_live = False
        result = validate(ScoringAction(runs=1), match)
        assert result.errors[0] == "Cannot score on a completed match"

    def test_missing_batsman(self, match):
        match.first_innings.non_striker_id = None
        result = validate(ScoringAction(runs=1), match)
        assert "Both batsmen must be selected before scoring" in result.errors

    def test_batsman_from_wrong_side(self, match):
        match.first_innings.non_striker_id = "B3"
        result = validate(ScoringAction(runs=1), match)
        assert "Batsman B3 is not in the Alpha playing XI" in result.errors

    def test_run_out_allowed_without_bowler(self, match):
        match.first_innings.current_bowler_id = None
        assert not validate(WicketAction("bowled"), match).valid
        assert validate(WicketAction("run_out", "A1"), match).valid
        assert validate(WicketAction("retired_hurt"), match).valid

    def test_invalid_dismissal(self, match):
        result = validate(WicketAction("mankad"), match)
        assert "Invalid dismissal type: mankad" in result.errors

    def test_only_striker_can_be_bowled(self, match):
        result = validate(WicketAction("bowled", "A2"), match)
        assert "Only the striker can be out bowled" in result.errors

    def test_fielder_must_be_fielding(self, match):
        result = validate(WicketAction("caught", fielder_id="A5"), match)
        assert "Fielder A5 is not in the Bravo playing XI" in result.errors

    def test_gate_does_not_mutate(self, match):
        before = match.to_dict()
        validate(ScoringAction(runs=9), match)
        validate(WicketAction("run_out"), match)
        assert match.to_dict() == before

    def test_no_active_innings(self, match):
        match.current_innings = 2
        result = validate(ScoringAction(runs=1), match)
        assert result.errors == ["No active innings found"]


class TestSetupValidators:
    """Team and match setup checks"""

    def test_duplicate_player_ids(self):
        team = Team(id="X", name="Xray", playing_xi=[Player(id="p1", name="One"), Player(id="p1", name="Uno")])
        result = validate_team(team)
        assert not result.valid
        assert "Duplicate player ID in Xray: p1" in result.errors

    def test_short_side_warns(self):
        result = validate_team(make_team("A", "Alpha", 7))
        assert result.valid
        assert result.warnings == ["Alpha playing XI has 7 players, expected 11"]

    def test_match_setup_errors(self):
        team1 = make_team("A", "Alpha")
        team2 = make_team("A", "Alpha")
        result = validate_match_setup(team1, team2, 0, "Z", None, None, None)
        assert "Teams must have different IDs" in result.errors
        assert "Teams must have different names" in result.errors
        assert "Invalid match overs: 0. Must be between 1 and 50" in result.errors
        assert "Toss winner Z is not playing in this match" in result.errors

    def test_openers_must_differ(self):
        team1 = make_team("A", "Alpha")
        team2 = make_team("B", "Bravo")
        result = validate_match_setup(team1, team2, 20, "A", team1, "A1", "A1", "B11")
        assert "Striker and non-striker cannot be the same player" in result.errors

    def test_start_match_rejects_bad_setup(self, engine):
        result = engine.start_match(
            make_team("A", "Alpha"), make_team("B", "Bravo"), 51, "A", "bat", "A1", "A2", "B11"
        )
        assert not result.ok
        assert result.match is None

    def test_start_match_rejects_unknown_toss_decision(self, engine):
        result = engine.start_match(
            make_team("A", "Alpha"), make_team("B", "Bravo"), 20, "A", "field", "A1", "A2", "B11"
        )
        assert not result.ok

    def test_toss_decides_batting_side(self, engine):
        result = engine.start_match(
            make_team("A", "Alpha"), make_team("B", "Bravo"), 20, "A", "bowl", "B1", "B2", "A11"
        )
        assert result.ok
        assert result.match.batting_first == "B"
        assert result.match.first_innings.batting_team_id == "B"

    def test_single_player_side_cannot_open(self, engine):
        result = engine.start_match(
            make_team("A", "Alpha", 1), make_team("B", "Bravo"), 20, "A", "bat", "A1", "A2", "B11"
        )
        assert "Alpha needs at least 2 batsmen to start an innings" in result.errors

    def test_innings_state(self):
        innings = Innings(number=1, batting_team_id="A", bowling_team_id="B", balls=6, wickets=11)
        result = validate_innings_state(innings, 11)
        assert "Invalid balls count: 6. Must be between 0 and 5" in result.errors
        assert "Wickets (11) cannot exceed maximum for team size (10)" in result.errors


class TestFriendlyErrors:
    """Gate messages as scorer prompts"""

    def test_known_message(self):
        assert user_friendly_error("Bowler must be selected before scoring") == \
            "Please select a bowler to start the over."

    def test_wicket_limit_message(self):
        assert user_friendly_error("All wickets have already fallen (10/10)") == \
            "The innings is complete - all batsmen are out."

    def test_unknown_message_passes_through(self):
        assert user_friendly_error("Something else") == "Something else"

    def test_result_messages(self, engine, play, match):
        m = play(match, [0] * 6)
        result = engine.record_delivery(m, 1)
        assert "Please select a bowler to start the over." in result.messages


class TestInvariantRepair:
    """Stale out flags on the batsmen at the crease"""

    def test_stale_out_flag_cleared(self, engine, match):
        match.team("A").find_player("A1").batting_stats.is_out = True
        result = engine.record_delivery(match, 1)
        assert result.ok
        assert result.match.team("A").find_player("A1").batting_stats.is_out is False
