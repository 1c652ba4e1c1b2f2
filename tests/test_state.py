"""
Tests for the match model and current batsmen resolution.
"""
import pytest

from crease.engine.batsmen import resolve_current_batsmen
from crease.engine.calculations import required_run_rate, match_phase, format_overs, max_wickets
from crease.engine.exceptions import InningsNotFoundError, PlayerNotFoundError
from crease.engine.state import Match, DismissalKind, ExtraKind


class TestDocuments:
    """Match documents for persistence and undo"""

    def test_round_trip_mid_innings(self, engine, play, match):
        m = play(match, [1, ("no_ball", 3), 4, "W"])
        m = engine.assign_new_batsman(m, "A3").match
        document = m.to_dict()

        restored = Match.from_dict(document)
        assert restored.to_dict() == document
        assert restored.first_innings.ball_history[1].extra_type is ExtraKind.NO_BALL
        assert restored.team("A").find_player("A2").batting_stats.dismissal_type is DismissalKind.BOWLED

    def test_document_layout(self, match):
        document = match.to_dict()
        assert document["innings"]["second"] is None
        assert document["innings"]["first"]["striker_id"] == "A1"
        assert document["toss_decision"] == "bat"
        assert document["is_live"] is True

    def test_legacy_tags(self):
        assert DismissalKind("hitWicket") is DismissalKind.HIT_WICKET
        assert ExtraKind("noball") is ExtraKind.NO_BALL
        assert ExtraKind("legBye") is ExtraKind.LEG_BYE


class TestLookups:
    """Roster and innings access"""

    def test_missing_innings_raises(self, match):
        match.current_innings = 2
        with pytest.raises(InningsNotFoundError):
            match.require_innings()

    def test_missing_player_raises(self, match):
        with pytest.raises(PlayerNotFoundError):
            match.team("A").get_player("Z9")

    def test_batting_and_bowling_team(self, match):
        assert match.batting_team.id == "A"
        assert match.bowling_team.id == "B"
        assert match.target is None


class TestResolveCurrentBatsmen:
    """Explicit ids first, then the most active batsmen still in"""

    def test_explicit_ids(self, match):
        current = resolve_current_batsmen(match.first_innings, match.team("A"))
        assert current.striker.id == "A1"
        assert current.non_striker.id == "A2"
        assert current.complete

    def test_fallback_to_most_active(self, match):
        team = match.team("A")
        team.find_player("A4").batting_stats.balls_faced = 12
        team.find_player("A5").batting_stats.balls_faced = 3
        innings = match.first_innings
        innings.striker_id = None

        current = resolve_current_batsmen(innings, team)
        assert current.striker.id == "A4"
        assert current.non_striker.id == "A2"

    def test_fallback_skips_dismissed(self, match):
        team = match.team("A")
        team.find_player("A4").batting_stats.balls_faced = 12
        team.find_player("A4").batting_stats.is_out = True
        team.find_player("A5").batting_stats.balls_faced = 3
        innings = match.first_innings
        innings.striker_id = None
        innings.non_striker_id = None

        current = resolve_current_batsmen(innings, team)
        assert current.striker.id == "A5"
        assert current.non_striker is not None
        assert current.non_striker.id != "A4"


class TestCalculations:
    """Shared cricket arithmetic"""

    def test_required_run_rate(self):
        assert required_run_rate(151, 148, 20, 4, 2) == pytest.approx(3 / (94 / 6))
        assert required_run_rate(151, 100, 20, 20, 0) is None

    def test_phase(self):
        assert match_phase(2, 20) == "powerplay"
        assert match_phase(10, 20) == "middle"
        assert match_phase(18, 20) == "death"

    def test_overs_and_wicket_limit(self):
        assert format_overs(15, 4) == "15.4"
        assert max_wickets(11) == 10
        assert max_wickets(7) == 6


class TestCurrentBatsmenQuery:
    def test_engine_query(self, engine, play, match):
        m = play(match, [1])
        current = engine.current_batsmen(m)
        assert current.striker.id == "A2"
        assert current.non_striker.id == "A1"
