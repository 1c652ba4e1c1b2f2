"""
Tests for single-level undo.
"""
from crease.engine.undo import UndoManager, NOTHING_TO_UNDO, CROSS_INNINGS


class TestUndo:
    """Restoring the state before the last scoring action"""

    def test_undo_boundary(self, engine, play, match):
        m = play(match, [1, 2])
        before = m.to_dict()

        after = engine.record_delivery(m, 4).match
        assert after.first_innings.score == 7

        result = engine.undo(after)
        assert result.ok
        restored = result.match
        innings = restored.first_innings

        assert innings.score == 3
        assert innings.wickets == 0
        assert innings.balls == 2
        assert innings.striker_id == "A2"
        assert innings.non_striker_id == "A1"
        assert restored.to_dict() == before

    def test_nothing_to_undo(self, engine, match):
        result = engine.undo(match)
        assert not result.ok
        assert result.errors == [NOTHING_TO_UNDO]
        assert result.match is match

    def test_only_one_level(self, engine, play, match):
        m = engine.record_delivery(match, 1).match
        m = engine.record_delivery(m, 1).match
        m = engine.undo(m).match
        assert m.first_innings.score == 1

        result = engine.undo(m)
        assert not result.ok
        assert result.errors == [NOTHING_TO_UNDO]

    def test_undo_wicket(self, engine, match):
        m = engine.record_wicket(match, "caught", fielder_id="B4").match
        restored = engine.undo(m).match

        a1 = restored.team("A").find_player("A1")
        assert a1.batting_stats.is_out is False
        assert restored.team("B").find_player("B4").fielding_stats.catches == 0
        assert restored.first_innings.wickets == 0
        assert restored.first_innings.needs_new_batsman is False

    def test_rejected_action_keeps_snapshot(self, engine, match):
        m = engine.record_delivery(match, 4).match
        rejected = engine.record_delivery(m, 9)
        assert not rejected.ok

        restored = engine.undo(m).match
        assert restored.first_innings.score == 0

    def test_refused_across_innings(self, engine, play, start):
        m = play(start(overs=1), [0] * 5)
        m = engine.record_delivery(m, 0).match
        assert m.current_innings == 2

        result = engine.undo(m)
        assert not result.ok
        assert result.errors == [CROSS_INNINGS]
        assert engine.can_undo

    def test_snapshot_is_independent(self, match):
        manager = UndoManager()
        manager.snapshot(match, "delivery")
        match.first_innings.score = 50

        restored, reason = manager.undo(match)
        assert reason is None
        assert restored.first_innings.score == 0
        assert restored is not match

    def test_last_action_tag(self, engine, match):
        m = engine.record_wicket(match, "bowled").match
        assert engine.undo_manager.last_action == "wicket"
        engine.undo(m)
        assert engine.undo_manager.last_action is None
