"""
Tests for innings completion, match results and awards.
"""
from crease.engine.result import complete_innings, calculate_result, calculate_awards
from crease.engine.state import CompletionReason


class TestEndToEnd:
    """Full T20 innings driven ball by ball"""

    def test_first_innings_bowled_out(self, engine, play, match):
        """80 all out in 15.4 overs ends on wickets, not overs"""
        m = play(match, [1] * 80 + [0] * 4 + ["W"] * 10)
        first = m.first_innings

        assert first.score == 80
        assert first.wickets == 10
        assert first.overs_display == "15.4"
        assert first.is_complete
        assert first.completion_reason is CompletionReason.ALL_OUT
        assert m.current_innings == 2
        assert m.second_innings is None
        assert m.is_live
        assert not m.is_complete

    def test_chase_won_by_wickets(self, engine, play, match, second_innings):
        m = play(match, [1] * 80 + [0] * 4 + ["W"] * 10)
        m = second_innings(m)
        assert m.second_innings.target == 81

        m = play(m, ["W", "W", "W", 0] + [1] * 81)
        second = m.second_innings

        assert second.score == 81
        assert second.wickets == 3
        assert second.overs_display == "14.1"
        assert second.completion_reason is CompletionReason.TARGET_REACHED
        assert m.is_complete
        assert not m.is_live
        assert m.winner == "Bravo"
        assert m.result == "Bravo won by 8 wickets"
        assert m.awards is not None
        assert m.awards.best_batsman_id is not None

    def test_chase_ends_mid_over(self, engine, start, second_innings):
        """Target 151, 148 at 4.2 overs, a six ends it at 154"""
        m = start(overs=20)
        first = m.first_innings
        first.score, first.wickets, first.overs = 150, 7, 20
        complete_innings(m, first, CompletionReason.OVERS_COMPLETE)
        m = second_innings(m)
        assert m.second_innings.target == 151

        m.second_innings.score = 148
        m.second_innings.overs = 4
        m.second_innings.balls = 2
        result = engine.record_delivery(m, 6)
        assert result.ok
        second = result.match.second_innings

        assert second.score == 154
        assert second.overs_display == "4.3"
        assert second.is_complete
        assert result.match.is_complete
        assert result.match.winner == "Bravo"

        rejected = engine.record_delivery(result.match, 1)
        assert not rejected.ok
        assert "Cannot score on a completed match" in rejected.errors


class TestResults:
    """Result strings for each outcome"""

    def test_first_innings_ends_on_overs(self, engine, play, start):
        m = play(start(overs=1), [1, 1, 0, 0, 0, 0])
        assert m.first_innings.completion_reason is CompletionReason.OVERS_COMPLETE
        assert m.first_innings.needs_new_bowler is False
        assert m.current_innings == 2

    def test_tie(self, engine, play, start, second_innings):
        m = play(start(overs=1), [1, 1, 0, 0, 0, 0])
        m = play(second_innings(m), [1, 1, 0, 0, 0, 0])
        assert m.is_complete
        assert m.winner == "Tie"
        assert m.result == "Match tied"

    def test_defended_by_runs(self, engine, play, start, second_innings):
        m = play(start(overs=1), [1, 1, 0, 0, 0, 0])
        m = play(second_innings(m), [1, 0, 0, 0, 0, 0])
        assert m.winner == "Alpha"
        assert m.result == "Alpha won by 1 run"

    def test_calculate_result_margins(self, start):
        m = start(overs=1)
        m.first_innings.score = 120
        outcome = calculate_result(m)
        assert outcome.winner == "Alpha"
        assert outcome.margin == 120
        assert outcome.margin_type == "runs"


class TestAwards:
    """Best batsman, best bowler and man of the match"""

    def test_awards(self, engine, play, start, second_innings):
        m = play(start(overs=1), [4, 6, 0, 0, 0, 0])
        m = play(second_innings(m), ["W", 1, 0, 0, 0, 0])

        assert m.result == "Alpha won by 9 runs"
        assert m.awards.best_batsman_id == "A1"
        assert m.awards.best_bowler_id == "A11"
        # A wicket (20) outweighs 10 runs
        assert m.awards.man_of_the_match_id == "A11"

    def test_no_awards_without_play(self, start):
        awards = calculate_awards(start())
        assert awards.best_batsman_id is None
        assert awards.best_bowler_id is None
        assert awards.man_of_the_match_id is None

    def test_bowler_economy_breaks_wicket_tie(self, start):
        m = start()
        cheap = m.team("B").find_player("B10").bowling_stats
        costly = m.team("B").find_player("B11").bowling_stats
        cheap.overs, cheap.runs, cheap.wickets = 4, 20, 2
        costly.overs, costly.runs, costly.wickets = 4, 40, 2
        assert calculate_awards(m).best_bowler_id == "B10"


class TestEndMatchEarly:
    """Forced completion"""

    def test_first_innings_is_no_result(self, engine, play, match):
        m = play(match, [4])
        result = engine.end_match_early(m)
        assert result.ok
        ended = result.match

        assert ended.is_complete
        assert not ended.is_live
        assert ended.winner == "No Result"
        assert ended.first_innings.completion_reason is CompletionReason.ENDED_EARLY

        rejected = engine.record_delivery(ended, 1)
        assert not rejected.ok
        assert rejected.errors[0] == "Cannot score on a completed match"

    def test_second_innings_uses_scores_so_far(self, engine, play, start, second_innings):
        m = play(start(overs=1), [4, 1, 0, 0, 0, 0])
        m = play(second_innings(m), [1])
        assert not m.is_complete

        result = engine.end_match_early(m)
        assert result.ok
        ended = result.match

        assert ended.winner == "Alpha"
        assert ended.result == "Alpha won by 4 runs (match ended early)"
        assert ended.second_innings.is_complete
        assert ended.second_innings.completion_reason is CompletionReason.ENDED_EARLY

    def test_innings_break_is_no_result(self, engine, play, start):
        m = play(start(overs=1), [4, 1, 0, 0, 0, 0])
        assert m.current_innings == 2
        assert m.second_innings is None

        result = engine.end_match_early(m)
        assert result.ok
        assert result.match.winner == "No Result"
        assert result.match.result == "Match abandoned at the innings break"

    def test_first_innings_result_text(self, engine, play, match):
        ended = engine.end_match_early(play(match, [4])).match
        assert ended.result == "Match abandoned during the first innings"

    def test_cannot_end_twice(self, engine, match):
        ended = engine.end_match_early(match).match
        result = engine.end_match_early(ended)
        assert not result.ok
        assert result.errors == ["Match is already complete"]


class TestChaseStatus:
    """What the chasing side still needs"""

    def test_no_chase_in_first_innings(self, engine, match):
        assert engine.chase_status(match) is None

    def test_chase_status(self, engine, play, start, second_innings):
        m = play(start(overs=2), [1, 1, 0, 0, 0, 0] + [4, 0, 0, 0, 0, 0])
        m = play(second_innings(m), [1, 1, 1])
        status = engine.chase_status(m)

        assert status["target"] == 7
        assert status["runs_needed"] == 4
        assert status["balls_remaining"] == 9
        assert status["required_run_rate"] == 4 / (9 / 6)
        assert status["summary"] == "4 needed from 9 balls."
