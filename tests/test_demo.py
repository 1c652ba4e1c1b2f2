"""
Tests for the scripted demo scorer and the CLI.
"""
import random

import pytest
from click.testing import CliRunner

from cli import cli
from crease.demo import DemoScorer, build_team
from crease.engine import ScoringEngine


class TestDemoScorer:
    """Random matches always run to a consistent finish"""

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_match_completes(self, seed):
        scorer = DemoScorer(ScoringEngine(), random.Random(seed))
        match = scorer.start(build_team("home", "Home XI"), build_team("away", "Away XI"), 5)
        match = scorer.play(match)

        assert match.is_complete
        assert not match.is_live
        assert match.result
        for innings in (match.first_innings, match.second_innings):
            assert innings.is_complete
            assert 0 <= innings.balls <= 5
            assert innings.wickets <= 10
            assert innings.overs <= 5

    def test_small_sides(self):
        scorer = DemoScorer(ScoringEngine(), random.Random(11))
        match = scorer.start(build_team("home", "Home XI", 5), build_team("away", "Away XI", 5), 3)
        match = scorer.play(match)

        assert match.is_complete
        assert match.first_innings.wickets <= 4

    def test_build_team(self):
        team = build_team("home", "Home XI")
        assert team.size == 11
        assert team.wicket_keeper_id == "home-5"
        assert team.captain_id == "home-1"


class TestCli:
    """Command line entry points"""

    def test_demo_without_saving(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["demo", "--overs", "2", "--seed", "7", "--no-save"])
        assert result.exit_code == 0, result.output
        assert "Home XI vs Away XI" in result.output

    def test_demo_rejects_bad_overs(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["demo", "--overs", "0", "--no-save"])
        assert result.exit_code == 1
        assert "Cannot start match" in result.output
