"""
Shared fixtures: two numbered sides (Alpha "A1".."An", Bravo "B1".."Bn"),
Alpha winning the toss and batting with A1/A2 against B11.
"""
import pytest

from crease.engine import ScoringEngine
from crease.engine.state import Team, Player


def make_team(team_id: str, name: str, size: int = 11) -> Team:
    return Team(
        id=team_id,
        name=name,
        playing_xi=[Player(id=f"{team_id}{i}", name=f"{name} {i}") for i in range(1, size + 1)],
    )


def fill_selections(engine: ScoringEngine, match):
    """Pick the next batsman / bowler the way a scorer would, if the innings asks for one"""
    innings = match.innings
    if innings is None or innings.is_complete:
        return match
    if innings.needs_new_batsman:
        incoming = engine.eligible_batsmen(match)[0]
        result = engine.assign_new_batsman(match, incoming.id)
        assert result.ok, result.errors
        match = result.match
    if match.innings.needs_new_bowler:
        # Last eligible in XI order, so the two tail-enders alternate overs
        bowler = engine.eligible_bowlers(match)[-1]
        result = engine.assign_new_bowler(match, bowler.id)
        assert result.ok, result.errors
        match = result.match
    return match


@pytest.fixture
def engine():
    return ScoringEngine()


@pytest.fixture
def start(engine):
    def _start(size: int = 11, overs: int = 20, bowler_id: str = None):
        team1 = make_team("A", "Alpha", size)
        team2 = make_team("B", "Bravo", size)
        result = engine.start_match(
            team1, team2, overs, "A", "bat", "A1", "A2", bowler_id or f"B{size}"
        )
        assert result.ok, result.errors
        return result.match
    return _start


@pytest.fixture
def match(start):
    return start()


@pytest.fixture
def play(engine):
    """
    Score a sequence of events: an int is runs off the bat, "W" is bowled,
    (extra_type, runs) is an extra.
    """
    def _play(match, events):
        for event in events:
            match = fill_selections(engine, match)
            if event == "W":
                result = engine.record_wicket(match, "bowled")
            elif isinstance(event, tuple):
                result = engine.record_delivery(match, event[1], True, event[0])
            else:
                result = engine.record_delivery(match, event)
            assert result.ok, result.errors
            match = result.match
        return match
    return _play


@pytest.fixture
def second_innings(engine):
    """Start the chase with B1/B2 against A<size>"""
    def _second(match):
        size = match.team1.size
        result = engine.start_second_innings(match, "B1", "B2", f"A{size}")
        assert result.ok, result.errors
        return result.match
    return _second
