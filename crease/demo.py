"""
Scripted scorer used by the CLI demo: drives a ScoringEngine through a whole
match with random outcomes, making the selections a human scorer would.
"""
import logging
import random
from typing import Optional

from crease.engine import ScoringEngine
from crease.engine.state import Match, Team, Player, PlayerRole, DismissalKind, ExtraKind

logger = logging.getLogger(__name__)

# (weight, runs, extra kind) for a delivery, or (weight, None, dismissal kind) for a wicket
OUTCOMES = [
    (34, 0, None),
    (30, 1, None),
    (8, 2, None),
    (1, 3, None),
    (10, 4, None),
    (4, 6, None),
    (3, 1, ExtraKind.WIDE),
    (1, 1, ExtraKind.NO_BALL),
    (1, 1, ExtraKind.BYE),
    (1, 1, ExtraKind.LEG_BYE),
    (2, None, DismissalKind.CAUGHT),
    (2, None, DismissalKind.BOWLED),
    (1, None, DismissalKind.LBW),
    (1, None, DismissalKind.RUN_OUT),
]

ROLE_ORDER = [
    PlayerRole.BATSMAN, PlayerRole.BATSMAN, PlayerRole.BATSMAN, PlayerRole.BATSMAN,
    PlayerRole.WICKET_KEEPER, PlayerRole.ALL_ROUNDER, PlayerRole.ALL_ROUNDER,
    PlayerRole.BOWLER, PlayerRole.BOWLER, PlayerRole.BOWLER, PlayerRole.BOWLER,
]


def build_team(team_id: str, name: str, size: int = 11) -> Team:
    players = [
        Player(id=f"{team_id}-{i + 1}", name=f"{name} {i + 1}", role=ROLE_ORDER[i % len(ROLE_ORDER)])
        for i in range(size)
    ]
    keeper = next((p.id for p in players if p.role == PlayerRole.WICKET_KEEPER), None)
    return Team(id=team_id, name=name, playing_xi=players, captain_id=players[0].id, wicket_keeper_id=keeper)


def _bowlers_first(team: Team):
    bowlers = [p for p in team.playing_xi if p.role in (PlayerRole.BOWLER, PlayerRole.ALL_ROUNDER)]
    return bowlers or list(team.playing_xi)


class DemoScorer:
    def __init__(self, engine: ScoringEngine, rng: Optional[random.Random] = None):
        self.engine = engine
        self.rng = rng or random.Random()

    def start(self, team1: Team, team2: Team, total_overs: int) -> Match:
        toss_winner = self.rng.choice([team1, team2])
        decision = self.rng.choice(["bat", "bowl"])
        batting = toss_winner if decision == "bat" else (team2 if toss_winner is team1 else team1)
        bowling = team2 if batting is team1 else team1
        result = self.engine.start_match(
            team1, team2, total_overs, toss_winner.id, decision,
            batting.playing_xi[0].id, batting.playing_xi[1].id, _bowlers_first(bowling)[-1].id,
        )
        if not result.ok:
            raise ValueError("; ".join(result.errors))
        return result.match

    def _select(self, match: Match) -> Match:
        """Fill every pending selection"""
        innings = match.innings
        if innings is None and match.current_innings == 2:
            batting = match.other_team(match.batting_first)
            bowling = match.team(match.batting_first)
            result = self.engine.start_second_innings(
                match, batting.playing_xi[0].id, batting.playing_xi[1].id, _bowlers_first(bowling)[-1].id,
            )
            return result.match
        if innings.needs_new_batsman:
            incoming = self.engine.eligible_batsmen(match)[0]
            match = self.engine.assign_new_batsman(match, incoming.id).match
        if match.innings.needs_new_bowler or match.innings.current_bowler_id is None:
            options = self.engine.eligible_bowlers(match)
            preferred = [p for p in options if p in _bowlers_first(match.team(match.innings.bowling_team_id))]
            bowler = self.rng.choice(preferred or options)
            match = self.engine.assign_new_bowler(match, bowler.id).match
        return match

    def next_ball(self, match: Match) -> Match:
        match = self._select(match)
        innings = match.innings
        weights = [w for w, _, _ in OUTCOMES]
        _, runs, kind = self.rng.choices(OUTCOMES, weights=weights)[0]

        if isinstance(kind, DismissalKind):
            if innings.free_hit and not kind.allowed_on_free_hit:
                kind = DismissalKind.RUN_OUT
            bowling = match.team(innings.bowling_team_id)
            out_id = None
            if kind is DismissalKind.RUN_OUT:
                out_id = self.rng.choice([innings.striker_id, innings.non_striker_id])
            fielder = self.rng.choice(bowling.playing_xi).id if kind in (
                DismissalKind.CAUGHT, DismissalKind.RUN_OUT) else None
            result = self.engine.record_wicket(match, kind, out_id, fielder)
        else:
            result = self.engine.record_delivery(match, runs, kind is not None, kind)

        if not result.ok:
            logger.warning("Demo outcome rejected (%s), scoring a dot ball", "; ".join(result.errors))
            result = self.engine.record_delivery(match, 0)
            if not result.ok:
                raise ValueError("; ".join(result.errors))
        return result.match

    def play(self, match: Match, max_deliveries: int = 5000) -> Match:
        for _ in range(max_deliveries):
            if match.is_complete:
                return match
            match = self.next_ball(match)
        raise RuntimeError(f"Match {match.id} did not finish within {max_deliveries} deliveries")
