"""
Match state for the scoring engine.

Everything the engine reads or mutates lives on these dataclasses, so a Match
value alone determines how the next ball is scored. Each class round-trips
through plain JSON-compatible dicts via to_dict/from_dict.
"""
import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List

from crease.engine.calculations import format_overs, run_rate, max_wickets
from crease.engine.exceptions import InningsNotFoundError, PlayerNotFoundError


def _camel_to_snake(value: str) -> str:
    out = []
    for ch in value:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out).replace("-", "_")


class PlayerRole(enum.Enum):
    BATSMAN = "batsman"
    BOWLER = "bowler"
    ALL_ROUNDER = "allrounder"
    WICKET_KEEPER = "wicketkeeper"


class DismissalKind(enum.Enum):
    BOWLED = "bowled"
    LBW = "lbw"
    CAUGHT = "caught"
    HIT_WICKET = "hit_wicket"
    RUN_OUT = "run_out"
    STUMPED = "stumped"
    OBSTRUCTING_FIELD = "obstructing_field"
    HANDLED_BALL = "handled_ball"
    TIMED_OUT = "timed_out"
    RETIRED_HURT = "retired_hurt"

    @classmethod
    def _missing_(cls, value):
        # Older documents store camelCase tags ("runOut", "hitWicket")
        if isinstance(value, str):
            normalized = _camel_to_snake(value)
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def requires_bowler(self) -> bool:
        return self not in NON_BOWLER_DISMISSALS

    @property
    def credits_bowler(self) -> bool:
        return self is not DismissalKind.RUN_OUT

    @property
    def allowed_on_free_hit(self) -> bool:
        return not self.requires_bowler

    @property
    def is_dismissal(self) -> bool:
        """Retired hurt vacates the crease without the batsman being out."""
        return self is not DismissalKind.RETIRED_HURT

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


NON_BOWLER_DISMISSALS = frozenset({
    DismissalKind.RUN_OUT,
    DismissalKind.RETIRED_HURT,
    DismissalKind.OBSTRUCTING_FIELD,
    DismissalKind.HANDLED_BALL,
    DismissalKind.TIMED_OUT,
})


class ExtraKind(enum.Enum):
    WIDE = "wide"
    NO_BALL = "no_ball"
    BYE = "bye"
    LEG_BYE = "leg_bye"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            aliases = {"noball": "no_ball", "legbye": "leg_bye"}
            normalized = aliases.get(value.lower(), _camel_to_snake(value))
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def counts_ball(self) -> bool:
        return self in (ExtraKind.BYE, ExtraKind.LEG_BYE)

    @property
    def charged_to_bowler(self) -> bool:
        return self in (ExtraKind.WIDE, ExtraKind.NO_BALL)


class TossDecision(enum.Enum):
    BAT = "bat"
    BOWL = "bowl"


class MatchType(enum.Enum):
    T20 = "T20"
    ODI = "ODI"
    CUSTOM = "Custom"


class CompletionReason(enum.Enum):
    ALL_OUT = "all_out"
    OVERS_COMPLETE = "overs_complete"
    TARGET_REACHED = "target_reached"
    ENDED_EARLY = "ended_early"


def _enum_or_none(enum_cls, value):
    if value is None or value == "":
        return None
    return enum_cls(value)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class BattingStats:
    runs: int = 0
    balls_faced: int = 0
    fours: int = 0
    sixes: int = 0
    strike_rate: float = 0.0
    is_out: bool = False
    dismissal_type: Optional[DismissalKind] = None
    dismissed_by: Optional[str] = None
    is_retired_hurt: bool = False

    @property
    def status(self) -> str:
        if self.is_retired_hurt:
            return "retired hurt"
        if self.is_out and self.dismissal_type:
            return self.dismissal_type.label
        return "not out"

    def to_dict(self) -> dict:
        return {
            "runs": self.runs,
            "balls_faced": self.balls_faced,
            "fours": self.fours,
            "sixes": self.sixes,
            "strike_rate": self.strike_rate,
            "is_out": self.is_out,
            "dismissal_type": self.dismissal_type.value if self.dismissal_type else None,
            "dismissed_by": self.dismissed_by,
            "is_retired_hurt": self.is_retired_hurt,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "BattingStats":
        return cls(
            runs=d.get("runs", 0),
            balls_faced=d.get("balls_faced", 0),
            fours=d.get("fours", 0),
            sixes=d.get("sixes", 0),
            strike_rate=d.get("strike_rate", 0.0),
            is_out=d.get("is_out", False),
            dismissal_type=_enum_or_none(DismissalKind, d.get("dismissal_type")),
            dismissed_by=d.get("dismissed_by"),
            is_retired_hurt=d.get("is_retired_hurt", False),
        )


@dataclass
class BowlingStats:
    overs: int = 0
    balls: int = 0
    runs: int = 0
    wickets: int = 0
    economy_rate: float = 0.0
    wides: int = 0
    no_balls: int = 0

    @property
    def overs_display(self) -> str:
        return format_overs(self.overs, self.balls)

    def to_dict(self) -> dict:
        return {
            "overs": self.overs,
            "balls": self.balls,
            "runs": self.runs,
            "wickets": self.wickets,
            "economy_rate": self.economy_rate,
            "wides": self.wides,
            "no_balls": self.no_balls,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "BowlingStats":
        return cls(
            overs=d.get("overs", 0),
            balls=d.get("balls", 0),
            runs=d.get("runs", 0),
            wickets=d.get("wickets", 0),
            economy_rate=d.get("economy_rate", 0.0),
            wides=d.get("wides", 0),
            no_balls=d.get("no_balls", 0),
        )


@dataclass
class FieldingStats:
    catches: int = 0
    run_outs: int = 0
    stumpings: int = 0

    def to_dict(self) -> dict:
        return {"catches": self.catches, "run_outs": self.run_outs, "stumpings": self.stumpings}

    @classmethod
    def from_dict(cls, d: dict) -> "FieldingStats":
        return cls(
            catches=d.get("catches", 0),
            run_outs=d.get("run_outs", 0),
            stumpings=d.get("stumpings", 0),
        )


@dataclass
class Player:
    id: str
    name: str
    role: PlayerRole = PlayerRole.BATSMAN
    batting_stats: BattingStats = field(default_factory=BattingStats)
    bowling_stats: BowlingStats = field(default_factory=BowlingStats)
    fielding_stats: FieldingStats = field(default_factory=FieldingStats)

    @property
    def is_dismissed(self) -> bool:
        """Out for good; a retired-hurt batsman may still come back."""
        return self.batting_stats.is_out and not self.batting_stats.is_retired_hurt

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "batting_stats": self.batting_stats.to_dict(),
            "bowling_stats": self.bowling_stats.to_dict(),
            "fielding_stats": self.fielding_stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Player":
        return cls(
            id=str(d["id"]),
            name=d["name"],
            role=PlayerRole(d.get("role", PlayerRole.BATSMAN.value)),
            batting_stats=BattingStats.from_dict(d.get("batting_stats", {})),
            bowling_stats=BowlingStats.from_dict(d.get("bowling_stats", {})),
            fielding_stats=FieldingStats.from_dict(d.get("fielding_stats", {})),
        )

    def __repr__(self):
        return f"<Player {self.name} ({self.role.value})>"


@dataclass
class Team:
    id: str
    name: str
    playing_xi: List[Player] = field(default_factory=list)
    captain_id: Optional[str] = None
    wicket_keeper_id: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.playing_xi)

    @property
    def max_wickets(self) -> int:
        return max_wickets(self.size or 11)

    def find_player(self, player_id: Optional[str]) -> Optional[Player]:
        if player_id is None:
            return None
        return next((p for p in self.playing_xi if p.id == player_id), None)

    def get_player(self, player_id: str) -> Player:
        player = self.find_player(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id, self.name)
        return player

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "playing_xi": [p.to_dict() for p in self.playing_xi],
            "captain_id": self.captain_id,
            "wicket_keeper_id": self.wicket_keeper_id,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Team":
        return cls(
            id=str(d["id"]),
            name=d["name"],
            playing_xi=[Player.from_dict(p) for p in d.get("playing_xi", [])],
            captain_id=d.get("captain_id"),
            wicket_keeper_id=d.get("wicket_keeper_id"),
        )


@dataclass
class Ball:
    """One entry in the ball-by-ball log (extras included)"""
    over: int
    ball_number: int
    bowler: Optional[str]
    batsman: Optional[str]
    runs: int = 0
    is_extra: bool = False
    extra_type: Optional[ExtraKind] = None
    extra_runs: int = 0
    is_wicket: bool = False
    dismissal_type: Optional[DismissalKind] = None
    dismissed_player: Optional[str] = None
    commentary: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: str = field(default_factory=_now_iso)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "over": self.over,
            "ball_number": self.ball_number,
            "bowler": self.bowler,
            "batsman": self.batsman,
            "runs": self.runs,
            "is_extra": self.is_extra,
            "extra_type": self.extra_type.value if self.extra_type else None,
            "extra_runs": self.extra_runs,
            "is_wicket": self.is_wicket,
            "dismissal_type": self.dismissal_type.value if self.dismissal_type else None,
            "dismissed_player": self.dismissed_player,
            "commentary": self.commentary,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Ball":
        return cls(
            id=d.get("id") or uuid.uuid4().hex,
            over=d.get("over", 0),
            ball_number=d.get("ball_number", 0),
            bowler=d.get("bowler"),
            batsman=d.get("batsman"),
            runs=d.get("runs", 0),
            is_extra=d.get("is_extra", False),
            extra_type=_enum_or_none(ExtraKind, d.get("extra_type")),
            extra_runs=d.get("extra_runs", 0),
            is_wicket=d.get("is_wicket", False),
            dismissal_type=_enum_or_none(DismissalKind, d.get("dismissal_type")),
            dismissed_player=d.get("dismissed_player"),
            commentary=d.get("commentary", ""),
            timestamp=d.get("timestamp") or _now_iso(),
        )

    @property
    def symbol(self) -> str:
        """Short scorecard notation: W, Wd, Nb+2, 1b, 4"""
        if self.is_wicket:
            return "W"
        if self.extra_type is ExtraKind.WIDE:
            return "Wd" if self.runs == 1 else f"Wd+{self.runs - 1}"
        if self.extra_type is ExtraKind.NO_BALL:
            return "Nb" if self.runs == 1 else f"Nb+{self.runs - 1}"
        if self.extra_type is ExtraKind.BYE:
            return f"{self.runs}b"
        if self.extra_type is ExtraKind.LEG_BYE:
            return f"{self.runs}lb"
        return str(self.runs)


@dataclass
class Over:
    number: int
    bowler: Optional[str]
    balls: List[Ball] = field(default_factory=list)
    runs: int = 0
    wickets: int = 0
    extras: int = 0

    @property
    def is_maiden(self) -> bool:
        legal = [b for b in self.balls if not (b.extra_type and not b.extra_type.counts_ball)]
        return len(legal) == 6 and self.runs == 0

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "bowler": self.bowler,
            "balls": [b.to_dict() for b in self.balls],
            "runs": self.runs,
            "wickets": self.wickets,
            "extras": self.extras,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Over":
        return cls(
            number=d.get("number", 0),
            bowler=d.get("bowler"),
            balls=[Ball.from_dict(b) for b in d.get("balls", [])],
            runs=d.get("runs", 0),
            wickets=d.get("wickets", 0),
            extras=d.get("extras", 0),
        )


@dataclass
class CommentaryEntry:
    over: int
    ball: int
    text: str
    runs: int = 0
    is_wicket: bool = False
    is_extra: bool = False
    timestamp: str = field(default_factory=_now_iso)

    def to_dict(self) -> dict:
        return {
            "over": self.over,
            "ball": self.ball,
            "text": self.text,
            "runs": self.runs,
            "is_wicket": self.is_wicket,
            "is_extra": self.is_extra,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "CommentaryEntry":
        return cls(
            over=d.get("over", 0),
            ball=d.get("ball", 0),
            text=d.get("text", ""),
            runs=d.get("runs", 0),
            is_wicket=d.get("is_wicket", False),
            is_extra=d.get("is_extra", False),
            timestamp=d.get("timestamp") or _now_iso(),
        )


@dataclass
class Partnership:
    batsmen: List[str]
    start_over: str
    runs: int = 0
    balls: int = 0
    end_over: Optional[str] = None
    is_unbroken: bool = True

    def to_dict(self) -> dict:
        return {
            "batsmen": list(self.batsmen),
            "runs": self.runs,
            "balls": self.balls,
            "start_over": self.start_over,
            "end_over": self.end_over,
            "is_unbroken": self.is_unbroken,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Partnership":
        return cls(
            batsmen=list(d.get("batsmen", [])),
            start_over=d.get("start_over", "0.0"),
            runs=d.get("runs", 0),
            balls=d.get("balls", 0),
            end_over=d.get("end_over"),
            is_unbroken=d.get("is_unbroken", True),
        )


@dataclass
class Innings:
    number: int
    batting_team_id: str
    bowling_team_id: str
    score: int = 0
    wickets: int = 0
    overs: int = 0
    balls: int = 0
    extras: int = 0
    target: Optional[int] = None
    is_complete: bool = False
    completion_reason: Optional[CompletionReason] = None

    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    current_bowler_id: Optional[str] = None
    last_bowler_id: Optional[str] = None

    # Flags the caller reads to decide what to prompt for next
    free_hit: bool = False
    needs_new_bowler: bool = False
    needs_new_batsman: bool = False
    vacated_batsman_id: Optional[str] = None

    over_history: List[Over] = field(default_factory=list)
    ball_history: List[Ball] = field(default_factory=list)
    commentary: List[CommentaryEntry] = field(default_factory=list)
    partnerships: List[Partnership] = field(default_factory=list)

    @property
    def overs_display(self) -> str:
        return format_overs(self.overs, self.balls)

    @property
    def run_rate(self) -> float:
        return run_rate(self.score, self.overs, self.balls)

    @property
    def current_partnership(self) -> Optional[Partnership]:
        if self.partnerships and self.partnerships[-1].is_unbroken:
            return self.partnerships[-1]
        return None

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "batting_team_id": self.batting_team_id,
            "bowling_team_id": self.bowling_team_id,
            "score": self.score,
            "wickets": self.wickets,
            "overs": self.overs,
            "balls": self.balls,
            "extras": self.extras,
            "target": self.target,
            "is_complete": self.is_complete,
            "completion_reason": self.completion_reason.value if self.completion_reason else None,
            "striker_id": self.striker_id,
            "non_striker_id": self.non_striker_id,
            "current_bowler_id": self.current_bowler_id,
            "last_bowler_id": self.last_bowler_id,
            "free_hit": self.free_hit,
            "needs_new_bowler": self.needs_new_bowler,
            "needs_new_batsman": self.needs_new_batsman,
            "vacated_batsman_id": self.vacated_batsman_id,
            "over_history": [o.to_dict() for o in self.over_history],
            "ball_history": [b.to_dict() for b in self.ball_history],
            "commentary": [c.to_dict() for c in self.commentary],
            "partnerships": [p.to_dict() for p in self.partnerships],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Innings":
        return cls(
            number=d["number"],
            batting_team_id=str(d["batting_team_id"]),
            bowling_team_id=str(d["bowling_team_id"]),
            score=d.get("score", 0),
            wickets=d.get("wickets", 0),
            overs=d.get("overs", 0),
            balls=d.get("balls", 0),
            extras=d.get("extras", 0),
            target=d.get("target"),
            is_complete=d.get("is_complete", False),
            completion_reason=_enum_or_none(CompletionReason, d.get("completion_reason")),
            striker_id=d.get("striker_id"),
            non_striker_id=d.get("non_striker_id"),
            current_bowler_id=d.get("current_bowler_id"),
            last_bowler_id=d.get("last_bowler_id"),
            free_hit=d.get("free_hit", False),
            needs_new_bowler=d.get("needs_new_bowler", False),
            needs_new_batsman=d.get("needs_new_batsman", False),
            vacated_batsman_id=d.get("vacated_batsman_id"),
            over_history=[Over.from_dict(o) for o in d.get("over_history", [])],
            ball_history=[Ball.from_dict(b) for b in d.get("ball_history", [])],
            commentary=[CommentaryEntry.from_dict(c) for c in d.get("commentary", [])],
            partnerships=[Partnership.from_dict(p) for p in d.get("partnerships", [])],
        )

    def __repr__(self):
        return f"<Innings {self.number}: {self.score}/{self.wickets} ({self.overs_display})>"


@dataclass
class Awards:
    best_batsman_id: Optional[str] = None
    best_bowler_id: Optional[str] = None
    man_of_the_match_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "best_batsman_id": self.best_batsman_id,
            "best_bowler_id": self.best_bowler_id,
            "man_of_the_match_id": self.man_of_the_match_id,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Awards":
        return cls(
            best_batsman_id=d.get("best_batsman_id"),
            best_bowler_id=d.get("best_bowler_id"),
            man_of_the_match_id=d.get("man_of_the_match_id"),
        )


@dataclass
class Match:
    team1: Team
    team2: Team
    total_overs: int
    batting_first: str
    toss_winner: Optional[str] = None
    toss_decision: Optional[TossDecision] = None
    current_innings: int = 1
    first_innings: Optional[Innings] = None
    second_innings: Optional[Innings] = None
    is_live: bool = False
    is_complete: bool = False
    winner: Optional[str] = None
    result: Optional[str] = None
    awards: Optional[Awards] = None
    match_type: MatchType = MatchType.T20
    venue: Optional[str] = None
    date: str = field(default_factory=_now_iso)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def team(self, team_id: str) -> Team:
        if team_id == self.team1.id:
            return self.team1
        if team_id == self.team2.id:
            return self.team2
        raise KeyError(f"Team {team_id} is not playing in match {self.id}")

    def other_team(self, team_id: str) -> Team:
        return self.team2 if team_id == self.team1.id else self.team1

    def innings_for(self, number: int) -> Optional[Innings]:
        return self.first_innings if number == 1 else self.second_innings

    @property
    def innings(self) -> Optional[Innings]:
        """The innings currently being scored, if it has been started"""
        return self.innings_for(self.current_innings)

    def require_innings(self) -> Innings:
        innings = self.innings
        if innings is None:
            raise InningsNotFoundError(self.current_innings)
        return innings

    @property
    def batting_team(self) -> Team:
        if self.current_innings == 1:
            return self.team(self.batting_first)
        return self.other_team(self.batting_first)

    @property
    def bowling_team(self) -> Team:
        return self.other_team(self.batting_team.id)

    @property
    def target(self) -> Optional[int]:
        if self.current_innings == 2 and self.first_innings is not None:
            return self.first_innings.score + 1
        return None

    def all_players(self) -> List[Player]:
        return list(self.team1.playing_xi) + list(self.team2.playing_xi)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "team1": self.team1.to_dict(),
            "team2": self.team2.to_dict(),
            "total_overs": self.total_overs,
            "toss_winner": self.toss_winner,
            "toss_decision": self.toss_decision.value if self.toss_decision else None,
            "batting_first": self.batting_first,
            "current_innings": self.current_innings,
            "innings": {
                "first": self.first_innings.to_dict() if self.first_innings else None,
                "second": self.second_innings.to_dict() if self.second_innings else None,
            },
            "is_live": self.is_live,
            "is_complete": self.is_complete,
            "winner": self.winner,
            "result": self.result,
            "awards": self.awards.to_dict() if self.awards else None,
            "match_type": self.match_type.value,
            "venue": self.venue,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Match":
        innings = d.get("innings") or {}
        first = innings.get("first")
        second = innings.get("second")
        return cls(
            id=d.get("id") or uuid.uuid4().hex,
            team1=Team.from_dict(d["team1"]),
            team2=Team.from_dict(d["team2"]),
            total_overs=d["total_overs"],
            toss_winner=d.get("toss_winner"),
            toss_decision=_enum_or_none(TossDecision, d.get("toss_decision")),
            batting_first=str(d["batting_first"]),
            current_innings=d.get("current_innings", 1),
            first_innings=Innings.from_dict(first) if first else None,
            second_innings=Innings.from_dict(second) if second else None,
            is_live=d.get("is_live", False),
            is_complete=d.get("is_complete", False),
            winner=d.get("winner"),
            result=d.get("result"),
            awards=Awards.from_dict(d["awards"]) if d.get("awards") else None,
            match_type=MatchType(d.get("match_type", MatchType.T20.value)),
            venue=d.get("venue"),
            date=d.get("date") or _now_iso(),
        )

    def __repr__(self):
        return f"<Match {self.team1.name} vs {self.team2.name}>"
