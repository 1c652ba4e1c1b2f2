"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum

from crease.engine.state import Team, Player, PlayerRole


# Enums
class TossDecisionEnum(str, Enum):
    BAT = "bat"
    BOWL = "bowl"


class MatchTypeEnum(str, Enum):
    T20 = "T20"
    ODI = "ODI"
    CUSTOM = "Custom"


# Roster Schemas
class PlayerIn(BaseModel):
    id: str
    name: str
    role: str = PlayerRole.BATSMAN.value

    def to_player(self) -> Player:
        return Player(id=self.id, name=self.name, role=PlayerRole(self.role))


class TeamIn(BaseModel):
    id: str
    name: str
    playing_xi: List[PlayerIn]
    captain_id: Optional[str] = None
    wicket_keeper_id: Optional[str] = None

    def to_team(self) -> Team:
        return Team(
            id=self.id,
            name=self.name,
            playing_xi=[p.to_player() for p in self.playing_xi],
            captain_id=self.captain_id,
            wicket_keeper_id=self.wicket_keeper_id,
        )


# Scoring Schemas
class StartMatchRequest(BaseModel):
    team1: TeamIn
    team2: TeamIn
    total_overs: int = 20
    toss_winner_id: str
    toss_decision: TossDecisionEnum
    striker_id: str
    non_striker_id: str
    bowler_id: Optional[str] = None
    match_type: MatchTypeEnum = MatchTypeEnum.T20
    venue: Optional[str] = None


class DeliveryRequest(BaseModel):
    runs: int
    is_extra: bool = False
    extra_type: Optional[str] = None  # "wide", "no_ball", "bye", "leg_bye"


class WicketRequest(BaseModel):
    dismissal_type: str
    out_batsman_id: Optional[str] = None
    fielder_id: Optional[str] = None


class BatsmanRequest(BaseModel):
    batsman_id: str


class BowlerRequest(BaseModel):
    bowler_id: str


class SecondInningsRequest(BaseModel):
    striker_id: str
    non_striker_id: str
    bowler_id: Optional[str] = None


class ScoringResponse(BaseModel):
    ok: bool = True
    warnings: List[str] = Field(default_factory=list)
    can_undo: bool = False
    needs_new_batsman: bool = False
    needs_new_bowler: bool = False
    is_complete: bool = False
    chase: Optional[dict] = None
    match: dict


class MatchSummary(BaseModel):
    id: str
    team1_name: str
    team2_name: str
    total_overs: int
    is_live: bool
    is_complete: bool
    result: Optional[str] = None

    class Config:
        from_attributes = True


class PlayerBrief(BaseModel):
    id: str
    name: str
    role: str
