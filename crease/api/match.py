import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Dict, List

from crease.database import get_db
from crease.engine import ScoringEngine, ScoringResult
from crease.engine.exceptions import ScoringError
from crease.engine.state import Match
from crease.repository import MatchRepository
from crease.api.schemas import (
    StartMatchRequest, DeliveryRequest, WicketRequest, BatsmanRequest, BowlerRequest,
    SecondInningsRequest, ScoringResponse, MatchSummary, PlayerBrief,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matches", tags=["Scoring"])

# One engine per match being scored; each holds that match's undo snapshot.
active_engines: Dict[str, ScoringEngine] = {}


def _engine_for(match_id: str) -> ScoringEngine:
    engine = active_engines.get(match_id)
    if engine is None:
        engine = ScoringEngine()
        active_engines[match_id] = engine
    return engine


def _load(match_id: str, db: Session) -> Match:
    match = MatchRepository(db).get(match_id)
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return match


def _persist(match: Match, db: Session):
    """Save after the engine has applied a change. A failed save is logged, the change stands."""
    try:
        MatchRepository(db).save(match)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to persist match %s", match.id)


def _respond(result: ScoringResult, engine: ScoringEngine, db: Session) -> ScoringResponse:
    if not result.ok:
        raise HTTPException(status_code=400, detail={"errors": result.errors, "messages": result.messages})
    _persist(result.match, db)
    innings = result.match.innings
    return ScoringResponse(
        warnings=result.warnings,
        can_undo=engine.can_undo,
        needs_new_batsman=innings.needs_new_batsman if innings else False,
        needs_new_bowler=innings.needs_new_bowler if innings else False,
        is_complete=result.match.is_complete,
        chase=engine.chase_status(result.match),
        match=result.match.to_dict(),
    )


@router.post("", response_model=ScoringResponse)
def start_match(request: StartMatchRequest, db: Session = Depends(get_db)):
    """Start a match from the toss outcome and opening selections"""
    engine = ScoringEngine()
    result = engine.start_match(
        request.team1.to_team(),
        request.team2.to_team(),
        request.total_overs,
        request.toss_winner_id,
        request.toss_decision.value,
        request.striker_id,
        request.non_striker_id,
        request.bowler_id,
        request.match_type.value,
        request.venue,
    )
    if result.ok:
        active_engines[result.match.id] = engine
    return _respond(result, engine, db)


@router.get("", response_model=List[MatchSummary])
def list_matches(db: Session = Depends(get_db)):
    return MatchRepository(db).list_records()


@router.get("/{match_id}")
def get_match(match_id: str, db: Session = Depends(get_db)):
    return _load(match_id, db).to_dict()


@router.delete("/{match_id}")
def delete_match(match_id: str, db: Session = Depends(get_db)):
    if not MatchRepository(db).delete(match_id):
        raise HTTPException(status_code=404, detail="Match not found")
    active_engines.pop(match_id, None)
    return {"deleted": match_id}


@router.post("/{match_id}/deliveries", response_model=ScoringResponse)
def record_delivery(match_id: str, request: DeliveryRequest, db: Session = Depends(get_db)):
    match = _load(match_id, db)
    engine = _engine_for(match_id)
    try:
        result = engine.record_delivery(match, request.runs, request.is_extra, request.extra_type)
    except ScoringError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _respond(result, engine, db)


@router.post("/{match_id}/wickets", response_model=ScoringResponse)
def record_wicket(match_id: str, request: WicketRequest, db: Session = Depends(get_db)):
    match = _load(match_id, db)
    engine = _engine_for(match_id)
    try:
        result = engine.record_wicket(match, request.dismissal_type, request.out_batsman_id, request.fielder_id)
    except ScoringError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _respond(result, engine, db)


@router.post("/{match_id}/undo", response_model=ScoringResponse)
def undo(match_id: str, db: Session = Depends(get_db)):
    match = _load(match_id, db)
    engine = _engine_for(match_id)
    return _respond(engine.undo(match), engine, db)


@router.post("/{match_id}/batsman", response_model=ScoringResponse)
def assign_new_batsman(match_id: str, request: BatsmanRequest, db: Session = Depends(get_db)):
    match = _load(match_id, db)
    engine = _engine_for(match_id)
    return _respond(engine.assign_new_batsman(match, request.batsman_id), engine, db)


@router.post("/{match_id}/bowler", response_model=ScoringResponse)
def assign_new_bowler(match_id: str, request: BowlerRequest, db: Session = Depends(get_db)):
    match = _load(match_id, db)
    engine = _engine_for(match_id)
    return _respond(engine.assign_new_bowler(match, request.bowler_id), engine, db)


@router.post("/{match_id}/second-innings", response_model=ScoringResponse)
def start_second_innings(match_id: str, request: SecondInningsRequest, db: Session = Depends(get_db)):
    match = _load(match_id, db)
    engine = _engine_for(match_id)
    result = engine.start_second_innings(match, request.striker_id, request.non_striker_id, request.bowler_id)
    return _respond(result, engine, db)


@router.post("/{match_id}/rotate-strike", response_model=ScoringResponse)
def rotate_strike(match_id: str, db: Session = Depends(get_db)):
    match = _load(match_id, db)
    engine = _engine_for(match_id)
    return _respond(engine.rotate_strike(match), engine, db)


@router.post("/{match_id}/end", response_model=ScoringResponse)
def end_match_early(match_id: str, db: Session = Depends(get_db)):
    match = _load(match_id, db)
    engine = _engine_for(match_id)
    return _respond(engine.end_match_early(match), engine, db)


@router.get("/{match_id}/eligible-bowlers", response_model=List[PlayerBrief])
def eligible_bowlers(match_id: str, db: Session = Depends(get_db)):
    match = _load(match_id, db)
    if match.innings is None:
        raise HTTPException(status_code=400, detail="No active innings")
    return [
        PlayerBrief(id=p.id, name=p.name, role=p.role.value)
        for p in _engine_for(match_id).eligible_bowlers(match)
    ]


@router.get("/{match_id}/eligible-batsmen", response_model=List[PlayerBrief])
def eligible_batsmen(match_id: str, db: Session = Depends(get_db)):
    match = _load(match_id, db)
    if match.innings is None:
        raise HTTPException(status_code=400, detail="No active innings")
    return [
        PlayerBrief(id=p.id, name=p.name, role=p.role.value)
        for p in _engine_for(match_id).eligible_batsmen(match)
    ]
