"""
Match persistence.

The engine never reads from here; callers save whatever Match the engine
hands back and load matches to resume scoring.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from crease.engine.state import Match
from crease.models.match import MatchRecord

logger = logging.getLogger(__name__)


class MatchRepository:
    def __init__(self, session: Session):
        self.session = session

    def save(self, match: Match) -> MatchRecord:
        """Insert or overwrite the stored document for this match"""
        record = self.session.get(MatchRecord, match.id)
        if record is None:
            record = MatchRecord(id=match.id)
            self.session.add(record)
        record.update_from(match)
        self.session.commit()
        logger.debug("Saved match %s (live=%s complete=%s)", match.id, match.is_live, match.is_complete)
        return record

    def get(self, match_id: str) -> Optional[Match]:
        record = self.session.get(MatchRecord, match_id)
        return record.to_match() if record else None

    def fetch_all(self) -> List[Match]:
        records = self.session.query(MatchRecord).order_by(MatchRecord.updated_at.desc()).all()
        return [r.to_match() for r in records]

    def list_records(self) -> List[MatchRecord]:
        return self.session.query(MatchRecord).order_by(MatchRecord.updated_at.desc()).all()

    def delete(self, match_id: str) -> bool:
        record = self.session.get(MatchRecord, match_id)
        if record is None:
            return False
        self.session.delete(record)
        self.session.commit()
        return True
