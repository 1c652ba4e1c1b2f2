import json
from typing import Optional
from datetime import datetime
from sqlalchemy import String, Boolean, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from crease.database import Base
from crease.engine.state import Match


class MatchRecord(Base):
    """A match stored as one JSON document, with a few columns copied out for listing"""
    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Full Match.to_dict() document
    document: Mapped[str] = mapped_column(Text)

    # Listing columns
    team1_name: Mapped[str] = mapped_column(String(100))
    team2_name: Mapped[str] = mapped_column(String(100))
    total_overs: Mapped[int] = mapped_column(default=20)
    is_live: Mapped[bool] = mapped_column(Boolean, default=False)
    is_complete: Mapped[bool] = mapped_column(Boolean, default=False)
    result: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_match(self) -> Match:
        return Match.from_dict(json.loads(self.document))

    def update_from(self, match: Match):
        self.document = json.dumps(match.to_dict())
        self.team1_name = match.team1.name
        self.team2_name = match.team2.name
        self.total_overs = match.total_overs
        self.is_live = match.is_live
        self.is_complete = match.is_complete
        self.result = match.result

    def __repr__(self):
        return f"<MatchRecord {self.team1_name} vs {self.team2_name}>"
