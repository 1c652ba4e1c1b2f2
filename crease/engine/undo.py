"""
Single-level undo.

A snapshot is the whole Match as a to_dict() document, taken just before a
scoring or wicket mutation. Restoring rebuilds the Match from that document,
so the snapshot never shares objects with the live match.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from crease.engine.state import Match

logger = logging.getLogger(__name__)

NOTHING_TO_UNDO = "Nothing to undo"
CROSS_INNINGS = "Cannot undo across innings"


@dataclass
class ActionSnapshot:
    tag: str
    document: dict
    current_innings: int


class UndoManager:
    def __init__(self):
        self._last: Optional[ActionSnapshot] = None

    @property
    def can_undo(self) -> bool:
        return self._last is not None

    @property
    def last_action(self) -> Optional[str]:
        return self._last.tag if self._last else None

    def snapshot(self, match: Match, tag: str):
        self._last = ActionSnapshot(tag=tag, document=match.to_dict(), current_innings=match.current_innings)

    def clear(self):
        self._last = None

    def undo(self, match: Match) -> Tuple[Optional[Match], Optional[str]]:
        """
        Returns (restored match, None), or (None, reason) when nothing was
        restored. A refused cross-innings undo keeps the snapshot.
        """
        if self._last is None:
            return None, NOTHING_TO_UNDO
        if self._last.current_innings != match.current_innings:
            logger.warning(
                "Refusing undo of %s: snapshot from innings %d, match now in innings %d",
                self._last.tag, self._last.current_innings, match.current_innings,
            )
            return None, CROSS_INNINGS

        restored = Match.from_dict(self._last.document)
        logger.info("Undid %s", self._last.tag)
        self._last = None
        return restored, None
