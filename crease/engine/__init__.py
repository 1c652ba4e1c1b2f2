from crease.engine.scoring_engine import ScoringEngine, ScoringResult
from crease.engine.state import Match, Innings, Team, Player, DismissalKind, ExtraKind
from crease.engine.undo import UndoManager

__all__ = [
    "ScoringEngine",
    "ScoringResult",
    "UndoManager",
    "Match",
    "Innings",
    "Team",
    "Player",
    "DismissalKind",
    "ExtraKind",
]
