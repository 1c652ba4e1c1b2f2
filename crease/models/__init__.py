from crease.models.match import MatchRecord

__all__ = [
    "MatchRecord",
]
