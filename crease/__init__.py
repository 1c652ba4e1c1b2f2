"""
Crease - ball-by-ball limited-overs cricket scoring
"""
__version__ = "0.1.0"

from crease.engine import ScoringEngine, ScoringResult  # noqa: E402

__all__ = ["ScoringEngine", "ScoringResult", "__version__"]
