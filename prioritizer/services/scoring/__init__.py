from .interfaces import (
    ScoringDimension,
    ScoreInputs,
    ScoreBreakdown,
    ScoringEngine,
)
from .registry import (
    DimensionInfo,
    SCORING_DIMENSIONS,
    get_engine,
    compute_score,
    priority_label,
)

__all__ = [
    "ScoringDimension",
    "ScoreInputs",
    "ScoreBreakdown",
    "ScoringEngine",
    "DimensionInfo",
    "SCORING_DIMENSIONS",
    "get_engine",
    "compute_score",
    "priority_label",
]
