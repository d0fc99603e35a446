# initiative_prioritizer/prioritizer/services/scoring/registry.py

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional

from prioritizer.config import settings
from prioritizer.services.scoring.engines import WeightedScoringEngine
from prioritizer.services.scoring.interfaces import (
    ScoreBreakdown,
    ScoreInputs,
    ScoringDimension,
    ScoringEngine,
)


@dataclass(frozen=True)
class DimensionInfo:
    name: ScoringDimension
    label: str
    breakdown_field: str
    multi_valued: bool = False


SCORING_DIMENSIONS: Dict[ScoringDimension, DimensionInfo] = {
    ScoringDimension.CATEGORY: DimensionInfo(ScoringDimension.CATEGORY, "Category", "category_score"),
    ScoringDimension.VERTICAL: DimensionInfo(ScoringDimension.VERTICAL, "Vertical", "vertical_score"),
    ScoringDimension.CLIENT_TYPE: DimensionInfo(ScoringDimension.CLIENT_TYPE, "Client", "client_score"),
    ScoringDimension.COUNTRY: DimensionInfo(ScoringDimension.COUNTRY, "Country", "country_score", multi_valued=True),
    ScoringDimension.SYSTEMIC_RISK: DimensionInfo(ScoringDimension.SYSTEMIC_RISK, "Risk", "risk_score"),
    ScoringDimension.ECONOMIC_IMPACT: DimensionInfo(ScoringDimension.ECONOMIC_IMPACT, "Economic", "economic_score"),
    ScoringDimension.EXPERIENCE_IMPACT: DimensionInfo(
        ScoringDimension.EXPERIENCE_IMPACT, "Experience", "experience_score", multi_valued=True
    ),
    ScoringDimension.INNOVATION_LEVEL: DimensionInfo(ScoringDimension.INNOVATION_LEVEL, "Innovation", "innovation_score"),
}


@lru_cache(maxsize=1)
def get_engine() -> ScoringEngine:
    """Default engine built from the configured point tables."""
    return WeightedScoringEngine(settings.SCORING_POINTS)


def compute_score(initiative: Any, engine: Optional[ScoringEngine] = None) -> ScoreBreakdown:
    """Score anything exposing the classification attributes (ORM row, DTO, draft)."""
    inputs = initiative if isinstance(initiative, ScoreInputs) else ScoreInputs.model_validate(initiative)
    return (engine or get_engine()).compute(inputs)


def priority_label(score: Optional[int]) -> str:
    low, medium = settings.SCORING_PRIORITY_THRESHOLDS
    if not score:
        return "Score not calculated yet"
    if score < low:
        return "Low priority initiative"
    if score < medium:
        return "Medium priority initiative"
    return "High priority initiative"


__all__ = [
    "DimensionInfo",
    "SCORING_DIMENSIONS",
    "get_engine",
    "compute_score",
    "priority_label",
]
