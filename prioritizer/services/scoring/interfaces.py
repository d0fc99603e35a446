# initiative_prioritizer/prioritizer/services/scoring/interfaces.py

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from prioritizer.schemas.classification import coerce_list


class ScoringDimension(str, Enum):
    """The eight weighted dimensions, in breakdown order."""
    CATEGORY = "category"
    VERTICAL = "vertical"
    CLIENT_TYPE = "client_type"
    COUNTRY = "country"
    SYSTEMIC_RISK = "systemic_risk"
    ECONOMIC_IMPACT = "economic_impact"
    EXPERIENCE_IMPACT = "experience_impact"
    INNOVATION_LEVEL = "innovation_level"


class ScoreInputs(BaseModel):
    """Classification snapshot consumed by scoring engines.

    Built from any object exposing the classification attributes (ORM rows,
    InitiativeCreate, drafts). Validation never rejects: values of the wrong
    shape collapse to "not set" so the dimension simply scores 0.
    """
    model_config = ConfigDict(from_attributes=True)

    category: Optional[str] = None
    vertical: Optional[str] = None
    client_type: Optional[str] = None
    countries: List[str] = Field(default_factory=list)
    systemic_risk: Optional[str] = None
    economic_impact: Optional[str] = None
    experience_impact: List[str] = Field(default_factory=list)
    innovation_level: Optional[str] = None

    @field_validator(
        "category",
        "vertical",
        "client_type",
        "systemic_risk",
        "economic_impact",
        "innovation_level",
        mode="before",
    )
    @classmethod
    def _single_value(cls, v: Any) -> Optional[str]:
        if isinstance(v, Enum):
            v = v.value
        return v if isinstance(v, str) else None

    @field_validator("countries", "experience_impact", mode="before")
    @classmethod
    def _multi_value(cls, v: Any) -> List[str]:
        items = []
        for item in coerce_list(v):
            if isinstance(item, Enum):
                item = item.value
            if isinstance(item, str):
                items.append(item)
        return items


class ScoreBreakdown(BaseModel):
    """Itemised score; immutable, replaced whole on every recomputation."""
    model_config = ConfigDict(frozen=True)

    category_score: int = 0
    vertical_score: int = 0
    client_score: int = 0
    country_score: int = 0
    risk_score: int = 0
    economic_score: int = 0
    experience_score: int = 0
    innovation_score: int = 0
    total_score: int = 0
    explanation: str = ""

    def component_sum(self) -> int:
        return (
            self.category_score
            + self.vertical_score
            + self.client_score
            + self.country_score
            + self.risk_score
            + self.economic_score
            + self.experience_score
            + self.innovation_score
        )

    @model_validator(mode="after")
    def _total_matches_components(self) -> "ScoreBreakdown":
        if self.total_score != self.component_sum():
            raise ValueError(
                f"total_score {self.total_score} does not match component sum {self.component_sum()}"
            )
        return self


class ScoringEngine(Protocol):
    """Protocol that all scoring engines must satisfy."""

    def compute(self, inputs: ScoreInputs) -> ScoreBreakdown:  # pragma: no cover - interface only
        ...


__all__ = [
    "ScoringDimension",
    "ScoreInputs",
    "ScoreBreakdown",
    "ScoringEngine",
]
