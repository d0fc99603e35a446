from datetime import datetime
from typing import Any, Dict, Optional, List
from pydantic import BaseModel, Field, field_validator

from prioritizer.schemas.classification import (
    InitiativeStatus,
    normalize_category,
    normalize_client_type,
    normalize_countries,
    normalize_economic_impact,
    normalize_experience_impact,
    normalize_innovation_level,
    normalize_systemic_risk,
    normalize_vertical,
)


TITLE_MIN_LENGTH = 3


class InitiativeBase(BaseModel):
    title: str = Field(..., min_length=TITLE_MIN_LENGTH)
    created_by: Optional[str] = None

    summary: Optional[str] = None
    problem_description: Optional[str] = None
    business_case: Optional[str] = None
    client_segment: Optional[str] = None
    economic_impact_description: Optional[str] = None
    executive_summary: Optional[str] = None
    quarter: Optional[str] = None

    category: Optional[str] = None
    vertical: Optional[str] = None
    client_type: Optional[str] = None
    countries: List[str] = Field(default_factory=list)
    systemic_risk: Optional[str] = None
    economic_impact: Optional[str] = None
    experience_impact: List[str] = Field(default_factory=list)
    innovation_level: Optional[str] = None

    status: InitiativeStatus = InitiativeStatus.BACKLOG


class InitiativeCreate(InitiativeBase):
    """Fully assembled initiative handed to the store for creation."""

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return normalize_category(v)

    @field_validator("vertical", mode="before")
    @classmethod
    def _vertical(cls, v):
        return normalize_vertical(v)

    @field_validator("client_type", mode="before")
    @classmethod
    def _client_type(cls, v):
        return normalize_client_type(v)

    @field_validator("systemic_risk", mode="before")
    @classmethod
    def _systemic_risk(cls, v):
        return normalize_systemic_risk(v)

    @field_validator("economic_impact", mode="before")
    @classmethod
    def _economic_impact(cls, v):
        return normalize_economic_impact(v)

    @field_validator("innovation_level", mode="before")
    @classmethod
    def _innovation_level(cls, v):
        return normalize_innovation_level(v)

    @field_validator("countries", mode="before")
    @classmethod
    def _countries(cls, v):
        return normalize_countries(v)

    @field_validator("experience_impact", mode="before")
    @classmethod
    def _experience_impact(cls, v):
        return normalize_experience_impact(v)


class InitiativeRead(InitiativeBase):
    id: str
    score: int = 0
    score_breakdown: Optional[Dict[str, Any]] = None
    scored_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    updated_source: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("countries", "experience_impact", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return v or []
