# initiative_prioritizer/prioritizer/schemas/intake.py

"""Typed conversation context for the intake flow.

The state that travels between intake turns is validated once here instead
of being passed around as loose dictionaries.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from prioritizer.schemas.classification import (
    coerce_list,
    is_empty_marker,
    normalize_category,
    normalize_client_type,
    normalize_countries,
    normalize_economic_impact,
    normalize_experience_impact,
    normalize_innovation_level,
    normalize_systemic_risk,
    normalize_vertical,
)
from prioritizer.schemas.initiative import TITLE_MIN_LENGTH

# Every one of these must be filled before the draft can be confirmed.
REQUIRED_FIELDS: Tuple[str, ...] = (
    "title",
    "summary",
    "category",
    "vertical",
    "countries",
    "client_type",
    "problem_description",
    "business_case",
    "economic_impact_type",
    "client_segment",
)

# Names the provider sometimes uses for draft fields.
FIELD_ALIASES: Dict[str, str] = {
    "description": "summary",
    "country": "countries",
    "economic_impact": "economic_impact_type",
    "competitive_approach": "innovation_level",
    "clientType": "client_type",
}

QUESTION_TYPES = {"text", "select", "multiselect", "boolean"}


class IntakePhase(str, Enum):
    COLLECTING = "collecting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    CONFIRMED = "confirmed"
    COMPLETE = "complete"
    PERSISTED = "persisted"


class NextStep(str, Enum):
    CONTINUE = "continue"
    CONFIRM = "confirm"
    VALIDATE = "validate"
    COMPLETE = "complete"
    FAILED = "failed"


class ConfirmationChoice(str, Enum):
    CONFIRM = "confirm"
    REFINE = "refine"
    MODIFY = "modify"
    AMBIGUOUS = "ambiguous"


class Question(BaseModel):
    id: str
    text: str = Field(..., min_length=1)
    type: str = "text"
    options: List[str] = Field(default_factory=list)
    required: bool = False

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, v: Any) -> str:
        return v if v in QUESTION_TYPES else "text"

    @field_validator("options", mode="before")
    @classmethod
    def _options(cls, v: Any) -> List[str]:
        return [str(o) for o in v] if isinstance(v, list) else []


class ConfirmationOption(BaseModel):
    id: str
    text: str
    description: str


def _clean_text(v: Any) -> Optional[str]:
    if v is None:
        return None
    if not isinstance(v, str):
        raise ValueError("expected a string")
    return None if is_empty_marker(v) else v.strip()


def _require_str(v: Any) -> Any:
    if v is not None and not isinstance(v, str):
        raise ValueError("expected a string")
    return v


def _require_list(v: Any) -> List[Any]:
    if v is None:
        return []
    if isinstance(v, str):
        return coerce_list(v)
    if not isinstance(v, list) or not all(isinstance(i, str) for i in v):
        raise ValueError("expected a list of strings")
    return v


class ExtractedData(BaseModel):
    """Structured initiative fields collected so far (the draft)."""

    title: Optional[str] = None
    summary: Optional[str] = None
    category: Optional[str] = None
    vertical: Optional[str] = None
    countries: List[str] = Field(default_factory=list)
    client_type: Optional[str] = None
    problem_description: Optional[str] = None
    business_case: Optional[str] = None
    economic_impact_type: Optional[str] = None
    client_segment: Optional[str] = None

    systemic_risk: Optional[str] = None
    innovation_level: Optional[str] = None
    experience_impact: List[str] = Field(default_factory=list)
    economic_impact_description: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> Optional[str]:
        text = _clean_text(v)
        if text is not None and len(text) < TITLE_MIN_LENGTH:
            raise ValueError(f"title must have at least {TITLE_MIN_LENGTH} characters")
        return text

    @field_validator(
        "summary",
        "problem_description",
        "business_case",
        "client_segment",
        "economic_impact_description",
        mode="before",
    )
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        return _clean_text(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: Any) -> Optional[str]:
        return normalize_category(_require_str(v))

    @field_validator("vertical", mode="before")
    @classmethod
    def _vertical(cls, v: Any) -> Optional[str]:
        return normalize_vertical(_require_str(v))

    @field_validator("client_type", mode="before")
    @classmethod
    def _client_type(cls, v: Any) -> Optional[str]:
        return normalize_client_type(_require_str(v))

    @field_validator("economic_impact_type", mode="before")
    @classmethod
    def _economic(cls, v: Any) -> Optional[str]:
        return normalize_economic_impact(_require_str(v))

    @field_validator("systemic_risk", mode="before")
    @classmethod
    def _risk(cls, v: Any) -> Optional[str]:
        return normalize_systemic_risk(_require_str(v))

    @field_validator("innovation_level", mode="before")
    @classmethod
    def _innovation(cls, v: Any) -> Optional[str]:
        return normalize_innovation_level(_require_str(v))

    @field_validator("countries", mode="before")
    @classmethod
    def _countries(cls, v: Any) -> List[str]:
        return normalize_countries(_require_list(v))

    @field_validator("experience_impact", mode="before")
    @classmethod
    def _experience(cls, v: Any) -> List[str]:
        return normalize_experience_impact(_require_list(v))

    @classmethod
    def from_untrusted(cls, raw: Any) -> Tuple["ExtractedData", List[str]]:
        """Validate provider output field by field.

        Returns the accepted fields plus the names of fields that were
        rejected. Unknown keys are ignored.
        """
        if raw is None:
            return cls(), []
        if not isinstance(raw, dict):
            return cls(), ["extracted_data"]

        accepted: Dict[str, Any] = {}
        rejected: List[str] = []
        for key, value in raw.items():
            name = FIELD_ALIASES.get(key, key)
            if name not in cls.model_fields:
                continue
            try:
                cls.model_validate({name: value})
            except ValidationError:
                rejected.append(name)
                continue
            accepted[name] = value
        return cls.model_validate(accepted), rejected

    def filled(self) -> Dict[str, Any]:
        return {k: v for k, v in self.model_dump().items() if v not in (None, [], "")}

    def merged_with(self, update: "ExtractedData") -> "ExtractedData":
        """New draft where every non-empty field of ``update`` wins."""
        values = self.model_dump()
        values.update(update.filled())
        return ExtractedData.model_validate(values)

    def missing_fields(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    def is_complete(self) -> bool:
        return not self.missing_fields()


class ConversationTurn(BaseModel):
    user: str
    extracted: Dict[str, Any] = Field(default_factory=dict)


class ConversationState(BaseModel):
    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_by: Optional[str] = None
    phase: IntakePhase = IntakePhase.COLLECTING
    history: List[ConversationTurn] = Field(default_factory=list)
    draft: ExtractedData = Field(default_factory=ExtractedData)

    # Field asked by the last deterministic question, if exactly one was asked
    pending_field: Optional[str] = None
    provider_turns: int = 0

    confirmation_summary: Optional[str] = None
    executive_summary: Optional[str] = None

    @property
    def awaiting_confirmation(self) -> bool:
        return self.phase == IntakePhase.AWAITING_CONFIRMATION

    def user_messages(self) -> List[str]:
        return [turn.user for turn in self.history]


class IntakeTurn(BaseModel):
    """What one intake step hands back to the caller."""

    session_id: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)
    next_step: NextStep = NextStep.CONTINUE
    is_complete: bool = False
    awaiting_confirmation: bool = False
    confirmation_summary: Optional[str] = None
    executive_summary: Optional[str] = None
    options: List[ConfirmationOption] = Field(default_factory=list)
    extracted_data: ExtractedData = Field(default_factory=ExtractedData)
    missing_fields: List[str] = Field(default_factory=list)
    used_fallback: bool = False
    error: Optional[str] = None
