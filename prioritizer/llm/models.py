# initiative_prioritizer/prioritizer/llm/models.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from prioritizer.schemas.intake import Question


class QuestionGenerationResponse(BaseModel):
    """Schema for start/continue calls.

    extracted_data stays a raw dict here; it is validated field by field by
    ExtractedData.from_untrusted so one bad field cannot sink the rest.
    """
    questions: List[Question] = Field(default_factory=list)
    extracted_data: Optional[Dict[str, Any]] = None
    next_step: Optional[str] = None
    is_complete: bool = False
    has_sufficient_info: bool = False

    @field_validator("questions", mode="before")
    @classmethod
    def _drop_invalid_questions(cls, v: Any) -> List[Any]:
        if not isinstance(v, list):
            return []
        kept = []
        for i, item in enumerate(v):
            if not isinstance(item, dict) or not isinstance(item.get("text"), str) or not item["text"].strip():
                continue
            item = dict(item)
            item.setdefault("id", f"q{i + 1}")
            item["id"] = str(item["id"])
            kept.append(item)
        return kept

    @field_validator("extracted_data", mode="before")
    @classmethod
    def _dict_or_none(cls, v: Any) -> Optional[Dict[str, Any]]:
        return v if isinstance(v, dict) else None

    @field_validator("is_complete", "has_sufficient_info", mode="before")
    @classmethod
    def _strict_bool(cls, v: Any) -> bool:
        return v is True

    def suggests_confirmation(self) -> bool:
        return self.next_step == "confirm" or self.has_sufficient_info or self.is_complete


class ExecutiveSummaryResponse(BaseModel):
    executive_summary: str = Field(..., min_length=1)


class ConfirmationResponse(BaseModel):
    """Schema for the confirmation-summary call."""
    confirmation_summary: str = Field(..., min_length=1)
    extracted_data: Optional[Dict[str, Any]] = None
    next_step: Optional[str] = None
    is_complete: bool = False

    @field_validator("extracted_data", mode="before")
    @classmethod
    def _dict_or_none(cls, v: Any) -> Optional[Dict[str, Any]]:
        return v if isinstance(v, dict) else None
