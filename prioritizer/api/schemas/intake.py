# initiative_prioritizer/prioritizer/api/schemas/intake.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class IntakeStartRequest(BaseModel):
    message: str = Field(..., min_length=1)
    created_by: Optional[str] = Field(default=None, max_length=100)


class IntakeMessageRequest(BaseModel):
    message: str = Field(..., min_length=1)


class IntakeSessionResponse(BaseModel):
    session_id: str
    phase: str
    created_by: Optional[str] = None
    history: List[Dict[str, Any]] = Field(default_factory=list)
    extracted_data: Dict[str, Any] = Field(default_factory=dict)
    missing_fields: List[str] = Field(default_factory=list)
    confirmation_summary: Optional[str] = None
    executive_summary: Optional[str] = None
