# initiative_prioritizer/prioritizer/schemas/scoring.py

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict


class ScoreComponentRead(BaseModel):
    dimension: str
    label: str
    points: int


class InitiativeScoreRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    initiative_id: str
    total_score: int
    breakdown_json: Dict[str, Any]
    inputs_json: Optional[Dict[str, Any]] = None
    trigger: Optional[str] = None
    created_at: datetime


class InitiativeScoreSummary(BaseModel):
    initiative_id: str
    status: str
    score: int
    message: str
    components: List[ScoreComponentRead] = []
    explanation: Optional[str] = None


class ScorePreviewResponse(BaseModel):
    total_score: int
    message: str
    components: List[ScoreComponentRead] = []
    explanation: Optional[str] = None
