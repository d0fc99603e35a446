# initiative_prioritizer/prioritizer/api/schemas/kanban.py

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class KanbanMoveRequest(BaseModel):
    new_status: str = Field(..., min_length=1)
    # stored as "workflow.move#<moved_by>" in a 50-character column
    moved_by: Optional[str] = Field(default=None, max_length=36)


class KanbanMoveResponse(BaseModel):
    initiative_id: str
    previous_status: Optional[str] = None
    new_status: str
    score: Optional[int] = None
    message: str


class KanbanStatus(BaseModel):
    code: str
    label: str


class KanbanStatusesResponse(BaseModel):
    statuses: List[KanbanStatus]
