# initiative_prioritizer/prioritizer/api/routes/initiatives.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from prioritizer.api.deps import (
    get_db,
    get_scoring_service,
    get_workflow_service,
    require_shared_secret,
)
from prioritizer.api.schemas.kanban import (
    KanbanMoveRequest,
    KanbanMoveResponse,
    KanbanStatus,
    KanbanStatusesResponse,
)
from prioritizer.db.models.initiative import Initiative
from prioritizer.db.models.scoring import InitiativeScore
from prioritizer.schemas.classification import normalize_status
from prioritizer.schemas.initiative import InitiativeRead
from prioritizer.schemas.scoring import (
    InitiativeScoreRead,
    InitiativeScoreSummary,
    ScoreComponentRead,
    ScorePreviewResponse,
)
from prioritizer.services.scoring import SCORING_DIMENSIONS, ScoreInputs, priority_label
from prioritizer.services.scoring_service import ScoringService
from prioritizer.services.workflow_service import WorkflowService


router = APIRouter(tags=["initiatives"], dependencies=[Depends(require_shared_secret)])


def score_components(breakdown: Optional[Dict[str, Any]]) -> List[ScoreComponentRead]:
    breakdown = breakdown or {}
    return [
        ScoreComponentRead(
            dimension=info.name.value,
            label=info.label,
            points=int(breakdown.get(info.breakdown_field, 0) or 0),
        )
        for info in SCORING_DIMENSIONS.values()
    ]


def _summary(initiative: Initiative) -> InitiativeScoreSummary:
    breakdown = initiative.score_breakdown or {}
    return InitiativeScoreSummary(
        initiative_id=initiative.id,  # type: ignore[arg-type]
        status=initiative.status,  # type: ignore[arg-type]
        score=initiative.score or 0,  # type: ignore[arg-type]
        message=priority_label(initiative.score),  # type: ignore[arg-type]
        components=score_components(breakdown),
        explanation=breakdown.get("explanation"),
    )


@router.get("/initiatives", response_model=List[InitiativeRead])
def list_initiatives(status: Optional[str] = None, db: Session = Depends(get_db)) -> List[InitiativeRead]:
    """
    Initiatives ordered by score (highest first), optionally for one kanban column.
    """
    stmt = select(Initiative).order_by(Initiative.score.desc(), Initiative.created_at)
    if status:
        resolved = normalize_status(status)
        if resolved is None:
            raise HTTPException(status_code=400, detail=f"Invalid status: {status!r}")
        stmt = stmt.where(Initiative.status == resolved.value)
    rows = db.execute(stmt).scalars().all()
    return [InitiativeRead.model_validate(r) for r in rows]


@router.get("/initiatives/{initiative_id}", response_model=InitiativeRead)
def get_initiative(initiative_id: str, db: Session = Depends(get_db)) -> InitiativeRead:
    initiative = db.get(Initiative, initiative_id)
    if initiative is None:
        raise HTTPException(status_code=404, detail="Initiative not found")
    return InitiativeRead.model_validate(initiative)


@router.get("/initiatives/{initiative_id}/score", response_model=InitiativeScoreSummary)
def get_score(initiative_id: str, db: Session = Depends(get_db)) -> InitiativeScoreSummary:
    initiative = db.get(Initiative, initiative_id)
    if initiative is None:
        raise HTTPException(status_code=404, detail="Initiative not found")
    return _summary(initiative)


@router.post("/initiatives/{initiative_id}/score", response_model=InitiativeScoreSummary)
def rescore(
    initiative_id: str,
    service: ScoringService = Depends(get_scoring_service),
) -> InitiativeScoreSummary:
    try:
        initiative = service.score_by_id(initiative_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _summary(initiative)


@router.get("/initiatives/{initiative_id}/score/history", response_model=List[InitiativeScoreRead])
def score_history(initiative_id: str, db: Session = Depends(get_db)) -> List[InitiativeScoreRead]:
    if db.get(Initiative, initiative_id) is None:
        raise HTTPException(status_code=404, detail="Initiative not found")
    rows = db.execute(
        select(InitiativeScore)
        .where(InitiativeScore.initiative_id == initiative_id)
        .order_by(InitiativeScore.created_at.desc(), InitiativeScore.id.desc())
    ).scalars().all()
    return [InitiativeScoreRead.model_validate(r) for r in rows]


@router.post("/initiatives/{initiative_id}/move", response_model=KanbanMoveResponse)
def move_initiative(
    initiative_id: str,
    req: KanbanMoveRequest,
    service: WorkflowService = Depends(get_workflow_service),
) -> KanbanMoveResponse:
    try:
        result = service.move(initiative_id, req.new_status, moved_by=req.moved_by)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return KanbanMoveResponse(**result)


@router.get("/kanban/statuses", response_model=KanbanStatusesResponse)
def kanban_statuses() -> KanbanStatusesResponse:
    return KanbanStatusesResponse(
        statuses=[KanbanStatus(**s) for s in WorkflowService.list_statuses()]
    )


@router.post("/scoring/preview", response_model=ScorePreviewResponse)
def preview_score(
    inputs: ScoreInputs,
    service: ScoringService = Depends(get_scoring_service),
) -> ScorePreviewResponse:
    """
    Score a classification without saving anything.
    """
    breakdown = service.preview(inputs)
    return ScorePreviewResponse(
        total_score=breakdown.total_score,
        message=priority_label(breakdown.total_score),
        components=score_components(breakdown.model_dump()),
        explanation=breakdown.explanation,
    )
