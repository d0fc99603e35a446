# initiative_prioritizer/prioritizer/api/routes/intake.py

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from prioritizer.api.deps import get_intake_service, require_shared_secret
from prioritizer.api.schemas.intake import (
    IntakeMessageRequest,
    IntakeSessionResponse,
    IntakeStartRequest,
)
from prioritizer.schemas.initiative import InitiativeRead
from prioritizer.schemas.intake import IntakeTurn, NextStep
from prioritizer.services.intake_service import IntakeService


router = APIRouter(
    prefix="/intake",
    tags=["intake"],
    dependencies=[Depends(require_shared_secret)],
)


def _checked(turn: IntakeTurn) -> IntakeTurn:
    """A failed turn goes back as 502 so the caller can retry; state is unchanged."""
    if turn.next_step == NextStep.FAILED:
        raise HTTPException(status_code=502, detail=turn.model_dump(mode="json"))
    return turn


@router.post("/sessions", response_model=IntakeTurn)
def start_session(req: IntakeStartRequest, service: IntakeService = Depends(get_intake_service)) -> IntakeTurn:
    """
    Open a session from the user's first description of the initiative.
    """
    return _checked(service.start_session(req.message, created_by=req.created_by))


@router.get("/sessions/{session_id}", response_model=IntakeSessionResponse)
def get_session(session_id: str, service: IntakeService = Depends(get_intake_service)) -> IntakeSessionResponse:
    try:
        state = service.get_session(session_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return IntakeSessionResponse(
        session_id=state.session_id,
        phase=state.phase.value,
        created_by=state.created_by,
        history=[t.model_dump() for t in state.history],
        extracted_data=state.draft.filled(),
        missing_fields=state.draft.missing_fields(),
        confirmation_summary=state.confirmation_summary,
        executive_summary=state.executive_summary,
    )


@router.post("/sessions/{session_id}/messages", response_model=IntakeTurn)
def post_message(
    session_id: str,
    req: IntakeMessageRequest,
    service: IntakeService = Depends(get_intake_service),
) -> IntakeTurn:
    try:
        turn = service.post_message(session_id, req.message)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _checked(turn)


@router.post("/sessions/{session_id}/validate", response_model=IntakeTurn)
def validate_session(session_id: str, service: IntakeService = Depends(get_intake_service)) -> IntakeTurn:
    try:
        turn = service.validate_session(session_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _checked(turn)


@router.post("/sessions/{session_id}/complete", response_model=InitiativeRead)
def complete_session(session_id: str, service: IntakeService = Depends(get_intake_service)) -> InitiativeRead:
    """
    Persist the validated draft as a Backlog initiative. Repeating the call returns the same initiative.
    """
    try:
        initiative = service.complete_session(session_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return InitiativeRead.model_validate(initiative)
