from __future__ import annotations

from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from prioritizer.config import settings
from prioritizer.db.session import SessionLocal
from prioritizer.llm.client import TextCompletionProvider, get_completion_provider
from prioritizer.services.intake_conversation import IntakeConversation
from prioritizer.services.intake_service import IntakeService
from prioritizer.services.scoring_service import ScoringService
from prioritizer.services.workflow_service import WorkflowService


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def require_shared_secret(x_prioritizer_secret: str | None = Header(default=None)) -> None:
    """
    Shared secret header sent by the front end.
    Header name: X-Prioritizer-Secret
    """
    expected = settings.PRIORITIZER_SECRET
    if not expected:
        # If secret isn't configured, fail closed.
        raise HTTPException(status_code=500, detail="PRIORITIZER_SECRET is not configured")

    if not x_prioritizer_secret or x_prioritizer_secret != expected:
        raise HTTPException(status_code=401, detail="Unauthorized")


def get_provider() -> Optional[TextCompletionProvider]:
    return get_completion_provider()


def get_intake_conversation(
    provider: Optional[TextCompletionProvider] = Depends(get_provider),
) -> IntakeConversation:
    return IntakeConversation(provider=provider)


def get_intake_service(
    db: Session = Depends(get_db),
    conversation: IntakeConversation = Depends(get_intake_conversation),
) -> IntakeService:
    return IntakeService(db, conversation=conversation)


def get_scoring_service(db: Session = Depends(get_db)) -> ScoringService:
    return ScoringService(db)


def get_workflow_service(db: Session = Depends(get_db)) -> WorkflowService:
    return WorkflowService(db)
