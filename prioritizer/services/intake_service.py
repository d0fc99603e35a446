"""IntakeService: persistence around the intake conversation.

- Loads/saves ConversationState per session (intake_sessions table).
- Failed turns are never saved; the stored state stays as it was.
- Turns a complete session into a Backlog Initiative exactly once,
  scoring it on creation when INTAKE_SCORE_ON_CREATE is set.
"""
from __future__ import annotations

from typing import Optional, Tuple
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from prioritizer.config import settings
from prioritizer.db.models.initiative import Initiative
from prioritizer.db.models.intake_session import IntakeSession
from prioritizer.schemas.intake import ConversationState, IntakePhase, IntakeTurn, NextStep
from prioritizer.services.intake_conversation import IntakeConversation, build_initiative_create
from prioritizer.services.scoring_service import ScoringService
from prioritizer.utils.provenance import Provenance, token

logger = logging.getLogger(__name__)


class IntakeService:
    def __init__(
        self,
        db: Session,
        conversation: Optional[IntakeConversation] = None,
        scoring: Optional[ScoringService] = None,
        logger: logging.Logger = logger,
    ) -> None:
        self.db = db
        self.conversation = conversation or IntakeConversation()
        self.scoring = scoring or ScoringService(db)
        self.logger = logger

    # ------------------------------------------------------------------
    # storage
    # ------------------------------------------------------------------

    def _load(self, session_id: str) -> Tuple[IntakeSession, ConversationState]:
        row = self.db.execute(
            select(IntakeSession).where(IntakeSession.session_id == session_id)
        ).scalar_one_or_none()
        if row is None:
            raise LookupError(f"Intake session {session_id} not found")
        return row, ConversationState.model_validate(row.state_json)

    def _save(self, row: IntakeSession, state: ConversationState) -> None:
        row.phase = state.phase.value  # type: ignore[assignment]
        row.state_json = state.model_dump(mode="json")  # type: ignore[assignment]
        self.db.commit()

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------

    def get_session(self, session_id: str) -> ConversationState:
        _, state = self._load(session_id)
        return state

    def start_session(self, message: str, created_by: Optional[str] = None) -> IntakeTurn:
        state, turn = self.conversation.start(message, created_by=created_by)
        if turn.next_step == NextStep.FAILED:
            # Nothing to resume from; the caller retries the start.
            turn.session_id = None
            return turn

        row = IntakeSession(
            session_id=state.session_id,
            created_by=created_by,
            phase=state.phase.value,
            state_json=state.model_dump(mode="json"),
        )
        self.db.add(row)
        self.db.commit()
        self.logger.info("intake.session_started", extra={"session_id": state.session_id})
        return turn

    def post_message(self, session_id: str, message: str) -> IntakeTurn:
        row, state = self._load(session_id)
        new_state, turn = self.conversation.continue_(state, message)
        if turn.next_step != NextStep.FAILED:
            self._save(row, new_state)
        return turn

    def validate_session(self, session_id: str) -> IntakeTurn:
        row, state = self._load(session_id)
        new_state, turn = self.conversation.validate(state)
        if turn.next_step != NextStep.FAILED:
            self._save(row, new_state)
        return turn

    def complete_session(self, session_id: str) -> Initiative:
        """Persist the finished draft as a Backlog initiative (idempotent).

        Raises:
            LookupError: unknown session
            ValueError: the session has not reached the complete phase
        """
        row, state = self._load(session_id)

        if row.initiative_id:
            existing = self.db.get(Initiative, row.initiative_id)
            if existing is not None:
                return existing

        if state.phase != IntakePhase.COMPLETE:
            raise ValueError(
                f"Intake session {session_id} is not complete (phase={state.phase.value}); validate it first"
            )

        payload = build_initiative_create(state)
        initiative = Initiative(**payload.model_dump(mode="json"))
        initiative.updated_source = token(Provenance.INTAKE_COMPLETE)  # type: ignore[assignment]
        self.db.add(initiative)
        self.db.flush()

        if settings.INTAKE_SCORE_ON_CREATE:
            self.scoring.score_initiative(initiative, trigger=Provenance.INTAKE_COMPLETE)

        state.phase = IntakePhase.PERSISTED
        row.initiative_id = initiative.id  # type: ignore[assignment]
        self._save(row, state)
        self.db.refresh(initiative)

        self.logger.info(
            "intake.persisted",
            extra={
                "session_id": session_id,
                "initiative_id": initiative.id,
                "total_score": initiative.score,
            },
        )
        return initiative


__all__ = ["IntakeService"]
