# initiative_prioritizer/prioritizer/services/scoring_service.py

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from prioritizer.config import settings
from prioritizer.db.models.initiative import Initiative
from prioritizer.db.models.scoring import InitiativeScore
from prioritizer.services.scoring import ScoreBreakdown, ScoreInputs, ScoringEngine, get_engine
from prioritizer.utils.provenance import Provenance, token

logger = logging.getLogger("prioritizer.services.scoring")


class ScoringService:
    """Service layer for computing and persisting initiative scores.

    Responsibilities:
    - Map Initiative fields -> ScoreInputs
    - Delegate to the scoring engine
    - Replace the Initiative's breakdown and score in one step
    - Optionally write InitiativeScore history rows
    - Support batch rescoring with commit control
    """

    def __init__(
        self,
        db: Session,
        engine: Optional[ScoringEngine] = None,
        logger: logging.Logger = logger,
    ):
        self.db = db
        self.engine = engine or get_engine()
        self.logger = logger

    @staticmethod
    def build_inputs(initiative: Any) -> ScoreInputs:
        return ScoreInputs.model_validate(initiative)

    def preview(self, inputs: Any) -> ScoreBreakdown:
        """Compute a breakdown without touching the database."""
        if not isinstance(inputs, ScoreInputs):
            inputs = self.build_inputs(inputs)
        return self.engine.compute(inputs)

    def score_initiative(
        self,
        initiative: Initiative,
        trigger: Provenance = Provenance.SCORING_MANUAL,
        enable_history: Optional[bool] = None,
    ) -> ScoreBreakdown:
        """Compute and persist the score of a single initiative.

        Side effects:
            - Replaces score_breakdown wholesale and sets score = total_score
            - Stamps scored_at / updated_source
            - May add an InitiativeScore row to the session (no commit)
        """
        if enable_history is None:
            enable_history = settings.SCORING_ENABLE_HISTORY

        inputs = self.build_inputs(initiative)
        breakdown = self.engine.compute(inputs)

        now = datetime.now(timezone.utc)
        initiative.score_breakdown = breakdown.model_dump()  # type: ignore[assignment]
        initiative.score = breakdown.total_score  # type: ignore[assignment]
        initiative.scored_at = now  # type: ignore[assignment]
        initiative.updated_source = token(trigger)  # type: ignore[assignment]

        if enable_history:
            self.db.add(
                InitiativeScore(
                    initiative_id=initiative.id,
                    total_score=breakdown.total_score,
                    breakdown_json=breakdown.model_dump(),
                    inputs_json=inputs.model_dump(),
                    trigger=token(trigger),
                )
            )

        self.db.flush()

        self.logger.info(
            "scoring.computed",
            extra={
                "initiative_id": initiative.id,
                "total_score": breakdown.total_score,
                "trigger": token(trigger),
            },
        )
        return breakdown

    def get_initiative(self, initiative_id: str) -> Initiative:
        initiative = self.db.get(Initiative, initiative_id)
        if initiative is None:
            raise LookupError(f"Initiative {initiative_id} not found")
        return initiative

    def score_by_id(
        self,
        initiative_id: str,
        trigger: Provenance = Provenance.SCORING_MANUAL,
    ) -> Initiative:
        """Fetch, score and commit one initiative."""
        initiative = self.get_initiative(initiative_id)
        self.score_initiative(initiative, trigger=trigger)
        self.db.commit()
        self.db.refresh(initiative)
        return initiative

    def score_all(
        self,
        commit_every: Optional[int] = None,
        only_missing_scores: bool = False,
        statuses: Optional[Iterable[str]] = None,
    ) -> int:
        """Rescore many initiatives with periodic commits.

        Args:
            commit_every: Commit every N initiatives; defaults to SCORING_BATCH_COMMIT_EVERY
            only_missing_scores: If True, only initiatives never scored
            statuses: Restrict to these kanban status codes

        Returns:
            Count of initiatives scored
        """
        batch_size = commit_every or settings.SCORING_BATCH_COMMIT_EVERY

        stmt = select(Initiative).order_by(Initiative.created_at, Initiative.id)
        if only_missing_scores:
            stmt = stmt.where(Initiative.scored_at.is_(None))
        if statuses:
            stmt = stmt.where(Initiative.status.in_(list(statuses)))

        initiatives = self.db.execute(stmt).scalars().all()
        self.logger.info("scoring.batch_start", extra={"count": len(initiatives)})

        scored = 0
        for idx, initiative in enumerate(initiatives, start=1):
            self.score_initiative(initiative, trigger=Provenance.SCORING_BATCH)
            scored += 1

            if batch_size and (idx % batch_size == 0):
                self.db.commit()
                self.logger.info("scoring.batch_commit", extra={"count": idx})

        self.db.commit()
        self.logger.info("scoring.batch_done", extra={"scored": scored})
        return scored


__all__ = ["ScoringService"]
