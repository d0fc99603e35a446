# initiative_prioritizer/prioritizer/services/workflow_service.py

"""Kanban workflow: move initiatives between board columns.

Some transitions (WORKFLOW_RESCORE_TRANSITIONS, Backlog -> Review and
Review -> Estimation by default) recompute the score on the way.
"""
from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from prioritizer.config import settings
from prioritizer.schemas.classification import STATUS_LABELS, InitiativeStatus, normalize_status
from prioritizer.services.scoring_service import ScoringService
from prioritizer.utils.provenance import Provenance, token

logger = logging.getLogger(__name__)


def rescore_transitions() -> Set[Tuple[str, str]]:
    pairs: Set[Tuple[str, str]] = set()
    for pair in settings.WORKFLOW_RESCORE_TRANSITIONS:
        if len(pair) != 2:
            continue
        src, dst = normalize_status(pair[0]), normalize_status(pair[1])
        if src and dst:
            pairs.add((src.value, dst.value))
    return pairs


class WorkflowService:
    def __init__(
        self,
        db: Session,
        scoring: Optional[ScoringService] = None,
        logger: logging.Logger = logger,
    ) -> None:
        self.db = db
        self.scoring = scoring or ScoringService(db)
        self.logger = logger

    @staticmethod
    def list_statuses() -> List[Dict[str, str]]:
        """Board columns in order."""
        return [{"code": s.value, "label": STATUS_LABELS[s]} for s in InitiativeStatus]

    def move(self, initiative_id: str, new_status: str, moved_by: Optional[str] = None) -> Dict[str, Any]:
        """Move an initiative to ``new_status`` (code or board label).

        Raises:
            ValueError: unknown status
            LookupError: initiative not found
        """
        target = normalize_status(new_status)
        if target is None:
            raise ValueError(f"Invalid status: {new_status!r}")

        initiative = self.scoring.get_initiative(initiative_id)
        previous = initiative.status

        initiative.status = target.value  # type: ignore[assignment]
        initiative.updated_at = datetime.now(timezone.utc)  # type: ignore[assignment]
        initiative.updated_source = token(Provenance.WORKFLOW_MOVE, moved_by)  # type: ignore[assignment]

        rescored = (previous, target.value) in rescore_transitions()
        if rescored:
            self.scoring.score_initiative(initiative, trigger=Provenance.WORKFLOW_MOVE)
            initiative.updated_source = token(Provenance.WORKFLOW_MOVE, moved_by)  # type: ignore[assignment]

        self.db.commit()
        self.db.refresh(initiative)

        self.logger.info(
            "workflow.move",
            extra={
                "initiative_id": initiative.id,
                "previous_status": previous,
                "new_status": target.value,
                "total_score": initiative.score if rescored else None,
            },
        )

        message = "Initiative moved successfully"
        if rescored:
            message = "Initiative moved successfully and score calculated"
        return {
            "initiative_id": initiative.id,
            "previous_status": previous,
            "new_status": target.value,
            "score": initiative.score if rescored else None,
            "message": message,
        }


__all__ = ["WorkflowService", "rescore_transitions"]
