"""Batch Rescoring Job

Encapsulates batch rescoring so that CLI and other orchestrators
can invoke it without directly depending on service layer details.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from prioritizer.services.scoring_service import ScoringService

logger = logging.getLogger(__name__)


def run_rescore_batch(
    db: Session,
    *,
    commit_every: Optional[int] = None,
    only_missing_scores: bool = False,
    statuses: Optional[Iterable[str]] = None,
) -> int:
    """Recompute the breakdown of every matching initiative.

    Args:
        db: SQLAlchemy session
        commit_every: batch commit size override (None -> settings default)
        only_missing_scores: whether to restrict to initiatives never scored
        statuses: optional kanban status codes to restrict to

    Returns:
        Number of initiatives scored.
    """
    statuses = list(statuses) if statuses else None
    logger.info("rescore.start", extra={"reason": ",".join(statuses) if statuses else None})
    service = ScoringService(db)
    scored = service.score_all(
        commit_every=commit_every,
        only_missing_scores=only_missing_scores,
        statuses=statuses,
    )
    logger.info("rescore.done", extra={"scored": scored})
    return scored


__all__ = ["run_rescore_batch"]
