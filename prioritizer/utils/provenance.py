# initiative_prioritizer/prioritizer/utils/provenance.py
from __future__ import annotations

from enum import Enum
from typing import Optional


class Provenance(str, Enum):
    """Canonical provenance tokens for initiative writes and score history."""

    # Intake
    INTAKE_COMPLETE = "intake.complete"

    # Scoring
    SCORING_MANUAL = "scoring.manual"
    SCORING_BATCH = "scoring.batch"

    # Kanban workflow
    WORKFLOW_MOVE = "workflow.move"


def token(prov: Provenance, run_id: Optional[str] = None) -> str:
    """Render a provenance token, optionally suffixed with a run/actor identifier."""

    return prov.value if not run_id else f"{prov.value}#{run_id}"


__all__ = ["Provenance", "token"]
