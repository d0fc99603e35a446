# prioritizer/db/models/__init__.py

from .initiative import Initiative
from .scoring import InitiativeScore
from .intake_session import IntakeSession

__all__ = [
    "Initiative",
    "InitiativeScore",
    "IntakeSession",
]
