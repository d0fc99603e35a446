# initiative_prioritizer/prioritizer/services/scoring/engines/__init__.py

from .weighted import WeightedScoringEngine

__all__ = ["WeightedScoringEngine"]
