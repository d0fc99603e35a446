# initiative_prioritizer/prioritizer/services/scoring/engines/weighted.py

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Type

from prioritizer.config import ScoringPointsConfig
from prioritizer.schemas.classification import (
    Category,
    ClientType,
    Country,
    EconomicImpact,
    ExperienceImpact,
    InnovationLevel,
    SystemicRisk,
    Vertical,
    normalize_code,
)
from prioritizer.services.scoring.interfaces import ScoreBreakdown, ScoreInputs


class WeightedScoringEngine:
    """Weighted multi-factor scoring engine.

    total = category + vertical + client + country + risk + economic
            + experience + innovation

    - Each dimension is a table lookup (canonical code -> points).
    - Unknown or empty values score 0; the engine never raises.
    - Countries: highest value among the distinct countries selected.
    - Experience impact: sum over the distinct tags selected.
    """

    def __init__(self, points: Optional[ScoringPointsConfig] = None) -> None:
        self.points = points or ScoringPointsConfig()

    def compute(self, inputs: ScoreInputs) -> ScoreBreakdown:
        p = self.points

        category = _lookup(p.category, Category, inputs.category)
        vertical = _lookup(p.vertical, Vertical, inputs.vertical)
        client = _lookup(p.client_type, ClientType, inputs.client_type)
        country = max(_lookup_each(p.country, Country, inputs.countries), default=0)
        risk = _lookup(p.systemic_risk, SystemicRisk, inputs.systemic_risk)
        economic = _lookup(p.economic_impact, EconomicImpact, inputs.economic_impact)
        experience = sum(_lookup_each(p.experience_impact, ExperienceImpact, inputs.experience_impact))
        innovation = _lookup(p.innovation_level, InnovationLevel, inputs.innovation_level)

        total = category + vertical + client + country + risk + economic + experience + innovation

        return ScoreBreakdown(
            category_score=category,
            vertical_score=vertical,
            client_score=client,
            country_score=country,
            risk_score=risk,
            economic_score=economic,
            experience_score=experience,
            innovation_score=innovation,
            total_score=total,
            explanation=_explain(
                category, vertical, client, country, risk, economic, experience, innovation, total
            ),
        )


def _lookup(table: Mapping[str, int], enum_cls: Type[Enum], value: Optional[str]) -> int:
    code = normalize_code(enum_cls, value)
    if code is None:
        return 0
    return int(table.get(code, 0))


def _lookup_each(table: Mapping[str, int], enum_cls: Type[Enum], values: Iterable[str]) -> list[int]:
    # set semantics: a repeated value counts once
    codes: Dict[str, int] = {}
    for value in values:
        code = normalize_code(enum_cls, value)
        if code is not None and code not in codes:
            codes[code] = int(table.get(code, 0))
    return list(codes.values())


def _explain(
    category: int,
    vertical: int,
    client: int,
    country: int,
    risk: int,
    economic: int,
    experience: int,
    innovation: int,
    total: int,
) -> str:
    return (
        f"Score breakdown: Category({category}) + Vertical({vertical}) + Client({client}) + "
        f"Country({country}) + Risk({risk}) + Economic({economic}) + "
        f"Experience({experience}) + Innovation({innovation}) = {total}"
    )


__all__ = ["WeightedScoringEngine"]
