# initiative_prioritizer/prioritizer/schemas/classification.py

"""Closed classification vocabularies and free-text normalisation.

Every classification value stored on an initiative is a lowercase canonical
code. Text coming from users or the completion provider goes through the
``normalize_*`` helpers, which accept codes, board labels and a handful of
aliases. Unrecognised text is kept as a cleaned slug and simply scores 0.
"""

from __future__ import annotations

import json
import re
import unicodedata
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Type


class Category(str, Enum):
    REGULATORY = "regulatory"
    RISK = "risk"
    PERFORMANCE = "performance"
    VALUE_PROP = "value_prop"
    NEW_PRODUCT = "new_product"


class Vertical(str, Enum):
    PROCESSING = "processing"
    CORE = "core"
    BIN_SPONSOR = "bin_sponsor"
    CARD_MANAGEMENT = "card_management"
    TOKENIZATION = "tokenization"
    FRAUD_TOOLS = "fraud_tools"
    PLATFORM_EXPERIENCE = "platform_experience"


class ClientType(str, Enum):
    ALL = "all"
    TOP_ISSUER = "top_issuer"
    TIER1 = "tier1"
    TIER2 = "tier2"
    TIER3 = "tier3"


class Country(str, Enum):
    ALL = "all"
    ARGENTINA = "argentina"
    BRAZIL = "brazil"
    CHILE = "chile"
    COLOMBIA = "colombia"
    MEXICO = "mexico"
    PERU = "peru"
    REST_OF_LATAM = "rest_of_latam"


class SystemicRisk(str, Enum):
    BLOCKER = "blocker"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NOT_APPLICABLE = "n/a"


class EconomicImpact(str, Enum):
    SIGNIFICANT = "significant"
    MODERATE = "moderate"
    LOW = "low"


class InnovationLevel(str, Enum):
    DISRUPTIVE = "disruptive"
    INCREMENTAL = "incremental"
    PARITY = "parity"


class ExperienceImpact(str, Enum):
    CONTACT_RATE = "contact_rate"
    APPROVAL_RATE = "approval_rate"
    ACCEPTANCE_RATE = "acceptance_rate"
    PROVISIONING_RATE = "provisioning_rate"
    SLA_DELIVERY = "sla_delivery"
    SLA_INCIDENTS = "sla_incidents"
    CHARGEBACKS = "chargebacks"
    MANUAL_KYC_REVIEW = "manual_kyc_review"


class InitiativeStatus(str, Enum):
    """Kanban columns, in board order."""
    BACKLOG = "backlog"
    REVIEW = "review"
    ESTIMATION = "estimation"
    PRIORITIZATION = "prioritization"
    ROADMAP = "roadmap"


STATUS_LABELS: Dict[InitiativeStatus, str] = {
    InitiativeStatus.BACKLOG: "Backlog",
    InitiativeStatus.REVIEW: "Iniciativas cargadas a revisar",
    InitiativeStatus.ESTIMATION: "Iniciativas a estimar",
    InitiativeStatus.PRIORITIZATION: "Priorizacion final",
    InitiativeStatus.ROADMAP: "Roadmap del Q",
}

# Keys are slugs (see _slug); values are canonical codes.
_ALIASES: Dict[Type[Enum], Dict[str, str]] = {
    Category: {
        "regulatorio": "regulatory",
        "mandates": "regulatory",
        "mandates_regulatorio_riesgo": "regulatory",
        "compliance": "regulatory",
        "riesgo": "risk",
        "mejora_de_performance": "performance",
        "performance_improvement": "performance",
        "rendimiento": "performance",
        "propuesta_de_valor": "value_prop",
        "value_proposition": "value_prop",
        "lanzamiento_nuevo_producto": "new_product",
        "nuevo_producto": "new_product",
        "new_product_launch": "new_product",
    },
    Vertical: {
        "core_banking": "core",
        "bin": "bin_sponsor",
        "bin_sponsorship": "bin_sponsor",
        "card_mgmt": "card_management",
        "card_management_logistics": "card_management",
        "tokenizacion": "tokenization",
        "fraud": "fraud_tools",
        "fraud_prevention": "fraud_tools",
        "platform": "platform_experience",
        "platform_apis": "platform_experience",
    },
    ClientType: {
        "todos": "all",
        "top_issuers": "top_issuer",
        "tier_1": "tier1",
        "tier_2": "tier2",
        "tier_3": "tier3",
        "major": "tier1",
        "medium": "tier2",
        "small": "tier3",
    },
    Country: {
        "todos": "all",
        "brasil": "brazil",
        "rola": "rest_of_latam",
        "rest_of_latin_america": "rest_of_latam",
        "resto_de_latam": "rest_of_latam",
    },
    SystemicRisk: {
        "bloqueante": "blocker",
        "alto": "high",
        "medio": "medium",
        "bajo": "low",
        "na": "n/a",
        "n_a": "n/a",
    },
    EconomicImpact: {
        "significativo": "significant",
        "aumento_significativo_en_revenue_o_nueva_linea_revenue": "significant",
        "moderado": "moderate",
        "aumento_moderado_en_revenue_existente": "moderate",
        "bajo": "low",
        "hard_to_quantify": "low",
        "impacto_menor_o_dificil_de_cuantificar": "low",
    },
    InnovationLevel: {
        "disruptivo": "disruptive",
        "mejora_incremental": "incremental",
        "paridad": "parity",
        "paridad_con_competencia": "parity",
    },
    ExperienceImpact: {
        "approval": "approval_rate",
        "aprobacion": "approval_rate",
        "acceptance": "acceptance_rate",
        "aceptacion": "acceptance_rate",
        "sla_de_envios": "sla_delivery",
        "sla_de_incidencias": "sla_incidents",
        "bps_chargebacks": "chargebacks",
        "revision_manual_kyc": "manual_kyc_review",
    },
    InitiativeStatus: {
        "iniciativas_cargadas_a_revisar": "review",
        "loaded_for_review": "review",
        "iniciativas_a_estimar": "estimation",
        "priorizacion_final": "prioritization",
        "roadmap_del_q": "roadmap",
    },
}

# Placeholders the provider uses for "not stated"; never treated as a value.
EMPTY_MARKERS = {"", "unknown", "desconocido", "none", "null", "por_definir", "tbd"}

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _slug(value: str) -> str:
    text = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return _SLUG_RE.sub("_", text.strip().lower()).strip("_")


def is_empty_marker(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return _slug(value) in EMPTY_MARKERS
    return False


def lookup_code(enum_cls: Type[Enum], value: Any) -> Optional[str]:
    """Return the canonical code for ``value`` or None when unrecognised."""
    if not isinstance(value, str):
        return None
    slug = _slug(value)
    codes = {m.value for m in enum_cls}  # type: ignore[attr-defined]
    if value.strip().lower() in codes:
        return value.strip().lower()
    if slug in codes:
        return slug
    return _ALIASES.get(enum_cls, {}).get(slug)


def normalize_code(enum_cls: Type[Enum], value: Any) -> Optional[str]:
    """Canonical code when recognised, a cleaned slug otherwise, None when empty."""
    if is_empty_marker(value) or not isinstance(value, str):
        return None
    return lookup_code(enum_cls, value) or _slug(value)


def normalize_category(value: Any) -> Optional[str]:
    return normalize_code(Category, value)


def normalize_vertical(value: Any) -> Optional[str]:
    return normalize_code(Vertical, value)


def normalize_client_type(value: Any) -> Optional[str]:
    return normalize_code(ClientType, value)


def normalize_systemic_risk(value: Any) -> Optional[str]:
    return normalize_code(SystemicRisk, value)


def normalize_economic_impact(value: Any) -> Optional[str]:
    return normalize_code(EconomicImpact, value)


def normalize_innovation_level(value: Any) -> Optional[str]:
    return normalize_code(InnovationLevel, value)


def coerce_list(value: Any) -> List[Any]:
    """Accept a list, a JSON-array string, or a comma separated string."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            try:
                parsed = json.loads(text)
            except ValueError:
                return []
            return parsed if isinstance(parsed, list) else []
        return [part for part in re.split(r",|;|\by\b|\band\b", text, flags=re.IGNORECASE) if part.strip()]
    return []


def _normalize_many(enum_cls: Type[Enum], values: Iterable[Any]) -> List[str]:
    seen: List[str] = []
    for raw in values:
        code = normalize_code(enum_cls, raw)
        if code and code not in seen:
            seen.append(code)
    return seen


def normalize_countries(value: Any) -> List[str]:
    return _normalize_many(Country, coerce_list(value))


def normalize_experience_impact(value: Any) -> List[str]:
    return _normalize_many(ExperienceImpact, coerce_list(value))


def normalize_status(value: Any) -> Optional[InitiativeStatus]:
    """Strict: returns None for anything that is not a known board column."""
    code = lookup_code(InitiativeStatus, value)
    return InitiativeStatus(code) if code else None


__all__ = [
    "Category",
    "Vertical",
    "ClientType",
    "Country",
    "SystemicRisk",
    "EconomicImpact",
    "InnovationLevel",
    "ExperienceImpact",
    "InitiativeStatus",
    "STATUS_LABELS",
    "is_empty_marker",
    "lookup_code",
    "normalize_code",
    "normalize_category",
    "normalize_vertical",
    "normalize_client_type",
    "normalize_systemic_risk",
    "normalize_economic_impact",
    "normalize_innovation_level",
    "normalize_countries",
    "normalize_experience_impact",
    "normalize_status",
    "coerce_list",
]
