# initiative_prioritizer/prioritizer/llm/prompts.py

from __future__ import annotations

import json
from typing import List

from prioritizer.schemas.intake import REQUIRED_FIELDS, ConversationState

_VOCABULARY = (
    "Categorias: regulatory, risk, performance, value_prop, new_product\n"
    "Verticales: processing, core, bin_sponsor, card_management, tokenization, fraud_tools, platform_experience\n"
    "Tipos de cliente: all, top_issuer, tier1, tier2, tier3\n"
    "Paises: all, argentina, brazil, chile, colombia, mexico, peru, rest_of_latam\n"
    "Riesgo sistemico: blocker, high, medium, low, n/a\n"
    "Impacto economico: significant, moderate, low\n"
    "Nivel de innovacion: disruptive, incremental, parity\n"
    "Impacto en experiencia: contact_rate, approval_rate, acceptance_rate, provisioning_rate, "
    "sla_delivery, sla_incidents, chargebacks, manual_kyc_review"
)

_JSON_ONLY = (
    "Responde UNICAMENTE con un objeto JSON valido, sin texto antes ni despues "
    "y sin bloques de codigo."
)


def start_system_prompt(min_questions: int, max_questions: int) -> str:
    return (
        "Eres un asistente que ayuda a definir iniciativas de negocio para una empresa "
        "de infraestructura de pagos en America Latina. A partir de la idea inicial del "
        f"usuario genera entre {min_questions} y {max_questions} preguntas de aclaracion "
        "especificas.\n\n"
        f"{_JSON_ONLY}\n"
        "Formato:\n"
        '{"questions": [{"id": "id_unico", "text": "pregunta en espanol", '
        '"type": "text|select|multiselect|boolean", "options": [], "required": true}], '
        '"extracted_data": {}, "next_step": "continue", "is_complete": false}\n\n'
        "Incluye en extracted_data solo datos que el usuario haya dicho explicitamente.\n\n"
        f"{_VOCABULARY}"
    )


def start_user_prompt(user_input: str) -> str:
    return (
        f"El usuario quiere crear una iniciativa: '{user_input}'. "
        "Genera las primeras preguntas para entender mejor su propuesta."
    )


def continue_system_prompt(max_questions: int) -> str:
    required = ", ".join(REQUIRED_FIELDS)
    return (
        "Eres un Product Manager senior de una empresa de infraestructura de pagos "
        "(procesamiento, emision de tarjetas, core banking, BIN sponsorship, "
        "tokenizacion, prevencion de fraude). Guias la carga de una iniciativa "
        "extrayendo datos estructurados de la conversacion.\n\n"
        "Reglas:\n"
        "- No repitas preguntas ya respondidas en el historial.\n"
        "- Extrae solo lo que el usuario dijo; no inventes valores, numeros ni fechas.\n"
        "- Usa exclusivamente los codigos del vocabulario para campos categoricos.\n"
        f"- Haz como maximo {max_questions} preguntas por turno, priorizando los campos faltantes.\n"
        f"- Campos obligatorios: {required}.\n"
        "- Solo cuando TODOS los campos obligatorios esten completos usa "
        '"next_step": "confirm" y "has_sufficient_info": true.\n\n'
        f"{_JSON_ONLY}\n"
        "Formato:\n"
        '{"questions": [...], "extracted_data": {"title": "", "summary": "", "category": "", '
        '"vertical": "", "countries": [], "client_type": "", "problem_description": "", '
        '"business_case": "", "economic_impact_type": "", "client_segment": "", '
        '"systemic_risk": "", "innovation_level": "", "experience_impact": []}, '
        '"next_step": "continue|confirm", "is_complete": false, "has_sufficient_info": false}\n\n'
        f"{_VOCABULARY}"
    )


def _history_block(state: ConversationState) -> List[str]:
    lines: List[str] = []
    if state.history:
        lines.append("")
        lines.append("HISTORIAL DE LA CONVERSACION:")
        for i, turn in enumerate(state.history, start=1):
            lines.append(f"{i}. Usuario: {turn.user}")
    return lines


def continue_user_prompt(state: ConversationState, user_input: str) -> str:
    lines = [
        f"Input actual del usuario: {user_input}",
        f"Turnos previos: {len(state.history)}",
    ]
    lines.extend(_history_block(state))
    lines.append("")
    lines.append(f"Datos extraidos hasta ahora: {json.dumps(state.draft.filled(), ensure_ascii=False)}")
    missing = state.draft.missing_fields()
    if missing:
        lines.append(f"Campos obligatorios faltantes: {', '.join(missing)}")
    return "\n".join(lines)


def confirmation_system_prompt() -> str:
    return (
        "Eres un asistente que confirma la informacion de una iniciativa.\n\n"
        "Reglas estrictas:\n"
        "- Usa SOLO informacion explicitamente provista por el usuario.\n"
        "- NO inventes numeros, fechas, porcentajes, metricas ni plazos.\n"
        "- NO agregues contexto de mercado ni competidores.\n"
        "- Si falta informacion para una seccion, escribe 'Por definir'.\n\n"
        "El resumen debe tener las secciones **OBJETIVO**, **ALCANCE**, **ENFOQUE** y "
        "**BENEFICIOS ESPERADOS**.\n\n"
        f"{_JSON_ONLY}\n"
        "Formato:\n"
        '{"confirmation_summary": "...", "extracted_data": {...}, '
        '"next_step": "confirm", "is_complete": true}\n'
        "En extracted_data usa 'unknown' para campos categoricos no mencionados y [] para listas vacias."
    )


def confirmation_user_prompt(state: ConversationState) -> str:
    lines = [f"Datos de la iniciativa: {json.dumps(state.draft.filled(), ensure_ascii=False)}"]
    lines.extend(_history_block(state))
    return "\n".join(lines)


def executive_summary_system_prompt() -> str:
    return (
        "Eres el Director de Producto y redactas el resumen ejecutivo de una iniciativa "
        "para el comite de priorizacion. Escribe en espanol, en texto plano con las "
        "secciones OPORTUNIDAD, JUSTIFICACION DE NEGOCIO, ALCANCE y RIESGOS.\n"
        "Usa unicamente los datos provistos. No inventes cifras, fechas, porcentajes "
        "ni nombres de competidores.\n\n"
        f"{_JSON_ONLY}\n"
        'Formato: {"executive_summary": "..."}'
    )


def executive_summary_user_prompt(state: ConversationState) -> str:
    lines = [f"Informacion de la iniciativa: {json.dumps(state.draft.filled(), ensure_ascii=False)}"]
    if state.confirmation_summary:
        lines.append(f"Resumen confirmado por el usuario:\n{state.confirmation_summary}")
    return "\n".join(lines)


__all__ = [
    "start_system_prompt",
    "start_user_prompt",
    "continue_system_prompt",
    "continue_user_prompt",
    "confirmation_system_prompt",
    "confirmation_user_prompt",
    "executive_summary_system_prompt",
    "executive_summary_user_prompt",
]
