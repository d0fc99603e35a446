# initiative_prioritizer/test_scripts/test_intake_conversation.py
# Tests for the intake conversation state machine (no database)
import re
from unittest.mock import Mock

import pytest

from prioritizer.config import settings
from prioritizer.llm.client import LLMUnavailableError
from prioritizer.llm.prompts import executive_summary_user_prompt
from prioritizer.schemas.classification import normalize_countries
from prioritizer.schemas.intake import (
    ConfirmationChoice,
    ConversationState,
    ExtractedData,
    IntakePhase,
    NextStep,
)
from prioritizer.services.intake_conversation import (
    IntakeConversation,
    build_confirmation_summary,
    build_initiative_create,
    classify_confirmation_reply,
    introduces_unknown_numbers,
    resolve_field_name,
)
from prioritizer.services.scoring import compute_score
from prioritizer.services.scoring.engines import WeightedScoringEngine

from fakes import ScriptedProvider, questions


FULL = {
    "title": "Reduce auth latency",
    "summary": "Bajar la latencia de autorizaciones",
    "category": "performance",
    "vertical": "processing",
    "countries": ["brazil"],
    "client_type": "top_issuer",
    "problem_description": "Las autorizaciones tardan demasiado en horas pico",
    "business_case": "Menos rechazos por timeout",
    "economic_impact_type": "moderate",
    "client_segment": "Top issuers de Brasil",
}

CONFIRMATION = {
    "confirmation_summary": "**OBJETIVO** Reduce auth latency en Brasil para top issuers.",
    "extracted_data": {},
    "next_step": "confirm",
    "is_complete": True,
}


def config(**overrides):
    return settings.model_copy(update=overrides)


def start_response(extracted=None, n_questions=3):
    return {
        "questions": questions(*[f"Pregunta {i}" for i in range(1, n_questions + 1)]),
        "extracted_data": extracted or {},
        "next_step": "continue",
        "is_complete": False,
    }


def awaiting_state() -> ConversationState:
    return ConversationState(
        phase=IntakePhase.AWAITING_CONFIRMATION,
        draft=ExtractedData(**FULL),
        confirmation_summary=build_confirmation_summary(ExtractedData(**FULL)),
    )


# ----------------------------------------------------------------------
# start
# ----------------------------------------------------------------------


def test_start_uses_provider_questions_and_extraction():
    provider = ScriptedProvider(start_response({"countries": ["Brasil"], "client_type": "top issuers"}))
    conv = IntakeConversation(provider=provider)

    state, turn = conv.start("Necesito reducir la latencia de autorización en Brasil para top issuers", "ana")

    assert turn.next_step == NextStep.CONTINUE
    assert len(turn.questions) == 3
    assert turn.used_fallback is False
    assert state.created_by == "ana"
    assert state.draft.countries == ["brazil"]
    assert state.draft.client_type == "top_issuer"
    assert len(state.history) == 1
    assert state.provider_turns == 1


def test_start_without_provider_uses_fixed_question_set():
    state, turn = IntakeConversation(provider=None).start("Quiero lanzar algo nuevo")

    assert turn.used_fallback is True
    assert [q.id for q in turn.questions] == ["start_problem", "start_countries", "start_clients", "start_business_case"]
    assert state.phase == IntakePhase.COLLECTING
    assert state.draft.filled() == {}


def test_start_pads_when_provider_asks_too_few_questions():
    provider = ScriptedProvider(start_response(n_questions=1))
    _, turn = IntakeConversation(provider=provider).start("idea")

    assert len(turn.questions) == 2
    assert turn.questions[1].id == "start_problem"


def test_start_caps_provider_questions():
    provider = ScriptedProvider(start_response(n_questions=7))
    _, turn = IntakeConversation(provider=provider).start("idea")
    assert len(turn.questions) == 4


def test_start_falls_back_when_provider_is_down():
    provider = ScriptedProvider(LLMUnavailableError("gateway timeout"))
    state, turn = IntakeConversation(provider=provider).start("idea")

    assert turn.next_step == NextStep.CONTINUE
    assert turn.used_fallback is True
    assert len(turn.questions) == 4
    assert state.provider_turns == 0


def test_start_strict_mode_reports_failure():
    provider = ScriptedProvider(LLMUnavailableError("gateway timeout"))
    conv = IntakeConversation(provider=provider, config=config(INTAKE_FALLBACK_ON_PROVIDER_ERROR=False))

    state, turn = conv.start("idea")

    assert turn.next_step == NextStep.FAILED
    assert "gateway timeout" in turn.error
    assert state.history == []


# ----------------------------------------------------------------------
# continue: completeness gating
# ----------------------------------------------------------------------


def test_missing_countries_never_reaches_confirmation():
    """Nine of ten required fields over three turns, provider pushing to confirm."""
    provider = ScriptedProvider(
        start_response({"title": "Reduce auth latency", "summary": "Bajar la latencia"}),
        {
            "questions": [],
            "extracted_data": {"category": "performance", "vertical": "processing", "client_type": "major"},
            "next_step": "confirm",
            "has_sufficient_info": True,
        },
        {
            "questions": [],
            "extracted_data": {
                "problem_description": "Timeouts en horas pico",
                "business_case": "Menos rechazos",
                "economic_impact_type": "moderate",
            },
            "next_step": "confirm",
            "is_complete": True,
        },
        {
            "questions": [],
            "extracted_data": {"client_segment": "Issuers grandes"},
            "next_step": "confirm",
            "is_complete": True,
            "has_sufficient_info": True,
        },
    )
    conv = IntakeConversation(provider=provider)
    state, _ = conv.start("Reducir latencia de autorización")

    for message in ("Es de performance en processing para clientes major", "El problema son los timeouts", "Issuers grandes"):
        state, turn = conv.continue_(state, message)
        assert turn.next_step == NextStep.CONTINUE
        assert turn.awaiting_confirmation is False
        assert state.phase == IntakePhase.COLLECTING

    assert state.draft.client_type == "tier1"
    assert turn.missing_fields == ["countries"]
    assert [q.id for q in turn.questions] == ["countries"]
    assert state.pending_field == "countries"
    assert "HISTORIAL DE LA CONVERSACION" in provider.calls[-1][1]


def test_complete_draft_with_go_ahead_moves_to_confirmation():
    provider = ScriptedProvider(
        start_response(),
        {"questions": [], "extracted_data": FULL, "next_step": "confirm", "has_sufficient_info": True},
        CONFIRMATION,
    )
    conv = IntakeConversation(provider=provider)
    state, _ = conv.start("idea")
    state, turn = conv.continue_(state, "Todos los datos")

    assert turn.next_step == NextStep.CONFIRM
    assert turn.awaiting_confirmation is True
    assert state.phase == IntakePhase.AWAITING_CONFIRMATION
    assert turn.confirmation_summary == CONFIRMATION["confirmation_summary"]
    assert [o.id for o in turn.options] == ["confirm", "refine", "modify"]
    assert turn.missing_fields == []


def test_complete_draft_without_go_ahead_keeps_asking():
    provider = ScriptedProvider(
        start_response(),
        {"questions": questions("¿Algo más?"), "extracted_data": FULL, "next_step": "continue"},
    )
    conv = IntakeConversation(provider=provider)
    state, _ = conv.start("idea")
    state, turn = conv.continue_(state, "Todos los datos")

    assert turn.next_step == NextStep.CONTINUE
    assert state.phase == IntakePhase.COLLECTING
    assert [q.text for q in turn.questions] == ["¿Algo más?"]


def test_provider_turn_budget_forces_confirmation():
    provider = ScriptedProvider(
        start_response(),
        {"questions": questions("¿Algo más?"), "extracted_data": FULL, "next_step": "continue"},
        CONFIRMATION,
    )
    conv = IntakeConversation(provider=provider, config=config(INTAKE_MAX_PROVIDER_TURNS=2))
    state, _ = conv.start("idea")
    state, turn = conv.continue_(state, "Todos los datos")

    assert turn.next_step == NextStep.CONFIRM
    assert state.phase == IntakePhase.AWAITING_CONFIRMATION


def test_provider_questions_are_capped_per_turn():
    provider = ScriptedProvider(
        start_response(),
        {"questions": questions("a", "b", "c", "d", "e"), "extracted_data": {}, "next_step": "continue"},
    )
    conv = IntakeConversation(provider=provider)
    state, _ = conv.start("idea")
    _, turn = conv.continue_(state, "más info")
    assert len(turn.questions) == 3


# ----------------------------------------------------------------------
# continue: untrusted provider output
# ----------------------------------------------------------------------


def test_malformed_fields_are_dropped_and_the_rest_merged():
    logger = Mock()
    provider = ScriptedProvider(
        {
            "questions": questions("¿Vertical?"),
            "extracted_data": {"title": 42, "category": "performance", "countries": "Brasil", "vertical": ["x"]},
            "next_step": "continue",
        }
    )
    conv = IntakeConversation(provider=provider, logger=logger)
    state = ConversationState(draft=ExtractedData(title="Titulo original"))

    new_state, turn = conv.continue_(state, "performance en Brasil")

    assert new_state.draft.title == "Titulo original"
    assert new_state.draft.category == "performance"
    assert new_state.draft.countries == ["brazil"]
    assert new_state.draft.vertical is None
    assert turn.next_step == NextStep.CONTINUE
    rejected = [c for c in logger.warning.call_args_list if c.args[0] == "intake.extraction_rejected"]
    assert rejected
    assert rejected[0].kwargs["extra"]["reason"] == "title,vertical"


def test_empty_markers_never_overwrite_draft_values():
    provider = ScriptedProvider(
        {
            "questions": questions("¿Algo más?"),
            "extracted_data": {"title": "unknown", "category": "", "countries": []},
            "next_step": "continue",
        }
    )
    state = ConversationState(draft=ExtractedData(title="Mi iniciativa", category="risk", countries=["chile"]))
    new_state, _ = IntakeConversation(provider=provider).continue_(state, "nada nuevo")

    assert new_state.draft.title == "Mi iniciativa"
    assert new_state.draft.category == "risk"
    assert new_state.draft.countries == ["chile"]


def test_unparsable_output_falls_back_without_touching_draft():
    provider = ScriptedProvider("Claro! Aquí van mis preguntas: 1) ...")
    state = ConversationState(draft=ExtractedData(title="Mi iniciativa"))

    new_state, turn = IntakeConversation(provider=provider).continue_(state, "hola")

    assert turn.used_fallback is True
    assert turn.next_step == NextStep.CONTINUE
    assert new_state.draft == state.draft
    assert [q.id for q in turn.questions] == ["summary"]


def test_unparsable_output_in_strict_mode_fails_the_turn():
    provider = ScriptedProvider("{not json")
    conv = IntakeConversation(provider=provider, config=config(INTAKE_FALLBACK_ON_PROVIDER_ERROR=False))
    state = ConversationState(draft=ExtractedData(title="Mi iniciativa"))

    new_state, turn = conv.continue_(state, "hola")

    assert turn.next_step == NextStep.FAILED
    assert turn.error
    assert new_state is state
    assert state.history == []
    assert state.draft.title == "Mi iniciativa"


def test_wrong_schema_is_treated_as_unparsable():
    provider = ScriptedProvider({"questions": "not a list", "extracted_data": ["x"], "is_complete": "yes"})
    state = ConversationState()
    new_state, turn = IntakeConversation(provider=provider).continue_(state, "hola")

    # still a valid response after coercion: no questions, no extraction
    assert turn.next_step == NextStep.CONTINUE
    assert new_state.draft.filled() == {}
    assert [q.id for q in turn.questions] == ["title"]


# ----------------------------------------------------------------------
# confirmation summary
# ----------------------------------------------------------------------


def test_confirmation_summary_states_only_given_facts():
    draft = ExtractedData(
        title="Reduce auth latency",
        category="performance",
        vertical="processing",
        countries=["brazil"],
    )
    text = build_confirmation_summary(draft)

    assert re.search(r"\d", text) is None
    for fact in ("Reduce auth latency", "performance", "processing", "brazil"):
        assert fact in text
    for section in ("**OBJETIVO**", "**ALCANCE**", "**ENFOQUE**", "**BENEFICIOS ESPERADOS**"):
        assert section in text
    assert "Por definir" in text


def test_provider_summary_with_invented_figures_is_replaced():
    invented = dict(CONFIRMATION, confirmation_summary="Reducir la latencia un 40% antes de marzo 2025.")
    provider = ScriptedProvider(
        start_response(),
        {"questions": [], "extracted_data": FULL, "next_step": "confirm"},
        invented,
    )
    logger = Mock()
    conv = IntakeConversation(provider=provider, logger=logger)
    state, _ = conv.start("idea")
    state, turn = conv.continue_(state, "Todos los datos")

    assert turn.next_step == NextStep.CONFIRM
    assert "40" not in turn.confirmation_summary
    assert re.search(r"\d", turn.confirmation_summary) is None
    assert turn.confirmation_summary == build_confirmation_summary(state.draft)
    assert any(c.args[0] == "intake.summary_rejected" for c in logger.warning.call_args_list)


def test_provider_summary_may_repeat_numbers_the_user_gave():
    stated = dict(CONFIRMATION, confirmation_summary="Bajar la latencia de 300 ms a 150 ms.")
    provider = ScriptedProvider(
        start_response(),
        {"questions": [], "extracted_data": FULL, "next_step": "confirm"},
        stated,
    )
    conv = IntakeConversation(provider=provider)
    state, _ = conv.start("Hoy la latencia es 300 ms y queremos 150 ms")
    state, turn = conv.continue_(state, "Todos los datos")

    assert turn.confirmation_summary == "Bajar la latencia de 300 ms a 150 ms."


def test_introduces_unknown_numbers():
    assert introduces_unknown_numbers("Subir 15%", ["queremos subir 15 por ciento"]) is False
    assert introduces_unknown_numbers("Subir 15%", ["queremos subir"]) is True
    assert introduces_unknown_numbers("Sin cifras", []) is False
    assert introduces_unknown_numbers("Costo 1,5 M", ["costo de 1.5 millones"]) is False


# ----------------------------------------------------------------------
# tri-state confirmation reply
# ----------------------------------------------------------------------


@pytest.mark.parametrize(
    "reply,expected",
    [
        ("confirmar", ConfirmationChoice.CONFIRM),
        ("Sí, crear la iniciativa", ConfirmationChoice.CONFIRM),
        ("yes", ConfirmationChoice.CONFIRM),
        ("✅", ConfirmationChoice.CONFIRM),
        ("quiero continuar", ConfirmationChoice.REFINE),
        ("seguir refinando", ConfirmationChoice.REFINE),
        ("➕", ConfirmationChoice.REFINE),
        ("modificar", ConfirmationChoice.MODIFY),
        ("cambiar el país", ConfirmationChoice.MODIFY),
        ("✏️", ConfirmationChoice.MODIFY),
        ("confirmar pero cambiar el título", ConfirmationChoice.AMBIGUOUS),
        ("sinceramente no sé", ConfirmationChoice.AMBIGUOUS),
        ("confirmación", ConfirmationChoice.AMBIGUOUS),
        ("hmm", ConfirmationChoice.AMBIGUOUS),
        ("", ConfirmationChoice.AMBIGUOUS),
    ],
)
def test_classify_confirmation_reply(reply, expected):
    assert classify_confirmation_reply(reply) == expected


def test_confirm_reply_moves_to_confirmed():
    state = awaiting_state()
    new_state, turn = IntakeConversation().continue_(state, "confirmar")

    assert new_state.phase == IntakePhase.CONFIRMED
    assert turn.next_step == NextStep.VALIDATE
    assert state.phase == IntakePhase.AWAITING_CONFIRMATION  # input state untouched


def test_refine_reply_returns_to_collecting():
    new_state, turn = IntakeConversation().continue_(awaiting_state(), "continuar")

    assert new_state.phase == IntakePhase.COLLECTING
    assert turn.next_step == NextStep.CONTINUE
    assert [q.id for q in turn.questions] == ["continue_refinement"]


def test_ambiguous_reply_reprompts():
    new_state, turn = IntakeConversation().continue_(awaiting_state(), "no sé")

    assert new_state.phase == IntakePhase.AWAITING_CONFIRMATION
    assert turn.next_step == NextStep.CONFIRM
    assert [q.id for q in turn.questions] == ["clarify_action"]
    assert len(turn.options) == 3


def test_modify_flow_changes_one_field_and_reconfirms():
    conv = IntakeConversation()
    state, turn = conv.continue_(awaiting_state(), "quiero cambiar algo")
    assert [q.id for q in turn.questions] == ["modification_field"]

    state, turn = conv.continue_(state, "algo que no existe")
    assert [q.id for q in turn.questions] == ["modification_field"]
    assert turn.questions[0].text.startswith("No identifiqué")

    state, turn = conv.continue_(state, "el país")
    assert [q.id for q in turn.questions] == ["countries"]
    assert state.pending_field == "countries"

    state, turn = conv.continue_(state, "México")
    assert state.draft.countries == ["mexico"]
    assert turn.next_step == NextStep.CONFIRM
    assert "Países: mexico" in turn.confirmation_summary


def test_resolve_field_name():
    assert resolve_field_name("el país") == "countries"
    assert resolve_field_name("Tipo de cliente") == "client_type"
    assert resolve_field_name("el título y el resumen") is None
    assert resolve_field_name("nada") is None


# ----------------------------------------------------------------------
# deterministic end to end + validate
# ----------------------------------------------------------------------


def test_deterministic_conversation_end_to_end():
    conv = IntakeConversation(provider=None)
    state, turn = conv.start("Necesito reducir la latencia de autorización en Brasil para top issuers", "ana")
    assert turn.used_fallback is True

    state, turn = conv.continue_(state, "Es un problema de latencia")
    assert [q.id for q in turn.questions] == ["title"]

    answers = [
        ("title", "Reducir latencia de autorización"),
        ("summary", "Bajar el tiempo de respuesta del autorizador"),
        ("category", "algo raro"),
        ("category", "Mejora de performance"),
        ("vertical", "processing"),
        ("countries", "Brasil"),
        ("client_type", "top issuers"),
        ("problem_description", "Timeouts en horas pico"),
        ("business_case", "Menos rechazos y mejor experiencia"),
        ("economic_impact_type", "moderado"),
        ("client_segment", "Top issuers de Brasil"),
    ]
    for field, reply in answers:
        assert state.pending_field == field
        state, turn = conv.continue_(state, reply)

    assert turn.next_step == NextStep.CONFIRM
    assert state.draft.category == "performance"
    assert state.draft.client_type == "top_issuer"
    assert state.draft.countries == ["brazil"]

    state, turn = conv.continue_(state, "sí")
    assert turn.next_step == NextStep.VALIDATE

    state, turn = conv.validate(state)
    assert turn.next_step == NextStep.COMPLETE
    assert turn.is_complete is True
    assert state.phase == IntakePhase.COMPLETE
    assert state.executive_summary.startswith("OPORTUNIDAD")

    payload = build_initiative_create(state)
    assert payload.status.value == "backlog"
    assert payload.created_by == "ana"
    assert payload.economic_impact == "moderate"
    breakdown = compute_score(payload, engine=WeightedScoringEngine())
    assert breakdown.total_score == 30 + 35 + 50 + 25 + 30


def test_unrecognised_classification_reply_is_asked_again():
    state = ConversationState(draft=ExtractedData(title="Mi iniciativa", summary="S"), pending_field="category")
    new_state, turn = IntakeConversation().continue_(state, "algo raro")

    assert new_state.draft.category is None
    assert new_state.pending_field == "category"
    assert turn.questions[0].id == "category"
    assert turn.questions[0].text.startswith("No reconocí")
    assert "performance" in turn.questions[0].options


def test_validate_incomplete_draft_goes_back_to_collecting():
    state = ConversationState(phase=IntakePhase.CONFIRMED, draft=ExtractedData(title="Mi iniciativa"))
    new_state, turn = IntakeConversation().validate(state)

    assert turn.next_step == NextStep.CONTINUE
    assert new_state.phase == IntakePhase.COLLECTING
    assert [q.id for q in turn.questions] == ["summary"]


def test_validate_uses_provider_summary_when_it_states_no_new_figures():
    provider = ScriptedProvider({"executive_summary": "OPORTUNIDAD: reducir la latencia en Brasil."})
    state = ConversationState(phase=IntakePhase.CONFIRMED, draft=ExtractedData(**FULL))
    new_state, turn = IntakeConversation(provider=provider).validate(state)

    assert new_state.executive_summary == "OPORTUNIDAD: reducir la latencia en Brasil."
    assert turn.executive_summary == new_state.executive_summary


def test_validate_rejects_invented_figures_in_executive_summary():
    provider = ScriptedProvider({"executive_summary": "Ahorro estimado de USD 2 millones en 2026."})
    state = ConversationState(phase=IntakePhase.CONFIRMED, draft=ExtractedData(**FULL))
    new_state, _ = IntakeConversation(provider=provider).validate(state)

    assert "2026" not in new_state.executive_summary
    assert new_state.executive_summary.startswith("OPORTUNIDAD")


def test_validate_is_idempotent_once_complete():
    state = ConversationState(phase=IntakePhase.COMPLETE, draft=ExtractedData(**FULL), executive_summary="X")
    new_state, turn = IntakeConversation().validate(state)
    assert new_state is state
    assert turn.next_step == NextStep.COMPLETE
    assert turn.executive_summary == "X"


def test_validate_while_awaiting_confirmation_asks_to_confirm():
    state = awaiting_state()
    new_state, turn = IntakeConversation().validate(state)

    assert new_state is state
    assert new_state.phase == IntakePhase.AWAITING_CONFIRMATION
    assert turn.next_step == NextStep.CONFIRM
    assert turn.is_complete is False
    assert turn.executive_summary is None
    assert [o.id for o in turn.options] == ["confirm", "refine", "modify"]


def test_validate_complete_draft_while_collecting_enters_confirmation():
    """A full draft that was never shown to the user is summarized, not completed."""
    state = ConversationState(draft=ExtractedData(**FULL))
    new_state, turn = IntakeConversation(provider=None).validate(state)

    assert turn.next_step == NextStep.CONFIRM
    assert turn.is_complete is False
    assert new_state.phase == IntakePhase.AWAITING_CONFIRMATION
    assert new_state.executive_summary is None
    assert turn.confirmation_summary == build_confirmation_summary(new_state.draft)
    assert state.phase == IntakePhase.COLLECTING


# ----------------------------------------------------------------------
# title length
# ----------------------------------------------------------------------


def test_extracted_title_needs_three_characters():
    with pytest.raises(ValueError):
        ExtractedData(title="KY")
    assert ExtractedData(title="  KYC  ").title == "KYC"


def test_short_title_from_provider_is_dropped_and_asked_again():
    provider = ScriptedProvider(
        start_response(),
        {"questions": [], "extracted_data": dict(FULL, title="KY"), "next_step": "confirm", "is_complete": True},
    )
    conv = IntakeConversation(provider=provider)
    state, _ = conv.start("idea")
    state, turn = conv.continue_(state, "Todos los datos")

    assert state.draft.title is None
    assert turn.next_step == NextStep.CONTINUE
    assert turn.missing_fields == ["title"]
    assert [q.id for q in turn.questions] == ["title"]


def test_short_title_reply_is_asked_again():
    state = ConversationState(draft=ExtractedData(summary="S"), pending_field="title")
    new_state, turn = IntakeConversation().continue_(state, "KY")

    assert new_state.draft.title is None
    assert new_state.pending_field == "title"
    assert turn.questions[0].id == "title"
    assert turn.questions[0].text.startswith("No reconocí")

    new_state, turn = IntakeConversation().continue_(new_state, "KYC para issuers")
    assert new_state.draft.title == "KYC para issuers"


def test_executive_summary_prompt_carries_draft_and_confirmed_summary():
    provider = ScriptedProvider({"executive_summary": "OPORTUNIDAD: reducir la latencia en Brasil."})
    state = ConversationState(
        phase=IntakePhase.CONFIRMED,
        draft=ExtractedData(**FULL),
        confirmation_summary="**OBJETIVO** Reduce auth latency",
    )
    IntakeConversation(provider=provider).validate(state)

    prompt = provider.calls[0][1]
    assert prompt == executive_summary_user_prompt(state)
    assert "Reduce auth latency" in prompt
    assert "Resumen confirmado por el usuario:\n**OBJETIVO** Reduce auth latency" in prompt


@pytest.mark.parametrize("reply", ["Brasil y Mexico", "Brasil Y Mexico", "Brasil AND Mexico", "Brasil; Mexico"])
def test_country_list_separators_ignore_case(reply):
    assert normalize_countries(reply) == ["brazil", "mexico"]
