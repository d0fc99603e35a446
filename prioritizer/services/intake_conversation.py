# initiative_prioritizer/prioritizer/services/intake_conversation.py

"""IntakeConversation: per-session state machine for initiative intake.

Phases:
- collecting: questions are asked and structured fields are merged into the draft.
- awaiting_confirmation: a summary was shown; the reply picks confirm / refine / modify.
- confirmed: the user confirmed; validate() produces the executive summary.
- complete: ready to be persisted as a Backlog initiative.

The provider's opinion (next_step, is_complete) is only an input: the move
to awaiting_confirmation also requires the deterministic completeness check
on the draft. Every step works on a deep copy of the incoming state, so a
failed turn never leaks partial changes.
"""

from __future__ import annotations

import json
import logging
import re
import unicodedata
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from prioritizer.config import Settings, settings as default_settings
from prioritizer.llm import prompts
from prioritizer.llm.client import (
    LLMError,
    LLMResponseError,
    LLMUnavailableError,
    TextCompletionProvider,
    parse_json_object,
)
from prioritizer.llm.models import (
    ConfirmationResponse,
    ExecutiveSummaryResponse,
    QuestionGenerationResponse,
)
from prioritizer.schemas.classification import (
    Category,
    ClientType,
    Country,
    EconomicImpact,
    ExperienceImpact,
    InitiativeStatus,
    InnovationLevel,
    SystemicRisk,
    Vertical,
    coerce_list,
    is_empty_marker,
    lookup_code,
)
from prioritizer.schemas.initiative import InitiativeCreate
from prioritizer.schemas.intake import (
    ConfirmationChoice,
    ConfirmationOption,
    ConversationState,
    ConversationTurn,
    ExtractedData,
    IntakePhase,
    IntakeTurn,
    NextStep,
    Question,
)

# Classification fields a single deterministic reply can be mapped into.
ENUM_FIELDS: Dict[str, Type[Any]] = {
    "category": Category,
    "vertical": Vertical,
    "client_type": ClientType,
    "economic_impact_type": EconomicImpact,
    "systemic_risk": SystemicRisk,
    "innovation_level": InnovationLevel,
}
LIST_FIELDS: Dict[str, Type[Any]] = {
    "countries": Country,
    "experience_impact": ExperienceImpact,
}

MODIFICATION_QUESTION_ID = "modification_field"
REFINEMENT_QUESTION_ID = "continue_refinement"
CLARIFY_QUESTION_ID = "clarify_action"

FIELD_QUESTIONS: Dict[str, str] = {
    "title": "¿Cuál es el título de la iniciativa?",
    "summary": "Describí brevemente la iniciativa en una o dos oraciones.",
    "category": "¿En qué categoría encaja la iniciativa?",
    "vertical": "¿Qué vertical de producto impacta principalmente?",
    "countries": "¿En qué países aplica? Podés indicar varios separados por coma.",
    "client_type": "¿Qué tipo de clientes se benefician?",
    "problem_description": "¿Qué problema concreto resuelve?",
    "business_case": "¿Cuál es el caso de negocio? ¿Por qué hacerlo ahora?",
    "economic_impact_type": "¿Qué impacto económico esperás?",
    "client_segment": "¿Qué segmento o clientes específicos están involucrados?",
    "systemic_risk": "¿Qué nivel de riesgo sistémico aborda?",
    "innovation_level": "¿Qué nivel de innovación representa frente a la competencia?",
    "experience_impact": "¿Qué indicadores de experiencia mejora? Podés indicar varios.",
}

# Words that point a modification request at a draft field (slug form).
FIELD_LABELS: Dict[str, str] = {
    "title": "title",
    "titulo": "title",
    "nombre": "title",
    "summary": "summary",
    "resumen": "summary",
    "descripcion": "summary",
    "category": "category",
    "categoria": "category",
    "vertical": "vertical",
    "countries": "countries",
    "pais": "countries",
    "paises": "countries",
    "client_type": "client_type",
    "tipo_de_cliente": "client_type",
    "problem_description": "problem_description",
    "problema": "problem_description",
    "business_case": "business_case",
    "caso_de_negocio": "business_case",
    "economic_impact_type": "economic_impact_type",
    "impacto_economico": "economic_impact_type",
    "client_segment": "client_segment",
    "segmento": "client_segment",
    "systemic_risk": "systemic_risk",
    "riesgo": "systemic_risk",
    "innovation_level": "innovation_level",
    "innovacion": "innovation_level",
    "experience_impact": "experience_impact",
    "experiencia": "experience_impact",
}

START_QUESTIONS: List[Question] = [
    Question(id="start_problem", text="¿Qué problema u oportunidad querés resolver con esta iniciativa?", required=True),
    Question(id="start_countries", text="¿En qué países aplicaría?", type="multiselect",
             options=[c.value for c in Country], required=True),
    Question(id="start_clients", text="¿Qué clientes se verían beneficiados?", type="select",
             options=[c.value for c in ClientType], required=True),
    Question(id="start_business_case", text="¿Cuál es el impacto de negocio esperado?", required=True),
]

CONFIRMATION_OPTIONS: List[ConfirmationOption] = [
    ConfirmationOption(id="confirm", text="✅ Confirmar y crear",
                       description="La información es correcta, crear la iniciativa."),
    ConfirmationOption(id="refine", text="➕ Continuar refinando",
                       description="Agregar más detalles antes de crearla."),
    ConfirmationOption(id="modify", text="✏️ Modificar",
                       description="Cambiar algún dato del resumen."),
]

_CONFIRM_WORDS = {"confirm", "confirmar", "confirmo", "si", "sí", "yes", "crear", "finalizar"}
_REFINE_WORDS = {"refine", "continue", "continuar", "refinar", "seguir", "agregar"}
_MODIFY_WORDS = {"modify", "change", "edit", "modificar", "cambiar", "editar", "corregir"}
_CONFIRM_PHRASES = ("✅", "está bien", "esta bien", "todo bien", "todo correcto")
_REFINE_PHRASES = ("➕", "más detalles", "mas detalles")
_MODIFY_PHRASES = ("✏", "no es correcto", "está mal", "esta mal")

_WORD_RE = re.compile(r"\w+", re.UNICODE)
_NUMBER_RE = re.compile(r"\d+(?:[.,]\d+)*")


def classify_confirmation_reply(text: Optional[str]) -> ConfirmationChoice:
    """Map a free-text reply to the tri-state choice.

    Matching is whole-word (plus the emoji shortcuts); a reply that matches
    no intent or more than one is ambiguous.
    """
    if not text or not text.strip():
        return ConfirmationChoice.AMBIGUOUS
    lowered = text.strip().lower()
    words = set(_WORD_RE.findall(lowered))

    matched = set()
    if words & _CONFIRM_WORDS or any(p in lowered for p in _CONFIRM_PHRASES):
        matched.add(ConfirmationChoice.CONFIRM)
    if words & _REFINE_WORDS or any(p in lowered for p in _REFINE_PHRASES):
        matched.add(ConfirmationChoice.REFINE)
    if words & _MODIFY_WORDS or any(p in lowered for p in _MODIFY_PHRASES):
        matched.add(ConfirmationChoice.MODIFY)

    if len(matched) != 1:
        return ConfirmationChoice.AMBIGUOUS
    return matched.pop()


def _numbers(text: str) -> set:
    return {n.replace(",", ".") for n in _NUMBER_RE.findall(text)}


def introduces_unknown_numbers(text: str, sources: Iterable[str]) -> bool:
    """True when ``text`` states a figure/date/percentage absent from ``sources``."""
    known = set()
    for source in sources:
        known |= _numbers(source)
    return bool(_numbers(text) - known)


def _display(value: Any) -> str:
    if value is None or value == [] or value == "":
        return "Por definir"
    if isinstance(value, list):
        return ", ".join(value)
    return str(value)


def build_confirmation_summary(draft: ExtractedData) -> str:
    """Deterministic confirmation summary built from draft fields only."""
    sections = [
        "**OBJETIVO**",
        f"{_display(draft.title)}: {_display(draft.summary)}",
        "",
        "**ALCANCE**",
        f"Categoría: {_display(draft.category)}",
        f"Vertical: {_display(draft.vertical)}",
        f"Países: {_display(draft.countries)}",
        f"Tipo de cliente: {_display(draft.client_type)}",
        f"Segmento: {_display(draft.client_segment)}",
        "",
        "**ENFOQUE**",
        _display(draft.problem_description),
        "",
        "**BENEFICIOS ESPERADOS**",
        _display(draft.business_case),
        f"Impacto económico: {_display(draft.economic_impact_type)}",
    ]
    return "\n".join(sections)


def build_executive_summary(draft: ExtractedData) -> str:
    """Deterministic executive summary built from draft fields only."""
    sections = [
        "OPORTUNIDAD",
        f"{_display(draft.title)}. {_display(draft.summary)}",
        "",
        "JUSTIFICACION DE NEGOCIO",
        _display(draft.business_case),
        f"Problema: {_display(draft.problem_description)}",
        f"Impacto económico: {_display(draft.economic_impact_type)}",
        "",
        "ALCANCE",
        f"Categoría {_display(draft.category)}, vertical {_display(draft.vertical)}, "
        f"países {_display(draft.countries)}, clientes {_display(draft.client_type)} "
        f"({_display(draft.client_segment)}).",
        "",
        "RIESGOS",
        f"Riesgo sistémico: {_display(draft.systemic_risk)}",
    ]
    return "\n".join(sections)


def build_initiative_create(state: ConversationState) -> InitiativeCreate:
    """Assemble the Backlog initiative handed to the store."""
    draft = state.draft
    return InitiativeCreate(
        title=draft.title,
        created_by=state.created_by,
        summary=draft.summary,
        problem_description=draft.problem_description,
        business_case=draft.business_case,
        client_segment=draft.client_segment,
        economic_impact_description=draft.economic_impact_description,
        executive_summary=state.executive_summary,
        category=draft.category,
        vertical=draft.vertical,
        client_type=draft.client_type,
        countries=list(draft.countries),
        systemic_risk=draft.systemic_risk,
        economic_impact=draft.economic_impact_type,
        experience_impact=list(draft.experience_impact),
        innovation_level=draft.innovation_level,
        status=InitiativeStatus.BACKLOG,
    )


def field_question(field: str, retry: bool = False) -> Question:
    """Deterministic question for a single draft field."""
    text = FIELD_QUESTIONS.get(field, f"¿Podés indicar {field}?")
    options: List[str] = []
    qtype = "text"
    if field in ENUM_FIELDS:
        options = [m.value for m in ENUM_FIELDS[field]]
        qtype = "select"
    elif field in LIST_FIELDS:
        options = [m.value for m in LIST_FIELDS[field]]
        qtype = "multiselect"
    if retry:
        text = f"No reconocí esa respuesta. {text}"
        if options:
            text = f"{text} Opciones: {', '.join(options)}."
    return Question(id=field, text=text, type=qtype, options=options, required=True)


def parse_field_reply(field: str, text: str) -> Optional[Any]:
    """Value for ``field`` from a direct reply, or None when it cannot be mapped."""
    if field in ENUM_FIELDS:
        return lookup_code(ENUM_FIELDS[field], text)
    if field in LIST_FIELDS:
        items = [item for item in coerce_list(text) if not is_empty_marker(item)]
        codes = [lookup_code(LIST_FIELDS[field], item) for item in items]
        if not codes or any(code is None for code in codes):
            return None
        return codes
    if is_empty_marker(text):
        return None
    return text.strip()


def resolve_field_name(text: str) -> Optional[str]:
    """Draft field a modification request refers to, when exactly one matches."""
    ascii_text = unicodedata.normalize("NFKD", text.lower()).encode("ascii", "ignore").decode("ascii")
    words = "_" + "_".join(_WORD_RE.findall(ascii_text)) + "_"
    found = {field for label, field in FIELD_LABELS.items() if f"_{label}_" in words}
    return found.pop() if len(found) == 1 else None


class IntakeConversation:
    """Drives one intake session turn by turn.

    ``provider`` is any TextCompletionProvider; with None the engine runs
    entirely on deterministic questions.
    """

    def __init__(
        self,
        provider: Optional[TextCompletionProvider] = None,
        logger: Optional[logging.Logger] = None,
        config: Optional[Settings] = None,
    ) -> None:
        self.provider = provider
        self.logger = logger or logging.getLogger(__name__)
        self.config = config or default_settings

    # ------------------------------------------------------------------
    # public steps
    # ------------------------------------------------------------------

    def start(self, user_input: str, created_by: Optional[str] = None) -> Tuple[ConversationState, IntakeTurn]:
        state = ConversationState(created_by=created_by)
        work = state.model_copy(deep=True)
        cfg = self.config

        response: Optional[QuestionGenerationResponse] = None
        used_fallback = self.provider is None
        if self.provider is not None:
            try:
                response = self._ask(
                    prompts.start_system_prompt(cfg.INTAKE_START_MIN_QUESTIONS, cfg.INTAKE_START_MAX_QUESTIONS),
                    prompts.start_user_prompt(user_input),
                    QuestionGenerationResponse,
                )
                work.provider_turns += 1
            except LLMError as exc:
                if not cfg.INTAKE_FALLBACK_ON_PROVIDER_ERROR:
                    return state, self._failed(state, exc)
                self._log_fallback(work, exc)
                used_fallback = True

        update = self._extract(work, response)
        work.draft = work.draft.merged_with(update)
        work.history.append(ConversationTurn(user=user_input, extracted=update.filled()))

        questions = (list(response.questions) if response else [])[: cfg.INTAKE_START_MAX_QUESTIONS]
        target = cfg.INTAKE_START_MAX_QUESTIONS if used_fallback else cfg.INTAKE_START_MIN_QUESTIONS
        known_ids = {q.id for q in questions}
        for q in START_QUESTIONS:
            if len(questions) >= target:
                break
            if q.id not in known_ids:
                questions.append(q.model_copy())

        turn = self._turn(work, NextStep.CONTINUE, questions=questions, used_fallback=used_fallback)
        self._log_turn(work, turn)
        return work, turn

    def continue_(self, state: ConversationState, user_input: str) -> Tuple[ConversationState, IntakeTurn]:
        if state.phase == IntakePhase.AWAITING_CONFIRMATION:
            return self._handle_confirmation_reply(state, user_input)
        if state.phase != IntakePhase.COLLECTING:
            # Confirmed/complete sessions do not take more input; report where they are.
            next_step = NextStep.VALIDATE if state.phase == IntakePhase.CONFIRMED else NextStep.COMPLETE
            return state, self._turn(state, next_step)

        work = state.model_copy(deep=True)
        cfg = self.config

        response: Optional[QuestionGenerationResponse] = None
        used_fallback = self.provider is None
        if self.provider is not None:
            try:
                response = self._ask(
                    prompts.continue_system_prompt(cfg.INTAKE_MAX_QUESTIONS_PER_TURN),
                    prompts.continue_user_prompt(work, user_input),
                    QuestionGenerationResponse,
                )
                work.provider_turns += 1
            except LLMError as exc:
                if not cfg.INTAKE_FALLBACK_ON_PROVIDER_ERROR:
                    return state, self._failed(state, exc)
                self._log_fallback(work, exc)
                used_fallback = True

        update = self._extract(work, response)
        follow_up: Optional[Question] = None
        if update.filled():
            work.draft = work.draft.merged_with(update)
            work.pending_field = None
        elif work.pending_field:
            update, follow_up = self._apply_pending(work, user_input)
        work.history.append(ConversationTurn(user=user_input, extracted=update.filled()))

        if follow_up is not None:
            turn = self._turn(work, NextStep.CONTINUE, questions=[follow_up], used_fallback=used_fallback)
            self._log_turn(work, turn)
            return work, turn

        budget_spent = work.provider_turns >= cfg.INTAKE_MAX_PROVIDER_TURNS
        provider_questions = list(response.questions) if response and not budget_spent else []
        go_ahead = (
            response is None
            or response.suggests_confirmation()
            or budget_spent
            or not provider_questions
        )

        if work.draft.is_complete() and go_ahead:
            return self._enter_confirmation(state, work, used_fallback)

        if provider_questions:
            questions = provider_questions[: cfg.INTAKE_MAX_QUESTIONS_PER_TURN]
            work.pending_field = None
        else:
            questions = self._missing_field_questions(work)

        turn = self._turn(work, NextStep.CONTINUE, questions=questions, used_fallback=used_fallback)
        self._log_turn(work, turn)
        return work, turn

    def validate(self, state: ConversationState) -> Tuple[ConversationState, IntakeTurn]:
        if state.phase in (IntakePhase.COMPLETE, IntakePhase.PERSISTED):
            return state, self._turn(state, NextStep.COMPLETE)
        if state.phase == IntakePhase.AWAITING_CONFIRMATION:
            return state, self._turn(state, NextStep.CONFIRM, options=list(CONFIRMATION_OPTIONS))

        work = state.model_copy(deep=True)
        if not work.draft.is_complete():
            work.phase = IntakePhase.COLLECTING
            work.confirmation_summary = None
            turn = self._turn(work, NextStep.CONTINUE, questions=self._missing_field_questions(work))
            self._log_turn(work, turn)
            return work, turn

        # the summary is only written once the user confirmed the draft
        if work.phase == IntakePhase.COLLECTING:
            return self._enter_confirmation(state, work, self.provider is None)

        used_fallback = self.provider is None
        summary: Optional[str] = None
        if self.provider is not None:
            try:
                result = self._ask(
                    prompts.executive_summary_system_prompt(),
                    prompts.executive_summary_user_prompt(work),
                    ExecutiveSummaryResponse,
                )
                summary = self._guarded(work, result.executive_summary)
            except LLMError as exc:
                if not self.config.INTAKE_FALLBACK_ON_PROVIDER_ERROR:
                    return state, self._failed(state, exc)
                self._log_fallback(work, exc)
                used_fallback = True

        work.executive_summary = summary or build_executive_summary(work.draft)
        work.phase = IntakePhase.COMPLETE
        work.pending_field = None
        turn = self._turn(work, NextStep.COMPLETE, used_fallback=used_fallback)
        self._log_turn(work, turn)
        return work, turn

    # ------------------------------------------------------------------
    # confirmation
    # ------------------------------------------------------------------

    def _enter_confirmation(
        self, original: ConversationState, work: ConversationState, used_fallback: bool
    ) -> Tuple[ConversationState, IntakeTurn]:
        summary: Optional[str] = None
        if self.provider is not None and not used_fallback:
            try:
                result = self._ask(
                    prompts.confirmation_system_prompt(),
                    prompts.confirmation_user_prompt(work),
                    ConfirmationResponse,
                )
                summary = self._guarded(work, result.confirmation_summary)
            except LLMError as exc:
                if not self.config.INTAKE_FALLBACK_ON_PROVIDER_ERROR:
                    return original, self._failed(original, exc)
                self._log_fallback(work, exc)
                used_fallback = True

        work.confirmation_summary = summary or build_confirmation_summary(work.draft)
        work.phase = IntakePhase.AWAITING_CONFIRMATION
        work.pending_field = None
        turn = self._turn(work, NextStep.CONFIRM, options=list(CONFIRMATION_OPTIONS), used_fallback=used_fallback)
        self._log_turn(work, turn)
        return work, turn

    def _handle_confirmation_reply(
        self, state: ConversationState, user_input: str
    ) -> Tuple[ConversationState, IntakeTurn]:
        work = state.model_copy(deep=True)
        work.history.append(ConversationTurn(user=user_input))
        choice = classify_confirmation_reply(user_input)

        if choice == ConfirmationChoice.CONFIRM:
            work.phase = IntakePhase.CONFIRMED
            turn = self._turn(work, NextStep.VALIDATE)
        elif choice == ConfirmationChoice.REFINE:
            work.phase = IntakePhase.COLLECTING
            work.pending_field = None
            question = Question(
                id=REFINEMENT_QUESTION_ID,
                text="¿Qué información adicional querés agregar a la iniciativa?",
            )
            turn = self._turn(work, NextStep.CONTINUE, questions=[question])
        elif choice == ConfirmationChoice.MODIFY:
            work.phase = IntakePhase.COLLECTING
            work.pending_field = MODIFICATION_QUESTION_ID
            turn = self._turn(work, NextStep.CONTINUE, questions=[self._modification_question()])
        else:
            question = Question(
                id=CLARIFY_QUESTION_ID,
                text="No entendí tu respuesta. ¿Querés confirmar, continuar refinando o modificar algún dato?",
                type="select",
                options=[o.id for o in CONFIRMATION_OPTIONS],
                required=True,
            )
            turn = self._turn(work, NextStep.CONFIRM, questions=[question], options=list(CONFIRMATION_OPTIONS))

        self._log_turn(work, turn)
        return work, turn

    def _guarded(self, state: ConversationState, text: str) -> Optional[str]:
        """Provider summary text, or None when it states numbers nobody gave."""
        sources = state.user_messages() + [json.dumps(state.draft.filled(), ensure_ascii=False)]
        if state.confirmation_summary:
            sources.append(state.confirmation_summary)
        if introduces_unknown_numbers(text, sources):
            self.logger.warning(
                "intake.summary_rejected",
                extra={"session_id": state.session_id, "reason": "unstated figures in provider summary"},
            )
            return None
        return text.strip()

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _ask(self, system_prompt: str, user_prompt: str, schema: Type[BaseModel]) -> Any:
        if self.provider is None:
            raise LLMUnavailableError("No text completion provider configured")
        text = self.provider.complete(system_prompt, user_prompt)
        data = parse_json_object(text)
        try:
            return schema.model_validate(data)
        except ValidationError as exc:
            raise LLMResponseError(f"Completion does not match {schema.__name__}: {exc}") from exc

    def _extract(self, state: ConversationState, response: Optional[QuestionGenerationResponse]) -> ExtractedData:
        if response is None:
            return ExtractedData()
        update, rejected = ExtractedData.from_untrusted(response.extracted_data)
        if rejected:
            self.logger.warning(
                "intake.extraction_rejected",
                extra={"session_id": state.session_id, "reason": ",".join(rejected)},
            )
        return update

    def _apply_pending(self, state: ConversationState, user_input: str) -> Tuple[ExtractedData, Optional[Question]]:
        """Map the reply into the single field asked last turn.

        Returns (update, follow_up). follow_up is the next question when the
        reply could not be mapped, or when it named the field to modify.
        The value of a known field overwrites whatever the draft held.
        """
        field = state.pending_field
        if field == MODIFICATION_QUESTION_ID:
            target = resolve_field_name(user_input)
            if target is None:
                return ExtractedData(), self._modification_question(retry=True)
            state.pending_field = target
            return ExtractedData(), field_question(target)

        value = parse_field_reply(field, user_input)
        if value is None:
            return ExtractedData(), field_question(field, retry=True)

        values = state.draft.model_dump()
        values[field] = value
        try:
            state.draft = ExtractedData.model_validate(values)
        except ValidationError:
            return ExtractedData(), field_question(field, retry=True)
        state.pending_field = None
        return ExtractedData.model_validate({field: value}), None

    @staticmethod
    def _modification_question(retry: bool = False) -> Question:
        text = "¿Qué dato querés modificar?"
        if retry:
            text = f"No identifiqué el dato. {text}"
        return Question(
            id=MODIFICATION_QUESTION_ID,
            text=text,
            type="select",
            options=list(FIELD_QUESTIONS.keys()),
            required=True,
        )

    def _missing_field_questions(self, state: ConversationState) -> List[Question]:
        missing = state.draft.missing_fields()
        if not missing:
            state.pending_field = None
            return []
        state.pending_field = missing[0]
        return [field_question(missing[0])]

    def _turn(self, state: ConversationState, next_step: NextStep, **kwargs: Any) -> IntakeTurn:
        return IntakeTurn(
            session_id=state.session_id,
            next_step=next_step,
            is_complete=state.phase in (IntakePhase.COMPLETE, IntakePhase.PERSISTED),
            awaiting_confirmation=state.awaiting_confirmation,
            confirmation_summary=state.confirmation_summary if state.phase != IntakePhase.COLLECTING else None,
            executive_summary=state.executive_summary,
            extracted_data=state.draft.model_copy(deep=True),
            missing_fields=state.draft.missing_fields(),
            **kwargs,
        )

    def _failed(self, state: ConversationState, exc: Exception) -> IntakeTurn:
        self.logger.error(
            "intake.turn_failed",
            extra={"session_id": state.session_id, "phase": state.phase.value, "reason": str(exc)},
        )
        return self._turn(state, NextStep.FAILED, error=f"Processing failed: {exc}")

    def _log_fallback(self, state: ConversationState, exc: Exception) -> None:
        self.logger.warning(
            "intake.provider_fallback",
            extra={"session_id": state.session_id, "phase": state.phase.value, "reason": str(exc)},
        )

    def _log_turn(self, state: ConversationState, turn: IntakeTurn) -> None:
        self.logger.info(
            "intake.turn",
            extra={
                "session_id": state.session_id,
                "phase": state.phase.value,
                "next_step": turn.next_step.value,
                "missing_fields": turn.missing_fields,
                "count": len(turn.questions),
            },
        )


__all__ = [
    "IntakeConversation",
    "CONFIRMATION_OPTIONS",
    "FIELD_QUESTIONS",
    "START_QUESTIONS",
    "build_confirmation_summary",
    "build_executive_summary",
    "build_initiative_create",
    "classify_confirmation_reply",
    "field_question",
    "introduces_unknown_numbers",
    "parse_field_reply",
    "resolve_field_name",
]
