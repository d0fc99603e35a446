from .initiative import InitiativeCreate, InitiativeRead
from .scoring import InitiativeScoreRead, InitiativeScoreSummary, ScoreComponentRead, ScorePreviewResponse
from .intake import (
	REQUIRED_FIELDS,
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

__all__ = [
	"InitiativeCreate",
	"InitiativeRead",
	"InitiativeScoreRead",
	"InitiativeScoreSummary",
	"ScoreComponentRead",
	"ScorePreviewResponse",
	"REQUIRED_FIELDS",
	"ConfirmationChoice",
	"ConfirmationOption",
	"ConversationState",
	"ConversationTurn",
	"ExtractedData",
	"IntakePhase",
	"IntakeTurn",
	"NextStep",
	"Question",
]
