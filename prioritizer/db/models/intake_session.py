# initiative_prioritizer/prioritizer/db/models/intake_session.py

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String

from prioritizer.db.base import Base


class IntakeSession(Base):
    """Persisted conversation state for one intake session."""

    __tablename__ = "intake_sessions"

    id = Column(Integer, primary_key=True, index=True)

    # Public identifier returned to the client
    session_id = Column(String(36), unique=True, index=True, nullable=False)

    phase = Column(String(30), index=True, nullable=False, default="collecting")
    state_json = Column(JSON, nullable=False)  # serialised ConversationState

    created_by = Column(String(100), nullable=True)
    # Set once the finished draft has been persisted as an Initiative
    initiative_id = Column(String(36), nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
