import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    String,
    Text,
    JSON,
)
from sqlalchemy.orm import relationship

from prioritizer.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Initiative(Base):
    __tablename__ = "initiatives"

    # A. Identity
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(500), nullable=False)
    created_by = Column(String(100), nullable=True)

    # B. Narrative (no scoring effect)
    summary = Column(Text, nullable=True)
    problem_description = Column(Text, nullable=True)
    business_case = Column(Text, nullable=True)
    client_segment = Column(Text, nullable=True)
    economic_impact_description = Column(Text, nullable=True)
    executive_summary = Column(Text, nullable=True)
    quarter = Column(String(20), nullable=True)

    # C. Classification (canonical lowercase codes)
    category = Column(String(100), nullable=True)
    vertical = Column(String(100), nullable=True)
    client_type = Column(String(100), nullable=True)
    countries = Column(JSON, nullable=True)  # list of country codes
    systemic_risk = Column(String(100), nullable=True)
    economic_impact = Column(String(100), nullable=True)
    experience_impact = Column(JSON, nullable=True)  # list of impact-area tags
    innovation_level = Column(String(100), nullable=True)

    # D. Workflow
    status = Column(String(50), nullable=False, default="backlog", index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
    # Source that last updated this row (e.g., "intake.complete", "workflow.move")
    updated_source = Column(String(50), nullable=True)

    # E. Score (derived; score always equals score_breakdown["total_score"])
    score = Column(Integer, nullable=False, default=0, index=True)
    score_breakdown = Column(JSON, nullable=True)
    scored_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    scores = relationship("InitiativeScore", back_populates="initiative", cascade="all, delete-orphan")
