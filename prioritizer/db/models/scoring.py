from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, JSON
from sqlalchemy.orm import relationship
from prioritizer.db.base import Base


class InitiativeScore(Base):
    """
    Scoring history table (one row per computation).
    """

    __tablename__ = "initiative_scores"

    id = Column(Integer, primary_key=True, index=True)
    initiative_id = Column(String(36), ForeignKey("initiatives.id"), nullable=False, index=True)

    total_score = Column(Integer, nullable=False)
    breakdown_json = Column(JSON, nullable=False)  # full ScoreBreakdown
    inputs_json = Column(JSON, nullable=True)  # classification snapshot used to compute it
    trigger = Column(String(50), nullable=True)  # provenance token, e.g. "workflow.move"

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    initiative = relationship("Initiative", back_populates="scores")
