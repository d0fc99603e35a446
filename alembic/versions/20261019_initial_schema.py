"""Create initiatives, initiative_scores and intake_sessions tables

Revision ID: 20261019_initial_schema
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261019_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "initiatives",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("created_by", sa.String(length=100), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("problem_description", sa.Text(), nullable=True),
        sa.Column("business_case", sa.Text(), nullable=True),
        sa.Column("client_segment", sa.Text(), nullable=True),
        sa.Column("economic_impact_description", sa.Text(), nullable=True),
        sa.Column("executive_summary", sa.Text(), nullable=True),
        sa.Column("quarter", sa.String(length=20), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("vertical", sa.String(length=100), nullable=True),
        sa.Column("client_type", sa.String(length=100), nullable=True),
        sa.Column("countries", sa.JSON(), nullable=True),
        sa.Column("systemic_risk", sa.String(length=100), nullable=True),
        sa.Column("economic_impact", sa.String(length=100), nullable=True),
        sa.Column("experience_impact", sa.JSON(), nullable=True),
        sa.Column("innovation_level", sa.String(length=100), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="backlog"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_source", sa.String(length=50), nullable=True),
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("score_breakdown", sa.JSON(), nullable=True),
        sa.Column("scored_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_initiatives_status", "initiatives", ["status"])
    op.create_index("ix_initiatives_score", "initiatives", ["score"])

    op.create_table(
        "initiative_scores",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("initiative_id", sa.String(length=36), sa.ForeignKey("initiatives.id"), nullable=False),
        sa.Column("total_score", sa.Integer(), nullable=False),
        sa.Column("breakdown_json", sa.JSON(), nullable=False),
        sa.Column("inputs_json", sa.JSON(), nullable=True),
        sa.Column("trigger", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_initiative_scores_id", "initiative_scores", ["id"])
    op.create_index("ix_initiative_scores_initiative_id", "initiative_scores", ["initiative_id"])

    op.create_table(
        "intake_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.String(length=36), nullable=False),
        sa.Column("phase", sa.String(length=30), nullable=False, server_default="collecting"),
        sa.Column("state_json", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(length=100), nullable=True),
        sa.Column("initiative_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_intake_sessions_id", "intake_sessions", ["id"])
    op.create_index("ix_intake_sessions_session_id", "intake_sessions", ["session_id"], unique=True)
    op.create_index("ix_intake_sessions_phase", "intake_sessions", ["phase"])


def downgrade() -> None:
    op.drop_index("ix_intake_sessions_phase", table_name="intake_sessions")
    op.drop_index("ix_intake_sessions_session_id", table_name="intake_sessions")
    op.drop_index("ix_intake_sessions_id", table_name="intake_sessions")
    op.drop_table("intake_sessions")

    op.drop_index("ix_initiative_scores_initiative_id", table_name="initiative_scores")
    op.drop_index("ix_initiative_scores_id", table_name="initiative_scores")
    op.drop_table("initiative_scores")

    op.drop_index("ix_initiatives_score", table_name="initiatives")
    op.drop_index("ix_initiatives_status", table_name="initiatives")
    op.drop_table("initiatives")
