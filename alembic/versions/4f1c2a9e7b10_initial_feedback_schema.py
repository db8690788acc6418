"""initial feedback schema

Revision ID: 4f1c2a9e7b10
Revises:
Create Date: 2026-10-18 09:12:44.210387
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "4f1c2a9e7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("job_title", sa.String(length=200), nullable=True),
        sa.Column("department", sa.String(length=200), nullable=True),
        sa.Column("manager_id", sa.Uuid(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["manager_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "evaluation_forms",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("evaluation_type", sa.String(length=20), nullable=False),
        sa.Column("target_role", sa.String(length=200), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_by_user_id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "evaluation_type IN ('self','manager','peer','direct_report')",
            name="ck_evaluation_forms_type",
        ),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "form_questions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("form_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("text", sa.String(length=1000), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=False),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column("rating_min", sa.Float(), nullable=False),
        sa.Column("rating_max", sa.Float(), nullable=False),
        sa.CheckConstraint("kind IN ('rating','text')", name="ck_form_questions_kind"),
        sa.CheckConstraint("rating_min < rating_max", name="ck_form_questions_bounds"),
        sa.ForeignKeyConstraint(["form_id"], ["evaluation_forms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("form_id", "position", name="uq_form_question_position"),
    )

    op.create_table(
        "evaluation_cycles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("target_departments", JSONType, nullable=False),
        sa.Column("created_by_user_id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("status IN ('draft','active','completed')", name="ck_evaluation_cycles_status"),
        sa.CheckConstraint("end_date > start_date", name="ck_evaluation_cycles_window"),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "cycle_participants",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("cycle_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('not_started','in_progress','completed')",
            name="ck_cycle_participants_status",
        ),
        sa.ForeignKeyConstraint(["cycle_id"], ["evaluation_cycles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cycle_id", "user_id", name="uq_cycle_participant"),
    )

    op.create_table(
        "evaluation_responses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("cycle_id", sa.Uuid(), nullable=False),
        sa.Column("form_id", sa.Uuid(), nullable=False),
        sa.Column("evaluator_id", sa.Uuid(), nullable=False),
        sa.Column("evaluated_user_id", sa.Uuid(), nullable=False),
        sa.Column("relationship_type", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("answers", JSONType, nullable=False),
        sa.Column("average_score", sa.Float(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending','in_progress','completed')",
            name="ck_evaluation_responses_status",
        ),
        sa.CheckConstraint(
            "relationship_type IN ('self','manager','peer','direct_report')",
            name="ck_evaluation_responses_relationship",
        ),
        sa.CheckConstraint(
            "(status = 'completed') OR (average_score IS NULL AND submitted_at IS NULL)",
            name="ck_evaluation_responses_unscored_draft",
        ),
        sa.CheckConstraint(
            "(status <> 'completed') OR (submitted_at IS NOT NULL)",
            name="ck_evaluation_responses_completed_ts",
        ),
        sa.ForeignKeyConstraint(["cycle_id"], ["evaluation_cycles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["form_id"], ["evaluation_forms.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["evaluator_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["evaluated_user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "cycle_id", "form_id", "evaluator_id", "evaluated_user_id",
            name="uq_evaluation_responses_tuple",
        ),
    )
    op.create_index(
        "ix_evaluation_responses_subject_status",
        "evaluation_responses",
        ["evaluated_user_id", "status"],
    )

    op.create_table(
        "development_suggestions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("cycle_id", sa.Uuid(), nullable=True),
        sa.Column("outcome", sa.String(length=40), nullable=False),
        sa.Column("categories", JSONType, nullable=False),
        sa.Column("suggestions", JSONType, nullable=False),
        sa.Column("rejected_segments", JSONType, nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("generated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("is_reviewed", sa.Boolean(), nullable=False),
        sa.Column("reviewer_comments", sa.Text(), nullable=True),
        sa.Column("reviewed_by_user_id", sa.Uuid(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["cycle_id"], ["evaluation_cycles.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["reviewed_by_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_development_suggestions_user_id", "development_suggestions", ["user_id"])

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("actor_user_id", sa.Uuid(), nullable=True),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("event_metadata", JSONType, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["actor_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("audit_events")
    op.drop_index("ix_development_suggestions_user_id", table_name="development_suggestions")
    op.drop_table("development_suggestions")
    op.drop_index("ix_evaluation_responses_subject_status", table_name="evaluation_responses")
    op.drop_table("evaluation_responses")
    op.drop_table("cycle_participants")
    op.drop_table("evaluation_cycles")
    op.drop_table("form_questions")
    op.drop_table("evaluation_forms")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
