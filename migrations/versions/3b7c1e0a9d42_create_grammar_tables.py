"""create grammar tables

Revision ID: 3b7c1e0a9d42
Revises:
Create Date: 2026-10-19 10:12:44.318207

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3b7c1e0a9d42"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamp(name: str, **kwargs) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
        **kwargs,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("external_id", sa.String(64), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(100), nullable=True),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("role", sa.String(20), server_default="USER", nullable=False),
        sa.Column("streak", sa.Integer(), server_default="0", nullable=False),
        sa.Column("highest_streak", sa.Integer(), server_default="0", nullable=False),
        sa.Column("last_active_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_exercises", JSONType, nullable=False),
        sa.Column("completed_lessons", JSONType, nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_external_id", "users", ["external_id"], unique=True)

    op.create_table(
        "units",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
    )
    op.create_index("ix_units_id", "units", ["id"])
    op.create_index("ix_units_title", "units", ["title"])

    op.create_table(
        "lessons",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("units.id"), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_lessons_id", "lessons", ["id"])
    op.create_index("ix_lessons_unit_id", "lessons", ["unit_id"])
    op.create_index("ix_lessons_slug", "lessons", ["slug"], unique=True)

    op.create_table(
        "lesson_blocks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "lesson_id", sa.Integer(), sa.ForeignKey("lessons.id"), nullable=False
        ),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("data", JSONType, nullable=False),
    )
    op.create_index("ix_lesson_blocks_id", "lesson_blocks", ["id"])
    op.create_index("ix_lesson_blocks_lesson_id", "lesson_blocks", ["lesson_id"])

    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("lesson_id", sa.Integer(), sa.ForeignKey("lessons.id"), nullable=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=False),
        sa.Column("concept", sa.String(120), nullable=True),
        sa.Column("level", sa.String(2), nullable=True),
        sa.Column("data", JSONType, nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_questions_id", "questions", ["id"])
    op.create_index("ix_questions_lesson_id", "questions", ["lesson_id"])
    op.create_index("ix_questions_type", "questions", ["type"])

    op.create_table(
        "exercises",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("lesson_id", sa.Integer(), sa.ForeignKey("lessons.id"), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_exercises_id", "exercises", ["id"])
    op.create_index("ix_exercises_lesson_id", "exercises", ["lesson_id"])

    op.create_table(
        "exercise_questions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "exercise_id", sa.Integer(), sa.ForeignKey("exercises.id"), nullable=False
        ),
        sa.Column(
            "question_id", sa.Integer(), sa.ForeignKey("questions.id"), nullable=False
        ),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.UniqueConstraint("exercise_id", "question_id", name="uq_exercise_question"),
    )
    op.create_index("ix_exercise_questions_id", "exercise_questions", ["id"])
    op.create_index(
        "ix_exercise_questions_exercise_id", "exercise_questions", ["exercise_id"]
    )
    op.create_index(
        "ix_exercise_questions_question_id", "exercise_questions", ["question_id"]
    )

    op.create_table(
        "attempts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "question_id", sa.Integer(), sa.ForeignKey("questions.id"), nullable=False
        ),
        sa.Column("answer", JSONType, nullable=True),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
        sa.Column("time_spent", sa.Integer(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_attempts_id", "attempts", ["id"])
    op.create_index("ix_attempts_user_id", "attempts", ["user_id"])
    op.create_index("ix_attempts_question_id", "attempts", ["question_id"])
    op.create_index("ix_attempts_created_at", "attempts", ["created_at"])


def downgrade() -> None:
    op.drop_table("attempts")
    op.drop_table("exercise_questions")
    op.drop_table("exercises")
    op.drop_table("questions")
    op.drop_table("lesson_blocks")
    op.drop_table("lessons")
    op.drop_table("units")
    op.drop_table("users")
