"""Initial tables: users, questions, progress, submissions, badges, activity.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("constraints", sa.Text(), nullable=True),
        sa.Column("difficulty", sa.String(16), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("total_submissions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("successful_submissions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("added_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_questions_difficulty"), "questions", ["difficulty"], unique=False)
    op.create_index(op.f("ix_questions_is_active"), "questions", ["is_active"], unique=False)

    op.create_table(
        "question_tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("tag", sa.String(64), nullable=False),
        sa.ForeignKeyConstraint(["question_id"], ["questions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("question_id", "tag", name="uq_question_tags_question_tag"),
    )
    op.create_index(op.f("ix_question_tags_question_id"), "question_tags", ["question_id"], unique=False)
    op.create_index(op.f("ix_question_tags_tag"), "question_tags", ["tag"], unique=False)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("avatar", sa.String(500), nullable=True),
        sa.Column("role", sa.String(16), nullable=False, server_default="student"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_active_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("question_of_the_day_id", sa.Integer(), nullable=True),
        sa.Column("question_of_the_day_date", sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(["question_of_the_day_id"], ["questions.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_name"), "users", ["name"], unique=False)
    op.create_index(op.f("ix_users_role"), "users", ["role"], unique=False)
    op.create_index(op.f("ix_users_total_points"), "users", ["total_points"], unique=False)

    op.create_table(
        "topic_stats",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("topic", sa.String(64), nullable=False),
        sa.Column("total_questions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("solved_questions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("attempted_questions", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("student_id", "topic", name="uq_topic_stats_student_topic"),
    )
    op.create_index(op.f("ix_topic_stats_student_id"), "topic_stats", ["student_id"], unique=False)

    op.create_table(
        "student_questions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="not_attempted"),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("first_attempt_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_attempt_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("solved_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("best_code", sa.Text(), nullable=True),
        sa.Column("best_language", sa.String(16), nullable=True),
        sa.Column("best_execution_time_ms", sa.Integer(), nullable=True),
        sa.Column("best_points_earned", sa.Integer(), nullable=True),
        sa.Column("total_points_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["question_id"], ["questions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("student_id", "question_id", name="uq_student_questions_pair"),
    )
    op.create_index(
        op.f("ix_student_questions_question_id"), "student_questions", ["question_id"], unique=False
    )
    op.create_index(
        "ix_student_questions_student_status", "student_questions", ["student_id", "status"], unique=False
    )

    op.create_table(
        "submissions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("language", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("points_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("execution_time_ms", sa.Integer(), nullable=True),
        sa.Column("is_question_of_the_day", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["question_id"], ["questions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_submissions_student_id"), "submissions", ["student_id"], unique=False)
    op.create_index(
        "ix_submissions_student_question", "submissions", ["student_id", "question_id"], unique=False
    )
    op.create_index("ix_submissions_question_status", "submissions", ["question_id", "status"], unique=False)

    op.create_table(
        "badges",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("icon", sa.String(500), nullable=True),
        sa.Column("criteria_type", sa.String(32), nullable=False),
        sa.Column("criteria_value", sa.Float(), nullable=False),
        sa.Column("criteria_timeframe", sa.String(16), nullable=False, server_default="all_time"),
        sa.Column("points", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "student_badges",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("badge_id", sa.Integer(), nullable=False),
        sa.Column("earned_date", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["badge_id"], ["badges.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("student_id", "badge_id", name="uq_student_badges_pair"),
    )
    op.create_index(op.f("ix_student_badges_student_id"), "student_badges", ["student_id"], unique=False)

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("activity_type", sa.String(32), nullable=False),
        sa.Column("question_id", sa.Integer(), nullable=True),
        sa.Column("badge_id", sa.Integer(), nullable=True),
        sa.Column("points_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("streak_count", sa.Integer(), nullable=True),
        sa.Column("activity_date", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["question_id"], ["questions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["badge_id"], ["badges.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_activity_logs_question_id"), "activity_logs", ["question_id"], unique=False)
    op.create_index(op.f("ix_activity_logs_badge_id"), "activity_logs", ["badge_id"], unique=False)
    op.create_index(
        "ix_activity_logs_student_date", "activity_logs", ["student_id", "activity_date"], unique=False
    )
    op.create_index(
        "ix_activity_logs_type_date", "activity_logs", ["activity_type", "activity_date"], unique=False
    )


def downgrade() -> None:
    op.drop_table("activity_logs")
    op.drop_table("student_badges")
    op.drop_table("badges")
    op.drop_table("submissions")
    op.drop_table("student_questions")
    op.drop_table("topic_stats")
    op.drop_table("users")
    op.drop_table("question_tags")
    op.drop_table("questions")
