"""Create study job and input tables.

Revision ID: 5c1e2a7d9b40
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "5c1e2a7d9b40"
down_revision = None
branch_labels = None
depends_on = None

_UTC_NOW_ISO = sa.text("""to_char((now() AT TIME ZONE 'UTC'), 'YYYY-MM-DD"T"HH24:MI:SS"Z"')""")


def upgrade() -> None:
  """Upgrade schema."""
  op.create_table(
    "study_jobs",
    sa.Column("id", sa.String(), nullable=False),
    sa.Column("user_id", sa.String(), nullable=False),
    sa.Column("kind", sa.String(), nullable=False),
    sa.Column("operation_type", sa.String(), nullable=False),
    sa.Column("status", sa.String(), server_default=sa.text("'pending'"), nullable=False),
    sa.Column("input_ids", postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'[]'::jsonb"), nullable=False),
    sa.Column("parameters", postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
    sa.Column("result", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column("error_message", sa.Text(), nullable=True),
    sa.Column("created_at", sa.String(), server_default=_UTC_NOW_ISO, nullable=False),
    sa.Column("updated_at", sa.String(), server_default=_UTC_NOW_ISO, nullable=False),
    sa.Column("completed_at", sa.String(), nullable=True),
    sa.PrimaryKeyConstraint("id"),
  )
  op.create_index(op.f("ix_study_jobs_user_id"), "study_jobs", ["user_id"], unique=False)
  op.create_index("ix_study_jobs_user_kind_status", "study_jobs", ["user_id", "kind", "status"], unique=False)
  op.create_index("ix_study_jobs_user_kind_operation", "study_jobs", ["user_id", "kind", "operation_type"], unique=False)

  op.create_table(
    "study_documents",
    sa.Column("id", sa.String(), nullable=False),
    sa.Column("user_id", sa.String(), nullable=False),
    sa.Column("name", sa.String(), nullable=False),
    sa.Column("type", sa.String(), nullable=True),
    sa.Column("size", sa.BigInteger(), nullable=True),
    sa.Column("status", sa.String(), nullable=False),
    sa.Column("source", sa.String(), nullable=False),
    sa.Column("storage_path", sa.String(), nullable=True),
    sa.Column("original_url", sa.String(), nullable=True),
    sa.Column("content", sa.Text(), nullable=True),
    sa.Column("page_count", sa.Integer(), nullable=True),
    sa.Column("text_chunks", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.PrimaryKeyConstraint("id"),
  )
  op.create_index(op.f("ix_study_documents_user_id"), "study_documents", ["user_id"], unique=False)

  op.create_table(
    "lecture_recordings",
    sa.Column("id", sa.String(), nullable=False),
    sa.Column("user_id", sa.String(), nullable=False),
    sa.Column("title", sa.String(), nullable=False),
    sa.Column("transcript", sa.Text(), nullable=True),
    sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.PrimaryKeyConstraint("id"),
  )
  op.create_index(op.f("ix_lecture_recordings_user_id"), "lecture_recordings", ["user_id"], unique=False)

  op.create_table(
    "subscriptions",
    sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
    sa.Column("user_id", sa.String(), nullable=False),
    sa.Column("status", sa.String(), nullable=False),
    sa.Column("current_period_end", sa.BigInteger(), nullable=True),
    sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.PrimaryKeyConstraint("id"),
  )
  op.create_index(op.f("ix_subscriptions_user_id"), "subscriptions", ["user_id"], unique=False)

  op.create_table(
    "temporary_scholar_access",
    sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
    sa.Column("user_id", sa.String(), nullable=False),
    sa.Column("is_active", sa.Boolean(), nullable=False),
    sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    sa.Column("points_spent", sa.Integer(), nullable=False),
    sa.Column("access_duration_hours", sa.Integer(), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.PrimaryKeyConstraint("id"),
  )
  op.create_index(op.f("ix_temporary_scholar_access_user_id"), "temporary_scholar_access", ["user_id"], unique=False)


def downgrade() -> None:
  """Downgrade schema."""
  op.drop_index(op.f("ix_temporary_scholar_access_user_id"), table_name="temporary_scholar_access")
  op.drop_table("temporary_scholar_access")
  op.drop_index(op.f("ix_subscriptions_user_id"), table_name="subscriptions")
  op.drop_table("subscriptions")
  op.drop_index(op.f("ix_lecture_recordings_user_id"), table_name="lecture_recordings")
  op.drop_table("lecture_recordings")
  op.drop_index(op.f("ix_study_documents_user_id"), table_name="study_documents")
  op.drop_table("study_documents")
  op.drop_index("ix_study_jobs_user_kind_operation", table_name="study_jobs")
  op.drop_index("ix_study_jobs_user_kind_status", table_name="study_jobs")
  op.drop_index(op.f("ix_study_jobs_user_id"), table_name="study_jobs")
  op.drop_table("study_jobs")
