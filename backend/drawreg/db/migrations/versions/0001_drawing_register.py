"""Drawing register: drawings, revision ledger, transmittals, comments, access log

Revision ID: 0001_drawing_register
Revises:
Create Date: 2026-10-19 00:00:00
"""
from typing import Sequence, Union
import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "0001_drawing_register"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    ]


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )

    op.create_table(
        "number_sequences",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("scope", sa.String(50), nullable=False),
        sa.Column("last_seq", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("project_id", "scope", name="uq_number_sequence_project_scope"),
    )

    op.create_table(
        "drawings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("drawing_number", sa.String(100), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("type", sa.String(50), nullable=False, server_default="other"),
        sa.Column("discipline", sa.String(10), nullable=False, server_default="G"),
        sa.Column("status", sa.String(50), nullable=False, server_default="draft"),
        sa.Column("revision", sa.String(10), nullable=False, server_default="A"),
        sa.Column("revision_date", sa.Date, nullable=False),
        sa.Column("scale", sa.String(50), nullable=True),
        sa.Column("paper_size", sa.String(10), nullable=True),
        sa.Column("file_path", sa.Text, nullable=False),
        sa.Column("file_size", sa.Integer, nullable=True),
        sa.Column("file_type", sa.String(50), nullable=True),
        sa.Column("cad_file_path", sa.Text, nullable=True),
        sa.Column("pdf_file_path", sa.Text, nullable=True),
        sa.Column("drawn_by", sa.String(255), nullable=False),
        sa.Column("checked_by", sa.String(255), nullable=True),
        sa.Column("approved_by", sa.String(255), nullable=True),
        sa.Column("issued_for", sa.String(255), nullable=True),
        sa.Column("issue_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("current_version", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("superseded_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("supersedes", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("sheet_number", sa.String(20), nullable=True),
        sa.Column("total_sheets", sa.Integer, nullable=True),
        sa.Column("grid_reference", sa.String(50), nullable=True),
        sa.Column("north_point", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("key_plan", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("tags", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("metadata", postgresql.JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        *_timestamps(),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["superseded_by"], ["drawings.id"]),
        sa.ForeignKeyConstraint(["supersedes"], ["drawings.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("project_id", "drawing_number", "revision", name="uq_drawing_number_revision"),
    )
    op.create_index("ix_drawings_project_id", "drawings", ["project_id"])
    op.create_index("ix_drawings_status", "drawings", ["status"])
    op.create_index("ix_drawings_discipline", "drawings", ["discipline"])
    op.create_index(
        "uq_drawings_one_current", "drawings", ["project_id", "drawing_number"],
        unique=True, postgresql_where=sa.text("current_version"),
    )
    op.create_index("ix_drawings_tags", "drawings", ["tags"], postgresql_using="gin")

    op.create_table(
        "drawing_revisions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("drawing_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("revision", sa.String(10), nullable=False),
        sa.Column("revision_date", sa.Date, nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("revised_by", sa.String(255), nullable=False),
        sa.Column("approved_by", sa.String(255), nullable=True),
        sa.Column("file_path", sa.Text, nullable=False),
        sa.Column("changes_summary", sa.Text, nullable=True),
        sa.Column("cloud_marks", postgresql.JSONB, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["drawing_id"], ["drawings.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("drawing_id", "revision", name="uq_drawing_revision_label"),
    )
    op.create_index("ix_drawing_revisions_drawing_id", "drawing_revisions", ["drawing_id"])

    op.create_table(
        "drawing_transmittals",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("transmittal_number", sa.String(50), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("recipient_company", sa.String(255), nullable=False),
        sa.Column("recipient_name", sa.String(255), nullable=False),
        sa.Column("recipient_email", sa.String(255), nullable=True),
        sa.Column("sender_name", sa.String(255), nullable=False),
        sa.Column("transmitted_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("purpose", sa.Text, nullable=True),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("acknowledgement_required", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("acknowledged", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("acknowledged_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("acknowledged_by", sa.String(255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("transmittal_number"),
    )
    op.create_index("ix_drawing_transmittals_project_id", "drawing_transmittals", ["project_id"])

    op.create_table(
        "drawing_transmittal_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("transmittal_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("drawing_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("revision", sa.String(10), nullable=True),
        sa.Column("copies", sa.Integer, nullable=False, server_default="1"),
        sa.Column("format", sa.String(50), nullable=False, server_default="PDF"),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["transmittal_id"], ["drawing_transmittals.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["drawing_id"], ["drawings.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("transmittal_id", "drawing_id", name="uq_transmittal_item_drawing"),
    )
    op.create_index("ix_drawing_transmittal_items_transmittal_id", "drawing_transmittal_items", ["transmittal_id"])
    op.create_index("ix_drawing_transmittal_items_drawing_id", "drawing_transmittal_items", ["drawing_id"])

    op.create_table(
        "drawing_comments",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("drawing_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("comment", sa.Text, nullable=False),
        sa.Column("x_coordinate", sa.Numeric(10, 2), nullable=True),
        sa.Column("y_coordinate", sa.Numeric(10, 2), nullable=True),
        sa.Column("markup_data", postgresql.JSONB, nullable=True),
        sa.Column("parent_comment_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("resolved", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("resolved_by", sa.String(255), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["drawing_id"], ["drawings.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_comment_id"], ["drawing_comments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_drawing_comments_drawing_id", "drawing_comments", ["drawing_id"])
    op.create_index("ix_drawing_comments_parent_comment_id", "drawing_comments", ["parent_comment_id"])

    op.create_table(
        "drawing_access_log",
        sa.Column("id", sa.BigInteger, autoincrement=True, nullable=False),
        sa.Column("drawing_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("actor", sa.String(255), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.Text, nullable=True),
        sa.Column("accessed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["drawing_id"], ["drawings.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_drawing_access_log_drawing_accessed", "drawing_access_log", ["drawing_id", "accessed_at"])


def downgrade() -> None:
    op.drop_table("drawing_access_log")
    op.drop_table("drawing_comments")
    op.drop_table("drawing_transmittal_items")
    op.drop_table("drawing_transmittals")
    op.drop_table("drawing_revisions")
    op.drop_table("drawings")
    op.drop_table("number_sequences")
    op.drop_table("projects")
