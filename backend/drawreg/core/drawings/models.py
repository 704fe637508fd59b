import uuid
from datetime import date, datetime
from sqlalchemy import (
    Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid, text,
)
from sqlalchemy.orm import Mapped, mapped_column
from drawreg.db.base import Base, JSONType, TimestampMixin, utcnow


class Drawing(Base, TimestampMixin):
    """
    One row per issued version of a drawing lineage.
    status: draft | for_review | for_approval | approved | for_construction | as_built | superseded | obsolete
    Exactly one row per lineage has current_version = true; older rows are
    linked forward by superseded_by and the newer row points back by supersedes.
    Rows are never deleted; "delete" sets status = obsolete.
    """
    __tablename__ = "drawings"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    drawing_number: Mapped[str] = mapped_column(String(100), nullable=False)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="other")
    discipline: Mapped[str] = mapped_column(String(10), nullable=False, default="G", index=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="draft", index=True)
    revision: Mapped[str] = mapped_column(String(10), nullable=False, default="A")
    revision_date: Mapped[date] = mapped_column(Date, nullable=False)
    scale: Mapped[str | None] = mapped_column(String(50), nullable=True)
    paper_size: Mapped[str | None] = mapped_column(String(10), nullable=True)
    file_path: Mapped[str] = mapped_column(Text, nullable=False)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    file_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    cad_file_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    pdf_file_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    drawn_by: Mapped[str] = mapped_column(String(255), nullable=False)
    checked_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    issued_for: Mapped[str | None] = mapped_column(String(255), nullable=True)
    issue_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    current_version: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    superseded_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("drawings.id"), nullable=True)
    supersedes: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("drawings.id"), nullable=True)
    sheet_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    total_sheets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    grid_reference: Mapped[str | None] = mapped_column(String(50), nullable=True)
    north_point: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    key_plan: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tags: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    # "metadata" is reserved on declarative classes
    extra: Mapped[dict] = mapped_column("metadata", JSONType, nullable=False, default=dict)
    __table_args__ = (
        UniqueConstraint("project_id", "drawing_number", "revision", name="uq_drawing_number_revision"),
        Index(
            "uq_drawings_one_current",
            "project_id", "drawing_number",
            unique=True,
            postgresql_where=text("current_version"),
            sqlite_where=text("current_version = 1"),
        ),
        Index("ix_drawings_tags", "tags", postgresql_using="gin"),
    )


class DrawingRevision(Base):
    """
    Append-only revision ledger. Never updated or deleted.
    """
    __tablename__ = "drawing_revisions"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    drawing_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("drawings.id", ondelete="CASCADE"), nullable=False, index=True)
    revision: Mapped[str] = mapped_column(String(10), nullable=False)
    revision_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    revised_by: Mapped[str] = mapped_column(String(255), nullable=False)
    approved_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    file_path: Mapped[str] = mapped_column(Text, nullable=False)
    changes_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    cloud_marks: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    __table_args__ = (
        UniqueConstraint("drawing_id", "revision", name="uq_drawing_revision_label"),
    )
