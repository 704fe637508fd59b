import uuid
from datetime import datetime
from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from drawreg.db.base import Base, JSONType, TimestampMixin


class DrawingComment(Base, TimestampMixin):
    """
    Review comment on a drawing, optionally anchored at (x, y) on the sheet.
    Replies point at their parent through parent_comment_id.
    """
    __tablename__ = "drawing_comments"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    drawing_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("drawings.id", ondelete="CASCADE"), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    x_coordinate: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    y_coordinate: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    markup_data: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    parent_comment_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("drawing_comments.id"), nullable=True, index=True)
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    resolved_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
