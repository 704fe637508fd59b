import uuid
from datetime import datetime
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from drawreg.db.base import Base, TimestampMixin, utcnow


class Transmittal(Base, TimestampMixin):
    """
    Dated package of drawings sent to one external recipient.
    Acknowledgement fields are write-once.
    """
    __tablename__ = "drawing_transmittals"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    transmittal_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    recipient_company: Mapped[str] = mapped_column(String(255), nullable=False)
    recipient_name: Mapped[str] = mapped_column(String(255), nullable=False)
    recipient_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sender_name: Mapped[str] = mapped_column(String(255), nullable=False)
    transmitted_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    purpose: Mapped[str | None] = mapped_column(Text, nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    acknowledgement_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    acknowledged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    acknowledged_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    acknowledged_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    items: Mapped[list["TransmittalItem"]] = relationship(back_populates="transmittal", lazy="raise", order_by="TransmittalItem.created_at")

    @property
    def drawings(self) -> list[uuid.UUID]:
        return [item.drawing_id for item in self.items]


class TransmittalItem(Base):
    """One drawing row in a transmittal, with the revision it was issued at."""
    __tablename__ = "drawing_transmittal_items"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    transmittal_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("drawing_transmittals.id", ondelete="CASCADE"), nullable=False, index=True)
    drawing_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("drawings.id"), nullable=False, index=True)
    revision: Mapped[str | None] = mapped_column(String(10), nullable=True)
    copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    format: Mapped[str] = mapped_column(String(50), nullable=False, default="PDF")
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    transmittal: Mapped["Transmittal"] = relationship(back_populates="items")
    __table_args__ = (
        UniqueConstraint("transmittal_id", "drawing_id", name="uq_transmittal_item_drawing"),
    )
