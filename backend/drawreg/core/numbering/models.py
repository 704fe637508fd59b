import uuid
from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from drawreg.db.base import Base, TimestampMixin


class NumberSequence(Base, TimestampMixin):
    """
    Per-(project, scope) counter behind generated numbers.
    scope: "drawing:<discipline>" | "transmittal"
    """
    __tablename__ = "number_sequences"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    scope: Mapped[str] = mapped_column(String(50), nullable=False)
    last_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    __table_args__ = (UniqueConstraint("project_id", "scope", name="uq_number_sequence_project_scope"),)
