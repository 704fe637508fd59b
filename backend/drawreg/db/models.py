"""Imports every mapped class so Base.metadata is complete (Alembic, create_all)."""
from sqlalchemy.ext.asyncio import AsyncEngine

from drawreg.db.base import Base
from drawreg.core.projects.models import Project  # noqa
from drawreg.core.numbering.models import NumberSequence  # noqa
from drawreg.core.drawings.models import Drawing, DrawingRevision  # noqa
from drawreg.core.transmittals.models import Transmittal, TransmittalItem  # noqa
from drawreg.core.comments.models import DrawingComment  # noqa
from drawreg.core.audit.models import AccessLogEntry  # noqa


async def create_all(engine: AsyncEngine) -> None:
    """Local development and tests only; deployed databases are migrated with Alembic."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
