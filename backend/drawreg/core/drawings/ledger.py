"""
Revision ledger: append-only history of every revision issued in a lineage.

Rows are written once and never updated or deleted. A (drawing_id, revision)
pair can only be recorded once.
"""
import uuid
from datetime import date
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from drawreg.core.drawings.models import DrawingRevision
from drawreg.core.errors import ConflictError


async def record_revision(
    db: AsyncSession,
    drawing_id: uuid.UUID,
    *,
    revision: str,
    revision_date: date,
    description: str,
    revised_by: str,
    file_path: str,
    approved_by: str | None = None,
    changes_summary: str | None = None,
    cloud_marks: dict[str, Any] | None = None,
) -> DrawingRevision:
    result = await db.execute(
        select(DrawingRevision.id).where(
            DrawingRevision.drawing_id == drawing_id,
            DrawingRevision.revision == revision,
        )
    )
    if result.scalar_one_or_none():
        raise ConflictError(
            f"Revision {revision} is already recorded for this drawing",
            drawing_id=str(drawing_id), revision=revision,
        )

    entry = DrawingRevision(
        drawing_id=drawing_id,
        revision=revision,
        revision_date=revision_date,
        description=description,
        revised_by=revised_by,
        approved_by=approved_by,
        file_path=file_path,
        changes_summary=changes_summary,
        cloud_marks=cloud_marks,
    )
    db.add(entry)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError(
            f"Revision {revision} is already recorded for this drawing",
            drawing_id=str(drawing_id), revision=revision,
        ) from exc
    return entry


async def revisions_for(db: AsyncSession, drawing_ids: Iterable[uuid.UUID]) -> list[DrawingRevision]:
    ids = list(drawing_ids)
    if not ids:
        return []
    result = await db.execute(
        select(DrawingRevision)
        .where(DrawingRevision.drawing_id.in_(ids))
        .order_by(
            DrawingRevision.revision_date.desc(),
            DrawingRevision.revision.desc(),
            DrawingRevision.created_at.desc(),
        )
    )
    return list(result.scalars().all())
