"""
Project-level views over the drawing register: per-drawing counts for the
register sheet and the status totals shown on the project dashboard.
"""
import uuid
from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from drawreg.core.comments.models import DrawingComment
from drawreg.core.drawings.enums import DrawingStatus
from drawreg.core.drawings.models import Drawing, DrawingRevision
from drawreg.core.drawings.schemas import DrawingRead, DrawingRegisterRow, DrawingStatistics
from drawreg.core.transmittals.models import Transmittal, TransmittalItem


async def get_drawing_register(db: AsyncSession, project_id: uuid.UUID) -> list[DrawingRegisterRow]:
    revision_count = (
        select(func.count(DrawingRevision.id))
        .where(DrawingRevision.drawing_id == Drawing.id)
        .scalar_subquery()
    )
    open_comments = (
        select(func.count(DrawingComment.id))
        .where(DrawingComment.drawing_id == Drawing.id, DrawingComment.resolved == False)
        .scalar_subquery()
    )
    transmittal_count = (
        select(func.count(TransmittalItem.id))
        .where(TransmittalItem.drawing_id == Drawing.id)
        .scalar_subquery()
    )
    result = await db.execute(
        select(
            Drawing,
            revision_count.label("revision_count"),
            open_comments.label("open_comments"),
            transmittal_count.label("transmittal_count"),
        )
        .where(Drawing.project_id == project_id)
        .order_by(Drawing.discipline, Drawing.drawing_number, Drawing.revision)
    )
    return [
        DrawingRegisterRow(
            **DrawingRead.model_validate(drawing).model_dump(),
            revision_count=revisions,
            open_comments=comments,
            transmittal_count=transmittals,
        )
        for drawing, revisions, comments, transmittals in result.all()
    ]


async def get_statistics(db: AsyncSession, project_id: uuid.UUID) -> DrawingStatistics:
    per_status = {
        f"{status.value}_count": func.count(Drawing.id).filter(Drawing.status == status.value)
        for status in DrawingStatus
    }
    result = await db.execute(
        select(
            func.count(Drawing.id).label("total_drawings"),
            func.count(Drawing.id).filter(Drawing.current_version == True).label("current_drawings"),
            func.count(distinct(Drawing.discipline)).label("disciplines_count"),
            *(expr.label(name) for name, expr in per_status.items()),
        ).where(Drawing.project_id == project_id)
    )
    totals = dict(result.one()._mapping)

    total_revisions = await db.scalar(
        select(func.count(DrawingRevision.id))
        .join(Drawing, DrawingRevision.drawing_id == Drawing.id)
        .where(Drawing.project_id == project_id)
    )
    total_transmittals = await db.scalar(
        select(func.count(Transmittal.id)).where(Transmittal.project_id == project_id)
    )
    open_comments = await db.scalar(
        select(func.count(DrawingComment.id))
        .join(Drawing, DrawingComment.drawing_id == Drawing.id)
        .where(Drawing.project_id == project_id, DrawingComment.resolved == False)
    )
    return DrawingStatistics(
        **totals,
        total_revisions=total_revisions or 0,
        total_transmittals=total_transmittals or 0,
        open_comments=open_comments or 0,
    )
