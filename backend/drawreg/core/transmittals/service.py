import logging
import uuid
from typing import Any
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from drawreg.core.audit.service import AuditContext, log_access
from drawreg.core.drawings.service import require_drawing
from drawreg.core.errors import NotFoundError, ValidationError, parse_payload
from drawreg.core.numbering.service import TRANSMITTAL_SCOPE, format_transmittal_number, next_ordinal
from drawreg.core.projects.service import require_project
from drawreg.core.transmittals.models import Transmittal, TransmittalItem
from drawreg.core.transmittals.schemas import TransmittalCreate
from drawreg.db.base import utcnow

logger = logging.getLogger(__name__)

DEFAULT_COPIES = 1
DEFAULT_FORMAT = "PDF"


async def get_transmittal(db: AsyncSession, transmittal_id: uuid.UUID) -> Transmittal | None:
    result = await db.execute(
        select(Transmittal)
        .where(Transmittal.id == transmittal_id)
        .options(selectinload(Transmittal.items))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_transmittal(
    db: AsyncSession,
    project_id: uuid.UUID,
    data: TransmittalCreate | dict[str, Any],
    actor: str | None = None,
    ctx: AuditContext | None = None,
) -> Transmittal:
    """
    Number the transmittal, insert it, then one item per drawing.
    Any failure (e.g. an unknown drawing id) aborts the caller's transaction,
    so no transmittal is left without its drawings.
    """
    data = parse_payload(TransmittalCreate, data)
    project = await require_project(db, project_id)
    drawing_ids = list(dict.fromkeys(data.drawings))

    existing = select(func.count(Transmittal.id)).where(Transmittal.project_id == project.id)
    ordinal = await next_ordinal(db, project.id, TRANSMITTAL_SCOPE, existing)

    transmittal = Transmittal(
        project_id=project.id,
        transmittal_number=format_transmittal_number(project.code, ordinal),
        **data.model_dump(exclude={"drawings"}),
    )
    db.add(transmittal)
    await db.flush()

    sender = actor or data.sender_name
    for drawing_id in drawing_ids:
        drawing = await require_drawing(db, drawing_id)
        if drawing.project_id != project.id:
            raise ValidationError(
                f"Drawing {drawing.drawing_number} belongs to another project",
                drawing_id=str(drawing_id),
            )
        db.add(TransmittalItem(
            transmittal_id=transmittal.id,
            drawing_id=drawing.id,
            revision=drawing.revision,
            copies=DEFAULT_COPIES,
            format=DEFAULT_FORMAT,
        ))
        await db.flush()
        await log_access(db, drawing.id, sender, "transmitted", ctx)

    logger.info("Transmittal %s created with %d drawing(s)", transmittal.transmittal_number, len(drawing_ids))
    return await get_transmittal(db, transmittal.id)


async def acknowledge_transmittal(db: AsyncSession, transmittal_id: uuid.UUID, actor: str) -> Transmittal:
    result = await db.execute(
        select(Transmittal)
        .where(Transmittal.id == transmittal_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    transmittal = result.scalar_one_or_none()
    if not transmittal:
        raise NotFoundError("Transmittal not found", transmittal_id=str(transmittal_id))

    # Write-once: a repeated acknowledgement keeps the original actor and time
    if not transmittal.acknowledged:
        transmittal.acknowledged = True
        transmittal.acknowledged_date = utcnow()
        transmittal.acknowledged_by = actor
        await db.flush()
        logger.info("Transmittal %s acknowledged by %s", transmittal.transmittal_number, actor)

    return await get_transmittal(db, transmittal.id)


async def list_transmittals(db: AsyncSession, project_id: uuid.UUID) -> list[Transmittal]:
    result = await db.execute(
        select(Transmittal)
        .where(Transmittal.project_id == project_id)
        .options(selectinload(Transmittal.items))
        .order_by(Transmittal.transmitted_date.desc(), Transmittal.created_at.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
