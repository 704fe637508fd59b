"""
Approval state machine for Drawing.status.

draft → for_review → for_approval → approved → for_construction → as_built,
plus superseded (assigned only by the supersession linker) and obsolete
(terminal, also reached through delete).

The transition rules and side effects live in transitions.py so drawing
creation applies the same ones.
"""
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from drawreg.core.audit.service import AuditContext, log_access
from drawreg.core.drawings.enums import DrawingStatus, coerce_enum
from drawreg.core.drawings.models import Drawing
from drawreg.core.drawings.service import require_drawing
from drawreg.core.drawings.transitions import (  # noqa: F401
    ISSUED_FOR_CONSTRUCTION, MANUAL_STATUSES, STATUS_SIDE_EFFECTS, apply_status, require_manual_status,
)
from drawreg.db.base import utcnow


def status_action(status: DrawingStatus) -> str:
    return f"status_changed_to_{status.value}"


async def update_status(
    db: AsyncSession,
    drawing_id: uuid.UUID,
    status: DrawingStatus | str,
    actor: str,
    ctx: AuditContext | None = None,
) -> Drawing:
    target = require_manual_status(coerce_enum(DrawingStatus, status, "status"))

    drawing = await require_drawing(db, drawing_id, lock=True)
    apply_status(drawing, target, actor, utcnow())
    await db.flush()

    await log_access(db, drawing.id, actor, status_action(target), ctx)
    await db.refresh(drawing)
    return drawing
