"""
Supersession linker.

The only code that writes Drawing.supersedes / Drawing.superseded_by. A
lineage is a linked list: each row points back to the row it replaced and
forward to the row that replaced it, and exactly one row is current.
"""
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from drawreg.core.drawings.enums import DrawingStatus
from drawreg.core.drawings.models import Drawing
from drawreg.core.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


async def get_lineage(db: AsyncSession, drawing_id: uuid.UUID) -> list[Drawing]:
    """All rows of the lineage containing drawing_id, oldest first."""
    start = await db.get(Drawing, drawing_id)
    if not start:
        raise NotFoundError("Drawing not found", drawing_id=str(drawing_id))

    seen = {start.id}
    older: list[Drawing] = []
    node = start
    while node.supersedes and node.supersedes not in seen:
        node = await db.get(Drawing, node.supersedes)
        if node is None:
            break
        seen.add(node.id)
        older.append(node)

    newer: list[Drawing] = []
    node = start
    while node.superseded_by and node.superseded_by not in seen:
        node = await db.get(Drawing, node.superseded_by)
        if node is None:
            break
        seen.add(node.id)
        newer.append(node)

    return list(reversed(older)) + [start] + newer


async def supersede(db: AsyncSession, current: Drawing, successor: Drawing) -> Drawing:
    """
    Replace `current` with the unsaved `successor` and link both directions.
    `current` must be the lineage's current row and should be locked by the caller.
    """
    if not current.current_version or current.superseded_by is not None:
        raise ConflictError(
            f"Drawing {current.drawing_number} rev {current.revision} is not the current version",
            drawing_id=str(current.id),
        )

    # The store allows one current row per drawing number, so retire first.
    current.current_version = False
    await db.flush()

    successor.current_version = True
    successor.supersedes = current.id
    db.add(successor)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError(
            f"Drawing {current.drawing_number} was revised concurrently",
            drawing_id=str(current.id),
        ) from exc

    current.superseded_by = successor.id
    current.status = DrawingStatus.SUPERSEDED.value
    await db.flush()

    logger.info(
        "%s rev %s superseded by rev %s (%s)",
        current.drawing_number, current.revision, successor.revision, successor.id,
    )
    return successor
