import logging
import uuid
from sqlalchemy import Select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from drawreg.core.numbering.models import NumberSequence
from drawreg.db.base import utcnow
from drawreg.db.session import dialect_name

logger = logging.getLogger(__name__)

TRANSMITTAL_SCOPE = "transmittal"

_UPSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def drawing_scope(discipline: str) -> str:
    return f"drawing:{discipline}"


def format_drawing_number(project_code: str, discipline: str, drawing_type: str, ordinal: int) -> str:
    """
    Format: {PROJECT}-{DISCIPLINE}-{TYPE}-{####}
    PROJ01-A-ARC-0001, PROJ01-S-STR-0012
    """
    return f"{project_code.upper()}-{discipline}-{drawing_type[:3].upper()}-{ordinal:04d}"


def format_transmittal_number(project_code: str, ordinal: int) -> str:
    return f"T-{project_code.upper()}-{ordinal:04d}"


async def next_ordinal(
    db: AsyncSession,
    project_id: uuid.UUID,
    scope: str,
    existing_count: Select,
) -> int:
    """
    Atomically allocate the next ordinal for (project_id, scope).

    A single INSERT ... ON CONFLICT DO UPDATE ... RETURNING, so concurrent
    transactions queue on the counter row instead of reading the same count.
    The first allocation for a key is seeded from `existing_count` (a scalar
    COUNT select) so rows created before the counter existed are not reused.
    """
    dialect = dialect_name(db)
    upsert = _UPSERTS.get(dialect)
    if upsert is None:
        raise RuntimeError(f"Numbering requires PostgreSQL or SQLite, not {dialect}")

    table = NumberSequence.__table__
    now = utcnow()
    stmt = (
        upsert(table)
        .values(
            project_id=project_id,
            scope=scope,
            last_seq=existing_count.scalar_subquery() + 1,
        )
        .on_conflict_do_update(
            index_elements=[table.c.project_id, table.c.scope],
            set_={"last_seq": table.c.last_seq + 1, "updated_at": now},
        )
        .returning(table.c.last_seq)
    )
    result = await db.execute(stmt)
    ordinal = result.scalar_one()
    logger.debug("Allocated %s #%d for project %s", scope, ordinal, project_id)
    return ordinal
