import logging
import uuid
from typing import Any

from sqlalchemy import distinct, func, or_, select, type_coerce
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from drawreg.core.audit.service import AuditContext, log_access
from drawreg.core.drawings.enums import (
    DrawingDiscipline, DrawingStatus, DrawingType, coerce_enum,
)
from drawreg.core.drawings.ledger import record_revision, revisions_for
from drawreg.core.drawings.models import Drawing, DrawingRevision
from drawreg.core.drawings.schemas import DrawingCreate, RevisionCreate
from drawreg.core.drawings.supersession import get_lineage, supersede
from drawreg.core.drawings.transitions import apply_status, require_manual_status
from drawreg.core.errors import ConflictError, NotFoundError, ValidationError, parse_payload
from drawreg.core.numbering.service import drawing_scope, format_drawing_number, next_ordinal
from drawreg.core.projects.models import Project
from drawreg.core.projects.service import require_project
from drawreg.db.base import utcnow
from drawreg.db.session import dialect_name

logger = logging.getLogger(__name__)

INITIAL_ISSUE = "Initial issue"

# Carried from a drawing row to the row that supersedes it.
DESCRIPTIVE_FIELDS = (
    "drawing_number", "project_id", "title", "description", "type", "discipline",
    "scale", "paper_size", "drawn_by", "sheet_number", "total_sheets",
    "grid_reference", "north_point", "key_plan",
)


# ── Lookups ───────────────────────────────────────────────────────────────────

async def get_drawing(db: AsyncSession, drawing_id: uuid.UUID) -> Drawing | None:
    result = await db.execute(select(Drawing).where(Drawing.id == drawing_id))
    return result.scalar_one_or_none()


async def require_drawing(db: AsyncSession, drawing_id: uuid.UUID, lock: bool = False) -> Drawing:
    """Row-level lock when `lock` is set, for state changes."""
    q = select(Drawing).where(Drawing.id == drawing_id)
    if lock:
        q = q.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(q)
    drawing = result.scalar_one_or_none()
    if not drawing:
        raise NotFoundError("Drawing not found", drawing_id=str(drawing_id))
    return drawing


async def _number_taken(db: AsyncSession, project_id: uuid.UUID, drawing_number: str) -> bool:
    result = await db.execute(
        select(Drawing.id).where(
            Drawing.project_id == project_id,
            Drawing.drawing_number == drawing_number,
        ).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def _assert_number_free(db: AsyncSession, project_id: uuid.UUID, drawing_number: str) -> None:
    if await _number_taken(db, project_id, drawing_number):
        raise ConflictError(f"Drawing number {drawing_number} already exists", drawing_number=drawing_number)


async def _allocate_number(db: AsyncSession, project: Project, discipline: str, drawing_type: str) -> str:
    """
    Next free generated number for (project, discipline). Ordinals already
    used by imported numbers are skipped; the counter advances past them in
    the same transaction.
    """
    existing = select(func.count(distinct(Drawing.drawing_number))).where(
        Drawing.project_id == project.id,
        Drawing.discipline == discipline,
    )
    while True:
        ordinal = await next_ordinal(db, project.id, drawing_scope(discipline), existing)
        drawing_number = format_drawing_number(project.code, discipline, drawing_type, ordinal)
        if not await _number_taken(db, project.id, drawing_number):
            return drawing_number
        logger.info("Skipping %s, already registered", drawing_number)


# ── Registry ──────────────────────────────────────────────────────────────────

async def create_drawing(
    db: AsyncSession,
    project_id: uuid.UUID | None,
    data: DrawingCreate | dict[str, Any],
    actor: str | None = None,
    ctx: AuditContext | None = None,
) -> Drawing:
    if project_id is None:
        raise ValidationError("project_id is required", field="project_id")
    data = parse_payload(DrawingCreate, data)
    project = await require_project(db, project_id)

    status = require_manual_status(data.status)

    discipline = data.discipline.value
    drawing_number = data.drawing_number
    if drawing_number:
        await _assert_number_free(db, project.id, drawing_number)
    else:
        drawing_number = await _allocate_number(db, project, discipline, data.type.value)

    fields = data.model_dump(exclude={"drawing_number", "metadata", "revision_date", "type", "discipline", "status"})
    drawing = Drawing(
        **fields,
        project_id=project.id,
        drawing_number=drawing_number,
        type=data.type.value,
        discipline=discipline,
        revision_date=data.revision_date or utcnow().date(),
        current_version=True,
        extra=data.metadata,
    )
    apply_status(drawing, status, data.approved_by or actor or data.drawn_by, data.issue_date or utcnow())
    db.add(drawing)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError(f"Drawing number {drawing_number} already exists", drawing_number=drawing_number) from exc

    await record_revision(
        db, drawing.id,
        revision=drawing.revision,
        revision_date=drawing.revision_date,
        description=INITIAL_ISSUE,
        revised_by=data.drawn_by,
        approved_by=drawing.approved_by,
        file_path=data.file_path,
    )
    await log_access(db, drawing.id, actor or data.drawn_by, "created", ctx)
    await db.refresh(drawing)
    return drawing


async def list_drawings(
    db: AsyncSession,
    project_id: uuid.UUID,
    status: DrawingStatus | str | None = None,
    discipline: DrawingDiscipline | str | None = None,
    type: DrawingType | str | None = None,
    current_only: bool = False,
) -> list[Drawing]:
    """Drawing register order: discipline, drawing number, newest revision first."""
    q = select(Drawing).where(Drawing.project_id == project_id)
    if status:
        q = q.where(Drawing.status == coerce_enum(DrawingStatus, status, "status").value)
    if discipline:
        q = q.where(Drawing.discipline == coerce_enum(DrawingDiscipline, discipline, "discipline").value)
    if type:
        q = q.where(Drawing.type == coerce_enum(DrawingType, type, "type").value)
    if current_only:
        q = q.where(Drawing.current_version == True)
    q = q.order_by(Drawing.discipline, Drawing.drawing_number, Drawing.revision.desc())
    result = await db.execute(q)
    return list(result.scalars().all())


def _tag_match(dialect: str, term: str):
    if dialect == "postgresql":
        return type_coerce(Drawing.tags, JSONB).contains([term])
    tags = func.json_each(Drawing.tags).table_valued("value")
    return select(tags.c.value).where(tags.c.value == term).exists()


async def search_drawings(db: AsyncSession, project_id: uuid.UUID, term: str) -> list[Drawing]:
    term = term.strip()
    if not term:
        return []
    q = select(Drawing).where(
        Drawing.project_id == project_id,
        or_(
            Drawing.drawing_number.icontains(term, autoescape=True),
            Drawing.title.icontains(term, autoescape=True),
            Drawing.description.icontains(term, autoescape=True),
            _tag_match(dialect_name(db), term),
        ),
    )
    q = q.order_by(Drawing.current_version.desc(), Drawing.drawing_number, Drawing.revision.desc())
    result = await db.execute(q)
    return list(result.scalars().all())


async def delete_drawing(
    db: AsyncSession,
    drawing_id: uuid.UUID,
    actor: str,
    ctx: AuditContext | None = None,
) -> Drawing:
    """Soft delete. The row stays so audit and transmittal references remain valid."""
    drawing = await require_drawing(db, drawing_id, lock=True)
    drawing.status = DrawingStatus.OBSOLETE.value
    await db.flush()
    await log_access(db, drawing.id, actor, "deleted", ctx)
    await db.refresh(drawing)
    return drawing


# ── Revisions ─────────────────────────────────────────────────────────────────

async def create_new_revision(
    db: AsyncSession,
    drawing_id: uuid.UUID,
    data: RevisionCreate | dict[str, Any],
    actor: str | None = None,
    ctx: AuditContext | None = None,
) -> Drawing:
    """
    Reissue the current drawing as a new row carrying the new revision.

    The old row keeps its id (so transmittals against it stay valid), loses
    current_version and is linked to the new row both ways. Returns the new
    current row.
    """
    data = parse_payload(RevisionCreate, data)
    current = await require_drawing(db, drawing_id, lock=True)
    if not current.current_version:
        raise ConflictError(
            f"Only the current version of {current.drawing_number} can be revised",
            drawing_id=str(drawing_id), superseded_by=str(current.superseded_by),
        )

    lineage = await get_lineage(db, current.id)
    labels = {d.revision for d in lineage}
    labels.update(r.revision for r in await revisions_for(db, [d.id for d in lineage]))
    if data.revision in labels:
        raise ConflictError(
            f"Revision {data.revision} already exists for {current.drawing_number}",
            drawing_id=str(drawing_id), revision=data.revision,
        )

    today = utcnow().date()
    successor = Drawing(
        **{f: getattr(current, f) for f in DESCRIPTIVE_FIELDS},
        status=DrawingStatus.DRAFT.value,
        revision=data.revision,
        revision_date=today,
        file_path=data.file_path,
        file_type=current.file_type,
        tags=list(current.tags or []),
        extra=dict(current.extra or {}),
    )
    await supersede(db, current, successor)

    await record_revision(
        db, successor.id,
        revision=data.revision,
        revision_date=today,
        description=data.description,
        revised_by=data.revised_by,
        approved_by=data.approved_by,
        file_path=data.file_path,
        changes_summary=data.changes_summary,
        cloud_marks=data.cloud_marks,
    )
    actor = actor or data.revised_by
    await log_access(db, current.id, actor, "superseded", ctx)
    await log_access(db, successor.id, actor, "revised", ctx)
    await db.refresh(successor)
    return successor


async def list_revisions(db: AsyncSession, drawing_id: uuid.UUID) -> list[DrawingRevision]:
    """Ledger for the whole lineage containing drawing_id, newest first."""
    lineage = await get_lineage(db, drawing_id)
    return await revisions_for(db, [d.id for d in lineage])
