import uuid
from typing import Any
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from drawreg.core.comments.models import DrawingComment
from drawreg.core.comments.schemas import CommentCreate
from drawreg.core.drawings.service import require_drawing
from drawreg.core.errors import NotFoundError, ValidationError, parse_payload
from drawreg.db.base import utcnow


async def get_comment(db: AsyncSession, comment_id: uuid.UUID, lock: bool = False) -> DrawingComment:
    q = select(DrawingComment).where(DrawingComment.id == comment_id)
    if lock:
        q = q.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(q)
    comment = result.scalar_one_or_none()
    if not comment:
        raise NotFoundError("Comment not found", comment_id=str(comment_id))
    return comment


async def add_comment(
    db: AsyncSession,
    drawing_id: uuid.UUID,
    actor: str,
    data: CommentCreate | dict[str, Any],
) -> DrawingComment:
    data = parse_payload(CommentCreate, data)
    drawing = await require_drawing(db, drawing_id)

    if data.parent_comment_id:
        parent = await get_comment(db, data.parent_comment_id)
        if parent.drawing_id != drawing.id:
            raise ValidationError("Reply must be on the same drawing as its parent comment", field="parent_comment_id")

    comment = DrawingComment(
        drawing_id=drawing.id,
        author=actor,
        comment=data.comment,
        x_coordinate=data.coordinates.x if data.coordinates else None,
        y_coordinate=data.coordinates.y if data.coordinates else None,
        markup_data=data.markup_data or {},
        parent_comment_id=data.parent_comment_id,
    )
    db.add(comment)
    await db.flush()
    await db.refresh(comment)
    return comment


async def resolve_comment(db: AsyncSession, comment_id: uuid.UUID, actor: str) -> DrawingComment:
    comment = await get_comment(db, comment_id, lock=True)
    # Idempotent: the first resolver and time are kept
    if comment.resolved:
        return comment
    comment.resolved = True
    comment.resolved_by = actor
    comment.resolved_at = utcnow()
    await db.flush()
    await db.refresh(comment)
    return comment


async def unresolve_comment(db: AsyncSession, comment_id: uuid.UUID) -> DrawingComment:
    comment = await get_comment(db, comment_id, lock=True)
    if not comment.resolved:
        return comment
    comment.resolved = False
    comment.resolved_by = None
    comment.resolved_at = None
    await db.flush()
    await db.refresh(comment)
    return comment


async def list_comments(db: AsyncSession, drawing_id: uuid.UUID) -> list[DrawingComment]:
    """Top-level comments only, newest first."""
    await require_drawing(db, drawing_id)
    result = await db.execute(
        select(DrawingComment)
        .where(
            DrawingComment.drawing_id == drawing_id,
            DrawingComment.parent_comment_id.is_(None),
        )
        .order_by(DrawingComment.created_at.desc())
    )
    return list(result.scalars().all())


async def list_replies(db: AsyncSession, parent_comment_id: uuid.UUID) -> list[DrawingComment]:
    await get_comment(db, parent_comment_id)
    result = await db.execute(
        select(DrawingComment)
        .where(DrawingComment.parent_comment_id == parent_comment_id)
        .order_by(DrawingComment.created_at)
    )
    return list(result.scalars().all())
