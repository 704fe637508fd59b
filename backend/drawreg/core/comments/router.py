import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from drawreg.core.comments import service
from drawreg.core.comments.schemas import CommentCreate, CommentRead
from drawreg.dependencies import get_actor, get_db

router = APIRouter(tags=["comments"])


@router.post("/drawings/{drawing_id}/comments", response_model=CommentRead, status_code=201)
async def add_comment(
    drawing_id: uuid.UUID,
    data: CommentCreate,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
):
    return await service.add_comment(db, drawing_id, actor, data)


@router.get("/drawings/{drawing_id}/comments", response_model=list[CommentRead])
async def list_comments(
    drawing_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    return await service.list_comments(db, drawing_id)


@router.get("/comments/{comment_id}/replies", response_model=list[CommentRead])
async def list_replies(
    comment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    return await service.list_replies(db, comment_id)


@router.post("/comments/{comment_id}/resolve", response_model=CommentRead)
async def resolve_comment(
    comment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
):
    return await service.resolve_comment(db, comment_id, actor)


@router.post("/comments/{comment_id}/unresolve", response_model=CommentRead)
async def unresolve_comment(
    comment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    return await service.unresolve_comment(db, comment_id)
