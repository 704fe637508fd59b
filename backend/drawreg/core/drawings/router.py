import uuid
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from drawreg.core.audit import service as audit_service
from drawreg.core.audit.schemas import AccessLogRead
from drawreg.core.audit.service import AuditContext
from drawreg.core.drawings import approval, register, service
from drawreg.core.drawings.enums import DrawingDiscipline, DrawingStatus, DrawingType
from drawreg.core.drawings.schemas import (
    DrawingCreate, DrawingRead, DrawingRegisterRow, DrawingStatistics,
    RevisionCreate, RevisionRead, StatusUpdate,
)
from drawreg.core.errors import NotFoundError
from drawreg.dependencies import get_actor, get_audit_ctx, get_db

router = APIRouter(tags=["drawings"])


@router.post("/projects/{project_id}/drawings", response_model=DrawingRead, status_code=201)
async def create_drawing(
    project_id: uuid.UUID,
    data: DrawingCreate,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    ctx: AuditContext = Depends(get_audit_ctx),
):
    return await service.create_drawing(db, project_id, data, actor=actor, ctx=ctx)


@router.get("/projects/{project_id}/drawings", response_model=list[DrawingRead])
async def list_drawings(
    project_id: uuid.UUID,
    status: DrawingStatus | None = Query(None),
    discipline: DrawingDiscipline | None = Query(None),
    type: DrawingType | None = Query(None),
    current_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    return await service.list_drawings(
        db, project_id,
        status=status,
        discipline=discipline,
        type=type,
        current_only=current_only,
    )


@router.get("/projects/{project_id}/drawings/search", response_model=list[DrawingRead])
async def search_drawings(
    project_id: uuid.UUID,
    q: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    return await service.search_drawings(db, project_id, q)


@router.get("/projects/{project_id}/drawing-register", response_model=list[DrawingRegisterRow])
async def drawing_register(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    return await register.get_drawing_register(db, project_id)


@router.get("/projects/{project_id}/drawing-statistics", response_model=DrawingStatistics)
async def drawing_statistics(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    return await register.get_statistics(db, project_id)


@router.get("/drawings/{drawing_id}", response_model=DrawingRead)
async def get_drawing(
    drawing_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    drawing = await service.get_drawing(db, drawing_id)
    if not drawing:
        raise NotFoundError("Drawing not found", drawing_id=str(drawing_id))
    return drawing


@router.delete("/drawings/{drawing_id}", response_model=DrawingRead)
async def delete_drawing(
    drawing_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    ctx: AuditContext = Depends(get_audit_ctx),
):
    return await service.delete_drawing(db, drawing_id, actor, ctx)


@router.patch("/drawings/{drawing_id}/status", response_model=DrawingRead)
async def update_status(
    drawing_id: uuid.UUID,
    data: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    ctx: AuditContext = Depends(get_audit_ctx),
):
    return await approval.update_status(db, drawing_id, data.status, actor, ctx)


@router.post("/drawings/{drawing_id}/revisions", response_model=DrawingRead, status_code=201)
async def create_revision(
    drawing_id: uuid.UUID,
    data: RevisionCreate,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    ctx: AuditContext = Depends(get_audit_ctx),
):
    return await service.create_new_revision(db, drawing_id, data, actor=actor, ctx=ctx)


@router.get("/drawings/{drawing_id}/revisions", response_model=list[RevisionRead])
async def list_revisions(
    drawing_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    return await service.list_revisions(db, drawing_id)


@router.get("/drawings/{drawing_id}/lineage", response_model=list[DrawingRead])
async def get_lineage(
    drawing_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    return await service.get_lineage(db, drawing_id)


@router.get("/drawings/{drawing_id}/access-log", response_model=list[AccessLogRead])
async def access_log(
    drawing_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    await service.require_drawing(db, drawing_id)
    return await audit_service.list_access_log(db, drawing_id)
