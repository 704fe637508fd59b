import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from drawreg.core.audit.service import AuditContext
from drawreg.core.errors import NotFoundError
from drawreg.core.transmittals import service
from drawreg.core.transmittals.schemas import TransmittalCreate, TransmittalRead
from drawreg.dependencies import get_actor, get_audit_ctx, get_db

router = APIRouter(tags=["transmittals"])


@router.post("/projects/{project_id}/transmittals", response_model=TransmittalRead, status_code=201)
async def create_transmittal(
    project_id: uuid.UUID,
    data: TransmittalCreate,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    ctx: AuditContext = Depends(get_audit_ctx),
):
    return await service.create_transmittal(db, project_id, data, actor=actor, ctx=ctx)


@router.get("/projects/{project_id}/transmittals", response_model=list[TransmittalRead])
async def list_transmittals(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    return await service.list_transmittals(db, project_id)


@router.get("/transmittals/{transmittal_id}", response_model=TransmittalRead)
async def get_transmittal(
    transmittal_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_actor),
):
    transmittal = await service.get_transmittal(db, transmittal_id)
    if not transmittal:
        raise NotFoundError("Transmittal not found", transmittal_id=str(transmittal_id))
    return transmittal


@router.post("/transmittals/{transmittal_id}/acknowledge", response_model=TransmittalRead)
async def acknowledge_transmittal(
    transmittal_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
):
    return await service.acknowledge_transmittal(db, transmittal_id, actor)
