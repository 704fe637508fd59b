import uuid
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from drawreg.core.errors import NotFoundError
from drawreg.core.projects.models import Project


async def register_project(
    db: AsyncSession,
    code: str,
    name: str,
    description: str | None = None,
) -> Project:
    """Mirror a project from the external registry (imports and tests)."""
    project = Project(code=code.upper(), name=name, description=description)
    db.add(project)
    await db.flush()
    await db.refresh(project)
    return project


async def get_project(db: AsyncSession, project_id: uuid.UUID) -> Project | None:
    result = await db.execute(select(Project).where(Project.id == project_id))
    return result.scalar_one_or_none()


async def require_project(db: AsyncSession, project_id: uuid.UUID | None) -> Project:
    project = await get_project(db, project_id) if project_id else None
    if not project:
        raise NotFoundError("Project not found", project_id=str(project_id))
    return project
