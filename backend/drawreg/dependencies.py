from typing import Annotated, AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from drawreg.core.audit.service import AuditContext
from drawreg.db.session import get_session


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory


async def get_db(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncGenerator[AsyncSession, None]:
    async with get_session(session_factory) as session:
        yield session


async def get_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
) -> str:
    """Opaque actor id supplied by the identity layer in front of this service."""
    if not x_actor_id or not x_actor_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-Actor-Id header required")
    return x_actor_id.strip()


def get_audit_ctx(request: Request) -> AuditContext:
    ctx = getattr(request.state, "audit_ctx", None)
    return ctx or AuditContext.from_request(request)
