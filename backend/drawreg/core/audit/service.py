import logging
import uuid
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from drawreg.core.audit.models import AccessLogEntry

logger = logging.getLogger(__name__)

ACCESS_LOG_LIMIT = 100


@dataclass(frozen=True)
class AuditContext:
    """Client metadata recorded with each access log entry."""
    ip_address: str | None = None
    user_agent: str | None = None

    @classmethod
    def from_request(cls, request: Request) -> "AuditContext":
        forwarded = request.headers.get("x-forwarded-for", "")
        ip_address = forwarded.split(",")[0].strip() if forwarded else (request.client.host if request.client else None)
        return cls(ip_address=ip_address, user_agent=request.headers.get("user-agent"))


class AuditMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        request.state.audit_ctx = AuditContext.from_request(request)
        return await call_next(request)


async def log_access(
    db: AsyncSession,
    drawing_id: uuid.UUID,
    actor: str,
    action: str,
    ctx: AuditContext | None = None,
) -> AccessLogEntry:
    """
    Append an entry inside the caller's transaction.
    A failure here rolls back the operation being logged.
    """
    ctx = ctx or AuditContext()
    entry = AccessLogEntry(
        drawing_id=drawing_id,
        actor=actor,
        action=action,
        ip_address=ctx.ip_address,
        user_agent=ctx.user_agent,
    )
    db.add(entry)
    await db.flush()
    logger.info("drawing %s: %s by %s", drawing_id, action, actor)
    return entry


async def list_access_log(
    db: AsyncSession,
    drawing_id: uuid.UUID,
    limit: int = ACCESS_LOG_LIMIT,
) -> list[AccessLogEntry]:
    result = await db.execute(
        select(AccessLogEntry)
        .where(AccessLogEntry.drawing_id == drawing_id)
        .order_by(AccessLogEntry.accessed_at.desc(), AccessLogEntry.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
