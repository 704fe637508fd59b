import logging

import pytest
from starlette.requests import Request

from conftest import drawing_payload
from drawreg.core.audit.service import AuditContext, list_access_log, log_access
from drawreg.core.drawings.service import create_drawing
from drawreg.core.logging import configure_logging
from drawreg.db.session import get_session


def _request(headers, client=("192.0.2.10", 5123)):
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": client,
    })


def test_context_from_client_address():
    ctx = AuditContext.from_request(_request({"User-Agent": "AutoCAD/2025"}))
    assert ctx == AuditContext(ip_address="192.0.2.10", user_agent="AutoCAD/2025")


def test_context_prefers_forwarded_for():
    ctx = AuditContext.from_request(_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}))
    assert ctx.ip_address == "203.0.113.7"
    assert ctx.user_agent is None


def test_context_without_client():
    ctx = AuditContext.from_request(_request({}, client=None))
    assert ctx.ip_address is None


def test_configure_logging_level():
    logger = configure_logging("debug")
    assert logger.name == "drawreg"
    assert logger.level == logging.DEBUG
    assert configure_logging("nonsense").level == logging.INFO
    assert len(logger.handlers) == 1


async def test_access_log_newest_first_and_limited(session_factory, project):
    async with get_session(session_factory) as db:
        drawing = await create_drawing(db, project.id, drawing_payload())
        for i in range(5):
            await log_access(db, drawing.id, f"viewer.{i}", "viewed")

    async with get_session(session_factory) as db:
        latest = await list_access_log(db, drawing.id, limit=3)
        everything = await list_access_log(db, drawing.id)

    assert [e.actor for e in latest] == ["viewer.4", "viewer.3", "viewer.2"]
    assert len(everything) == 6
    assert everything[-1].action == "created"


async def test_entry_rolled_back_with_its_transaction(session_factory, project):
    async with get_session(session_factory) as db:
        drawing = await create_drawing(db, project.id, drawing_payload())
    with pytest.raises(RuntimeError):
        async with get_session(session_factory) as db:
            await log_access(db, drawing.id, "viewer", "viewed")
            raise RuntimeError("downstream failure")
    async with get_session(session_factory) as db:
        assert [e.action for e in await list_access_log(db, drawing.id)] == ["created"]
