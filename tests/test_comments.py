import uuid

import pytest

from conftest import drawing_payload
from drawreg.core.comments import service
from drawreg.core.drawings.service import create_drawing
from drawreg.core.errors import NotFoundError, ValidationError
from drawreg.db.session import get_session


@pytest.fixture
async def drawing(session_factory, project):
    async with get_session(session_factory) as db:
        return await create_drawing(db, project.id, drawing_payload())


async def test_add_anchored_comment(session_factory, drawing):
    async with get_session(session_factory) as db:
        comment = await service.add_comment(db, drawing.id, "k.berg", {
            "comment": "Door D12 clashes with duct",
            "coordinates": {"x": 120.5, "y": 88.25},
            "markup_data": {"shape": "cloud", "points": [[110, 80], [130, 96]]},
        })
    assert comment.author == "k.berg"
    assert (comment.x_coordinate, comment.y_coordinate) == (120.5, 88.25)
    assert comment.markup_data["shape"] == "cloud"
    assert comment.resolved is False
    assert comment.parent_comment_id is None


async def test_comment_without_coordinates(session_factory, drawing):
    async with get_session(session_factory) as db:
        comment = await service.add_comment(db, drawing.id, "k.berg", {"comment": "General note"})
    assert comment.x_coordinate is None
    assert comment.y_coordinate is None


async def test_empty_comment_rejected(session_factory, drawing):
    with pytest.raises(ValidationError):
        async with get_session(session_factory) as db:
            await service.add_comment(db, drawing.id, "k.berg", {"comment": ""})


async def test_comment_on_unknown_drawing(session_factory, project):
    with pytest.raises(NotFoundError):
        async with get_session(session_factory) as db:
            await service.add_comment(db, uuid.uuid4(), "k.berg", {"comment": "Orphan"})


async def test_replies_are_threaded(session_factory, drawing):
    async with get_session(session_factory) as db:
        root = await service.add_comment(db, drawing.id, "k.berg", {"comment": "Check stair width"})
        first = await service.add_comment(db, drawing.id, "j.hansen", {
            "comment": "1200 clear", "parent_comment_id": str(root.id),
        })
        second = await service.add_comment(db, drawing.id, "k.berg", {
            "comment": "OK", "parent_comment_id": str(root.id),
        })
        other = await service.add_comment(db, drawing.id, "k.berg", {"comment": "Title block date"})

    async with get_session(session_factory) as db:
        top_level = await service.list_comments(db, drawing.id)
        replies = await service.list_replies(db, root.id)

    assert {c.id for c in top_level} == {root.id, other.id}
    assert [c.id for c in replies] == [first.id, second.id]


async def test_reply_to_unknown_parent(session_factory, drawing):
    with pytest.raises(NotFoundError):
        async with get_session(session_factory) as db:
            await service.add_comment(db, drawing.id, "k.berg", {
                "comment": "Reply", "parent_comment_id": str(uuid.uuid4()),
            })


async def test_reply_must_stay_on_parent_drawing(session_factory, project, drawing):
    async with get_session(session_factory) as db:
        other_drawing = await create_drawing(db, project.id, drawing_payload(type="section"))
        root = await service.add_comment(db, drawing.id, "k.berg", {"comment": "Check stair width"})

    with pytest.raises(ValidationError):
        async with get_session(session_factory) as db:
            await service.add_comment(db, other_drawing.id, "k.berg", {
                "comment": "Reply", "parent_comment_id": str(root.id),
            })


async def test_resolve_is_idempotent(session_factory, drawing):
    async with get_session(session_factory) as db:
        comment = await service.add_comment(db, drawing.id, "k.berg", {"comment": "Fix gridline"})

    async with get_session(session_factory) as db:
        first = await service.resolve_comment(db, comment.id, "j.hansen")
    async with get_session(session_factory) as db:
        second = await service.resolve_comment(db, comment.id, "lead.arch")

    assert first.resolved is True
    assert second.resolved_by == "j.hansen"
    assert second.resolved_at == first.resolved_at


async def test_unresolve_clears_resolution(session_factory, drawing):
    async with get_session(session_factory) as db:
        comment = await service.add_comment(db, drawing.id, "k.berg", {"comment": "Fix gridline"})
        await service.resolve_comment(db, comment.id, "j.hansen")

    async with get_session(session_factory) as db:
        reopened = await service.unresolve_comment(db, comment.id)
    assert (reopened.resolved, reopened.resolved_by, reopened.resolved_at) == (False, None, None)

    async with get_session(session_factory) as db:
        again = await service.resolve_comment(db, comment.id, "lead.arch")
    assert again.resolved_by == "lead.arch"


async def test_resolve_unknown(session_factory, project):
    with pytest.raises(NotFoundError):
        async with get_session(session_factory) as db:
            await service.resolve_comment(db, uuid.uuid4(), "j.hansen")


async def test_list_for_unknown_drawing(session_factory, project):
    with pytest.raises(NotFoundError):
        async with get_session(session_factory) as db:
            await service.list_comments(db, uuid.uuid4())
