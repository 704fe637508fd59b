import uuid

import pytest

from conftest import drawing_payload, revision_payload, transmittal_payload
from drawreg.core.audit.service import list_access_log
from drawreg.core.comments.service import add_comment, resolve_comment
from drawreg.core.drawings import register, service
from drawreg.core.drawings.enums import DrawingDiscipline, DrawingStatus, coerce_enum
from drawreg.core.errors import NotFoundError, ValidationError
from drawreg.core.transmittals.service import create_transmittal
from drawreg.db.session import get_session


def test_coerce_enum_accepts_value_and_member():
    assert coerce_enum(DrawingStatus, "approved", "status") is DrawingStatus.APPROVED
    assert coerce_enum(DrawingDiscipline, DrawingDiscipline.HVAC, "discipline") is DrawingDiscipline.HVAC


def test_coerce_enum_rejects_unknown():
    with pytest.raises(ValidationError) as exc:
        coerce_enum(DrawingStatus, "pending", "status")
    assert exc.value.context["field"] == "status"


async def test_unknown_type_rejected_before_write(session_factory, project):
    with pytest.raises(ValidationError):
        async with get_session(session_factory) as db:
            await service.create_drawing(db, project.id, drawing_payload(type="sketch"))
    async with get_session(session_factory) as db:
        assert await service.list_drawings(db, project.id) == []


async def test_missing_required_fields_rejected(session_factory, project):
    payload = drawing_payload()
    del payload["drawn_by"]
    with pytest.raises(ValidationError):
        async with get_session(session_factory) as db:
            await service.create_drawing(db, project.id, payload)


async def test_create_records_initial_issue_and_access(session_factory, project):
    async with get_session(session_factory) as db:
        drawing = await service.create_drawing(
            db, project.id,
            drawing_payload(tags=["ground floor", "tender"], metadata={"grid": "A-F/1-9"}),
        )
    async with get_session(session_factory) as db:
        revisions = await service.list_revisions(db, drawing.id)
        log = await list_access_log(db, drawing.id)
    assert [(r.revision, r.description) for r in revisions] == [("A", "Initial issue")]
    assert revisions[0].revised_by == "j.hansen"
    assert [(e.action, e.actor) for e in log] == [("created", "j.hansen")]
    assert drawing.tags == ["ground floor", "tender"]
    assert drawing.extra == {"grid": "A-F/1-9"}


async def test_get_drawing(session_factory, project):
    async with get_session(session_factory) as db:
        drawing = await service.create_drawing(db, project.id, drawing_payload())
    async with get_session(session_factory) as db:
        assert (await service.get_drawing(db, drawing.id)).title == "Ground Floor Plan"
        assert await service.get_drawing(db, uuid.uuid4()) is None
        with pytest.raises(NotFoundError):
            await service.require_drawing(db, uuid.uuid4())


async def test_list_filters_and_order(session_factory, project):
    async with get_session(session_factory) as db:
        s1 = await service.create_drawing(db, project.id, drawing_payload(discipline="S", type="structural"))
        a1 = await service.create_drawing(db, project.id, drawing_payload())
        a2 = await service.create_drawing(db, project.id, drawing_payload(type="elevation", status="for_review"))
        a1b = await service.create_new_revision(db, a1.id, revision_payload("B"))

    async with get_session(session_factory) as db:
        everything = await service.list_drawings(db, project.id)
        current = await service.list_drawings(db, project.id, current_only=True)
        structural = await service.list_drawings(db, project.id, discipline="S")
        in_review = await service.list_drawings(db, project.id, status=DrawingStatus.FOR_REVIEW)
        elevations = await service.list_drawings(db, project.id, type="elevation")

    assert [d.id for d in everything] == [a1b.id, a1.id, a2.id, s1.id]
    assert {d.id for d in current} == {a1b.id, a2.id, s1.id}
    assert [d.id for d in structural] == [s1.id]
    assert [d.id for d in in_review] == [a2.id]
    assert [d.id for d in elevations] == [a2.id]


async def test_list_rejects_unknown_filter(session_factory, project):
    async with get_session(session_factory) as db:
        with pytest.raises(ValidationError):
            await service.list_drawings(db, project.id, discipline="X")


async def test_search(session_factory, project):
    async with get_session(session_factory) as db:
        plan = await service.create_drawing(db, project.id, drawing_payload(tags=["core", "level-1"]))
        section = await service.create_drawing(
            db, project.id,
            drawing_payload(type="section", title="Stair Section", description="Stair core 100% fire rated"),
        )

    async with get_session(session_factory) as db:
        by_title = await service.search_drawings(db, project.id, "stair")
        by_number = await service.search_drawings(db, project.id, "a-arc")
        by_tag = await service.search_drawings(db, project.id, "level-1")
        by_percent = await service.search_drawings(db, project.id, "100%")
        literal_percent = await service.search_drawings(db, project.id, "%")
        nothing = await service.search_drawings(db, project.id, "roof")

    assert [d.id for d in by_title] == [section.id]
    assert [d.id for d in by_number] == [plan.id]
    assert [d.id for d in by_tag] == [plan.id]
    assert [d.id for d in by_percent] == [section.id]
    assert [d.id for d in literal_percent] == [section.id]
    assert nothing == []


async def test_blank_search_term_matches_nothing(session_factory, project):
    async with get_session(session_factory) as db:
        await service.create_drawing(db, project.id, drawing_payload())
        assert await service.search_drawings(db, project.id, "   ") == []


async def test_search_tag_match_is_exact(session_factory, project):
    async with get_session(session_factory) as db:
        await service.create_drawing(db, project.id, drawing_payload(tags=["level-10"]))
        assert await service.search_drawings(db, project.id, "level-1") == []


async def test_search_lists_current_revision_first(session_factory, project):
    async with get_session(session_factory) as db:
        rev_a = await service.create_drawing(db, project.id, drawing_payload())
        rev_b = await service.create_new_revision(db, rev_a.id, revision_payload("B"))
        found = await service.search_drawings(db, project.id, "ground floor")
    assert [d.id for d in found] == [rev_b.id, rev_a.id]


async def test_delete_is_soft(session_factory, project):
    async with get_session(session_factory) as db:
        drawing = await service.create_drawing(db, project.id, drawing_payload())
    async with get_session(session_factory) as db:
        deleted = await service.delete_drawing(db, drawing.id, "site.admin")
    async with get_session(session_factory) as db:
        reloaded = await service.get_drawing(db, drawing.id)
        log = await list_access_log(db, drawing.id)
    assert deleted.status == "obsolete"
    assert reloaded is not None
    assert reloaded.status == "obsolete"
    assert log[0].action == "deleted"
    assert log[0].actor == "site.admin"


async def test_delete_unknown(session_factory, project):
    with pytest.raises(NotFoundError):
        async with get_session(session_factory) as db:
            await service.delete_drawing(db, uuid.uuid4(), "site.admin")


async def test_drawing_register_counts(session_factory, project):
    async with get_session(session_factory) as db:
        plan = await service.create_drawing(db, project.id, drawing_payload())
        detail = await service.create_drawing(db, project.id, drawing_payload(discipline="S", type="detail"))
        plan_b = await service.create_new_revision(db, plan.id, revision_payload("B"))
        await add_comment(db, plan_b.id, "k.berg", {"comment": "Check door widths"})
        done = await add_comment(db, plan_b.id, "k.berg", {"comment": "Add north arrow"})
        await resolve_comment(db, done.id, "j.hansen")
        await create_transmittal(db, project.id, transmittal_payload([plan_b.id, detail.id]))

    async with get_session(session_factory) as db:
        rows = await register.get_drawing_register(db, project.id)

    assert [r.id for r in rows] == [plan.id, plan_b.id, detail.id]
    counts = {r.id: (r.revision_count, r.open_comments, r.transmittal_count) for r in rows}
    assert counts[plan.id] == (1, 0, 0)
    assert counts[plan_b.id] == (1, 1, 1)
    assert counts[detail.id] == (1, 0, 1)


async def test_statistics(session_factory, project, other_project):
    async with get_session(session_factory) as db:
        plan = await service.create_drawing(db, project.id, drawing_payload())
        await service.create_drawing(db, project.id, drawing_payload(discipline="E", type="electrical", status="approved"))
        await service.create_drawing(db, project.id, drawing_payload(discipline="E", type="schedule"))
        plan_b = await service.create_new_revision(db, plan.id, revision_payload("B"))
        await add_comment(db, plan_b.id, "k.berg", {"comment": "Check door widths"})
        await create_transmittal(db, project.id, transmittal_payload([plan_b.id]))
        await service.create_drawing(db, other_project.id, drawing_payload())

    async with get_session(session_factory) as db:
        stats = await register.get_statistics(db, project.id)

    assert stats.total_drawings == 4
    assert stats.current_drawings == 3
    assert stats.draft_count == 2
    assert stats.approved_count == 1
    assert stats.superseded_count == 1
    assert stats.obsolete_count == 0
    assert stats.disciplines_count == 2
    assert stats.total_revisions == 4
    assert stats.total_transmittals == 1
    assert stats.open_comments == 1
