import pytest

from drawreg.core.projects.service import register_project
from drawreg.db.models import create_all
from drawreg.db.session import build_engine, build_session_factory, get_session
from drawreg.settings import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'drawreg.db'}",
        APP_ENV="test",
        APP_DEBUG=False,
        SQLITE_BUSY_TIMEOUT=30.0,
    )


@pytest.fixture
async def engine(settings):
    engine = build_engine(settings.DATABASE_URL, settings)
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def project(session_factory):
    async with get_session(session_factory) as session:
        return await register_project(session, code="proj01", name="Harbour Office Block")


@pytest.fixture
async def other_project(session_factory):
    async with get_session(session_factory) as session:
        return await register_project(session, code="PROJ02", name="Depot Extension")


def drawing_payload(**overrides):
    payload = {
        "title": "Ground Floor Plan",
        "type": "architectural",
        "discipline": "A",
        "file_path": "drawings/proj01/a-arc-0001-a.pdf",
        "drawn_by": "j.hansen",
    }
    payload.update(overrides)
    return payload


def revision_payload(label, **overrides):
    payload = {
        "revision": label,
        "description": f"Issued at revision {label}",
        "revised_by": "k.berg",
        "file_path": f"drawings/proj01/a-arc-0001-{label.lower()}.pdf",
    }
    payload.update(overrides)
    return payload


def transmittal_payload(drawing_ids, **overrides):
    payload = {
        "title": "Tender issue",
        "recipient_company": "Nordbygg AS",
        "recipient_name": "Per Olsen",
        "recipient_email": "per.olsen@nordbygg.no",
        "sender_name": "k.berg",
        "purpose": "For tender",
        "drawings": [str(d) for d in drawing_ids],
    }
    payload.update(overrides)
    return payload
