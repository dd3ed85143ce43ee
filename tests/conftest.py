"""Shared fixtures for resume builder tests."""

from datetime import datetime, timedelta, timezone
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from resume_builder.main import app
from resume_builder.models.resume_models import (
    Profile,
    Resume,
    Section,
    SectionItem,
    SectionType,
)
from resume_builder.services.resume_store import ResumeStore, get_resume_store


class FakeClock:
    """Clock that advances one second per reading."""
    
    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)
    
    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path, clock):
    return ResumeStore(tmp_path / "resumes", clock=clock)


@pytest_asyncio.fixture
async def client(store):
    app.dependency_overrides[get_resume_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def resume():
    """Resume with four sections A-D; A holds two items."""
    return Resume(
        id="r1",
        title="Sample",
        profile=Profile(name="Jane Doe", role="Engineer", contact={"email": "jane@example.com"}),
        sections=[
            Section(
                id="A",
                type=SectionType.EXPERIENCE,
                title="Experience",
                items=[
                    SectionItem(id="job1", title="Acme", points=["a", "b", "c"]),
                    SectionItem(id="job2", title="Globex"),
                ],
            ),
            Section(id="B", type=SectionType.PROJECT, title="Projects", visible=True),
            Section(id="C", type=SectionType.EDUCATION, title="Education", visible=False),
            Section(id="D", type=SectionType.CUSTOM, title="Extra"),
        ],
    )
