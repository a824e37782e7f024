"""Pytest configuration and fixtures."""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("PROCRASTINATE_DATABASE_URL", "postgresql://localhost/reviewgate_test")
os.environ.setdefault("JWT_SECRET", "reviewgate-test-secret-0123456789abcdef")

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from reviewgate.models import AccessLevel, Base, Project, ProjectTeam, Team, TeamMember, User
from reviewgate.services.activity_recorder import ActivityEntry, ActivityRecorder
from reviewgate.services.rooms import RoomRegistry
from reviewgate.utils.tokens import create_access_token


@pytest.fixture
async def db_engine():
    """Create a test database engine."""
    # Use SQLite for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded(db_session):
    """Project P with teams A (u1, u2) and B (u3), plus an admin and an outsider."""
    u1 = User(username="u1", email="u1@example.com", first_name="Una", last_name="One")
    u2 = User(username="u2", email="u2@example.com")
    u3 = User(username="u3", email="u3@example.com", first_name="Theo")
    admin = User(username="root", email="root@example.com", role="admin")
    outsider = User(username="stranger", email="stranger@example.com")

    team_a = Team(name="Backend")
    team_b = Team(name="Security")
    team_c = Team(name="Docs")

    project = Project(name="Widgets", key="WID", github_owner="acme", github_repo="widgets")
    bare_project = Project(name="Sandbox", key="SBX")

    db_session.add_all([u1, u2, u3, admin, outsider])
    db_session.add_all([team_a, team_b, team_c, project, bare_project])
    await db_session.flush()

    db_session.add_all(
        [
            TeamMember(team_id=team_a.id, user_id=u1.id),
            TeamMember(team_id=team_a.id, user_id=u2.id),
            TeamMember(team_id=team_b.id, user_id=u3.id),
            TeamMember(team_id=team_c.id, user_id=outsider.id),
        ]
    )
    # Assignment order is the order teams appear in approval status
    db_session.add(
        ProjectTeam(project_id=project.id, team_id=team_a.id, access_level=AccessLevel.WRITE)
    )
    await db_session.flush()
    db_session.add(
        ProjectTeam(project_id=project.id, team_id=team_b.id, access_level=AccessLevel.READ)
    )
    await db_session.commit()

    return SimpleNamespace(
        u1=u1,
        u2=u2,
        u3=u3,
        admin=admin,
        outsider=outsider,
        team_a=team_a,
        team_b=team_b,
        team_c=team_c,
        project=project,
        bare_project=bare_project,
    )


class FakeGitHub:
    """Stands in for GitHubClient; records calls instead of talking to GitHub."""

    def __init__(self):
        self.pull_request: dict[str, Any] = {"id": 9001, "number": 42, "title": "Add widgets"}
        self.merge_result: dict[str, Any] = {
            "sha": "6dcb09b5b57875f334f61aebed695e2e4193db5e",
            "merged": True,
            "message": "Pull Request successfully merged",
        }
        self.fetch_error: Exception | None = None
        self.merge_error: Exception | None = None
        self.installations: list[int | None] = []
        self.fetches: list[tuple[str, str, int]] = []
        self.merges: list[dict[str, Any]] = []

    def __call__(self, installation_id: int | None = None) -> "FakeGitHub":
        self.installations.append(installation_id)
        return self

    async def __aenter__(self) -> "FakeGitHub":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass

    async def get_pull_request(self, owner: str, repo: str, pr_number: int) -> dict[str, Any]:
        self.fetches.append((owner, repo, pr_number))
        if self.fetch_error:
            raise self.fetch_error
        return self.pull_request

    async def merge_pull_request(self, owner: str, repo: str, pr_number: int, **options: Any):
        self.merges.append({"owner": owner, "repo": repo, "number": pr_number, **options})
        if self.merge_error:
            raise self.merge_error
        return self.merge_result


@pytest.fixture
def fake_github():
    return FakeGitHub()


@dataclass
class ActivityCollector:
    """Activity sink that keeps entries in memory."""

    entries: list[ActivityEntry] = field(default_factory=list)

    async def __call__(self, entry: ActivityEntry) -> None:
        self.entries.append(entry)


@pytest.fixture
def activity_collector():
    return ActivityCollector()


@pytest.fixture
def activity_recorder(activity_collector):
    return ActivityRecorder(sink=activity_collector)


class FakeConnection:
    """Room member that records what it receives."""

    def __init__(self, connection_id: str, user_id: int = 1, fail: bool = False):
        self.id = connection_id
        self.user_id = user_id
        self.fail = fail
        self.received: list[tuple[str, Any]] = []

    async def send(self, event: str, payload: Any) -> None:
        if self.fail:
            raise ConnectionError("socket closed")
        self.received.append((event, payload))

    def events(self) -> list[str]:
        return [event for event, _ in self.received]


@pytest.fixture
def rooms():
    return RoomRegistry()


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def app(session_factory, fake_github, activity_recorder, rooms):
    """The FastAPI app wired to the test database and fakes."""
    from reviewgate.api.deps import get_activity_recorder, get_github_factory
    from reviewgate.database import get_session
    from reviewgate.main import app as fastapi_app
    from reviewgate.services.rooms import get_room_registry

    async def override_session():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_session] = override_session
    fastapi_app.dependency_overrides[get_github_factory] = lambda: fake_github
    fastapi_app.dependency_overrides[get_activity_recorder] = lambda: activity_recorder
    fastapi_app.dependency_overrides[get_room_registry] = lambda: rooms

    yield fastapi_app

    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_connection():
    return FakeConnection


@pytest.fixture
def auth():
    return auth_headers
