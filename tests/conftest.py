from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from lifetrack.app import models  # noqa: F401
from lifetrack.app.api import deps
from lifetrack.app.db.base import Base, get_db
from lifetrack.app.db.session import create_engine_for, create_session_factory
from lifetrack.app.main import app
from lifetrack.app.models.user import User
from lifetrack.app.security.sessions import InMemorySessionStore, SessionManager
from lifetrack.app.services.badges import seed_user_badges


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
async def engine(tmp_path):
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    # Real time, so cookies issued in API tests are not already stale for the client
    return FakeClock(datetime.now(timezone.utc))


@pytest.fixture
def local_clock():
    return FakeClock(datetime(2024, 3, 1, 9, 30))


@pytest.fixture
def session_manager(clock):
    return SessionManager(InMemorySessionStore(clock=clock), cookie_name="lifetrack_session")


@pytest.fixture
async def client(session_factory, session_manager, local_clock):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_session_manager] = lambda: session_manager
    app.dependency_overrides[deps.get_now] = local_clock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Insert a user with the default badge set, skipping password hashing."""

    async def _make_user(username: str = "alice") -> User:
        user = User(username=username, email=f"{username}@example.com", hashed_password="!", is_active=True)
        db.add(user)
        await db.flush()
        await seed_user_badges(db, user.id)
        await db.commit()
        return user

    return _make_user
