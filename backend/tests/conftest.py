"""
Shared fixtures: a throwaway SQLite database per test, a controllable clock,
the room services wired to both, and a TestClient over the FastAPI app.
"""
import asyncio
import random
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from overlap.api.deps import get_clock
from overlap.core.database import Base, get_db
from overlap.main import app
from overlap.models import Prompt
from overlap.services import AnswerService, PhaseEngine, RoomService, VoteService


class FakeClock:
    """Callable clock that only moves when a test says so"""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'overlap_test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def prompts(db):
    rows = [
        Prompt(topic1="Breakfast", topic2="Outer space"),
        Prompt(topic1="Pirates", topic2="Office life"),
        Prompt(topic1="Dogs", topic2="Superheroes"),
    ]
    db.add_all(rows)
    db.commit()
    return rows


@pytest.fixture
def services(db, clock):
    rng = random.Random(2050)
    return SimpleNamespace(
        rooms=RoomService(db, clock=clock, rng=rng),
        phases=PhaseEngine(db, clock=clock),
        answers=AnswerService(db, clock=clock),
        votes=VoteService(db, clock=clock),
    )


@pytest.fixture
def new_room(services):
    """Create a room and join the given players; returns (room_code, [player_id, ...])"""

    async def _new_room(*names):
        room_code = (await services.rooms.create_room()).room_code
        player_ids = []
        for name in names:
            joined = await services.rooms.join(room_code, name)
            player_ids.append(joined.player_id)
        return room_code, player_ids

    return _new_room


@pytest.fixture
def started_room(services, new_room, prompts):
    """A room with the given players, explicitly started (or auto-started when full)"""

    async def _started_room(*names):
        room_code, player_ids = await new_room(*names)
        if len(names) < 4:
            await services.rooms.start(room_code)
        return room_code, player_ids

    return _started_room


@pytest.fixture
def client(session_factory, clock):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def concurrently():
    """Run a service coroutine to completion on another thread, like a second request"""

    def _run(coro):
        with ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()

    return _run
