"""
Pytest fixtures for arena tests.

Provides an in-memory transport, a hand-released reveal timer and an
in-memory database so the match core runs without Redis or a network.
"""

import asyncio
import random

import pytest
from broadcaster import Broadcast
from fastapi.testclient import TestClient
from sqlmodel import Session

from arena.database import build_engine, create_db_and_tables, get_session
from arena.game import CardCatalog, MatchConfig, PlayerRegistry, RoundController
from arena.game.catalog import DEFAULT_CARDS


class RecordingTransport:
    """Keeps every message instead of sending it."""

    def __init__(self):
        self.broadcasts: list[dict] = []
        self.private: dict[str, list[dict]] = {}

    async def broadcast(self, message: dict) -> None:
        self.broadcasts.append(message)

    async def send_to(self, player_id: str, message: dict) -> None:
        self.private.setdefault(player_id, []).append(message)

    def of_type(self, event_type: str) -> list[dict]:
        return [m for m in self.broadcasts if m["type"] == event_type]

    def types(self) -> list[str]:
        return [m["type"] for m in self.broadcasts]


class ManualSleeper:
    """Stands in for asyncio.sleep; returns only once released."""

    def __init__(self):
        self.delays: list[float] = []
        self._released = asyncio.Event()

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await self._released.wait()

    def release(self) -> None:
        self._released.set()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def catalog() -> CardCatalog:
    return CardCatalog(DEFAULT_CARDS)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def sleeper() -> ManualSleeper:
    return ManualSleeper()


@pytest.fixture
def registry() -> PlayerRegistry:
    registry = PlayerRegistry("test-room")
    registry.add_player("p1")
    registry.add_player("p2")
    return registry


@pytest.fixture
def effects() -> list:
    return []


@pytest.fixture
def make_controller(catalog, registry, transport, sleeper, effects):
    """Factory for a controller wired to the recording fixtures."""

    async def sink(outcome):
        effects.append(outcome)

    def factory(**config) -> RoundController:
        return RoundController(
            catalog=catalog,
            registry=registry,
            transport=transport,
            config=MatchConfig(**config),
            effect_sink=sink,
            rng=random.Random(7),
            sleep=sleeper,
        )

    return factory


@pytest.fixture
def controller(make_controller) -> RoundController:
    return make_controller()


@pytest.fixture
def db_engine():
    engine = build_engine("sqlite://")
    create_db_and_tables(engine)
    return engine


@pytest.fixture
def client(db_engine, catalog, monkeypatch):
    """TestClient running the full lifespan against in-memory backends."""
    import arena.main

    def get_session_override():
        with Session(db_engine) as session:
            yield session

    monkeypatch.setattr(arena.main, "broadcast", Broadcast("memory://"))
    monkeypatch.setattr(arena.main, "create_db_and_tables", lambda: create_db_and_tables(db_engine))
    monkeypatch.setattr(arena.main, "load_catalog", lambda path: catalog)
    arena.main.app.dependency_overrides[get_session] = get_session_override

    with TestClient(arena.main.app) as test_client:
        yield test_client

    arena.main.app.dependency_overrides.clear()
