"""Shared fixtures; environment is set before any app module reads settings."""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BEARER_TOKEN", "test-token")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="destination-logs-"))

import fakeredis  # noqa: E402
import pytest  # noqa: E402

from app.core.db import build_engine, build_session_factory  # noqa: E402
from app.models import Base  # noqa: E402
from app.services.cache_service import DestinationCache  # noqa: E402
from app.services.destination_store import DestinationStore  # noqa: E402


@pytest.fixture
def session_factory(tmp_path):
    """File-backed SQLite so worker threads each get their own connection."""
    engine = build_engine(f"sqlite:///{tmp_path / 'destinations.db'}")
    Base.metadata.create_all(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return DestinationStore(session_factory)


@pytest.fixture
def redis_client():
    return fakeredis.FakeAsyncRedis()


@pytest.fixture
def cache(redis_client):
    return DestinationCache(redis_client)
