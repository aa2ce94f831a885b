from __future__ import annotations

from pathlib import Path
from typing import Generator

import sys

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from pgprobe.config import Settings
from pgprobe.models import ConnectionSpec


class FakeConnection:
    """Stand-in for an async SQLAlchemy connection that tracks its lifetime."""

    def __init__(self, driver: "FakeDriver") -> None:
        self.driver = driver
        self.closed = False

    async def execute(self, statement):  # type: ignore[no-untyped-def]
        self.driver.queries.append(str(statement))
        if self.driver.query_error is not None:
            raise self.driver.query_error

    async def close(self) -> None:
        self.closed = True
        self.driver.open_sessions -= 1
        if self.driver.close_error is not None:
            raise self.driver.close_error


class FakeEngine:
    def __init__(self, driver: "FakeDriver", url) -> None:  # type: ignore[no-untyped-def]
        self.driver = driver
        self.url = url

    async def connect(self) -> FakeConnection:
        error = self.driver.connect_errors.get(self.url.host, self.driver.connect_error)
        if error is not None:
            raise error
        self.driver.open_sessions += 1
        self.driver.sessions_opened += 1
        return FakeConnection(self.driver)

    async def dispose(self) -> None:
        self.driver.disposed += 1
        if self.driver.dispose_error is not None:
            raise self.driver.dispose_error


class FakeDriver:
    """Engine factory recording every target and session it hands out."""

    def __init__(
        self,
        *,
        connect_error: Exception | None = None,
        connect_errors: dict[str, Exception] | None = None,
        query_error: Exception | None = None,
        close_error: Exception | None = None,
        dispose_error: Exception | None = None,
    ) -> None:
        self.connect_error = connect_error
        self.connect_errors = dict(connect_errors or {})
        self.query_error = query_error
        self.close_error = close_error
        self.dispose_error = dispose_error
        self.urls: list = []
        self.queries: list[str] = []
        self.open_sessions = 0
        self.sessions_opened = 0
        self.disposed = 0

    def create_engine(self, url, settings):  # type: ignore[no-untyped-def]
        self.urls.append(url)
        return FakeEngine(self, url)


@pytest.fixture
def settings() -> Generator[Settings, None, None]:
    """Return a fresh Settings instance that ignores any local .env file."""

    yield Settings(_env_file=None)


@pytest.fixture
def make_driver():  # type: ignore[no-untyped-def]
    return FakeDriver


@pytest.fixture
def spec() -> ConnectionSpec:
    return ConnectionSpec(
        name="Local",
        host="db.example.com",
        port=5432,
        database="app",
        username="app_user",
        password="s3cret",
        ssl=False,
    )
