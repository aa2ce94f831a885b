"""One-shot PostgreSQL connectivity probe.

A probe opens a single short-lived session, runs a liveness query and reports
the outcome as a ``ProbeResult``. Every failure is returned as data; nothing
raised by the driver escapes ``ConnectionProbe.probe``.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from pgprobe.config import Settings, get_settings
from pgprobe.models import ConnectionSpec, ProbeResult
from pgprobe.target import build_target, render_target

__all__ = [
    "CONNECT_FAILED_MESSAGE",
    "QUERY_FAILED_MESSAGE",
    "SUCCESS_MESSAGE",
    "ConnectionProbe",
    "EngineFactory",
    "create_probe_engine",
    "probe",
]

log = logger.bind(module="probe")

SUCCESS_MESSAGE = "Connection successful!"
CONNECT_FAILED_MESSAGE = "Failed to connect to database"
QUERY_FAILED_MESSAGE = "Failed to execute test query"

EngineFactory = Callable[[URL, Settings], AsyncEngine]


def create_probe_engine(url: URL, settings: Settings) -> AsyncEngine:
    """Create an async engine limited to a single connection."""
    connect_args: dict[str, object] = {}
    if settings.probe_connect_timeout is not None:
        # psycopg (PostgreSQL) supports connect_timeout in seconds.
        connect_args["connect_timeout"] = int(settings.probe_connect_timeout)
    return create_async_engine(
        url,
        pool_size=1,
        max_overflow=0,
        connect_args=connect_args,
    )


class ConnectionProbe:
    """Run connectivity checks against PostgreSQL servers.

    Instances hold configuration only, so one probe may serve any number of
    concurrent ``probe`` calls.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        engine_factory: EngineFactory | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._engine_factory = engine_factory or create_probe_engine

    async def probe(self, spec: ConnectionSpec) -> ProbeResult:
        """Check that ``spec`` reaches a server that answers a trivial query."""
        try:
            url = build_target(spec, self.settings)
            engine = self._engine_factory(url, self.settings)
        except Exception as exc:
            log.warning("Cannot build target for {!r}: {}", spec.name, exc)
            return ProbeResult.failed(CONNECT_FAILED_MESSAGE, exc)

        safe_target = render_target(url)
        log.debug("Probing {!r} at {}", spec.name, safe_target)
        try:
            try:
                connection = await engine.connect()
            except Exception as exc:
                log.warning("Connection to {} failed: {}", safe_target, exc)
                return ProbeResult.failed(CONNECT_FAILED_MESSAGE, exc)

            try:
                await connection.execute(text(self.settings.probe_liveness_query))
            except Exception as exc:
                log.warning("Liveness query on {} failed: {}", safe_target, exc)
                return ProbeResult.failed(QUERY_FAILED_MESSAGE, exc)
            finally:
                await _release(connection.close, "session", safe_target)

            log.info("Connection to {} succeeded", safe_target)
            return ProbeResult.succeeded(SUCCESS_MESSAGE)
        finally:
            await _release(engine.dispose, "engine", safe_target)

    async def probe_many(self, specs: Iterable[ConnectionSpec]) -> list[ProbeResult]:
        """Probe several specs concurrently, returning results in input order."""
        return list(await asyncio.gather(*(self.probe(spec) for spec in specs)))


async def _release(close: Callable[[], Awaitable[object]], what: str, safe_target: str) -> None:
    """Await ``close`` and log, rather than raise, any failure."""
    try:
        await close()
    except Exception as exc:
        log.warning("Failed to release {} for {}: {}", what, safe_target, exc)


async def probe(spec: ConnectionSpec, settings: Settings | None = None) -> ProbeResult:
    """Probe ``spec`` with a default ``ConnectionProbe``."""
    return await ConnectionProbe(settings).probe(spec)
