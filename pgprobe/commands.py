"""Command surface used by the hosting application.

Payloads arrive as JSON-decoded mappings and leave as JSON-compatible dicts,
so the UI never has to special-case a raised fault.
"""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger
from pydantic import ValidationError

from pgprobe.models import ConnectionSpec, ProbeResult
from pgprobe.probe import ConnectionProbe

__all__ = ["COMMAND_FAILED_MESSAGE", "parse_spec", "test_connection"]

log = logger.bind(module="commands")

COMMAND_FAILED_MESSAGE = "Failed to test connection"


def parse_spec(config: Any) -> ConnectionSpec:
    """Validate a connection payload.

    Raises:
        ValidationError: When the payload fields are invalid.
        TypeError: When the payload is not an object.
    """
    if isinstance(config, ConnectionSpec):
        return config
    if not isinstance(config, Mapping):
        raise TypeError(f"Expected a connection object, got {type(config).__name__}.")
    return ConnectionSpec.model_validate(dict(config))


async def test_connection(
    config: Any,
    *,
    probe: ConnectionProbe | None = None,
) -> dict[str, Any]:
    """Probe the connection described by ``config`` and return the result payload."""
    try:
        spec = parse_spec(config)
    except (ValidationError, TypeError, ValueError) as exc:
        log.warning("Rejected connection payload: {}", exc)
        return ProbeResult.failed(COMMAND_FAILED_MESSAGE, exc).to_payload()

    result = await (probe or ConnectionProbe()).probe(spec)
    return result.to_payload()
