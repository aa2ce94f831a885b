"""Connection test endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from loguru import logger

from pgprobe import commands
from pgprobe.models import ProbeResult
from pgprobe.probe import ConnectionProbe

router = APIRouter()
log = logger.bind(module="api.connections")


def get_probe() -> ConnectionProbe:
    return ConnectionProbe()


@router.post(
    "/connections/test",
    response_model=ProbeResult,
    response_model_exclude_none=True,
)
async def post_connection_test(
    request: Request,
    probe: ConnectionProbe = Depends(get_probe),
) -> dict[str, Any]:
    # Missing or malformed JSON is reported as a failed result, not a 422.
    try:
        payload = await request.json()
    except ValueError as exc:
        log.warning("Unreadable connection test body: {}", exc)
        return ProbeResult.failed(commands.COMMAND_FAILED_MESSAGE, exc).to_payload()
    return await commands.test_connection(payload, probe=probe)
