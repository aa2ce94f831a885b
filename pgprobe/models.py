"""Wire models exchanged between the UI layer and the connection probe."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = ["ConnectionSpec", "ProbeResult", "describe_error"]


class ConnectionSpec(BaseModel):
    """Connection parameters for a single PostgreSQL profile.

    `id` and `name` only correlate the spec with a saved profile and label it
    in the UI; neither takes part in reaching the server. All string fields
    are caller-supplied and are encoded per field when a target is built.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str
    host: str
    port: int = Field(default=5432, ge=0, le=65535)
    database: str
    username: str
    password: str = Field(default="", repr=False)
    ssl: bool = False


class ProbeResult(BaseModel):
    """Outcome of one probe.

    `error` is set exactly when `success` is false. It is omitted from the
    serialized payload when absent rather than emitted as null.
    """

    success: bool
    message: str
    error: str | None = None

    @model_validator(mode="after")
    def _error_matches_outcome(self) -> "ProbeResult":
        if self.success and self.error is not None:
            raise ValueError("A successful result cannot carry an error.")
        if not self.success and not self.error:
            raise ValueError("A failed result requires a non-empty error.")
        return self

    @classmethod
    def succeeded(cls, message: str) -> "ProbeResult":
        return cls(success=True, message=message)

    @classmethod
    def failed(cls, message: str, exc: BaseException | str) -> "ProbeResult":
        return cls(success=False, message=message, error=describe_error(exc))

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-compatible representation sent across the UI boundary."""
        return self.model_dump(mode="json", exclude_none=True)


def describe_error(exc: BaseException | str) -> str:
    """Return the verbatim error text, falling back to the exception type name."""
    if isinstance(exc, str):
        return exc if exc.strip() else "Unknown error"
    text = str(exc)
    return text if text.strip() else type(exc).__name__
