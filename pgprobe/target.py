"""Connection target construction.

Targets are built as structured SQLAlchemy ``URL`` objects from named fields so
that reserved characters in any field can never be read as delimiters. The
string rendering used for logs and display percent-encodes each component on
its own.
"""

from __future__ import annotations

from functools import partial
from urllib.parse import quote, urlencode

from sqlalchemy.engine import URL

from pgprobe.config import Settings, get_settings
from pgprobe.models import ConnectionSpec

__all__ = ["TargetError", "build_target", "render_target"]

_quote_component = partial(quote, safe="")
_HOST_FORBIDDEN = frozenset("/@?#[]")


class TargetError(ValueError):
    """Raised when connection fields cannot form a usable target."""


def _check_field(label: str, value: str) -> None:
    if "\x00" in value:
        raise TargetError(f"{label} contains a NUL character.")


def build_target(spec: ConnectionSpec, settings: Settings | None = None) -> URL:
    """Return the connection target for ``spec``.

    Raises:
        TargetError: When a field cannot be represented in a target.
    """
    settings = settings or get_settings()

    host = (spec.host or "").strip()
    # IPv6 literals may arrive in URL form, e.g. "[::1]".
    if len(host) > 2 and host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if not host:
        raise TargetError("host must be non-empty.")
    # A slash would turn the host into a Unix socket directory for libpq.
    if any(ch in host for ch in _HOST_FORBIDDEN) or any(ch.isspace() for ch in host):
        raise TargetError(f"host {host!r} is not a valid host name or address.")
    for label, value in (
        ("host", host),
        ("username", spec.username),
        ("password", spec.password),
        ("database", spec.database),
    ):
        _check_field(label, value or "")

    query: dict[str, str] = {}
    if spec.ssl:
        query["sslmode"] = settings.probe_ssl_mode

    return URL.create(
        drivername=settings.probe_db_scheme,
        username=spec.username or None,
        password=spec.password or None,
        host=host,
        port=int(spec.port),
        database=spec.database or None,
        query=query,
    )


def render_target(url: URL, *, hide_password: bool = True) -> str:
    """Render ``url`` as a DSN string with every component percent-encoded."""
    rendered = f"{url.drivername}://"
    if url.username is not None:
        rendered += _quote_component(url.username)
        if url.password is not None:
            secret = "***" if hide_password else _quote_component(str(url.password))
            rendered += f":{secret}"
        rendered += "@"

    host = url.host or ""
    # IPv6 literals need brackets to keep the port delimiter unambiguous.
    rendered += f"[{host}]" if ":" in host else host
    if url.port is not None:
        rendered += f":{url.port}"
    if url.database is not None:
        rendered += "/" + _quote_component(url.database)
    if url.query:
        rendered += "?" + urlencode(sorted(url.query.items()), doseq=True)
    return rendered
