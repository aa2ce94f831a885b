"""Command-line front end for the connection probe.

Probes either a single connection described by flags or every profile in a
JSON file, then renders the outcomes as a table (or JSON with ``--json``).

Exit codes: 0 when every probe succeeds, 1 when any fails, 2 when the
connection parameters or profiles file cannot be used.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
from pathlib import Path
from typing import Sequence

from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.text import Text

from pgprobe.config import get_settings
from pgprobe.models import ConnectionSpec, ProbeResult
from pgprobe.probe import ConnectionProbe
from pgprobe.target import TargetError, build_target, render_target
from pgprobe.ui.client import ProbeAPIClient

console = Console()
log = logger.bind(module="cli")


class ProfileFileError(RuntimeError):
    """Raised when a profiles file cannot be read or validated."""


def load_profiles(path: Path) -> list[ConnectionSpec]:
    """Load one profile object or a list of them from a JSON file."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ProfileFileError(f"Cannot read profiles from {path}: {exc}") from exc

    items = raw if isinstance(raw, list) else [raw]
    if not items:
        raise ProfileFileError(f"No profiles found in {path}.")
    try:
        return [ConnectionSpec.model_validate(item) for item in items]
    except ValidationError as exc:
        raise ProfileFileError(f"Invalid profile in {path}: {exc}") from exc


def _spec_from_args(args: argparse.Namespace) -> ConnectionSpec:
    return ConnectionSpec(
        name=args.name or args.host,
        host=args.host,
        port=args.port,
        database=args.database,
        username=args.username,
        password=args.password if args.password is not None else os.getenv("PGPASSWORD", ""),
        ssl=args.ssl,
    )


def _display_target(spec: ConnectionSpec) -> str:
    try:
        return render_target(build_target(spec, get_settings()))
    except TargetError as exc:
        return f"<invalid: {exc}>"


def _status_text(result: ProbeResult) -> Text:
    if result.success:
        return Text("OK", style="bold green")
    return Text("FAIL", style="bold red")


def _render_table(specs: Sequence[ConnectionSpec], results: Sequence[ProbeResult]) -> None:
    table = Table(title="Connection test", show_lines=False)
    table.add_column("Name", style="bold")
    table.add_column("Target")
    table.add_column("Status", justify="center")
    table.add_column("Message")
    table.add_column("Error")
    for spec, result in zip(specs, results):
        table.add_row(
            spec.name,
            _display_target(spec),
            _status_text(result),
            result.message,
            result.error or "",
        )
    console.print(table)


async def _probe_locally(specs: Sequence[ConnectionSpec]) -> list[ProbeResult]:
    return await ConnectionProbe(get_settings()).probe_many(specs)


def _probe_via_api(specs: Sequence[ConnectionSpec], base_url: str) -> list[ProbeResult]:
    client = ProbeAPIClient(base_url)
    return [client.test_connection(spec) for spec in specs]


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check that PostgreSQL connection profiles can connect and run a query.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--name", default=None, help="Display name (defaults to the host).")
    parser.add_argument("--host", default="localhost", help="Database server host.")
    parser.add_argument("--port", type=int, default=5432, help="Database server port.")
    parser.add_argument("--database", default="postgres", help="Database name.")
    parser.add_argument("--username", default="postgres", help="Login role.")
    parser.add_argument(
        "--password",
        default=None,
        help="Password; $PGPASSWORD is used when omitted.",
    )
    parser.add_argument("--ssl", action="store_true", help="Require an encrypted connection.")
    parser.add_argument(
        "--profiles",
        type=Path,
        default=None,
        help="JSON file holding one connection object or a list of them; overrides the connection flags.",
    )
    parser.add_argument(
        "--api-base-url",
        default=None,
        help="Run the test through a pgprobe API at this URL instead of locally.",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print results as JSON.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(list(argv) if argv is not None else None)

    if args.profiles is not None:
        try:
            specs = load_profiles(args.profiles)
        except ProfileFileError as exc:
            console.print(f"[bold red]Cannot load profiles[/] {exc}")
            return 2
    else:
        try:
            specs = [_spec_from_args(args)]
        except ValidationError as exc:
            console.print(f"[bold red]Invalid connection parameters[/] {exc}")
            return 2

    if args.api_base_url:
        results = _probe_via_api(specs, args.api_base_url)
    else:
        results = asyncio.run(_probe_locally(specs))

    if args.json_output:
        payload = [
            {"name": spec.name, **result.to_payload()}
            for spec, result in zip(specs, results)
        ]
        console.print_json(json.dumps(payload, ensure_ascii=False))
    else:
        _render_table(specs, results)

    failed = sum(1 for result in results if not result.success)
    log.info("Connection test finished: ok={} fail={}", len(results) - failed, failed)
    return 1 if failed else 0
