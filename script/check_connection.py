from __future__ import annotations

"""Entry script for testing PostgreSQL connection profiles.

This is a thin wrapper around ``pgprobe.cli`` that configures Loguru from
``Settings.log_level``, routes standard-library logging (used by SQLAlchemy and
psycopg) through Loguru, and delegates argument parsing to ``pgprobe.cli.main``.

Usage:

    python script/check_connection.py --host db.local --database app --username app --ssl
    python script/check_connection.py --profiles profiles.json --json
"""

import logging
import sys
from typing import Sequence

from loguru import logger

from pgprobe.cli import main as cli_main
from pgprobe.config import get_settings


class _LoguruInterceptHandler(logging.Handler):
    """Bridge standard-library logging records into Loguru."""

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - thin wrapper
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(exception=record.exc_info).log(level, record.getMessage())


def _configure_logging() -> None:
    """Configure Loguru on stderr and bridge stdlib logging into it."""

    level = (get_settings().log_level or "INFO").upper()

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        backtrace=False,
        diagnose=False,
    )

    root = logging.getLogger()
    root.handlers = [_LoguruInterceptHandler()]
    root.setLevel(level)
    logging.captureWarnings(True)

    logger.bind(module="script.check_connection").debug("Logging initialised at level {}", level)


def main(argv: Sequence[str] | None = None) -> int:
    _configure_logging()
    return int(cli_main(argv))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
