"""Connectivity probe for PostgreSQL connection profiles."""

from pgprobe.models import ConnectionSpec, ProbeResult
from pgprobe.probe import ConnectionProbe

__all__ = ["ConnectionProbe", "ConnectionSpec", "ProbeResult"]
