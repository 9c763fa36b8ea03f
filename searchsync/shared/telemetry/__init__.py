"""Shared telemetry: logging setup and tracing helpers."""

from searchsync.shared.telemetry.logging import setup_logging
from searchsync.shared.telemetry.tracing import TracedOperation, traced

__all__ = [
    "setup_logging",
    "traced",
    "TracedOperation",
]
