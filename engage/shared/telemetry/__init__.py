"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from engage.shared.telemetry.logging import get_logger, setup_logging
from engage.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from engage.shared.telemetry.tracing import traced

__all__ = [
    "TelemetryConfig",
    "get_logger",
    "get_telemetry",
    "set_telemetry",
    "setup_logging",
    "traced",
]
