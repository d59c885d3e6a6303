"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from accounts.shared.telemetry.logging import TraceContextFilter, setup_logging
from accounts.shared.telemetry.telemetry import TelemetryConfig, build_exporter
from accounts.shared.telemetry.tracing import (
    add_span_attributes,
    set_span_error,
    traced,
)

__all__ = [
    "setup_logging",
    "TraceContextFilter",
    "TelemetryConfig",
    "build_exporter",
    "traced",
    "add_span_attributes",
    "set_span_error",
]
