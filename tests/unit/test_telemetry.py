"""Unit tests for telemetry exporter selection and disabled startup."""

from fastapi import FastAPI
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from accounts.shared.telemetry.telemetry import TelemetryConfig, build_exporter


def test_none_exporter(make_settings) -> None:
    assert build_exporter(make_settings(telemetry_exporter="none")) is None


def test_console_exporter(make_settings) -> None:
    exporter = build_exporter(make_settings(telemetry_exporter="console"))
    assert isinstance(exporter, ConsoleSpanExporter)


def test_otlp_exporter_with_endpoint(make_settings) -> None:
    exporter = build_exporter(
        make_settings(
            telemetry_exporter="otlp", telemetry_otlp_endpoint="http://localhost:4317"
        )
    )
    assert isinstance(exporter, OTLPSpanExporter)


def test_otlp_without_endpoint_falls_back_to_console(make_settings) -> None:
    exporter = build_exporter(make_settings(telemetry_exporter="otlp"))
    assert isinstance(exporter, ConsoleSpanExporter)


def test_disabled_telemetry_installs_nothing(make_settings) -> None:
    telemetry = TelemetryConfig(make_settings(telemetry_enabled=False))
    assert telemetry.start(FastAPI()) is None
    assert telemetry.tracer_provider is None
    telemetry.shutdown()
