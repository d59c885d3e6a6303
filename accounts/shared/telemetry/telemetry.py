"""OpenTelemetry tracing for the account service.

Built from Settings in the lifespan and kept on app.state.telemetry. Spans
go to the console, to an OTLP gRPC collector, or nowhere.
"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from accounts.core.config import Settings

logger = logging.getLogger(__name__)

# Probes are not traced.
UNTRACED_URLS = "/health,/ping"


def build_exporter(settings: Settings) -> SpanExporter | None:
    """Pick the span exporter named by TELEMETRY_EXPORTER.

    "otlp" needs TELEMETRY_OTLP_ENDPOINT; without it, and for any unknown
    name, spans go to the console.
    """
    kind = settings.telemetry_exporter
    if kind == "none":
        return None
    endpoint = settings.telemetry_otlp_endpoint
    if kind == "otlp" and endpoint:
        return OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
    if kind != "console":
        logger.warning("Unknown or incomplete exporter %r, using console", kind)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Tracer provider plus the instrumentations enabled for this process."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.tracer_provider: TracerProvider | None = None

    def start(
        self,
        app: FastAPI,
        *,
        instrument_redis: bool = False,
        engine: AsyncEngine | None = None,
    ) -> TracerProvider | None:
        """Install the global tracer provider and instrument the app.

        Returns None (and instruments nothing) when telemetry is disabled.
        Instrumentation failures are logged; the service starts without them.
        """
        settings = self.settings
        if not settings.telemetry_enabled:
            return None
        provider = TracerProvider(
            resource=Resource(
                attributes={
                    SERVICE_NAME: settings.app_name,
                    SERVICE_VERSION: settings.app_version,
                    "deployment.environment": settings.telemetry_environment,
                }
            ),
            sampler=TraceIdRatioBased(settings.telemetry_sample_rate),
        )
        exporter = build_exporter(settings)
        if exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
        self.tracer_provider = provider

        try:
            FastAPIInstrumentor.instrument_app(
                app, tracer_provider=provider, excluded_urls=UNTRACED_URLS
            )
            if instrument_redis:
                RedisInstrumentor().instrument(tracer_provider=provider)
            if engine is not None:
                SQLAlchemyInstrumentor().instrument(
                    engine=engine.sync_engine, tracer_provider=provider
                )
        except Exception:
            logger.exception("Telemetry instrumentation failed")

        logger.info(
            "OpenTelemetry initialized: service=%s exporter=%s redis=%s sql=%s",
            settings.app_name,
            settings.telemetry_exporter,
            instrument_redis,
            engine is not None,
        )
        return provider

    def shutdown(self) -> None:
        """Flush pending spans and stop the provider."""
        if self.tracer_provider is None:
            return
        self.tracer_provider.shutdown()
        self.tracer_provider = None
        logger.info("Telemetry shutdown complete")
