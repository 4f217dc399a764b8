"""OpenTelemetry tracing for the bookshelf API."""

import logging
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.trace import Tracer

from bookshelf.core.config import Settings, get_settings

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

# Provider installed by setup_tracing, flushed by shutdown_tracing
_tracer_provider: TracerProvider | None = None


def build_exporter(settings: Settings) -> SpanExporter:
    """Create the OTLP span exporter for the configured protocol."""
    if settings.otel_exporter_otlp_protocol == "grpc":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    else:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

    return OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)


def setup_tracing(app: "FastAPI", settings: Settings | None = None) -> TracerProvider | None:
    """Export spans over OTLP and instrument the application's routes.

    Repository spans come from module tracers obtained through ``get_tracer``;
    they start reporting once the provider installed here is global.

    Args:
        app: The application to instrument. Call before routers are included.
        settings: Tracing settings. Defaults to the cached application settings.

    Returns:
        The installed provider, or None when tracing is disabled.
    """
    global _tracer_provider

    settings = settings or get_settings()
    if not settings.otel_enabled:
        logger.info("OpenTelemetry tracing is disabled")
        return None

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.otel_service_name,
                "service.version": app.version,
                "deployment.environment": settings.environment,
            }
        )
    )
    provider.add_span_processor(BatchSpanProcessor(build_exporter(settings)))
    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

    FastAPIInstrumentor.instrument_app(app)

    logger.info(
        f"Tracing '{settings.otel_service_name}' over OTLP/{settings.otel_exporter_otlp_protocol}"
        f" to {settings.otel_exporter_otlp_endpoint}"
    )
    return provider


def shutdown_tracing() -> None:
    """Flush pending spans and release the provider, if one was installed."""
    global _tracer_provider

    if _tracer_provider is None:
        return

    logger.info("Shutting down OpenTelemetry tracing")
    _tracer_provider.shutdown()
    _tracer_provider = None


def get_tracer(name: str) -> Tracer:
    """Return a tracer for a module; it follows whichever provider is global."""
    return trace.get_tracer(name)
