"""
OpenTelemetry Tracing

Configures the OpenTelemetry tracer provider for the catalog service. Spans
are printed to the console when span export is enabled; otherwise the SDK
provider is installed without an exporter.
"""

import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

_tracer: Optional[trace.Tracer] = None
_initialized = False


def setup_tracing(service_name: str = "catalog-service", enable: bool = True, console_export: bool = False) -> None:
    """
    Initialize OpenTelemetry tracing.

    Args:
        service_name: Name of the service for tracing
        enable: Enable/disable tracing
        console_export: Print finished spans to stdout
    """
    global _initialized

    if _initialized:
        logger.warning("Tracing already initialized. Skipping.")
        return

    if not enable:
        logger.info("Tracing disabled via configuration")
        return

    resource = Resource(attributes={SERVICE_NAME: service_name})
    tracer_provider = TracerProvider(resource=resource)
    if console_export:
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(tracer_provider)

    _initialized = True
    logger.info(f"OpenTelemetry tracing initialized for service: {service_name}")


def get_tracer(name: str = __name__) -> trace.Tracer:
    """
    Get tracer instance for creating custom spans.

    Example:
        tracer = get_tracer(__name__)

        with tracer.start_as_current_span("my_operation"):
            pass
    """
    global _tracer

    if _tracer is None:
        _tracer = trace.get_tracer(name)

    return _tracer


def add_span_attributes(span: trace.Span, **attributes) -> None:
    for key, value in attributes.items():
        span.set_attribute(key, str(value))
