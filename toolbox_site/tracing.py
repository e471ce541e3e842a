"""OpenTelemetry tracing for the transcript proxy."""

from __future__ import annotations

from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

_TRACING_CONFIGURED = False


def build_tracer_provider(
    service_name: str,
    environment: Optional[str] = None,
    endpoint: Optional[str] = None,
) -> TracerProvider:
    """Provider tagged with the service; spans leave the process only when an OTLP endpoint is given."""
    resource_attrs = {"service.name": service_name}
    if environment:
        resource_attrs["deployment.environment"] = environment

    provider = TracerProvider(resource=Resource.create(resource_attrs))
    if endpoint:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    return provider


def setup_tracing(
    service_name: str,
    environment: Optional[str] = None,
    endpoint: Optional[str] = None,
) -> None:
    """Install the global TracerProvider once per process."""
    global _TRACING_CONFIGURED
    if _TRACING_CONFIGURED:
        return
    trace.set_tracer_provider(build_tracer_provider(service_name, environment, endpoint))
    _TRACING_CONFIGURED = True
