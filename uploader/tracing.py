"""Tracer provider for a single uploader run.

The CLI exits as soon as the last upload finishes, so the provider is handed
back to the caller, which must call ``shutdown()`` to flush batched spans.
"""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import DEPLOYMENT_ENVIRONMENT, SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

_provider: TracerProvider | None = None


def setup_tracing(
    service_name: str,
    environment: str | None = None,
    endpoint: str | None = None,
) -> TracerProvider:
    """Install the global TracerProvider on first call and return it.

    Spans are exported over OTLP/HTTP to endpoint when given; otherwise they
    are recorded for log correlation only.
    """
    global _provider
    if _provider is not None:
        return _provider

    attributes = {SERVICE_NAME: service_name}
    if environment:
        attributes[DEPLOYMENT_ENVIRONMENT] = environment

    provider = TracerProvider(resource=Resource.create(attributes), shutdown_on_exit=False)
    if endpoint:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(provider)

    _provider = provider
    return provider
