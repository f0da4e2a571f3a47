"""OpenTelemetry tracing setup.

Exports spans over OTLP gRPC when an endpoint is configured; otherwise a
no-op provider is installed so callers never need conditional logic.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import NoOpTracerProvider

from arena_chat.config import ArenaSettings

logger = logging.getLogger(__name__)

_tracer_provider: TracerProvider | NoOpTracerProvider | None = None


def init_tracing(
    *,
    service_name: str = "arena-chat",
    env: str = "dev",
    endpoint: str | None = None,
    attributes: Mapping[str, str] | None = None,
) -> TracerProvider | NoOpTracerProvider:
    global _tracer_provider  # noqa: PLW0603

    if not endpoint:
        provider = NoOpTracerProvider()
        trace.set_tracer_provider(provider)
        _tracer_provider = provider
        logger.debug("Tracing disabled (no endpoint configured)")
        return provider

    try:
        service_version = pkg_version("arena-chat")
    except PackageNotFoundError:
        service_version = "0.0.0"

    resource = Resource.create(
        {
            **(attributes or {}),
            "service.name": service_name,
            "deployment.environment": env,
            "service.version": service_version,
        }
    )
    provider = TracerProvider(resource=resource)

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True)))
    logger.info("Tracing enabled → %s (env=%s)", endpoint, env)

    trace.set_tracer_provider(provider)
    _tracer_provider = provider
    return provider


def resource_attributes(settings: ArenaSettings) -> dict[str, str]:
    """Describe which completion endpoint and default model this process talks to."""
    return {
        "arena_chat.server.api": settings.server.api.value,
        "arena_chat.server.url": settings.server.url,
        "arena_chat.model.default": settings.models.default,
        "arena_chat.context.max_chars": str(settings.context.max_chars),
    }


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)


def shutdown_tracing() -> None:
    """Flush and shut down the tracer provider."""
    if isinstance(_tracer_provider, TracerProvider):
        _tracer_provider.shutdown()


__all__ = ["get_tracer", "init_tracing", "resource_attributes", "shutdown_tracing"]
