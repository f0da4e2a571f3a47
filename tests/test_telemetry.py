"""Tests for arena_chat.core.telemetry."""

from __future__ import annotations

from unittest.mock import patch

from arena_chat.config import ArenaSettings, ContextConfig, ModelsConfig, ServerApi, ServerConfig
from arena_chat.core import telemetry
from arena_chat.core.telemetry import get_tracer, init_tracing, resource_attributes, shutdown_tracing
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import NoOpTracerProvider


class TestInitTracing:
    def setup_method(self) -> None:
        telemetry._tracer_provider = None

    def test_no_endpoint_returns_noop(self) -> None:
        assert isinstance(init_tracing(endpoint=None), NoOpTracerProvider)

    def test_empty_endpoint_returns_noop(self) -> None:
        assert isinstance(init_tracing(endpoint=""), NoOpTracerProvider)

    def test_endpoint_builds_sdk_provider(self) -> None:
        with patch("arena_chat.core.telemetry.BatchSpanProcessor"):
            provider = init_tracing(service_name="arena-test", env="test", endpoint="localhost:4317")
        assert isinstance(provider, TracerProvider)
        attrs = dict(provider.resource.attributes)
        assert attrs["service.name"] == "arena-test"
        assert attrs["deployment.environment"] == "test"
        shutdown_tracing()

    def test_arena_attributes_land_on_resource(self) -> None:
        settings = ArenaSettings(
            server=ServerConfig(api=ServerApi.openai, url="http://localhost:8000"),
            models=ModelsConfig(default="codestral"),
            context=ContextConfig(),
        )
        with patch("arena_chat.core.telemetry.BatchSpanProcessor"):
            provider = init_tracing(endpoint="localhost:4317", attributes=resource_attributes(settings))
        attrs = dict(provider.resource.attributes)
        assert attrs["arena_chat.server.api"] == "openai"
        assert attrs["arena_chat.server.url"] == "http://localhost:8000"
        assert attrs["arena_chat.model.default"] == "codestral"
        assert attrs["arena_chat.context.max_chars"] == "10000"
        assert attrs["service.name"] == "arena-chat"
        shutdown_tracing()


def test_get_tracer_yields_usable_spans() -> None:
    tracer = get_tracer("arena_chat.tests")
    with tracer.start_as_current_span("unit") as span:
        span.set_attribute("arena.model", "gpt-4")


def test_shutdown_without_init_is_safe() -> None:
    telemetry._tracer_provider = None
    shutdown_tracing()
