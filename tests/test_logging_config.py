"""Tests for logging configuration: JSON output, trace correlation, level, context."""

import json
import logging
from collections.abc import Iterator

import pytest
import structlog
from opentelemetry.sdk.trace import TracerProvider

from uploader.logging_config import bind_environment, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    level = root.level
    structlog.contextvars.clear_contextvars()
    yield
    root.setLevel(level)
    structlog.contextvars.clear_contextvars()


def test_json_logs_carry_trace_context_inside_span(caplog: pytest.LogCaptureFixture) -> None:
    """With json_logs=True a line logged inside a span is JSON with its trace_id/span_id."""
    setup_logging(service_name="test-service", json_logs=True)
    tracer = TracerProvider().get_tracer(__name__)

    with caplog.at_level(logging.INFO), tracer.start_as_current_span("upload_video") as span:
        structlog.get_logger("uploader.test").info("upload_video.ready", uid="abc")

    line = json.loads(caplog.records[-1].getMessage())
    span_context = span.get_span_context()
    assert line["event"] == "upload_video.ready"
    assert line["uid"] == "abc"
    assert line["level"] == "info"
    assert line["service"] == "test-service"
    assert line["trace_id"] == f"{span_context.trace_id:032x}"
    assert line["span_id"] == f"{span_context.span_id:016x}"


def test_json_logs_outside_span_have_no_trace_id(caplog: pytest.LogCaptureFixture) -> None:
    """No trace fields are added when no span is active."""
    setup_logging(service_name="test-service", json_logs=True)

    with caplog.at_level(logging.INFO):
        structlog.get_logger("uploader.test").info("uploader.start", videos=1)

    line = json.loads(caplog.records[-1].getMessage())
    assert "trace_id" not in line


def test_setup_logging_applies_level() -> None:
    """level='debug' lowers the root logger to DEBUG even when handlers already exist."""
    setup_logging(service_name="test-service", level="debug")

    assert logging.getLogger().level == logging.DEBUG


def test_setup_logging_binds_service_and_environment() -> None:
    """service and environment are merged into every event via contextvars."""
    setup_logging(service_name="test-service")
    bind_environment("staging")

    assert structlog.contextvars.get_contextvars() == {"service": "test-service", "environment": "staging"}


def test_bind_environment_ignores_none() -> None:
    """No environment key is bound when the environment is unset."""
    bind_environment(None)

    assert "environment" not in structlog.contextvars.get_contextvars()
