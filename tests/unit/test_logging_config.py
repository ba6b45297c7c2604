"""
Unit tests for logging configuration.
"""

import logging

import structlog

from content_gateway.logging_config import ServiceContext, build_processors, configure_logging


def test_service_context_stamps_identity():
    context = ServiceContext("content-gateway", "1.2.3", "staging")

    event = context(None, "info", {"event": "hello"})

    assert event == {
        "event": "hello",
        "service": "content-gateway",
        "version": "1.2.3",
        "env": "staging",
    }


def test_service_context_keeps_explicit_fields():
    context = ServiceContext("content-gateway", "1.2.3", "staging")

    event = context(None, "info", {"event": "hello", "service": "worker"})

    assert event["service"] == "worker"


def test_production_renders_json():
    context = ServiceContext("gw", "1", "production")

    shared, renderer = build_processors("Production", context)

    assert isinstance(renderer, structlog.processors.JSONRenderer)
    assert structlog.processors.format_exc_info in shared
    assert context in shared


def test_development_renders_console():
    shared, renderer = build_processors("development", ServiceContext("gw", "1", "development"))

    assert isinstance(renderer, structlog.dev.ConsoleRenderer)
    assert structlog.processors.format_exc_info not in shared


def test_configure_logging_sets_levels():
    configure_logging("warning", "development", quiet_loggers=("noisy.lib",))

    root_logger = logging.getLogger()
    assert root_logger.level == logging.WARNING
    assert any(
        isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
        for handler in root_logger.handlers
    )
    assert logging.getLogger("noisy.lib").level == logging.WARNING


def test_unknown_level_falls_back_to_info():
    configure_logging("chatty")

    assert logging.getLogger().level == logging.INFO
