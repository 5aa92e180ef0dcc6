# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for structured logging setup."""

import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from src.core.config.settings import BackendSettings, Settings
from src.domains.institution.ports import LoggingNotifier
from src.utils.logging import bind_context, get_logger, reset_context, setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore structlog defaults after each test."""
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def _production_settings() -> Settings:
    return Settings(
        environment="production",
        debug=False,
        log_level="INFO",
        backend=BackendSettings(
            institutions_url="https://api.colegios.pe/v1/institutions",
            classrooms_url="https://api.colegios.pe/v1/classrooms",
        ),
    )


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_output_outside_development(self, capsys) -> None:
        """Test production logs are JSON with bound context."""
        setup_logging(_production_settings())
        root = logging.getLogger()
        handler = logging.StreamHandler()
        root.addHandler(handler)
        try:
            bind_context(institution_id="inst-1")
            get_logger("src.tests").info("Classroom deleted", classroom_id="c-1", director_id=None)
        finally:
            root.removeHandler(handler)

        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "Classroom deleted"
        assert event["classroom_id"] == "c-1"
        assert event["institution_id"] == "inst-1"
        assert event["level"] == "info"
        assert event["logger"] == "src.tests"
        assert "director_id" not in event

    def test_quiets_third_party_loggers(self) -> None:
        setup_logging(Settings())

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("src").level == logging.DEBUG


class TestLogContext:
    """Tests for binding and resetting log context."""

    def test_reset_restores_previous_values(self) -> None:
        bind_context(institution_id="inst-1")
        tokens = bind_context(institution_id="inst-2", step=3)

        reset_context(tokens)

        assert structlog.contextvars.get_contextvars() == {"institution_id": "inst-1"}


class TestLoggingNotifier:
    """Tests for the log-backed notifier."""

    def test_writes_messages(self) -> None:
        notifier = LoggingNotifier()

        with capture_logs() as logs:
            notifier.notify_progress("Actualizando institución...")
            notifier.notify_failure("1 operación(es) de aulas fallaron")

        assert [entry["log_level"] for entry in logs] == ["info", "warning"]
        assert logs[0]["message"] == "Actualizando institución..."
