"""Unit tests for the structlog configuration in src/utils/logging.py."""

from __future__ import annotations

import json

import pytest
import structlog

from src.utils.logging import _service_context, configure_logging, redact_secrets


@pytest.fixture
def restore_logging():
    yield
    configure_logging()


class TestRedactSecrets:
    def test_masks_credential_keys(self) -> None:
        event = redact_secrets(
            None,
            "info",
            {"event": "x", "openai_api_key": "sk-123", "Authorization": "Bearer t"},
        )
        assert event["openai_api_key"] == "***"
        assert event["Authorization"] == "***"

    def test_leaves_other_keys(self) -> None:
        event = redact_secrets(None, "info", {"event": "x", "max_tokens": 1024, "model": "m"})
        assert event == {"event": "x", "max_tokens": 1024, "model": "m"}

    def test_empty_secret_left_visible(self) -> None:
        event = redact_secrets(None, "info", {"event": "x", "anthropic_api_key": ""})
        assert event["anthropic_api_key"] == ""


class TestServiceContext:
    def test_adds_service_and_component(self) -> None:
        event = _service_context("cli")(None, "info", {"event": "x"})
        assert event["service"] == "brandkit"
        assert event["component"] == "cli"

    def test_bound_component_wins(self) -> None:
        event = _service_context("api")(None, "info", {"event": "x", "component": "seeder"})
        assert event["component"] == "seeder"


class TestConfigureLogging:
    def test_json_output_carries_context_and_masks_keys(self, capsys, restore_logging) -> None:
        configure_logging(json_output=True, component="cli")

        structlog.get_logger("test").info("settings_loaded", openai_api_key="sk-secret")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "settings_loaded"
        assert record["service"] == "brandkit"
        assert record["component"] == "cli"
        assert record["level"] == "info"
        assert record["openai_api_key"] == "***"
        assert "sk-secret" not in line

    def test_level_filtering(self, capsys, restore_logging) -> None:
        configure_logging(log_level="WARNING", json_output=True)

        structlog.get_logger("test").info("hidden_event")

        assert "hidden_event" not in capsys.readouterr().out
