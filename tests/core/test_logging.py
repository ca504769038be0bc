"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from mockwright.config.models import LoggingConfig, LogOutputConfig
from mockwright.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)


class TestRunIdCorrelation:
    """Run ID context variable tests."""

    def setup_method(self) -> None:
        """Clear run ID before each test."""
        clear_run_id()

    def test_given_run_id_when_set_then_can_retrieve(self) -> None:
        """Run ID can be set and retrieved."""
        # Given
        run_id = "test-123"

        # When
        result = set_run_id(run_id)

        # Then
        assert result == run_id
        assert get_run_id() == run_id

    def test_given_no_id_when_set_then_generates_uuid(self) -> None:
        """Set generates UUID-based ID when none provided."""
        # When
        rid = set_run_id()

        # Then
        assert len(rid) == 12  # uuid4().hex[:12]

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        """Clear removes the current run ID."""
        # Given
        set_run_id("to-clear")

        # When
        clear_run_id()

        # Then
        assert get_run_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_run_id()

    def teardown_method(self) -> None:
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.getLogger().handlers.clear()

    def test_given_default_level_then_root_is_warning(self) -> None:
        """Default configuration only lets warnings through."""
        # When
        configure_logging()

        # Then
        assert logging.getLogger().level == logging.WARNING

    def test_given_json_file_output_when_log_then_valid_json_with_run_id(
        self, tmp_path: Path
    ) -> None:
        """JSON file output carries event, fields, level and run id."""
        # Given
        log_file = tmp_path / "logs" / "run.jsonl"
        configure_logging(
            config=LoggingConfig(
                level="DEBUG",
                outputs=[LogOutputConfig(destination=str(log_file), format="json")],
            )
        )
        set_run_id("abc123")
        logger = get_logger("test")

        # When
        logger.info("mock_generated", interface="Widget")
        for handler in logging.getLogger().handlers:
            handler.flush()

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "mock_generated"
        assert data["interface"] == "Widget"
        assert data["level"] == "info"
        assert data["run_id"] == "abc123"
        assert "timestamp" in data

    def test_given_output_level_when_below_then_filtered(self, tmp_path: Path) -> None:
        """Per-output level filters lower events."""
        # Given
        log_file = tmp_path / "warn.log"
        configure_logging(
            config=LoggingConfig(
                level="DEBUG",
                outputs=[
                    LogOutputConfig(destination=str(log_file), format="json", level="WARNING")
                ],
            )
        )
        logger = get_logger("test")

        # When
        logger.debug("hidden")
        logger.warning("shown")
        for handler in logging.getLogger().handlers:
            handler.flush()

        # Then
        content = log_file.read_text()
        assert "hidden" not in content
        assert "shown" in content

    def test_given_relative_file_destination_then_rejected(self) -> None:
        """File destinations must be absolute."""
        with pytest.raises(ValueError):
            LogOutputConfig(destination="relative/file.log")
