"""Tests for logging setup functions."""

import json
import logging

import pytest

from core.errors.exceptions import HTTPStatusError
from core.logging.context import clear_log_context, get_log_context, set_log_context
from core.logging.setup import get_log_file_path, setup_logging
from core.logging.utilities import log_exception, log_with_context


class TestSetupLogging:
    """Tests for setup_logging function."""

    @pytest.fixture(autouse=True)
    def cleanup(self):
        """Clean up after each test."""
        clear_log_context()
        yield
        clear_log_context()
        root_logger = logging.getLogger()
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers.clear()

    def _read_log_lines(self, tmp_path):
        for handler in logging.getLogger().handlers:
            handler.flush()
        log_files = list(tmp_path.rglob("*.log"))
        assert len(log_files) == 1
        return [json.loads(line) for line in log_files[0].read_text().splitlines()]

    def test_creates_file_and_console_handlers(self, tmp_path):
        """One rotating file handler plus one console handler."""
        setup_logging(stage="populate", domain="image_store", log_dir=tmp_path)

        root_logger = logging.getLogger()

        assert len(root_logger.handlers) == 2
        assert (tmp_path / "image_store").is_dir()

    def test_reinit_does_not_duplicate_handlers(self, tmp_path):
        setup_logging(domain="image_store", log_dir=tmp_path)
        setup_logging(domain="image_store", log_dir=tmp_path)

        assert len(logging.getLogger().handlers) == 2

    def test_sets_log_context(self, tmp_path):
        setup_logging(
            stage="populate", domain="image_store", log_dir=tmp_path, worker_id="w-1"
        )

        assert get_log_context() == {
            "domain": "image_store",
            "stage": "populate",
            "worker_id": "w-1",
        }

    def test_json_file_records_include_context_and_extras(self, tmp_path):
        setup_logging(stage="populate", domain="image_store", log_dir=tmp_path)

        log_with_context(
            logging.getLogger("test"),
            logging.INFO,
            "Downloading iso for version 4.8",
            version="4.8",
            download_url="http://h/a.iso",
        )

        entry = self._read_log_lines(tmp_path)[-1]
        assert entry["msg"] == "Downloading iso for version 4.8"
        assert entry["level"] == "INFO"
        assert entry["domain"] == "image_store"
        assert entry["stage"] == "populate"
        assert entry["version"] == "4.8"
        assert entry["download_url"] == "http://h/a.iso"

    def test_log_exception_adds_category_and_message(self, tmp_path):
        setup_logging(domain="image_store", log_dir=tmp_path)

        log_exception(
            logging.getLogger("test"),
            HTTPStatusError("http://h/a.iso", 404),
            "Populate failed for version",
            version="X",
        )

        entry = self._read_log_lines(tmp_path)[-1]
        assert entry["error_category"] == "permanent"
        assert "404" in entry["error_message"]
        assert "exception" in entry

    def test_log_exception_truncates_long_messages(self, tmp_path):
        setup_logging(domain="image_store", log_dir=tmp_path)

        log_exception(
            logging.getLogger("test"),
            RuntimeError("x" * 1000),
            "Boom",
            include_traceback=False,
        )

        entry = self._read_log_lines(tmp_path)[-1]
        assert len(entry["error_message"]) == 503
        assert "exception" not in entry

    def test_suppresses_noisy_loggers(self, tmp_path):
        """Noisy loggers are set to WARNING level."""
        setup_logging(domain="image_store", log_dir=tmp_path, suppress_noisy=True)

        assert logging.getLogger("aiohttp").level == logging.WARNING

    def test_console_uses_readable_format(self, tmp_path, capsys):
        setup_logging(domain="image_store", log_dir=tmp_path)

        log_with_context(
            logging.getLogger("test"), logging.INFO, "Finished downloading", version="4.7"
        )

        captured = capsys.readouterr()
        assert "INFO - [image_store] - [4.7] Finished downloading" in captured.out


class TestGetLogFilePath:
    """Tests for log file path layout."""

    def test_domain_stage_and_instance(self, tmp_path):
        path = get_log_file_path(
            tmp_path, domain="image_store", stage="populate", instance_id="p42"
        )

        assert path.parent.parent == tmp_path / "image_store"
        assert path.name.startswith("image_store_populate_")
        assert path.name.endswith("_p42.log")

    def test_no_domain(self, tmp_path):
        path = get_log_file_path(tmp_path)

        assert path.parent.parent == tmp_path
        assert path.name.startswith("image_store_")


class TestLogContext:
    """Tests for context variables."""

    def test_partial_update_keeps_other_fields(self):
        clear_log_context()
        set_log_context(domain="image_store")
        set_log_context(stage="versions")

        ctx = get_log_context()
        assert ctx["domain"] == "image_store"
        assert ctx["stage"] == "versions"
        assert ctx["worker_id"] is None
        clear_log_context()
