"""
Tests for structured logging helpers.
"""

import json

import pytest

from docs_auditor.core.constants import LogFormat
from docs_auditor.core.exceptions import DocsAuditorError, FrontMatterError
from docs_auditor.core.logging import LogContext, get_logger, log_operation, setup_logging


def json_lines(text: str) -> list[dict]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


class TestLogging:
    """Tests for setup_logging, LogContext and log_operation."""

    def test_json_logs_go_to_stderr(self, capsys):
        setup_logging("INFO", LogFormat.JSON)
        logger = get_logger("docs_auditor.test")

        with LogContext(doc="intro.md"):
            logger.info("Checked", findings=2)
        logger.info("Outside")

        captured = capsys.readouterr()
        assert captured.out == ""
        first, second = json_lines(captured.err)
        assert (first["event"], first["doc"], first["findings"]) == ("Checked", "intro.md", 2)
        assert first["level"] == "info"
        assert "doc" not in second

    def test_level_filtering(self, capsys):
        setup_logging("WARNING", LogFormat.JSON)
        logger = get_logger("docs_auditor.test")

        logger.info("hidden")
        logger.warning("shown")

        assert [line["event"] for line in json_lines(capsys.readouterr().err)] == ["shown"]

    def test_log_operation_failure(self, capsys):
        setup_logging("INFO", LogFormat.JSON)
        logger = get_logger("docs_auditor.test")

        with pytest.raises(ValueError):
            with log_operation(logger, "scaffold", count=3):
                raise ValueError("boom")

        start, failed = json_lines(capsys.readouterr().err)
        assert start["event"] == "[START] scaffold"
        assert failed["event"] == "[FAILED] scaffold"
        assert (failed["error"], failed["count"]) == ("boom", 3)


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_to_dict(self):
        error = FrontMatterError("Invalid YAML in front-matter: bad", line=3)

        assert isinstance(error, DocsAuditorError)
        assert error.to_dict() == {
            "error": {
                "code": "FRONT_MATTER_ERROR",
                "message": "Invalid YAML in front-matter: bad",
                "details": {"line": 3},
            }
        }
