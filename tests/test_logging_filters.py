"""Tests for sensitive data filtering and submission correlation in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from crpt_api.core.config import LogSettings
from crpt_api.core.logging import (
    JsonFormatter,
    SensitiveDataFilter,
    SubmissionIdFilter,
    configure_logging,
    submission_context,
)


def _capture_logger(name: str) -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(SubmissionIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_sensitive_filter_redacts_signature():
    """Signature header values never reach the log output."""

    logger, stream = _capture_logger("test_signature_redaction")

    logger.info(
        "http.submitted",
        extra={
            "signature": "base64-detached-signature",
            "status_code": 200,
        },
    )

    output = stream.getvalue()

    assert "base64-detached-signature" not in output
    assert "[REDACTED]" in output
    assert "200" in output


def test_sensitive_filter_redacts_nested_headers():
    logger, stream = _capture_logger("test_nested_redaction")

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "Signature": "secret-sig",
                "Content-Type": "application/json",
            },
        },
    )

    output = stream.getvalue()

    assert "secret-sig" not in output
    assert "application/json" in output


def test_safe_fields_pass_through():
    logger, stream = _capture_logger("test_safe_fields")

    logger.info("document.submitted", extra={"doc_id": "doc-1", "duration_ms": 12.5})

    record = json.loads(stream.getvalue())

    assert record["message"] == "document.submitted"
    assert record["doc_id"] == "doc-1"
    assert record["duration_ms"] == 12.5
    assert "[REDACTED]" not in stream.getvalue()


def test_submission_id_attached_from_context():
    logger, stream = _capture_logger("test_submission_id")

    with submission_context("sub-123"):
        logger.info("rate_limit.admitted")
    logger.info("outside")

    first, second = [json.loads(line) for line in stream.getvalue().splitlines()]

    assert first["submission_id"] == "sub-123"
    assert "submission_id" not in second


def test_submission_context_restores_outer_id():
    logger, stream = _capture_logger("test_submission_context")

    with submission_context("outer"):
        with submission_context() as inner:
            logger.info("inner_event")
        logger.info("outer_event")
    logger.info("no_submission")

    inner_rec, outer_rec, none_rec = [json.loads(line) for line in stream.getvalue().splitlines()]

    assert inner_rec["submission_id"] == inner
    assert inner != "outer"
    assert outer_rec["submission_id"] == "outer"
    assert "submission_id" not in none_rec


def test_configure_logging_to_file(tmp_path, monkeypatch: pytest.MonkeyPatch):
    root = logging.getLogger()
    previous_handlers = list(root.handlers)
    previous_level = root.level
    log_file = tmp_path / "logs" / "crpt.log"

    try:
        configure_logging(
            LogSettings(level="info", format="json", output="file", file_path=str(log_file))
        )
        logging.getLogger("crpt_api.test").info("file_event", extra={"signature": "s3cret"})
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)

    content = log_file.read_text(encoding="utf-8")
    assert "file_event" in content
    assert "s3cret" not in content
