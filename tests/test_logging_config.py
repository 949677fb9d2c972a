import json
import logging

from capital_client.logging_config import JsonFormatter, RedactingFilter, redact


def test_redact_masks_tokens() -> None:
    text = "headers={'CST': 'abc123', 'X-SECURITY-TOKEN': 'xyz'} password=hunter2"
    cleaned = redact(text)
    assert "abc123" not in cleaned
    assert "xyz" not in cleaned
    assert "hunter2" not in cleaned
    assert "CST" in cleaned


def test_filter_rewrites_record() -> None:
    record = logging.LogRecord(
        "capital_client", logging.INFO, __file__, 1, "cst=%s", ("secret",), None
    )
    assert RedactingFilter().filter(record)
    assert record.getMessage() == "cst=***"


def test_json_formatter_output() -> None:
    record = logging.LogRecord(
        "capital_client.http", logging.WARNING, __file__, 1, "hello %s", ("world",), None
    )
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["name"] == "capital_client.http"
    assert payload["message"] == "hello world"
