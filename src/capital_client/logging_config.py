"""
Structured logging helpers.

Purpose:
- Provide a consistent log format for troubleshooting.
- Support JSONL output for easy ingestion by downstream tools.
- Keep session tokens and API keys out of log output.
"""

from __future__ import annotations

import json
import logging
import re
import time

_SECRET_PATTERN = re.compile(
    r"(?P<key>CST|X-SECURITY-TOKEN|X-CAP-API-KEY|securityToken|cst|password)"
    r"(?P<sep>['\"]?\s*[:=]\s*['\"]?)"
    r"(?P<value>[^'\",\s}]+)"
)


def redact(text: str) -> str:
    return _SECRET_PATTERN.sub(lambda m: f"{m.group('key')}{m.group('sep')}***", text)


class RedactingFilter(logging.Filter):
    """
    Mask token/key values in the rendered message.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


class JsonFormatter(logging.Formatter):
    """
    JSONL formatter for structured logs.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = redact(self.formatException(record.exc_info))
        return json.dumps(payload)


def setup_logging(level: str = "INFO", *, json_output: bool = False) -> None:
    """
    Configure root logging with optional JSONL output and secret redaction.
    """

    handler = logging.StreamHandler()
    handler.addFilter(RedactingFilter())
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)
