import json
import logging

import pytest

from utils.logger import JsonFormatter

pytestmark = pytest.mark.unit


def _record(**extra_fields) -> logging.LogRecord:
    record = logging.LogRecord("research", logging.WARNING, __file__, 10, "Source failed", None, None)
    record.extra_fields = extra_fields
    return record


def test_json_formatter_merges_context_and_masks_credentials():
    line = JsonFormatter().format(_record(source="news", api_key="sk-secret", Authorization="Bearer x"))
    data = json.loads(line)

    assert data["message"] == "Source failed"
    assert data["level"] == "WARNING"
    assert data["source"] == "news"
    assert data["api_key"] == "[REDACTED]"
    assert data["Authorization"] == "[REDACTED]"
    assert "sk-secret" not in line
    assert data["timestamp"].endswith("Z")
