"""
Unit tests for log formatting and metric labels.
"""
import json
import logging

import pytest

from pollguard.observability.logging import REDACTED, PollguardJsonFormatter, redact
from pollguard.observability.middleware import normalize_path


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="pollguard.test",
        level=logging.WARNING,
        pathname="test.py",
        lineno=1,
        msg="Rate limit exceeded",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestPollguardJsonFormatter:
    """Tests for PollguardJsonFormatter."""

    @pytest.mark.unit
    def test_standard_and_context_fields(self):
        formatter = PollguardJsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        data = json.loads(formatter.format(make_record(client="1.2.3.4", policy="auth")))

        assert data["service"] == "pollguard"
        assert data["level"] == "WARNING"
        assert data["logger"] == "pollguard.test"
        assert data["client"] == "1.2.3.4"
        assert data["policy"] == "auth"

    @pytest.mark.unit
    def test_credentials_redacted(self):
        formatter = PollguardJsonFormatter("%(message)s")
        record = make_record(password="Secret123", payload={"email": "a@b.co", "access_token": "t"})

        data = json.loads(formatter.format(record))

        assert data["password"] == REDACTED
        assert data["payload"] == {"email": "a@b.co", "access_token": REDACTED}


class TestRedact:
    """Tests for redact."""

    @pytest.mark.unit
    def test_nested_values(self):
        value = {"Authorization": "Bearer x", "items": [{"token": "y"}, {"name": "ok"}]}
        assert redact(value) == {
            "Authorization": REDACTED,
            "items": [{"token": REDACTED}, {"name": "ok"}],
        }

    @pytest.mark.unit
    def test_scalars_untouched(self):
        assert redact("password") == "password"
        assert redact(3) == 3


class TestNormalizePath:
    """Tests for normalize_path."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/api/polls/123e4567-e89b-12d3-a456-426614174000", "/api/polls/{id}"),
            ("/api/polls/42", "/api/polls/{id}"),
            ("/api/polls/vote", "/api/polls/vote"),
            ("/auth/login", "/auth/login"),
        ],
    )
    def test_ids_replaced(self, path, expected):
        assert normalize_path(path) == expected
