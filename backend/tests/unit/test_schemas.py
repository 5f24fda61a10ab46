"""
Unit tests for Pydantic schemas.
"""
import pytest
from uuid import uuid4
from datetime import datetime

from pollguard.schemas import ActionOut, LoginIn, PollListOut, PollOut, PollResultOut, VoteIn


class TestVoteIn:
    """Tests for VoteIn schema parsing."""

    @pytest.mark.unit
    def test_camel_case_aliases(self):
        data = VoteIn.model_validate({"pollId": "abc", "optionIndex": 2})
        assert data.poll_id == "abc"
        assert data.option_index == 2

    @pytest.mark.unit
    def test_field_names_accepted(self):
        data = VoteIn(poll_id="abc", option_index=0)
        assert data.option_index == 0

    @pytest.mark.unit
    def test_malformed_values_pass_through(self):
        """Type checks are left to the validators so callers get the usual error body."""
        data = VoteIn.model_validate({"pollId": 42, "optionIndex": "1"})
        assert data.poll_id == 42
        assert data.option_index == "1"

    @pytest.mark.unit
    def test_missing_fields_default_to_none(self):
        data = VoteIn.model_validate({})
        assert data.poll_id is None
        assert data.option_index is None


class TestAuthPayloads:
    """Tests for login and registration payloads."""

    @pytest.mark.unit
    def test_empty_login(self):
        data = LoginIn.model_validate({})
        assert data.email is None
        assert data.password is None


class TestPollOut:
    """Tests for poll response schemas."""

    @pytest.mark.unit
    def test_from_attributes(self):
        class Row:
            id = uuid4()
            user_id = "user-1"
            question = "Lunch?"
            options = ["A", "B"]
            created_at = datetime(2024, 1, 1)

        out = PollOut.model_validate(Row())
        assert out.question == "Lunch?"
        assert out.options == ["A", "B"]

    @pytest.mark.unit
    def test_action_envelopes(self):
        assert ActionOut().model_dump() == {"error": None}
        assert PollResultOut().model_dump() == {"error": None, "poll": None}
        assert PollListOut().polls == []
