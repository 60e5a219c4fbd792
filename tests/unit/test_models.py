"""Unit tests for message models.

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import pytest

from form_mailer.core.exceptions import ConfigError, TransportError
from form_mailer.models.message import (
    MailerConfig,
    MessageDraft,
    SendResult,
    SendState,
    is_valid_email,
)


class TestEmailCheck:
    """Tests for is_valid_email."""

    @pytest.mark.parametrize("address,expected", [
        ("a@b.com", True),
        ("first.last@example.co.uk", True),
        ("not-an-email", False),
        ("missing-domain@", False),
        ("@example.com", False),
        ("two@@example.com", False),
        ("", False),
        (None, False),
    ])
    def test_is_valid_email(self, address, expected):
        """Test syntactic address validation."""
        assert is_valid_email(address) is expected


class TestMailerConfig:
    """Tests for MailerConfig."""

    def test_direct_construction_is_checked(self):
        """Test building the model directly runs the same checks."""
        with pytest.raises(ConfigError, match="Invalid receiving email address"):
            MailerConfig(smtp_username="u", smtp_password="p", recipient_address="nope")

    def test_none_values_are_missing(self):
        """Test None in the construction mapping counts as empty."""
        with pytest.raises(ConfigError, match="Missing SMTP username"):
            MailerConfig.from_mapping({"username": None, "password": "p", "emailTo": "a@b.com"})

    def test_password_hidden_from_repr(self):
        """Test the password is not shown in repr."""
        config = MailerConfig.from_mapping({"username": "u", "password": "secret", "emailTo": "a@b.com"})

        assert "secret" not in repr(config)


class TestMessageDraft:
    """Tests for MessageDraft defaults."""

    def test_defaults(self):
        """Test the draft starts empty with the default subject."""
        draft = MessageDraft()

        assert draft.from_email is None
        assert draft.subject == "New email from website"
        assert draft.reply_to is None


class TestSendResult:
    """Tests for SendResult."""

    def test_success(self):
        """Test a successful result."""
        result = SendResult(state=SendState.SUCCEEDED)

        assert result.ok is True
        assert result.status_code == 200
        assert result.detail is None
        assert result.to_payload() == {}

    def test_failure(self):
        """Test a failed result carries the error message."""
        result = SendResult(state=SendState.FAILED, error=TransportError("Connection refused"))

        assert result.ok is False
        assert result.to_payload() == {"status": 400, "detail": "Connection refused"}
        with pytest.raises(TransportError):
            result.unwrap()
