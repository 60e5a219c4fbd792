"""Pytest configuration and fixtures for form mailer tests.

Provides reusable fixtures for unit and integration tests including
session stores, mocked SMTP connections and transports, and a FastAPI
test client.

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import os
from typing import Any
from unittest.mock import MagicMock

import pytest

# Set test environment before importing application modules
os.environ.setdefault("SMTP_USER", "sender@gmail.com")
os.environ.setdefault("SMTP_PASSWORD", "testpassword")
os.environ.setdefault("MAIL_TO", "inbox@example.com")
os.environ.setdefault("LOG_TO_FILE", "false")


# =============================================================================
# Mailer Fixtures
# =============================================================================
@pytest.fixture
def mailer_config() -> dict[str, str]:
    """Construction mapping accepted by Mailer."""
    return {
        "username": "sender@gmail.com",
        "password": "testpassword",
        "emailTo": "inbox@example.com",
    }


@pytest.fixture
def session_store():
    """Empty in-memory session store."""
    from form_mailer.session.store import InMemorySessionStore

    return InMemorySessionStore()


@pytest.fixture
def mock_transport() -> MagicMock:
    """Transport whose send_message succeeds."""
    transport = MagicMock()
    transport.send_message.return_value = None
    return transport


@pytest.fixture
def transport_factory(mock_transport: MagicMock) -> MagicMock:
    """Factory returning mock_transport, recording the SMTPConfig it was given."""
    return MagicMock(return_value=mock_transport)


@pytest.fixture
def mailer(mailer_config, session_store, transport_factory):
    """Mailer wired to the in-memory session and mock transport."""
    from form_mailer.mailer import Mailer

    return Mailer(mailer_config, session=session_store, transport_factory=transport_factory)


@pytest.fixture
def composed_mailer(mailer):
    """Mailer with a valid draft."""
    mailer.compose(from_email="visitor@example.org", from_name="Visitor", body="hi")
    return mailer


# =============================================================================
# SMTP Client Fixtures
# =============================================================================
@pytest.fixture
def smtp_config():
    """SMTPConfig for the default STARTTLS setup."""
    from form_mailer.models.smtp_config import SMTPConfig

    return SMTPConfig(
        host="smtp.test.com",
        port=587,
        secure="tls",
        username="sender@gmail.com",
        password="testpassword",
        timeout=30,
    )


@pytest.fixture
def outbound_message():
    """Outbound message as built by the Mailer."""
    from form_mailer.models.message import OutboundMessage

    return OutboundMessage(
        from_email="visitor@example.org",
        from_name="Visitor",
        reply_to="reply@example.org",
        recipient="inbox@example.com",
        subject="New email from website",
        body="Hello there",
    )


@pytest.fixture
def mock_smtp_connection() -> MagicMock:
    """Create a mock SMTP connection."""
    smtp = MagicMock()
    smtp.send_message.return_value = {}
    smtp.starttls.return_value = (220, b"TLS ready")
    smtp.login.return_value = (235, b"Authentication successful")
    smtp.quit.return_value = (221, b"Bye")
    return smtp


# =============================================================================
# Settings & FastAPI Test Client Fixtures
# =============================================================================
@pytest.fixture
def settings_overrides() -> dict[str, Any]:
    """Settings values used by test_settings; tests may mutate before use."""
    return {
        "SMTP_HOST": "smtp.test.com",
        "SMTP_USER": "sender@gmail.com",
        "SMTP_PASSWORD": "testpassword",
        "MAIL_TO": "inbox@example.com",
        "SESSION_SECRET_KEY": "test-secret-key-0123456789",
        "LOG_TO_FILE": False,
        "MAILER_AJAX_MODE": False,
    }


@pytest.fixture
def test_settings(settings_overrides):
    """MailerSettings built without reading any .env file."""
    from form_mailer.config.settings import MailerSettings

    return MailerSettings(_env_file=None, **settings_overrides)


@pytest.fixture
def test_client(test_settings):
    """FastAPI test client serving an app built from test_settings."""
    from fastapi.testclient import TestClient

    from form_mailer.api.main import create_app

    with TestClient(create_app(test_settings), raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def ajax_headers() -> dict[str, str]:
    """Headers sent by a browser XMLHttpRequest/fetch submission."""
    return {"X-Requested-With": "XMLHttpRequest"}
