"""Unit tests for SMTP client.

Tests connection setup per security mode, message building, sending and
error handling.

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import smtplib
from email.errors import HeaderParseError
from unittest.mock import MagicMock, patch

import pytest

from form_mailer.clients.smtp import SMTPClient
from form_mailer.core.exceptions import SMTPClientError


class TestSMTPConnection:
    """Tests for SMTP connection setup."""

    def test_create_connection_with_tls(self, smtp_config, mock_smtp_connection):
        """Test STARTTLS is issued before login in tls mode."""
        with patch("form_mailer.clients.smtp.smtplib.SMTP", return_value=mock_smtp_connection) as mock_smtp:
            client = SMTPClient(smtp_config)
            conn = client._create_connection()

            assert conn == mock_smtp_connection
            mock_smtp.assert_called_once_with("smtp.test.com", 587, timeout=30)
            mock_smtp_connection.starttls.assert_called_once()
            mock_smtp_connection.login.assert_called_once_with("sender@gmail.com", "testpassword")

    def test_create_connection_with_ssl(self, smtp_config, mock_smtp_connection):
        """Test implicit SSL uses SMTP_SSL and no STARTTLS."""
        smtp_config.secure = "ssl"
        smtp_config.port = 465

        with patch("form_mailer.clients.smtp.smtplib.SMTP_SSL", return_value=mock_smtp_connection) as mock_ssl:
            SMTPClient(smtp_config)._create_connection()

            mock_ssl.assert_called_once_with("smtp.test.com", 465, timeout=30)
            mock_smtp_connection.starttls.assert_not_called()
            mock_smtp_connection.login.assert_called_once()

    def test_create_connection_plain(self, smtp_config, mock_smtp_connection):
        """Test no encryption is negotiated in none mode."""
        smtp_config.secure = "none"

        with patch("form_mailer.clients.smtp.smtplib.SMTP", return_value=mock_smtp_connection):
            SMTPClient(smtp_config)._create_connection()

            mock_smtp_connection.starttls.assert_not_called()
            mock_smtp_connection.login.assert_called_once()

    def test_create_connection_failure(self, smtp_config):
        """Test connection errors raise SMTPClientError."""
        with patch("form_mailer.clients.smtp.smtplib.SMTP") as mock_smtp:
            mock_smtp.side_effect = ConnectionRefusedError("Connection refused")

            with pytest.raises(SMTPClientError) as exc_info:
                SMTPClient(smtp_config)._create_connection()

            assert "Failed to connect" in str(exc_info.value)
            assert exc_info.value.is_transient is True

    def test_login_failure_closes_connection(self, smtp_config, mock_smtp_connection):
        """Test a rejected login is reported and the socket closed."""
        mock_smtp_connection.login.side_effect = smtplib.SMTPAuthenticationError(535, b"Bad credentials")

        with patch("form_mailer.clients.smtp.smtplib.SMTP", return_value=mock_smtp_connection):
            with pytest.raises(SMTPClientError) as exc_info:
                SMTPClient(smtp_config)._create_connection()

            assert "Bad credentials" in str(exc_info.value)
            mock_smtp_connection.quit.assert_called_once()


class TestBuildMime:
    """Tests for MIME message construction."""

    def test_headers(self, outbound_message):
        """Test From, Reply-To, To and Subject headers."""
        msg = SMTPClient.build_mime(outbound_message)

        assert msg["From"] == "Visitor <visitor@example.org>"
        assert msg["Reply-To"] == "reply@example.org"
        assert msg["To"] == "inbox@example.com"
        assert msg["Subject"] == "New email from website"

    def test_body(self, outbound_message):
        """Test the body is plain text."""
        msg = SMTPClient.build_mime(outbound_message)

        assert msg.get_content_type() == "text/plain"
        assert msg.get_payload(decode=True).decode("utf-8") == "Hello there"


class TestSendMessage:
    """Tests for message sending."""

    def test_send_message_success(self, smtp_config, outbound_message, mock_smtp_connection):
        """Test a message is sent to the single recipient and the connection closed."""
        with patch("form_mailer.clients.smtp.smtplib.SMTP", return_value=mock_smtp_connection):
            SMTPClient(smtp_config).send_message(outbound_message)

            mock_smtp_connection.send_message.assert_called_once()
            kwargs = mock_smtp_connection.send_message.call_args.kwargs
            assert kwargs["from_addr"] == "visitor@example.org"
            assert kwargs["to_addrs"] == ["inbox@example.com"]
            mock_smtp_connection.quit.assert_called_once()

    def test_send_message_failure(self, smtp_config, outbound_message, mock_smtp_connection):
        """Test a rejected message raises SMTPClientError without retrying."""
        mock_smtp_connection.send_message.side_effect = smtplib.SMTPRecipientsRefused(
            {"inbox@example.com": (550, b"Mailbox unavailable")}
        )

        with patch("form_mailer.clients.smtp.smtplib.SMTP", return_value=mock_smtp_connection):
            with pytest.raises(SMTPClientError) as exc_info:
                SMTPClient(smtp_config).send_message(outbound_message)

            assert "Failed to send message" in str(exc_info.value)
            assert mock_smtp_connection.send_message.call_count == 1
            mock_smtp_connection.quit.assert_called_once()

    def test_quit_error_ignored(self, smtp_config, outbound_message, mock_smtp_connection):
        """Test an error on QUIT does not fail a sent message."""
        mock_smtp_connection.quit.side_effect = smtplib.SMTPServerDisconnected("gone")

        with patch("form_mailer.clients.smtp.smtplib.SMTP", return_value=mock_smtp_connection):
            SMTPClient(smtp_config).send_message(outbound_message)

        mock_smtp_connection.send_message.assert_called_once()

    def test_build_error_wrapped(self, smtp_config, outbound_message):
        """Test a message that cannot be built raises SMTPClientError before connecting."""
        with patch("form_mailer.clients.smtp.smtplib.SMTP") as mock_smtp, \
                patch.object(SMTPClient, "build_mime", side_effect=HeaderParseError("bad header")):
            with pytest.raises(SMTPClientError) as exc_info:
                SMTPClient(smtp_config).send_message(outbound_message)

            assert "Failed to build message" in str(exc_info.value)
            mock_smtp.assert_not_called()

    def test_serialization_error_wrapped(self, smtp_config, outbound_message, mock_smtp_connection):
        """Test a header rejected while the message is written out raises SMTPClientError."""
        mock_smtp_connection.send_message.side_effect = HeaderParseError("folded header")

        with patch("form_mailer.clients.smtp.smtplib.SMTP", return_value=mock_smtp_connection):
            with pytest.raises(SMTPClientError, match="folded header"):
                SMTPClient(smtp_config).send_message(outbound_message)

            mock_smtp_connection.quit.assert_called_once()


class TestValidateConnection:
    """Tests for connection validation."""

    def test_validate_connection_success(self, smtp_config, mock_smtp_connection):
        """Test validate_connection returns True after a successful login."""
        with patch("form_mailer.clients.smtp.smtplib.SMTP", return_value=mock_smtp_connection):
            assert SMTPClient(smtp_config).validate_connection() is True
            mock_smtp_connection.quit.assert_called_once()

    def test_validate_connection_failure(self, smtp_config):
        """Test validate_connection returns False when the server is unreachable."""
        with patch("form_mailer.clients.smtp.smtplib.SMTP") as mock_smtp:
            mock_smtp.side_effect = ConnectionRefusedError("Cannot connect")

            assert SMTPClient(smtp_config).validate_connection() is False


class TestTransientErrorDetection:
    """Tests for transient error detection."""

    @pytest.mark.parametrize("error_message,expected", [
        ("Connection timeout", True),
        ("Connection refused", True),
        ("Service temporarily unavailable", True),
        ("Try again later", True),
        ("Broken pipe", True),
        ("Invalid recipient", False),
        ("Authentication failed", False),
        ("Mailbox not found", False),
    ])
    def test_is_transient_error(self, error_message, expected):
        """Test _is_transient_error correctly identifies transient errors."""
        assert SMTPClient._is_transient_error(Exception(error_message)) == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
