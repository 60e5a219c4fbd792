"""SMTP client for form delivery.

Submits one message per call over an authenticated SMTP connection.
Works with Gmail and any compatible SMTP server.

Features:
- STARTTLS, implicit SSL or plain connections
- Authenticated submission
- Plain-text UTF-8 messages with Reply-To
- Transient error detection for logging

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import smtplib
from email.errors import MessageError
from email.mime.text import MIMEText
from email.utils import formataddr

from form_mailer.core.exceptions import SMTPClientError
from form_mailer.core.logger import get_logger, log_context
from form_mailer.models.message import OutboundMessage
from form_mailer.models.smtp_config import SMTPConfig

logger = get_logger(__name__)


class SMTPClient:
    """SMTP delivery client.

    Opens a connection, authenticates, transmits and closes for every
    message. No connection is kept between calls and nothing is retried.

    Attributes:
        config: SMTP configuration.
    """

    def __init__(self, smtp_config: SMTPConfig) -> None:
        """Initialize SMTP client.

        Args:
            smtp_config: SMTP configuration including credentials.
        """
        self.config = smtp_config
        logger.debug(f"SMTP Client initialized: {self.config.host}:{self.config.port}")

    def _create_connection(self) -> smtplib.SMTP:
        """Create an authenticated SMTP connection.

        Returns:
            Logged-in SMTP connection.

        Raises:
            SMTPClientError: If connection or authentication fails.
        """
        smtp: smtplib.SMTP | None = None
        try:
            logger.debug(
                f"Connecting to SMTP: {self.config.host}:{self.config.port} "
                f"({self.config.secure})"
            )
            if self.config.secure == "ssl":
                smtp = smtplib.SMTP_SSL(
                    self.config.host,
                    self.config.port,
                    timeout=self.config.timeout,
                )
            else:
                smtp = smtplib.SMTP(
                    self.config.host,
                    self.config.port,
                    timeout=self.config.timeout,
                )
                if self.config.secure == "tls":
                    logger.debug("Starting TLS...")
                    smtp.starttls()

            logger.debug("Authenticating...")
            smtp.login(self.config.username, self.config.password)

            logger.debug("SMTP connection established")
            return smtp

        except Exception as e:
            logger.error(f"Failed to establish SMTP connection: {e}")
            if smtp is not None:
                self._close_connection(smtp)
            raise SMTPClientError(
                f"Failed to connect to SMTP server: {e}",
                is_transient=self._is_transient_error(e),
            ) from e

    @staticmethod
    def _close_connection(smtp: smtplib.SMTP) -> None:
        """Close an SMTP connection, ignoring errors on QUIT."""
        try:
            smtp.quit()
        except (smtplib.SMTPException, OSError) as e:
            logger.debug(f"Error closing SMTP connection (non-critical): {e}")

    @staticmethod
    def build_mime(message: OutboundMessage) -> MIMEText:
        """Build the MIME message for a submission.

        Args:
            message: Outbound message fields.

        Returns:
            Plain-text UTF-8 MIME message with From, Reply-To, To and Subject.
        """
        msg = MIMEText(message.body, "plain", "utf-8")
        msg["From"] = formataddr((message.from_name, message.from_email))
        msg["Reply-To"] = message.reply_to
        msg["To"] = message.recipient
        msg["Subject"] = message.subject
        return msg

    def send_message(self, message: OutboundMessage) -> None:
        """Send a submission via SMTP.

        Args:
            message: Sender, reply-to, recipient, subject and body.

        Raises:
            SMTPClientError: If the message cannot be built or delivered.
        """
        try:
            msg = self.build_mime(message)
        except (MessageError, ValueError) as e:
            logger.error(f"Failed to build message for {message.recipient}: {e}")
            raise SMTPClientError(f"Failed to build message: {e}") from e

        smtp = self._create_connection()
        try:
            smtp.send_message(
                msg,
                from_addr=message.from_email,
                to_addrs=[message.recipient],
            )
            logger.info(
                f"Message sent: {log_context('send', recipient=message.recipient, subject=message.subject[:50])}"
            )
        except (smtplib.SMTPException, MessageError, OSError) as e:
            logger.error(f"Failed to send message to {message.recipient}: {e}", exc_info=True)
            raise SMTPClientError(
                f"Failed to send message to {message.recipient}: {e}",
                is_transient=self._is_transient_error(e),
            ) from e
        finally:
            self._close_connection(smtp)

    def validate_connection(self) -> bool:
        """Test SMTP connection and authentication.

        Returns:
            True if connection successful, False otherwise.
        """
        try:
            logger.info("Testing SMTP connection...")
            smtp = self._create_connection()
            self._close_connection(smtp)
            logger.info("SMTP connection test successful")
            return True

        except SMTPClientError as e:
            logger.error(f"SMTP connection test failed: {e}")
            return False

    @staticmethod
    def _is_transient_error(error: Exception) -> bool:
        """Determine if error is temporary.

        Args:
            error: Exception to analyze.

        Returns:
            True if error is likely transient and a later attempt may succeed.
        """
        error_str = str(error).lower()
        transient_keywords = [
            "timeout",
            "timed out",
            "connection",
            "temporarily",
            "try again",
            "unavailable",
            "refused",
            "reset",
            "broken pipe",
        ]
        return any(keyword in error_str for keyword in transient_keywords)
