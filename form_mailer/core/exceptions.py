"""Custom exceptions for form mailer.

Defines the error taxonomy surfaced by the Mailer so that callers (the HTTP
layer, scripts) can translate each failure into a response.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""


class MailerError(Exception):
    """Base exception for all form mailer errors.

    Every error raised or reported by the Mailer derives from this class and
    carries a human-readable message suitable for the ``detail`` field of an
    Ajax error payload.

    Attributes:
        message (str): Description of the failure.
        status_code (int): HTTP status used when the error is reported to a client.

    Example:
        try:
            mailer.send().unwrap()
        except MailerError as e:
            logger.error(f"Form submission failed: {e}")
    """

    status_code: int = 400

    def __init__(self, message: str):
        """Initialize mailer error.

        Args:
            message: Error description.
        """
        super().__init__(message)
        self.message = message


class ConfigError(MailerError):
    """Exception raised for bad construction input.

    Indicates missing SMTP credentials or a missing/invalid receiving address.

    Example:
        raise ConfigError("Missing SMTP username")
    """

    pass


class ValidationError(MailerError):
    """Exception raised for missing or malformed message fields.

    Example:
        raise ValidationError("Required property missing: fromEmail")
    """

    pass


class SecurityError(MailerError):
    """Exception raised when the submitted CSRF token does not match the session."""

    pass


class TransportError(MailerError):
    """Exception raised when the SMTP transport fails to deliver the message.

    The message is the detail reported by the transport.

    Attributes:
        is_transient (bool): Whether a later attempt may succeed.
    """

    def __init__(self, message: str, is_transient: bool = False):
        super().__init__(message)
        self.is_transient = is_transient


class SMTPClientError(Exception):
    """Exception raised for SMTP connection/delivery failures.

    Raised by SMTPClient and wrapped into TransportError by the Mailer.

    Attributes:
        message (str): Description of the SMTP error.
        is_transient (bool): Whether error is temporary.

    Example:
        raise SMTPClientError(
            "Connection timeout to smtp.gmail.com:587",
            is_transient=True
        )
    """

    def __init__(self, message: str, is_transient: bool = False):
        """Initialize SMTP client error.

        Args:
            message: Error description.
            is_transient: Whether error is temporary.
        """
        super().__init__(message)
        self.is_transient = is_transient
