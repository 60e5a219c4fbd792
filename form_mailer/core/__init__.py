"""Core module for form mailer.

Provides the error taxonomy and logging configuration.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from form_mailer.core.exceptions import (
    ConfigError,
    MailerError,
    SecurityError,
    SMTPClientError,
    TransportError,
    ValidationError,
)
from form_mailer.core.logger import (
    get_logger,
    log_context,
    setup_logging,
)

__all__ = [
    # Exceptions
    "MailerError",
    "ConfigError",
    "ValidationError",
    "SecurityError",
    "TransportError",
    "SMTPClientError",
    # Logging
    "get_logger",
    "setup_logging",
    "log_context",
]
