"""Models module for form mailer.

Defines Pydantic v2 data models for the mailer configuration, message
drafts, send results and SMTP configuration.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from form_mailer.models.message import (
    DEFAULT_SUBJECT,
    MailerConfig,
    MessageDraft,
    OutboundMessage,
    RequestContext,
    ResponseMode,
    SendResult,
    SendState,
    is_valid_email,
)
from form_mailer.models.smtp_config import SMTPConfig

__all__ = [
    # Enums
    "ResponseMode",
    "SendState",
    # Models
    "MailerConfig",
    "MessageDraft",
    "RequestContext",
    "OutboundMessage",
    "SendResult",
    "SMTPConfig",
    # Helpers
    "DEFAULT_SUBJECT",
    "is_valid_email",
]
