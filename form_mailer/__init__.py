"""Form Mailer - Contact form to email relay.

Accepts submitted form fields, validates them, optionally checks a CSRF
token and forwards the composed message to a fixed mailbox over an
authenticated SMTP connection.

Architecture:
    - Mailer (validation, CSRF check, transmit)
    - Session store abstraction for the CSRF token
    - SMTP client wrapper (smtplib)
    - FastAPI application with signed-cookie sessions

Modules:
    - core: Exceptions, logger
    - config: Pydantic v2 settings
    - models: Data models (MailerConfig, MessageDraft, SendResult)
    - session: Session stores and CSRF token helpers
    - clients: External integrations (SMTP)
    - mailer: The Mailer itself
    - api: HTTP endpoints

Usage:
    from form_mailer import Mailer

    mailer = Mailer({"username": "me@gmail.com", "password": "...", "emailTo": "inbox@example.com"})
    mailer.compose(from_email="visitor@example.org", from_name="Visitor", body="Hi")
    result = mailer.send()
    if not result.ok:
        print(result.to_payload())

Author: Odiseo
Created: 2025-10-18
Version: 0.1.0
"""

__version__ = "0.1.0"

# Clients
from form_mailer.clients import SMTPClient

# Configuration
from form_mailer.config import MailerSettings

# Core utilities
from form_mailer.core import (
    ConfigError,
    MailerError,
    SecurityError,
    SMTPClientError,
    TransportError,
    ValidationError,
    get_logger,
)

# Mailer
from form_mailer.mailer import Mailer

# Models
from form_mailer.models import (
    MailerConfig,
    MessageDraft,
    OutboundMessage,
    RequestContext,
    ResponseMode,
    SendResult,
    SendState,
    SMTPConfig,
)

# Session
from form_mailer.session import (
    InMemorySessionStore,
    RequestSessionStore,
    SessionStore,
    get_token,
)

__all__ = [
    # Version
    "__version__",
    # Core exceptions
    "MailerError",
    "ConfigError",
    "ValidationError",
    "SecurityError",
    "TransportError",
    "SMTPClientError",
    "get_logger",
    # Configuration
    "MailerSettings",
    # Models - Enums
    "ResponseMode",
    "SendState",
    # Models - Core
    "MailerConfig",
    "MessageDraft",
    "RequestContext",
    "OutboundMessage",
    "SendResult",
    "SMTPConfig",
    # Session
    "SessionStore",
    "InMemorySessionStore",
    "RequestSessionStore",
    "get_token",
    # Clients
    "SMTPClient",
    # Mailer
    "Mailer",
]
