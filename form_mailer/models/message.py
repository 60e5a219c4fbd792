"""Form message models.

Defines the validated mailer configuration, the mutable message draft,
request metadata, the outbound envelope handed to the transport and the
result of a send attempt.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, model_validator

from form_mailer.core.exceptions import ConfigError, MailerError

DEFAULT_SUBJECT = "New email from website"


def is_valid_email(address: str | None) -> bool:
    """Check that an address is syntactically valid.

    Deliverability (DNS) is not checked: the relay only needs a well-formed
    address to put in the From/Reply-To/To headers.
    """
    if not address:
        return False
    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class ResponseMode(str, Enum):
    """How a send outcome is surfaced to the caller.

    Attributes:
        EXCEPTION: Failures are raised as MailerError.
        AJAX: Failures become HTTP 400 with a JSON body, success HTTP 200.
    """

    EXCEPTION = "exception"
    AJAX = "ajax"


class SendState(str, Enum):
    """Lifecycle of a single send() call.

    VALIDATING → CHECKING_TOKEN (only if a token was set) → TRANSMITTING →
    SUCCEEDED or FAILED. SUCCEEDED and FAILED are terminal.
    """

    VALIDATING = "validating"
    CHECKING_TOKEN = "checking_token"
    TRANSMITTING = "transmitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class MailerConfig(BaseModel):
    """Validated, immutable mailer configuration.

    Attributes:
        smtp_username: Account used to authenticate with the SMTP server.
        smtp_password: Password for that account.
        recipient_address: Mailbox receiving every submission.

    Checks run in a fixed order and the first failure raises ConfigError.
    """

    model_config = ConfigDict(frozen=True)

    smtp_username: str = ""
    smtp_password: str = Field(default="", repr=False)
    recipient_address: str = ""

    @model_validator(mode="after")
    def check_required(self) -> MailerConfig:
        if not self.smtp_username:
            raise ConfigError("Missing SMTP username")
        if not self.smtp_password:
            raise ConfigError("Missing SMTP password")
        if not self.recipient_address:
            raise ConfigError("Missing receiving email address")
        if not is_valid_email(self.recipient_address):
            raise ConfigError("Invalid receiving email address")
        return self

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> MailerConfig:
        """Build from the ``{username, password, emailTo}`` construction mapping.

        Args:
            config: Mapping holding the three construction keys.

        Returns:
            Validated MailerConfig.

        Raises:
            ConfigError: On the first missing or invalid value.
        """
        return cls(
            smtp_username=config.get("username") or "",
            smtp_password=config.get("password") or "",
            recipient_address=config.get("emailTo") or "",
        )


class MessageDraft(BaseModel):
    """Message fields populated from the submitted form before send().

    Attributes:
        from_email: Sender address typed into the form.
        from_name: Sender name typed into the form.
        body: Message text.
        subject: Subject line.
        reply_to: Reply-To address, defaults to from_email at send time.
    """

    from_email: str | None = None
    from_name: str | None = None
    body: str | None = None
    subject: str = DEFAULT_SUBJECT
    reply_to: str | None = None


class RequestContext(BaseModel):
    """HTTP request metadata used to annotate the message body."""

    host: str | None = None
    uri: str | None = None


class OutboundMessage(BaseModel):
    """Everything the transport needs to deliver one submission."""

    from_email: str
    from_name: str
    reply_to: str
    recipient: str
    subject: str
    body: str


@dataclass(frozen=True)
class SendResult:
    """Outcome of Mailer.send().

    Carries either nothing (success) or the MailerError that stopped the
    pipeline, together with the state the pipeline ended in.
    """

    state: SendState
    error: MailerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status_code(self) -> int:
        return 200 if self.error is None else self.error.status_code

    @property
    def detail(self) -> str | None:
        return self.error.message if self.error else None

    def to_payload(self) -> dict[str, Any]:
        """Ajax error body: ``{"status": 400, "detail": "<message>"}``."""
        if self.error is None:
            return {}
        return {"status": self.status_code, "detail": self.error.message}

    def unwrap(self) -> bool:
        """Return True on success, raise the carried error otherwise.

        Raises:
            MailerError: The error that failed the send.
        """
        if self.error is not None:
            raise self.error
        return True
