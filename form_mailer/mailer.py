"""Form-to-email relay.

The Mailer validates submitted form fields, optionally checks a CSRF token
against the user's session and hands the composed message to the SMTP
transport. Every outcome is returned as a SendResult; the caller decides
whether to raise it or turn it into an HTTP response.

Usage:
    from form_mailer import Mailer, InMemorySessionStore

    session = InMemorySessionStore()
    token = Mailer.get_token(session)           # embed in the form

    mailer = Mailer(
        {"username": "me@gmail.com", "password": "app-password", "emailTo": "inbox@example.com"},
        session=session,
    )
    mailer.compose(from_email="visitor@example.org", from_name="Visitor", body="Hello")
    mailer.set_token(token)                     # value posted back by the form
    mailer.send().unwrap()

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from form_mailer.clients.smtp import SMTPClient
from form_mailer.core.exceptions import (
    ConfigError,
    MailerError,
    SecurityError,
    SMTPClientError,
    TransportError,
    ValidationError,
)
from form_mailer.core.logger import get_logger, log_context
from form_mailer.models.message import (
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
from form_mailer.session.store import SessionStore, get_token, token_matches

logger = get_logger(__name__)


def _has_line_break(value: str | None) -> bool:
    return bool(value) and ("\r" in value or "\n" in value)


class MailTransport(Protocol):
    """Delivers one outbound message, raising SMTPClientError on failure."""

    def send_message(self, message: OutboundMessage) -> None: ...


TransportFactory = Callable[[SMTPConfig], MailTransport]


class Mailer:
    """Validate a form submission and relay it to a fixed mailbox.

    A Mailer is built for exactly one outbound message. Construction fails
    with ConfigError unless the SMTP credentials and a well-formed receiving
    address are supplied.

    Attributes:
        config: Validated sender/recipient configuration.
        draft: Message fields, populated before send().
        response_mode: How the caller should surface the outcome.
        smtp_host: SMTP server hostname.
        smtp_port: SMTP server port.
        smtp_secure: "tls", "ssl" or "none".
        smtp_timeout: SMTP timeout in seconds.
        state: Current SendState, None until send() is called.
    """

    # Checked in this order; the first empty one is reported.
    REQUIRED_FIELDS = (
        ("from_email", "fromEmail"),
        ("from_name", "fromName"),
        ("body", "body"),
    )

    def __init__(
        self,
        config: Mapping[str, Any],
        *,
        session: SessionStore | None = None,
        transport_factory: TransportFactory = SMTPClient,
        response_mode: ResponseMode | str = ResponseMode.EXCEPTION,
        smtp_host: str = "smtp.gmail.com",
        smtp_port: int = 587,
        smtp_secure: str = "tls",
        smtp_timeout: int = 30,
    ) -> None:
        """Initialize the mailer.

        Args:
            config: Mapping with ``username``, ``password`` and ``emailTo``.
            session: Session store holding the CSRF token.
            transport_factory: Builds the transport from an SMTPConfig.
            response_mode: Exception or Ajax reporting.
            smtp_host: SMTP server hostname.
            smtp_port: SMTP server port.
            smtp_secure: Transport security.
            smtp_timeout: SMTP timeout in seconds.

        Raises:
            ConfigError: If a construction value is missing or invalid.
        """
        self.config = MailerConfig.from_mapping(config)
        self.session = session
        self.transport_factory = transport_factory
        self.response_mode = ResponseMode(response_mode)
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_secure = smtp_secure
        self.smtp_timeout = smtp_timeout
        self._smtp_config()
        self.draft = MessageDraft()
        self.state: SendState | None = None
        self._token: str | None = None
        self._result: SendResult | None = None

    @property
    def ajax_mode(self) -> bool:
        return self.response_mode is ResponseMode.AJAX

    @ajax_mode.setter
    def ajax_mode(self, enabled: bool) -> None:
        self.response_mode = ResponseMode.AJAX if enabled else ResponseMode.EXCEPTION

    def compose(
        self,
        *,
        from_email: str | None = None,
        from_name: str | None = None,
        body: str | None = None,
        subject: str | None = None,
        reply_to: str | None = None,
    ) -> MessageDraft:
        """Set draft fields; None leaves a field unchanged.

        Returns:
            The updated draft.
        """
        updates = {
            "from_email": from_email,
            "from_name": from_name,
            "body": body,
            "subject": subject,
            "reply_to": reply_to,
        }
        for field_name, value in updates.items():
            if value is not None:
                setattr(self.draft, field_name, value)
        return self.draft

    @staticmethod
    def get_token(session: SessionStore) -> str:
        """Return the session CSRF token, generating it if needed."""
        return get_token(session)

    def set_token(self, token: str) -> None:
        """Store the token submitted with the form for checking at send time.

        Raises:
            ValidationError: If the token is empty.
        """
        if not token:
            raise ValidationError("CSRF token is empty")
        self._token = token

    @staticmethod
    def prepare_message(raw_body: str, context: RequestContext | None = None) -> str:
        """Prefix the submitted text with where it came from.

        Args:
            raw_body: Text typed into the form.
            context: Host and URI of the submitting request, if known.

        Returns:
            Greeting line, optional source URL line and the body, separated
            by blank lines.
        """
        host = context.host if context and context.host else None
        uri = context.uri if context and context.uri else None

        parts = [f"You have a new message from {host or 'your website'}:"]
        if uri:
            parts.append(f"Submitted from URL: {host or ''}{uri}")
        parts.append(raw_body)
        return "\n\n".join(parts)

    def send(self) -> SendResult:
        """Validate, check the token and transmit.

        Returns:
            SendResult holding the error that stopped the pipeline, if any.
            Calling send() again returns the same result without transmitting.
        """
        if self._result is not None:
            logger.warning(f"Mailer already {self._result.state.value}, not sending again")
            return self._result

        try:
            self.state = SendState.VALIDATING
            self._validate_draft()

            if self._token:
                self.state = SendState.CHECKING_TOKEN
                self._validate_token()

            self.state = SendState.TRANSMITTING
            self._transmit()

        except MailerError as e:
            extra = {"transient": e.is_transient} if isinstance(e, TransportError) else {}
            logger.warning(
                f"Send failed: {log_context(self.state.value, recipient=self.config.recipient_address, error=e, **extra)}"
            )
            self.state = SendState.FAILED
            self._result = SendResult(state=SendState.FAILED, error=e)
            return self._result

        self.state = SendState.SUCCEEDED
        self._result = SendResult(state=SendState.SUCCEEDED)
        return self._result

    def _validate_draft(self) -> None:
        """Check required fields and header values, default Reply-To.

        Raises:
            ValidationError: On the first missing field or bad header value.
        """
        for attr, name in self.REQUIRED_FIELDS:
            if not getattr(self.draft, attr):
                raise ValidationError(f"Required property missing: {name}")

        if not is_valid_email(self.draft.from_email):
            raise ValidationError("Sender email address is invalid")

        # Values end up in message headers
        if _has_line_break(self.draft.from_name):
            raise ValidationError("Sender name must not contain line breaks")
        if _has_line_break(self.draft.subject):
            raise ValidationError("Subject must not contain line breaks")

        if not self.draft.reply_to:
            self.draft.reply_to = self.draft.from_email
        elif not is_valid_email(self.draft.reply_to):
            raise ValidationError("Reply-To email address is invalid")

    def _validate_token(self) -> None:
        """Compare the submitted token with the session one.

        Raises:
            SecurityError: If no session is attached or the tokens differ.
        """
        if self.session is None or not token_matches(self.session, self._token):
            raise SecurityError("Invalid token")

    def _smtp_config(self) -> SMTPConfig:
        """Build the transport settings from the current tunables.

        Raises:
            ConfigError: If host, port, security, credentials or timeout are invalid.
        """
        secure = self.smtp_secure.lower() if isinstance(self.smtp_secure, str) else self.smtp_secure
        try:
            return SMTPConfig(
                host=self.smtp_host,
                port=self.smtp_port,
                secure=secure,
                username=self.config.smtp_username,
                password=self.config.smtp_password,
                timeout=self.smtp_timeout,
            )
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"])
            raise ConfigError(f"Invalid SMTP settings: {field}: {error['msg']}") from e

    def _transmit(self) -> None:
        """Hand the message to the transport.

        Raises:
            ConfigError: If the SMTP settings are invalid.
            ValidationError: If the draft cannot form a message.
            TransportError: With the transport's detail if delivery fails.
        """
        smtp_config = self._smtp_config()
        try:
            message = OutboundMessage(
                from_email=self.draft.from_email,
                from_name=self.draft.from_name,
                reply_to=self.draft.reply_to,
                recipient=self.config.recipient_address,
                subject=self.draft.subject,
                body=self.draft.body,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid message: {e.errors()[0]['msg']}") from e

        try:
            self.transport_factory(smtp_config).send_message(message)
        except SMTPClientError as e:
            raise TransportError(str(e), is_transient=e.is_transient) from e

        logger.info(
            f"Form relayed: {log_context('send', recipient=message.recipient, sender=message.from_email)}"
        )
