"""Form mailer configuration with Pydantic v2.

Manages SMTP credentials, the receiving mailbox, session signing and
logging settings loaded from environment variables or .env file.

All settings can be overridden via environment variables.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

import secrets

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from form_mailer.core.exceptions import ConfigError


class MailerSettings(BaseSettings):
    """Form mailer configuration.

    Loads settings from environment variables and .env file using Pydantic v2.
    All settings are case-sensitive and strictly validated.

    Attributes:
        SERVICE_NAME: Name of the service.
        SERVICE_VERSION: Service version.
        API_HOST: API server host.
        API_PORT: API server port.
        SMTP_HOST: SMTP server hostname.
        SMTP_PORT: SMTP server port (1-65535).
        SMTP_SECURE: Transport security (tls, ssl or none).
        SMTP_USER: SMTP authentication username.
        SMTP_PASSWORD: SMTP authentication password.
        SMTP_TIMEOUT: SMTP connection timeout in seconds.
        MAIL_TO: Mailbox receiving every form submission.
        MAIL_SUBJECT: Subject used when the form does not provide one.
        MAILER_AJAX_MODE: Report outcomes as HTTP status + JSON by default.
        SESSION_SECRET_KEY: Key signing the session cookie.
        SESSION_COOKIE_NAME: Name of the session cookie.
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        LOG_TO_FILE: Whether to log to file.
        LOG_DIR: Directory for log files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ========================================================================
    # Service Configuration
    # ========================================================================
    SERVICE_NAME: str = Field(
        default="form-mailer",
        description="Name of the service",
    )
    SERVICE_VERSION: str = Field(
        default="0.1.0",
        description="Service version",
    )
    API_HOST: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    API_PORT: int = Field(
        default=8002,
        ge=1,
        le=65535,
        description="API server port",
    )

    # ========================================================================
    # SMTP Configuration
    # ========================================================================
    SMTP_HOST: str = Field(
        default="smtp.gmail.com",
        description="SMTP server hostname",
    )
    SMTP_PORT: int = Field(
        default=587,
        ge=1,
        le=65535,
        description="SMTP server port",
    )
    SMTP_SECURE: str = Field(
        default="tls",
        pattern="^(tls|ssl|none)$",
        description="Transport security: STARTTLS, implicit SSL or none",
    )
    SMTP_USER: str = Field(
        default="",
        description="SMTP authentication username",
    )
    SMTP_PASSWORD: str = Field(
        default="",
        description="SMTP authentication password",
    )
    SMTP_TIMEOUT: int = Field(
        default=30,
        ge=5,
        le=300,
        description="SMTP connection timeout in seconds",
    )

    # ========================================================================
    # Mail Configuration
    # ========================================================================
    MAIL_TO: str = Field(
        default="",
        description="Mailbox receiving form submissions",
    )
    MAIL_SUBJECT: str = Field(
        default="New email from website",
        min_length=1,
        description="Subject used when the form does not send one",
    )
    MAILER_AJAX_MODE: bool = Field(
        default=False,
        description="Answer with HTTP status and JSON body instead of raising",
    )

    # ========================================================================
    # Session Configuration
    # ========================================================================
    SESSION_SECRET_KEY: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        min_length=16,
        description="Key used to sign the session cookie",
    )
    SESSION_COOKIE_NAME: str = Field(
        default="form_mailer_session",
        description="Session cookie name",
    )

    # ========================================================================
    # Logging Configuration
    # ========================================================================
    LOG_LEVEL: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level",
    )
    LOG_TO_FILE: bool = Field(
        default=True,
        description="Whether to log to file",
    )
    LOG_DIR: str = Field(
        default="./logs",
        description="Directory for log files",
    )
    LOG_MAX_SIZE_MB: int = Field(
        default=10,
        gt=0,
        description="Maximum log file size in megabytes",
    )
    LOG_BACKUP_COUNT: int = Field(
        default=5,
        gt=0,
        description="Number of backup log files to keep",
    )

    @field_validator("SMTP_HOST")
    @classmethod
    def validate_smtp_host(cls, v: str) -> str:
        """Validate SMTP host is not empty.

        Raises:
            ValueError: If hostname is empty or whitespace.
        """
        if not v.strip():
            raise ValueError("SMTP_HOST cannot be empty")
        return v.strip()

    @field_validator("SMTP_PASSWORD")
    @classmethod
    def validate_smtp_password(cls, v: str) -> str:
        """Remove spaces from SMTP password.

        Gmail app passwords are displayed with spaces for readability but
        must be used without them.

        Examples:
            >>> # Gmail generates: "wrce fmkh xlvn jiht"
            >>> # Automatically converted to: "wrcefmkhxlvnjiht"
        """
        return v.replace(" ", "")

    @field_validator("MAIL_TO")
    @classmethod
    def validate_mail_to(cls, v: str) -> str:
        # Checked for well-formedness when the Mailer is built
        return v.strip()

    def validate_smtp_config(self) -> None:
        """Validate complete SMTP configuration.

        Ensures the settings a Mailer needs are present before a form is accepted.

        Raises:
            ConfigError: If required settings are missing.
        """
        missing_fields = []

        if not self.SMTP_USER.strip():
            missing_fields.append("SMTP_USER")

        if not self.SMTP_PASSWORD.strip():
            missing_fields.append("SMTP_PASSWORD")

        if not self.MAIL_TO:
            missing_fields.append("MAIL_TO")

        if missing_fields:
            raise ConfigError(
                f"Required settings missing: {', '.join(missing_fields)}. "
                f"Set these environment variables to enable form delivery."
            )

    def get_mailer_config(self) -> dict[str, str]:
        """Get the Mailer construction mapping.

        Returns:
            Dictionary with the ``username``, ``password`` and ``emailTo`` keys.
        """
        return {
            "username": self.SMTP_USER,
            "password": self.SMTP_PASSWORD,
            "emailTo": self.MAIL_TO,
        }

    def get_smtp_options(self) -> dict[str, str | int]:
        """Get the SMTP transport tunables (everything except credentials).

        Returns:
            Dictionary with host, port, secure and timeout keys.
        """
        return {
            "smtp_host": self.SMTP_HOST,
            "smtp_port": self.SMTP_PORT,
            "smtp_secure": self.SMTP_SECURE,
            "smtp_timeout": self.SMTP_TIMEOUT,
        }
