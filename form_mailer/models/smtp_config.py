"""SMTP configuration model.

Defines Pydantic model for SMTP server configuration and validation.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from pydantic import BaseModel, Field, field_validator


class SMTPConfig(BaseModel):
    """SMTP server configuration model.

    Validates and stores the SMTP connection parameters handed to the
    transport for a single submission.

    Attributes:
        host: SMTP server hostname.
        port: SMTP server port (1-65535).
        secure: "tls" for STARTTLS, "ssl" for implicit TLS, "none" for plain.
        username: SMTP authentication username.
        password: SMTP authentication password.
        timeout: Connection timeout in seconds.
    """

    host: str = Field(default="smtp.gmail.com", min_length=1, description="SMTP server hostname")
    port: int = Field(default=587, ge=1, le=65535, description="SMTP server port")
    secure: str = Field(default="tls", pattern="^(tls|ssl|none)$", description="Transport security")
    username: str = Field(..., min_length=1, description="SMTP authentication username")
    password: str = Field(..., description="SMTP authentication password")
    timeout: int = Field(default=30, ge=5, le=300, description="Connection timeout (seconds)")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password is not empty.

        Raises:
            ValueError: If password is empty or whitespace.
        """
        if not v or not v.strip():
            raise ValueError("SMTP password cannot be empty")
        return v
