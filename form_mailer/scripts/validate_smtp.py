#!/usr/bin/env python3
"""Validate SMTP configuration and connectivity.

Tests SMTP server reachability, TLS/SSL and authentication with the
credentials the form mailer will use, and can relay a test submission
to the configured mailbox.

Usage:
    python -m form_mailer.scripts.validate_smtp
    python -m form_mailer.scripts.validate_smtp --verbose
    python -m form_mailer.scripts.validate_smtp --send-test
"""

from __future__ import annotations

import argparse
import sys

from form_mailer.clients.smtp import SMTPClient
from form_mailer.config import MailerSettings
from form_mailer.core.exceptions import ConfigError
from form_mailer.core.logger import get_logger, setup_logging
from form_mailer.mailer import Mailer
from form_mailer.models.smtp_config import SMTPConfig

logger = get_logger(__name__)


def print_config(settings: MailerSettings) -> None:
    """Print loaded SMTP configuration (with credentials masked).

    Args:
        settings: MailerSettings instance.
    """
    print("\n📋 Loaded Configuration:")
    print(f"  SMTP Host:      {settings.SMTP_HOST}")
    print(f"  SMTP Port:      {settings.SMTP_PORT}")
    print(f"  Security:       {settings.SMTP_SECURE}")
    print(f"  SMTP Username:  {settings.SMTP_USER or '(not set)'}")
    print(f"  SMTP Password:  {'***' if settings.SMTP_PASSWORD else '(not set)'}")
    print(f"  Recipient:      {settings.MAIL_TO or '(not set)'}")
    print(f"  Timeout:        {settings.SMTP_TIMEOUT}s")


def validate_smtp_connection(settings: MailerSettings) -> bool:
    """Log in to the SMTP server and disconnect.

    Returns:
        True if connection successful, False otherwise.
    """
    print("\n🧪 Testing SMTP Connection...")
    client = SMTPClient(
        SMTPConfig(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            secure=settings.SMTP_SECURE,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            timeout=settings.SMTP_TIMEOUT,
        )
    )

    if client.validate_connection():
        print("✅ SMTP connection test PASSED")
        return True
    print("❌ SMTP connection test FAILED")
    return False


def send_test_submission(settings: MailerSettings) -> bool:
    """Relay a test submission to MAIL_TO through the Mailer.

    Returns:
        True if the message was sent, False otherwise.
    """
    print(f"\n📧 Sending test submission to: {settings.MAIL_TO}")
    mailer = Mailer(settings.get_mailer_config(), **settings.get_smtp_options())
    mailer.compose(
        from_email=settings.MAIL_TO,
        from_name="Form Mailer",
        subject=f"{settings.MAIL_SUBJECT} (test)",
        body=mailer.prepare_message("Form mailer is working correctly."),
    )
    result = mailer.send()

    if result.ok:
        print(f"✅ Test submission sent to {settings.MAIL_TO}")
        return True
    print(f"❌ Test submission failed: {result.detail}")
    return False


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        0 if all checks passed, 1 otherwise.
    """
    parser = argparse.ArgumentParser(
        description="Validate form mailer SMTP configuration and connectivity.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal output (only errors and results)")
    parser.add_argument("--send-test", "-t", action="store_true", help="Relay a test submission to MAIL_TO")
    args = parser.parse_args(argv)

    setup_logging(
        log_level="DEBUG" if args.verbose else "INFO",
        console_level="DEBUG" if args.verbose else "WARNING" if args.quiet else "INFO",
        enable_file=False,
    )

    try:
        settings = MailerSettings()
        if not args.quiet:
            print_config(settings)
        settings.validate_smtp_config()
    except ConfigError as e:
        print(f"\n❌ {e}")
        return 1

    if not validate_smtp_connection(settings):
        return 1

    if args.send_test:
        try:
            sent = send_test_submission(settings)
        except ConfigError as e:
            print(f"\n❌ {e}")
            return 1
        if not sent:
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
