"""Configuration module for form mailer.

Loads and validates settings from environment variables or .env file.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from form_mailer.config.settings import MailerSettings

__all__ = ["MailerSettings"]
