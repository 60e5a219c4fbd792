"""Clients module for form mailer.

Contains the SMTP transport used to deliver submissions.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from form_mailer.clients.smtp import SMTPClient

__all__ = ["SMTPClient"]
