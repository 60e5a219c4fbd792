"""Operational scripts for form mailer."""
