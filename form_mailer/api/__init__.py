"""API module for form mailer.

FastAPI application exposing the token, contact and health endpoints.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from form_mailer.api.main import create_app

__all__ = ["create_app"]
