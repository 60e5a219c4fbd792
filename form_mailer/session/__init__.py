"""Session module for form mailer.

Session store abstraction and CSRF token handling.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from form_mailer.session.store import (
    TOKEN_SESSION_KEY,
    InMemorySessionStore,
    RequestSessionStore,
    SessionStore,
    clear_token,
    get_token,
    token_matches,
)

__all__ = [
    "TOKEN_SESSION_KEY",
    "SessionStore",
    "InMemorySessionStore",
    "RequestSessionStore",
    "get_token",
    "clear_token",
    "token_matches",
]
