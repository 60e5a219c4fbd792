"""Session stores and CSRF token helpers.

The CSRF token lives in the user's session under a single ``Token`` slot.
Stores are explicit collaborators so the Mailer never reaches for ambient
request state: the API hands it a store wrapping the Starlette session,
tests hand it an in-memory one.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from __future__ import annotations

import secrets
from collections.abc import MutableMapping
from typing import Any, Protocol, runtime_checkable

from form_mailer.core.logger import get_logger

logger = get_logger(__name__)

TOKEN_SESSION_KEY = "Token"
TOKEN_BYTES = 256


@runtime_checkable
class SessionStore(Protocol):
    """Key-value store scoped to one user session."""

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def clear(self, key: str) -> None: ...


class InMemorySessionStore:
    """Dictionary-backed session store."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def clear(self, key: str) -> None:
        self._data.pop(key, None)


class RequestSessionStore:
    """Adapter over a mutable session mapping such as ``request.session``.

    Args:
        session: The session mapping populated by Starlette's SessionMiddleware.
    """

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def get(self, key: str) -> Any:
        return self._session.get(key)

    def set(self, key: str, value: Any) -> None:
        self._session[key] = value

    def clear(self, key: str) -> None:
        self._session.pop(key, None)


def get_token(store: SessionStore) -> str:
    """Return the session's CSRF token, generating it on first use.

    The token is 256 random bytes, hex-encoded (512 characters). It is reused
    for the lifetime of the session until clear_token() is called.

    Args:
        store: Session store of the current user.

    Returns:
        The CSRF token to embed in the form.
    """
    token = store.get(TOKEN_SESSION_KEY)
    if not token:
        token = secrets.token_hex(TOKEN_BYTES)
        store.set(TOKEN_SESSION_KEY, token)
        logger.debug("Generated new CSRF token for session")
    return token


def clear_token(store: SessionStore) -> None:
    """Drop the session's CSRF token so the next get_token() issues a new one."""
    store.clear(TOKEN_SESSION_KEY)


def token_matches(store: SessionStore, supplied: str) -> bool:
    """Compare a submitted token with the session one in constant time.

    A session without a token never matches.
    """
    stored = store.get(TOKEN_SESSION_KEY)
    if not isinstance(stored, str) or not stored:
        return False
    return secrets.compare_digest(stored.encode(), supplied.encode())
