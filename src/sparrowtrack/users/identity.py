from __future__ import annotations

from typing import Optional, Protocol

from flask import has_request_context, session

SESSION_USER_KEY = "user_email"


class IdentityService(Protocol):
    """Who is acting right now.

    Note (DIP): services depend on this interface; login/registration live elsewhere.
    """

    def current_user_email(self) -> Optional[str]:
        raise NotImplementedError


class StaticIdentity:
    """Fixed user, for scripts and tests."""

    def __init__(self, email: Optional[str]):
        self._email = email

    def current_user_email(self) -> Optional[str]:
        return self._email


class SessionIdentity:
    """Reads the signed-in user's email from the Flask session of the current request."""

    def __init__(self, key: str = SESSION_USER_KEY):
        self._key = key

    def current_user_email(self) -> Optional[str]:
        if not has_request_context():
            return None
        return session.get(self._key)
