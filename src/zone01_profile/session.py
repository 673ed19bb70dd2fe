"""
Session context for the Zone01 Profile dashboard.

PURPOSE: Explicit holder for the bearer token, user id and resolved event id.
AI CONTEXT: Passed by reference into transport, queries and orchestrator -
there is no ambient/global session state.

LIFECYCLE:
1. Created from a stored token/user id pair (SessionStore.load) or sign-in
2. Event id written once by the resolve phase of ProfileLoader
3. Read-only for the concurrent fan-out phase
4. Cleared on sign-out or on a failed profile load

USAGE:
    session = SessionContext(token="eyJ...", user_id=1234)
    client = GraphQLClient(session)
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass

from jose import JWTError, jwt

__all__ = [
    "SessionContext",
    "encode_credentials",
    "extract_user_id",
]

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """
    Mutable per-session state shared by the data pipeline.

    The event id has a single writer (the resolve phase) and is only read
    afterwards, so no locking is needed under asyncio.
    """

    token: str | None = None
    user_id: int | None = None
    event_id: int | None = None

    def get_token(self) -> str | None:
        """Return the bearer token, or None when empty or absent."""
        return self.token or None

    def get_user_id(self) -> int | None:
        """Return the numeric user id, or None when unknown."""
        return self.user_id

    def get_event_id(self) -> int | None:
        """Return the resolved current event id, or None before resolution."""
        return self.event_id

    def set_event_id(self, event_id: int | None) -> None:
        """
        Store the current event id resolved from the user's cohorts.

        Args:
            event_id: Event identifier, or None when the user has no
                enrollment with an event.
        """
        self.event_id = event_id

    def is_authenticated(self) -> bool:
        """True when a bearer token is present."""
        return self.get_token() is not None

    def clear(self) -> None:
        """Forget token, user id and event id."""
        self.token = None
        self.user_id = None
        self.event_id = None


def encode_credentials(username: str, password: str) -> str:
    """
    Encode credentials for HTTP Basic authentication.

    Business context: The Zone01 sign-in endpoint accepts either the login
    name or the e-mail address as the username, combined with the password
    as 'username:password' and base64-encoded.

    Args:
        username: Login name or e-mail.
        password: Account password.

    Returns:
        Base64 string suitable for an 'Authorization: Basic ...' header.

    Example:
        >>> encode_credentials("alice", "secret")
        'YWxpY2U6c2VjcmV0'
    """
    raw = f"{username}:{password}".encode()
    return base64.b64encode(raw).decode("ascii")


def extract_user_id(token: str) -> int | None:
    """
    Read the user id from a JWT's 'sub' claim without verifying it.

    The platform signs the token; this client only needs the subject to
    scope its queries, and the server re-validates the token on every
    request.

    Args:
        token: Encoded JWT returned by the sign-in endpoint.

    Returns:
        The subject as int, or None when the token cannot be decoded or
        carries no numeric subject.

    Example:
        >>> extract_user_id(token_with_sub_1234)
        1234
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError as e:
        logger.error(f"Error decoding JWT: {e}")
        return None

    subject = claims.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        logger.error(f"JWT subject is not a numeric user id: {subject!r}")
        return None
