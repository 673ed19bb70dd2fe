"""
Credential sign-in for the Zone01 Profile dashboard.

PURPOSE: Exchange a username/password pair for a bearer token.
AI CONTEXT: Used by the CLI 'login' command and the web login form.

PROTOCOL:
    POST <domain>/api/auth/signin
    Authorization: Basic base64(username:password)
    -> 200 "eyJhbGciOi..."            (JSON string: the JWT)
    -> 401 {"error": "User does not exist or password incorrect"}

The user id is taken from the token's 'sub' claim. The token is not
verified locally; the platform validates it on every GraphQL request.

USAGE:
    client = SignInClient()
    session = await client.sign_in("alice", "secret")
    SessionStore().save(session)
"""

from __future__ import annotations

import logging

import httpx

from .config import Config
from .errors import AuthenticationError, TransportError
from .session import SessionContext, encode_credentials, extract_user_id

__all__ = [
    "SignInClient",
    "INVALID_CREDENTIALS_MESSAGE",
    "NETWORK_ERROR_MESSAGE",
    "MISSING_CREDENTIALS_MESSAGE",
]

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials. Please try again!"
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again!"
MISSING_CREDENTIALS_MESSAGE = "Please enter both username and password"


class SignInClient:
    """Basic-auth sign-in against the platform's auth endpoint."""

    def __init__(
        self,
        endpoint: str | None = None,
        *,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the sign-in client.

        Args:
            endpoint: Sign-in URL. Default: Config.signin_endpoint()
            timeout: Request timeout in seconds.
                Default: Config.get_request_timeout()
            http_client: Optional shared httpx.AsyncClient (tests inject one
                backed by httpx.MockTransport).
        """
        self.endpoint = endpoint or Config.signin_endpoint()
        self.timeout = timeout if timeout is not None else Config.get_request_timeout()
        self._http = http_client

    async def _post(self, headers: dict[str, str]) -> httpx.Response:
        if self._http is not None:
            return await self._http.post(self.endpoint, headers=headers, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.endpoint, headers=headers)

    async def sign_in(self, username: str, password: str) -> SessionContext:
        """
        Sign in and build a session context from the returned token.

        Business context: Students sign in with their login name or e-mail.
        The platform answers with a JWT whose subject is the numeric user
        id that scopes every later query.

        Args:
            username: Login name or e-mail. Surrounding whitespace is removed.
            password: Account password.

        Returns:
            SessionContext with token and user id set; event id unresolved.

        Raises:
            AuthenticationError: Empty credentials, rejected credentials, or
                a response that does not carry a token.
            TransportError: Network failure or timeout (status None).

        Example:
            >>> session = await SignInClient().sign_in("alice", "secret")
            >>> session.is_authenticated()
            True
        """
        username = username.strip()
        if not username or not password:
            raise AuthenticationError(MISSING_CREDENTIALS_MESSAGE)

        headers = {
            "Authorization": f"Basic {encode_credentials(username, password)}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._post(headers)
        except httpx.HTTPError as e:
            logger.error(f"Sign-in request failed: {e!r}")
            raise TransportError(NETWORK_ERROR_MESSAGE) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            message = INVALID_CREDENTIALS_MESSAGE
            if isinstance(body, dict) and body.get("error"):
                message = str(body["error"])
            logger.warning(f"Sign-in rejected with status {response.status_code}")
            raise AuthenticationError(message)

        if not isinstance(body, str) or not body:
            logger.error("Sign-in response did not contain a token")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        user_id = extract_user_id(body)
        if user_id is None:
            logger.warning("Signed-in token carries no numeric user id")
        logger.info(f"Signed in as {username}")
        return SessionContext(token=body, user_id=user_id)
