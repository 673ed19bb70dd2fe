"""
GraphQL transport client for the Zone01 Profile dashboard.

PURPOSE: Send one authenticated GraphQL request and return its data.
AI CONTEXT: The only module that talks to the GraphQL endpoint.

PROTOCOL:
    POST <domain>/api/graphql-engine/v1/graphql
    Authorization: Bearer <token>
    {"query": "...", "variables": {...}}
    -> {"data": {...}, "errors": [{"message": "..."}]}

ERROR MAPPING:
- No token in session      -> AuthenticationError (no request sent)
- Network failure/timeout  -> TransportError(status=None)
- Non-2xx status           -> TransportError(status=<code>)
- Undecodable body         -> TransportError(status=<code>)
- Non-empty errors list    -> QueryError(<first message>), all errors logged

No retries: callers decide whether a failure is fatal.

USAGE:
    client = GraphQLClient(session)
    data = await client.execute("query { user { id } }")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from .config import Config
from .errors import AuthenticationError, QueryError, TransportError

if TYPE_CHECKING:
    from .session import SessionContext

__all__ = ["GraphQLClient"]

logger = logging.getLogger(__name__)


class GraphQLClient:
    """
    Authenticated GraphQL client backed by httpx.

    A shared httpx.AsyncClient may be injected so that concurrent queries
    reuse one connection pool (and so tests can supply a MockTransport).
    Without one, each request opens and closes its own client.
    """

    def __init__(
        self,
        session: SessionContext,
        endpoint: str | None = None,
        *,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            session: Session context supplying the bearer token.
            endpoint: GraphQL URL. Default: Config.graphql_endpoint()
            timeout: Per-request timeout in seconds.
                Default: Config.get_request_timeout()
            http_client: Optional shared httpx.AsyncClient. The caller owns
                its lifecycle.
        """
        self.session = session
        self.endpoint = endpoint or Config.graphql_endpoint()
        self.timeout = timeout if timeout is not None else Config.get_request_timeout()
        self._http = http_client

    async def execute(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Execute a GraphQL query and return its data field.

        Business context: Every metric on the dashboard comes through this
        method. It raises on every failure kind so the query layer can
        apply its per-query gating/degrading policy in one place.

        Args:
            query: GraphQL document.
            variables: Variables for the document. Default: {}.

        Returns:
            The response's 'data' mapping (field name -> result).

        Raises:
            AuthenticationError: If the session has no bearer token.
            TransportError: On network failure, timeout, non-2xx status or
                an undecodable body.
            QueryError: If the response carries a non-empty errors list.

        Example:
            >>> data = await client.execute(
            ...     "query($id: Int!) { user(where: {id: {_eq: $id}}) { login } }",
            ...     {"id": 1234},
            ... )
            >>> data["user"][0]["login"]
            'alice'
        """
        token = self.session.get_token()
        if not token:
            logger.error("GraphQL query attempted without an authentication token")
            raise AuthenticationError("No authentication token found")

        payload = {"query": query, "variables": variables or {}}
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        try:
            if self._http is not None:
                response = await self._http.post(
                    self.endpoint, json=payload, headers=headers, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"GraphQL request failed: {e!r}")
            raise TransportError(f"Request to {self.endpoint} failed: {e}") from e

        if not response.is_success:
            logger.error(f"GraphQL HTTP error: status {response.status_code}")
            raise TransportError(
                f"HTTP error! status: {response.status_code}",
                status=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            logger.error(f"GraphQL response is not valid JSON: {e}")
            raise TransportError(
                "Invalid JSON in GraphQL response", status=response.status_code
            ) from e

        if not isinstance(result, dict):
            logger.error(f"GraphQL response is not an object: {type(result).__name__}")
            raise TransportError(
                "Unexpected GraphQL response shape", status=response.status_code
            )

        errors = result.get("errors")
        if errors:
            logger.error(f"GraphQL errors: {errors}")
            first = errors[0]
            message = first.get("message") if isinstance(first, dict) else str(first)
            raise QueryError(message or "Unknown GraphQL error")

        data: dict[str, Any] = result.get("data") or {}
        return data
