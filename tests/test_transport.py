"""Tests for transport module."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

# Add tests directory to path for conftest imports
sys.path.insert(0, str(Path(__file__).parent))

from zone01_profile.config import Config
from zone01_profile.errors import AuthenticationError, QueryError, TransportError
from zone01_profile.session import SessionContext
from zone01_profile.transport import GraphQLClient

ENDPOINT = "http://test/api/graphql-engine/v1/graphql"


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    session: SessionContext | None = None,
) -> GraphQLClient:
    """GraphQLClient whose HTTP layer is an httpx.MockTransport."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GraphQLClient(
        session or SessionContext(token="tok", user_id=1),
        ENDPOINT,
        timeout=5.0,
        http_client=http,
    )


class TestGraphQLClientInit:
    """Tests for client defaults."""

    def test_defaults_from_config(self) -> None:
        """Verifies endpoint and timeout fall back to Config."""
        Config.set_test_overrides(domain="http://campus", request_timeout=7.0)
        client = GraphQLClient(SessionContext(token="t"))
        assert client.endpoint == "http://campus/api/graphql-engine/v1/graphql"
        assert client.timeout == 7.0


class TestGraphQLClientExecute:
    """Tests for request building and error mapping."""

    @pytest.mark.asyncio
    async def test_success_returns_data(self) -> None:
        """Verifies a successful response yields its data mapping.

        Business context:
        Every metric flows through execute(); the query layer expects the
        bare 'data' object.

        Arrangement:
        MockTransport capturing the request and answering with data.

        Action:
        Execute a query with variables.

        Assertion Strategy:
        Returned data, bearer header, JSON body with query and variables.
        """
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"user": [{"id": 1}]}})

        data = await make_client(handler).execute("query { user { id } }", {"userId": 1})

        assert data == {"user": [{"id": 1}]}
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == ENDPOINT
        assert request.headers["Authorization"] == "Bearer tok"
        assert json.loads(request.content) == {
            "query": "query { user { id } }",
            "variables": {"userId": 1},
        }

    @pytest.mark.asyncio
    async def test_variables_default_to_empty_object(self) -> None:
        """Verifies omitted variables are sent as {}."""
        bodies: list[dict[str, object]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"data": {}})

        await make_client(handler).execute("query { user { id } }")
        assert bodies[0]["variables"] == {}

    @pytest.mark.asyncio
    async def test_missing_data_returns_empty_dict(self) -> None:
        """Verifies a null data field becomes an empty mapping."""
        client = make_client(lambda r: httpx.Response(200, json={"data": None}))
        assert await client.execute("q") == {}

    @pytest.mark.asyncio
    async def test_no_token_sends_nothing(self) -> None:
        """Verifies a session without token fails before any request.

        Business context:
        A signed-out dashboard must not hit the platform with anonymous
        requests.

        Arrangement:
        Handler that records calls; session without a token.

        Action:
        Execute a query.

        Assertion Strategy:
        AuthenticationError and no recorded request.
        """
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"data": {}})

        client = make_client(handler, SessionContext())
        with pytest.raises(AuthenticationError, match="No authentication token found"):
            await client.execute("q")
        assert calls == []

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        """Verifies non-2xx responses raise TransportError with the status."""
        client = make_client(lambda r: httpx.Response(500, text="oops"))
        with pytest.raises(TransportError, match="HTTP error! status: 500") as exc_info:
            await client.execute("q")
        assert exc_info.value.status == 500

    @pytest.mark.asyncio
    async def test_network_failure(self) -> None:
        """Verifies connection errors raise TransportError without status."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            await make_client(handler).execute("q")
        assert exc_info.value.status is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        """Verifies an undecodable body raises TransportError."""
        client = make_client(lambda r: httpx.Response(200, text="<html>"))
        with pytest.raises(TransportError) as exc_info:
            await client.execute("q")
        assert exc_info.value.status == 200

    @pytest.mark.asyncio
    async def test_non_object_body(self) -> None:
        """Verifies a JSON array body is rejected."""
        client = make_client(lambda r: httpx.Response(200, json=[1, 2]))
        with pytest.raises(TransportError, match="Unexpected GraphQL response shape"):
            await client.execute("q")

    @pytest.mark.asyncio
    async def test_graphql_errors_raise_first_message(self) -> None:
        """Verifies the first GraphQL error message is surfaced.

        Business context:
        Hasura reports permission and validation problems in an errors list
        with HTTP 200. These must not be mistaken for empty data.

        Arrangement:
        Response with two errors and partial data.

        Action:
        Execute a query.

        Assertion Strategy:
        QueryError carrying the first message.
        """
        body = {
            "data": {"user": []},
            "errors": [{"message": "field 'foo' not found"}, {"message": "second"}],
        }
        client = make_client(lambda r: httpx.Response(200, json=body))
        with pytest.raises(QueryError, match="field 'foo' not found"):
            await client.execute("q")

    @pytest.mark.asyncio
    async def test_graphql_error_without_message(self) -> None:
        """Verifies a message-less error still raises QueryError."""
        client = make_client(lambda r: httpx.Response(200, json={"errors": [{}]}))
        with pytest.raises(QueryError, match="Unknown GraphQL error"):
            await client.execute("q")
