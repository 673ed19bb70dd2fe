"""
Pytest configuration and shared fixtures for Zone01 Profile tests.

This module contains:
- MockFileSystem: In-memory filesystem for testing without actual I/O
- FakeGraphQLClient: Scripted stand-in for GraphQLClient keyed by query
- make_token: Builds unsigned-claims JWTs like the platform issues
- Shared fixtures available to all test modules
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

import pytest
from jose import jwt

from zone01_profile.config import Config
from zone01_profile.models import (
    AggregatedUserData,
    AuditStats,
    Cohort,
    ProgressRecord,
    RankingResult,
    UserProfile,
    XPTransaction,
)
from zone01_profile.queries import (
    AUDIT_RATIO_QUERY,
    AUDITS_DONE_QUERY,
    CURRENT_USER_QUERY,
    PROJECTS_QUERY,
    TOTAL_XP_QUERY,
    USER_LEVEL_QUERY,
    USER_RANKING_QUERY,
    XP_TIMELINE_QUERY,
)
from zone01_profile.session import SessionContext

USER_ID = 1234


class MockFileSystem:
    """
    In-memory file system for testing.

    Simulates a file system using dictionaries:
    - _files: dict mapping path -> content (str)
    - _dirs: set of directory paths
    - _modes: dict mapping path -> permission mode (int)

    FEATURES:
    - No actual I/O operations
    - Easy to inspect state (including permission modes)
    - Supports read-only and failure simulation
    """

    def __init__(self) -> None:
        self._files: dict[str, str] = {}
        self._dirs: set[str] = set()
        self._modes: dict[str, int] = {}
        self._read_only: set[str] = set()
        self._undeletable: set[str] = set()

    def exists(self, path: str) -> bool:
        """True if path is a mock file or directory."""
        return path in self._files or path in self._dirs

    def makedirs(self, path: str, exist_ok: bool = False) -> None:
        """
        Create mock directory and parent directories.

        Raises:
            OSError: If directory exists and exist_ok is False,
                or if path is an existing file.
        """
        if path in self._dirs:
            if not exist_ok:
                raise OSError(f"Directory exists: {path}")
            return

        if path in self._files:
            raise OSError(f"Path is a file, not directory: {path}")

        parts = path.rstrip("/").split("/")
        for i in range(1, len(parts) + 1):
            parent = "/".join(parts[:i])
            if parent:
                self._dirs.add(parent)

    def read_text(self, path: str, _encoding: str = "utf-8") -> str:
        """
        Read mock file contents.

        Raises:
            FileNotFoundError: If path not in _files.
        """
        if path not in self._files:
            raise FileNotFoundError(f"No such file: {path}")
        return self._files[path]

    def write_text(self, path: str, content: str, _encoding: str = "utf-8") -> None:
        """
        Write text to mock file, creating parent directories.

        Raises:
            PermissionError: If path is marked read-only.
        """
        if path in self._read_only:
            raise PermissionError(f"Permission denied: {path}")

        parent = "/".join(path.rstrip("/").split("/")[:-1])
        if parent and parent not in self._dirs:
            self.makedirs(parent, exist_ok=True)

        self._files[path] = content

    def chmod(self, path: str, mode: int) -> None:
        """
        Record permission mode; clearing the write bit makes the file read-only.

        Raises:
            FileNotFoundError: If path not in _files or _dirs.
        """
        if path not in self._files and path not in self._dirs:
            raise FileNotFoundError(f"No such file or directory: {path}")

        self._modes[path] = mode
        if mode & 0o200 == 0:
            self._read_only.add(path)
        else:
            self._read_only.discard(path)

    def remove(self, path: str) -> None:
        """
        Remove a mock file.

        Raises:
            FileNotFoundError: If path not in _files.
            PermissionError: If path was marked undeletable.
        """
        if path in self._undeletable:
            raise PermissionError(f"Permission denied: {path}")
        if path not in self._files:
            raise FileNotFoundError(f"No such file: {path}")
        del self._files[path]
        self._modes.pop(path, None)
        self._read_only.discard(path)

    # =========================================================================
    # TEST HELPERS
    # =========================================================================

    def get_file(self, path: str) -> str | None:
        """File content, or None when the file does not exist."""
        return self._files.get(path)

    def set_file(self, path: str, content: str) -> None:
        """Create a file directly (delegates to write_text)."""
        self.write_text(path, content)

    def get_mode(self, path: str) -> int | None:
        """Permission mode last set with chmod, or None."""
        return self._modes.get(path)

    def set_read_only(self, path: str) -> None:
        """Make future writes to path raise PermissionError."""
        self._read_only.add(path)

    def set_undeletable(self, path: str) -> None:
        """Make future removals of path raise PermissionError."""
        self._undeletable.add(path)

    def list_files(self) -> list[str]:
        """Sorted list of all file paths."""
        return sorted(self._files)


class FakeGraphQLClient:
    """
    Scripted replacement for GraphQLClient.

    Each query document maps to either a data dict (returned) or an
    exception instance (raised). Every call is recorded in 'calls' as
    (query, variables), and 'events' logs ("start" | "end", query) pairs.
    A non-zero 'delay' suspends each request so concurrent callers
    overlap; 'max_in_flight' holds the peak overlap seen.
    """

    def __init__(self, responses: dict[str, Any], delay: float = 0.0) -> None:
        self.responses = responses
        self.delay = delay
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.events: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def execute(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        self.calls.append((query, variables or {}))
        self.events.append(("start", query))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            result = self.responses[query]
            if isinstance(result, BaseException):
                raise result
            return result
        finally:
            self.in_flight -= 1
            self.events.append(("end", query))

    def queries_called(self) -> list[str]:
        """Query documents in call order."""
        return [query for query, _ in self.calls]


def make_token(sub: Any = USER_ID, **claims: Any) -> str:
    """Encode a JWT carrying the given subject, as the sign-in endpoint does."""
    payload: dict[str, Any] = dict(claims)
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, "test-secret", algorithm="HS256")


@pytest.fixture(autouse=True)
def reset_config() -> Iterator[None]:
    """Clear Config test overrides after every test."""
    yield
    Config.reset_test_overrides()


@pytest.fixture
def mock_fs() -> MockFileSystem:
    """
    Create a MockFileSystem for testing.

    Provides a fresh in-memory filesystem instance for each test,
    ensuring test isolation without actual disk I/O.

    Example:
        >>> def test_store(mock_fs):
        ...     mock_fs.set_file('/s/session.json', '{}')
    """
    return MockFileSystem()


@pytest.fixture
def session() -> SessionContext:
    """Signed-in session with a token and user id but no event yet."""
    return SessionContext(token=make_token(), user_id=USER_ID)


@pytest.fixture
def platform_responses() -> dict[str, Any]:
    """
    Realistic GraphQL data for every metric query.

    The user has two events (first cohort without an event id), two
    distinct completed projects plus one duplicate and one exercise,
    three XP transactions, and ranks second of two positive totals.
    """
    return {
        CURRENT_USER_QUERY: {
            "user": [
                {
                    "id": USER_ID,
                    "login": "alice",
                    "email": "alice@example.com",
                    "events": [
                        {"cohorts": [{"eventId": None}]},
                        {"cohorts": [{"eventId": 200}, {"eventId": 300}]},
                    ],
                }
            ]
        },
        TOTAL_XP_QUERY: {"transaction_aggregate": {"aggregate": {"sum": {"amount": 412000}}}},
        PROJECTS_QUERY: {
            "progress": [
                {"id": 1, "grade": 1.2, "object": {"id": 10, "name": "go-reloaded", "type": "project"}},
                {"id": 2, "grade": 1, "object": {"id": 10, "name": "go-reloaded", "type": "project"}},
                {"id": 3, "grade": 1, "object": {"id": 11, "name": "quad", "type": "exercise"}},
                {"id": 4, "grade": 2, "object": {"id": 12, "name": "ascii-art", "type": "project"}},
            ]
        },
        XP_TIMELINE_QUERY: {
            "transaction": [
                {"amount": 10, "createdAt": "2024-01-01T00:00:00Z", "path": "/athens/div-01/a"},
                {"amount": 20, "createdAt": "2024-01-02T00:00:00Z", "path": "/athens/div-01/b"},
                {"amount": 30, "createdAt": "2024-01-03T00:00:00Z", "path": "/athens/div-01/c"},
            ]
        },
        AUDIT_RATIO_QUERY: {
            "user": [{"id": USER_ID, "auditRatio": 1.5, "totalUp": 3000, "totalDown": 1000}]
        },
        USER_LEVEL_QUERY: {"transaction": [{"amount": 12}]},
        USER_RANKING_QUERY: {
            "user": [{"id": USER_ID, "transactions": [{"amount": 60}]}],
            "allUsers": [
                {"id": 1, "transactions": [{"amount": 100}]},
                {"id": USER_ID, "transactions": [{"amount": 60}]},
                {"id": 3, "transactions": []},
            ],
        },
        AUDITS_DONE_QUERY: {"audit_aggregate": {"aggregate": {"count": 7}}},
    }


@pytest.fixture
def sample_data() -> AggregatedUserData:
    """Fully populated AggregatedUserData for presenter, web and CLI tests."""
    return AggregatedUserData(
        profile=UserProfile(
            id=USER_ID,
            login="alice",
            email="alice@example.com",
            cohorts=(Cohort(None), Cohort(200)),
        ),
        total_xp=412000,
        level=12.25,
        projects=[
            ProgressRecord(1, 1.2, 10, "go-reloaded", "project"),
            ProgressRecord(4, 2.0, 12, "ascii-art", "project"),
        ],
        ranking=RankingResult(rank=2, total=40),
        audits_done=7,
        xp_timeline=[
            XPTransaction(10, datetime(2024, 1, 1, tzinfo=UTC), "/a"),
            XPTransaction(20, datetime(2024, 1, 2, tzinfo=UTC), "/b"),
            XPTransaction(30, datetime(2024, 1, 3, tzinfo=UTC), "/c"),
        ],
        audit=AuditStats(ratio=1.5, done=3000, received=1000),
    )
