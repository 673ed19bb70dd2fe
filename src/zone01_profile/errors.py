"""
Exception taxonomy for the Zone01 Profile dashboard.

PURPOSE: One hierarchy for every failure the data pipeline can raise.
AI CONTEXT: Gating queries propagate these; degrading queries absorb them.

HIERARCHY:
    DashboardError
    ├── AuthenticationError   # No token, or credentials rejected
    ├── TransportError        # Non-success HTTP status or network failure
    ├── QueryError            # Backend reported a GraphQL error
    ├── DegradedMetricError   # Logged inside degrading queries, never raised out
    └── ProfileLoadError      # Orchestrator aborted the whole load
"""

from __future__ import annotations

__all__ = [
    "DashboardError",
    "AuthenticationError",
    "TransportError",
    "QueryError",
    "DegradedMetricError",
    "ProfileLoadError",
]


class DashboardError(Exception):
    """Base class for all dashboard pipeline errors."""


class AuthenticationError(DashboardError):
    """No bearer token is available, or the platform rejected credentials."""


class TransportError(DashboardError):
    """
    HTTP exchange failed.

    Attributes:
        status: HTTP status code, or None when no response was received
            (connection error, timeout).
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class QueryError(DashboardError):
    """
    Backend returned a GraphQL errors list.

    Only the first error's message is carried; the rest are logged by the
    transport client.
    """


class DegradedMetricError(DashboardError):
    """
    A non-essential metric failed and was replaced by its default value.

    Created for logging only. Degrading queries never let it escape.

    Attributes:
        metric: Name of the metric query that failed.
        cause: Underlying exception.
    """

    def __init__(self, metric: str, cause: BaseException) -> None:
        super().__init__(f"{metric} unavailable: {cause}")
        self.metric = metric
        self.cause = cause


class ProfileLoadError(DashboardError):
    """Profile load aborted; callers should clear the session and re-authenticate."""
