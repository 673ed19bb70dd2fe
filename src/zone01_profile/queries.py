"""
Metric queries for the Zone01 Profile dashboard.

PURPOSE: The eight GraphQL queries behind the dashboard, each with an
explicit failure policy.
AI CONTEXT: Shapes variables, calls GraphQLClient.execute, and turns the
raw payload into model objects.

FAILURE POLICY:
Each query method is declared with @metric(policy, requires_event, default):

| Method             | Policy    | Needs event | Default           |
|--------------------|-----------|-------------|-------------------|
| current_user       | GATING    | no          | -                 |
| total_xp           | DEGRADING | yes         | 0                 |
| projects_completed | GATING    | no          | -                 |
| xp_timeline        | DEGRADING | yes         | []                |
| audit_ratio        | DEGRADING | no          | AuditStats()      |
| user_level         | DEGRADING | yes         | 0                 |
| user_ranking       | DEGRADING | yes         | RankingResult()   |
| audits_done        | DEGRADING | no          | 0                 |

- Event-dependent query without a resolved event: warning, default, no request
- GATING: every error propagates
- DEGRADING: DashboardError and malformed payloads are logged as
  DegradedMetricError and replaced by the default

USAGE:
    queries = MetricQueries(GraphQLClient(session), session)
    profile = await queries.current_user()
    xp = await queries.total_xp()
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from .errors import AuthenticationError, DashboardError, DegradedMetricError
from .models import AuditStats, ProgressRecord, RankingResult, UserProfile, XPTransaction
from .statistics import StatisticsEngine

if TYPE_CHECKING:
    from .session import SessionContext
    from .transport import GraphQLClient

__all__ = [
    "QueryPolicy",
    "MetricSpec",
    "metric",
    "MetricQueries",
    "CURRENT_USER_QUERY",
    "TOTAL_XP_QUERY",
    "PROJECTS_QUERY",
    "XP_TIMELINE_QUERY",
    "AUDIT_RATIO_QUERY",
    "USER_LEVEL_QUERY",
    "USER_RANKING_QUERY",
    "AUDITS_DONE_QUERY",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Malformed payloads surface as one of these while extracting values.
_PAYLOAD_ERRORS = (KeyError, TypeError, IndexError, ValueError)


# =============================================================================
# QUERY DOCUMENTS
# =============================================================================

CURRENT_USER_QUERY = """
query {
    user {
        id
        login
        email
        events {
            cohorts {
                eventId
            }
        }
    }
}
"""

TOTAL_XP_QUERY = """
query GetUserXP($userId: Int!, $eventId: Int!) {
    transaction_aggregate(
        where: {
            userId: { _eq: $userId },
            type: { _eq: "xp" },
            eventId: { _eq: $eventId }
        }
    ) {
        aggregate {
            sum {
                amount
            }
        }
    }
}
"""

PROJECTS_QUERY = """
query GetProjects($userId: Int!) {
    progress(
        where: {
            userId: { _eq: $userId },
            grade: { _gte: 1 }
        },
        distinct_on: objectId
    ) {
        id
        grade
        object {
            id
            name
            type
        }
    }
}
"""

XP_TIMELINE_QUERY = """
query GetXPTimeline($userId: Int!, $eventId: Int!) {
    transaction(
        where: {
            userId: { _eq: $userId },
            type: { _eq: "xp" },
            eventId: { _eq: $eventId }
        },
        order_by: { createdAt: asc }
    ) {
        amount
        createdAt
        path
    }
}
"""

AUDIT_RATIO_QUERY = """
query GetAudits($userId: Int!) {
    user(where: { id: { _eq: $userId } }) {
        id
        auditRatio
        totalUp
        totalDown
    }
}
"""

USER_LEVEL_QUERY = """
query GetUserLevel($userId: Int!, $eventId: Int!) {
    transaction(
        where: {
            userId: { _eq: $userId },
            type: { _eq: "level" },
            eventId: { _eq: $eventId }
        },
        order_by: { amount: desc }
        limit: 1
    ) {
        amount
    }
}
"""

USER_RANKING_QUERY = """
query GetUserRanking($userId: Int!, $eventId: Int!) {
    user(where: { id: { _eq: $userId } }) {
        id
        transactions(
            where: {
                type: { _eq: "xp" },
                eventId: { _eq: $eventId }
            }
        ) {
            amount
        }
    }
    allUsers: user {
        id
        transactions(
            where: {
                type: { _eq: "xp" },
                eventId: { _eq: $eventId }
            }
        ) {
            amount
        }
    }
}
"""

AUDITS_DONE_QUERY = """
query GetAuditsDone($userId: Int!) {
    audit_aggregate(
        where: {
            auditorId: { _eq: $userId }
        }
    ) {
        aggregate {
            count
        }
    }
}
"""


# =============================================================================
# POLICY DECLARATION
# =============================================================================


class QueryPolicy(Enum):
    """How a query's failure affects the whole profile load."""

    GATING = "gating"
    DEGRADING = "degrading"


@dataclass(frozen=True)
class MetricSpec:
    """Declared behaviour of one metric query."""

    name: str
    policy: QueryPolicy
    requires_event: bool = False
    default: Callable[[], Any] | None = None

    def make_default(self) -> Any:
        """Fresh default value (None when no default is declared)."""
        return self.default() if self.default is not None else None


def metric(
    policy: QueryPolicy,
    *,
    requires_event: bool = False,
    default: Callable[[], Any] | None = None,
) -> Callable[
    [Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]
]:
    """
    Declare a MetricQueries method's failure policy.

    Wraps the coroutine so that:
    - an event-dependent query short-circuits to its default when the
      session has no resolved event id;
    - a DEGRADING query converts DashboardError and payload errors into a
      logged DegradedMetricError plus its default value;
    - a GATING query lets every error propagate.

    The MetricSpec is attached to the wrapper as 'metric_spec' so that
    MetricQueries.policies() can list it.

    Args:
        policy: GATING or DEGRADING.
        requires_event: True when the query is scoped to the current event.
        default: Zero-argument factory for the fallback value.

    Returns:
        Decorator for an async method of MetricQueries.

    Example:
        >>> @metric(QueryPolicy.DEGRADING, requires_event=True, default=int)
        ... async def total_xp(self) -> int: ...
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        spec = MetricSpec(
            name=func.__name__,
            policy=policy,
            requires_event=requires_event,
            default=default,
        )

        @functools.wraps(func)
        async def wrapper(self: MetricQueries, *args: Any, **kwargs: Any) -> T:
            if spec.requires_event and self.session.get_event_id() is None:
                logger.warning(f"No event id resolved; {spec.name} uses its default")
                return spec.make_default()  # type: ignore[no-any-return]

            if spec.policy is QueryPolicy.GATING:
                return await func(self, *args, **kwargs)

            try:
                return await func(self, *args, **kwargs)
            except (DashboardError, *_PAYLOAD_ERRORS) as e:
                degraded = DegradedMetricError(spec.name, e)
                logger.warning(str(degraded))
                return spec.make_default()  # type: ignore[no-any-return]

        wrapper.metric_spec = spec  # type: ignore[attr-defined]
        return wrapper

    return decorator


# =============================================================================
# QUERIES
# =============================================================================


class MetricQueries:
    """
    The dashboard's metric queries bound to one session.

    All queries read the user id (and, where needed, the event id) from
    the SessionContext passed in. current_user is the only writer of the
    event id.
    """

    def __init__(
        self,
        client: GraphQLClient,
        session: SessionContext,
        engine: StatisticsEngine | None = None,
    ) -> None:
        """
        Initialize the query set.

        Args:
            client: Transport used for every request.
            session: Session supplying user id and event id.
            engine: Derived-metric calculator. Default: StatisticsEngine()
        """
        self.client = client
        self.session = session
        self.engine = engine or StatisticsEngine()

    @classmethod
    def policies(cls) -> dict[str, MetricSpec]:
        """
        Declared policy of every metric query.

        Returns:
            Mapping of method name to MetricSpec, in declaration order.

        Example:
            >>> MetricQueries.policies()["total_xp"].policy
            <QueryPolicy.DEGRADING: 'degrading'>
        """
        specs: dict[str, MetricSpec] = {}
        for name, attr in vars(cls).items():
            spec = getattr(attr, "metric_spec", None)
            if isinstance(spec, MetricSpec):
                specs[name] = spec
        return specs

    def _user_id(self) -> int:
        user_id = self.session.get_user_id()
        if user_id is None:
            raise AuthenticationError("No user id in session")
        return user_id

    def _event_variables(self) -> dict[str, Any]:
        return {"userId": self._user_id(), "eventId": self.session.get_event_id()}

    @metric(QueryPolicy.GATING)
    async def current_user(self) -> UserProfile:
        """
        Fetch the signed-in user and resolve the current event.

        Business context: Every XP, level and ranking number is scoped to
        the event the student is enrolled in, so this query must complete
        before any event-scoped query starts.

        Side effect: writes the resolved event id (or None) into the
        session context.

        Returns:
            UserProfile of the signed-in user.

        Raises:
            DashboardError: Any transport or query failure.
            IndexError: If the backend returned no user row.
        """
        data = await self.client.execute(CURRENT_USER_QUERY)
        profile = UserProfile.from_dict(data["user"][0])
        event_id = profile.current_event_id
        self.session.set_event_id(event_id)
        if event_id is None:
            logger.warning(f"No cohort with an event id for user {profile.login}")
        else:
            logger.info(f"Resolved event {event_id} for user {profile.login}")
        return profile

    @metric(QueryPolicy.DEGRADING, requires_event=True, default=int)
    async def total_xp(self) -> int:
        """Total XP in the current event; 0 when the aggregate is null."""
        data = await self.client.execute(TOTAL_XP_QUERY, self._event_variables())
        amount = data["transaction_aggregate"]["aggregate"]["sum"]["amount"]
        return int(amount or 0)

    @metric(QueryPolicy.GATING)
    async def projects_completed(self) -> list[ProgressRecord]:
        """
        Distinct projects completed by the user.

        The backend already filters by grade and de-duplicates by object;
        the engine re-applies both rules so the result does not depend on
        server-side filtering.

        Returns:
            Completed project records, one per object id.
        """
        data = await self.client.execute(PROJECTS_QUERY, {"userId": self._user_id()})
        records = [ProgressRecord.from_dict(row) for row in data["progress"]]
        return self.engine.select_completed_projects(records)

    @metric(QueryPolicy.DEGRADING, requires_event=True, default=list)
    async def xp_timeline(self) -> list[XPTransaction]:
        """XP transactions in the current event, oldest first."""
        data = await self.client.execute(XP_TIMELINE_QUERY, self._event_variables())
        return [XPTransaction.from_dict(row) for row in data["transaction"]]

    @metric(QueryPolicy.DEGRADING, default=AuditStats)
    async def audit_ratio(self) -> AuditStats:
        """
        Audit ratio with audit weight done (totalUp) and received (totalDown).

        Returns:
            AuditStats; each field is 0 when null, and all are 0 when the
            user row is missing.
        """
        data = await self.client.execute(AUDIT_RATIO_QUERY, {"userId": self._user_id()})
        users = data["user"]
        if not users:
            return AuditStats()
        user = users[0]
        return AuditStats(
            ratio=float(user.get("auditRatio") or 0),
            done=float(user.get("totalUp") or 0),
            received=float(user.get("totalDown") or 0),
        )

    @metric(QueryPolicy.DEGRADING, requires_event=True, default=int)
    async def user_level(self) -> float:
        """Highest level transaction amount in the current event (0 if none)."""
        data = await self.client.execute(USER_LEVEL_QUERY, self._event_variables())
        rows = data["transaction"]
        if not rows:
            return 0
        return rows[0].get("amount") or 0

    @metric(QueryPolicy.DEGRADING, requires_event=True, default=RankingResult)
    async def user_ranking(self) -> RankingResult:
        """
        Rank of the user's event XP among all users in the event.

        Business context: The platform exposes no leaderboard, so the
        ranking is derived client-side from every user's transactions.

        Returns:
            RankingResult; rank 0 when the user has no positive XP.
        """
        data = await self.client.execute(USER_RANKING_QUERY, self._event_variables())
        users = data["user"]
        user_total = self.engine.sum_amounts(users[0]["transactions"]) if users else 0
        all_totals = [self.engine.sum_amounts(u["transactions"]) for u in data["allUsers"]]
        return self.engine.calculate_ranking(user_total, all_totals)

    @metric(QueryPolicy.DEGRADING, default=int)
    async def audits_done(self) -> int:
        """Number of audits the user performed as auditor."""
        data = await self.client.execute(AUDITS_DONE_QUERY, {"userId": self._user_id()})
        return int(data["audit_aggregate"]["aggregate"]["count"] or 0)
