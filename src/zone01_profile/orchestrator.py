"""
Profile aggregation for the Zone01 Profile dashboard.

PURPOSE: Run the metric queries in dependency order and assemble one
AggregatedUserData record.
AI CONTEXT: The single entry point used by the web routes and the CLI.

TASK GRAPH:
    Phase 1 (sequential)     current_user  -> writes session event id
                                   │
    Phase 2 (asyncio.gather) total_xp, projects_completed, xp_timeline,
                             audit_ratio, user_level, user_ranking,
                             audits_done

Phase 2 waits for every query to settle. Degrading queries never fail, so
any failure comes from a gating query and aborts the load; partial
results are discarded.

USAGE:
    loader = ProfileLoader.for_session(session)
    try:
        data = await loader.load()
    except ProfileLoadError:
        store.clear()
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from .errors import DashboardError, ProfileLoadError
from .models import AggregatedUserData
from .queries import MetricQueries
from .transport import GraphQLClient

if TYPE_CHECKING:
    import httpx

    from .session import SessionContext

__all__ = ["ProfileLoader", "LOAD_FAILURE_MESSAGE"]

logger = logging.getLogger(__name__)

LOAD_FAILURE_MESSAGE = "Failed to load profile data. Please try logging in again!"

# Failures of a gating query that abort the load.
_ABORTING_ERRORS = (DashboardError, KeyError, TypeError, IndexError, ValueError)


class ProfileLoader:
    """
    Two-phase loader for a signed-in user's dashboard data.

    Holds no state between loads beyond the session's event id, which is
    rewritten by every resolve phase.
    """

    def __init__(self, queries: MetricQueries, session: SessionContext) -> None:
        self.queries = queries
        self.session = session

    @classmethod
    def for_session(
        cls,
        session: SessionContext,
        http_client: httpx.AsyncClient | None = None,
    ) -> ProfileLoader:
        """
        Assemble transport, queries and loader for one session.

        Args:
            session: Signed-in session context.
            http_client: Optional shared httpx.AsyncClient for the transport.

        Returns:
            ProfileLoader ready to load().

        Example:
            >>> data = await ProfileLoader.for_session(store.load()).load()
        """
        client = GraphQLClient(session, http_client=http_client)
        return cls(MetricQueries(client, session), session)

    async def load(self) -> AggregatedUserData:
        """
        Load every dashboard metric for the session's user.

        Business context: The event id scopes most metrics, so it must be
        resolved before the other queries start. Once resolved, the
        remaining queries are independent and run concurrently, so the
        load takes as long as the slowest of them.

        Returns:
            AggregatedUserData with every field populated (degraded metrics
            hold their defaults).

        Raises:
            ProfileLoadError: No user id in the session, or a gating query
                failed. Chained to the underlying error when there is one.

        Example:
            >>> data = await ProfileLoader(queries, session).load()
            >>> data.profile.login
            'alice'
        """
        if self.session.get_user_id() is None:
            logger.error("Profile load attempted without a user id")
            raise ProfileLoadError("No user id in session")

        try:
            profile = await self.queries.current_user()
        except _ABORTING_ERRORS as e:
            logger.error(f"Resolve phase failed: {e}")
            raise ProfileLoadError(LOAD_FAILURE_MESSAGE) from e

        results = await asyncio.gather(
            self.queries.total_xp(),
            self.queries.projects_completed(),
            self.queries.xp_timeline(),
            self.queries.audit_ratio(),
            self.queries.user_level(),
            self.queries.user_ranking(),
            self.queries.audits_done(),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, _ABORTING_ERRORS):
                logger.error(f"Fan-out phase failed: {result}")
                raise ProfileLoadError(LOAD_FAILURE_MESSAGE) from result
            if isinstance(result, BaseException):
                raise result

        total_xp, projects, timeline, audit, level, ranking, audits_done = results
        data = AggregatedUserData(
            profile=profile,
            total_xp=total_xp,  # type: ignore[arg-type]
            level=level,  # type: ignore[arg-type]
            projects=projects,  # type: ignore[arg-type]
            ranking=ranking,  # type: ignore[arg-type]
            audits_done=audits_done,  # type: ignore[arg-type]
            xp_timeline=timeline,  # type: ignore[arg-type]
            audit=audit,  # type: ignore[arg-type]
        )
        logger.info(
            f"Loaded profile for {profile.login}: {data.total_xp} XP, "
            f"{data.projects_completed} projects, "
            f"rank {data.ranking.rank}/{data.ranking.total}"
        )
        return data
