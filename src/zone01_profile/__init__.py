"""
Zone01 Profile Dashboard.

PURPOSE: Fetch a student's progress metrics from the Zone01 GraphQL API and
render them as SVG charts.
AI CONTEXT: Async GraphQL client, metric queries, two-phase loader, renderers.

PACKAGE STRUCTURE:
- config.py: Endpoints, timeouts and chart geometry
- errors.py: Exception taxonomy
- session.py: Session context (token, user id, event id)
- storage.py: Session persistence on disk
- transport.py: Authenticated GraphQL client
- auth.py: Credential sign-in
- models.py: Data models (UserProfile, XPTransaction, AuditStats, ...)
- statistics.py: Pure derived metrics (ranking, cumulative XP, shares)
- queries.py: Metric query definitions with gating/degrading policies
- orchestrator.py: Two-phase profile loader
- charts.py: SVG timeline and donut renderers
- presenters.py: View models for display
- web/: FastAPI dashboard

QUICK START:
    zone01-profile login
    zone01-profile report
    zone01-profile dashboard
"""

from zone01_profile.__version__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __title__,
    __url__,
    __version__,
    __version_date__,
)

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__url__",
    "__author__",
    "__license__",
    "__copyright__",
]
