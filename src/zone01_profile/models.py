"""
Data models for the Zone01 Profile dashboard.

PURPOSE: Type-safe dataclasses for the records returned by the GraphQL API.
AI CONTEXT: These models define the hand-off between fetching and rendering.

MODEL HIERARCHY:
- UserProfile: The signed-in user with ordered cohort enrollments
- XPTransaction: One XP gain, ordered by creation time
- ProgressRecord: One graded attempt at a project or exercise
- AuditStats: Audit ratio with done/received audit weight
- RankingResult: Position among users with positive XP in the event
- AggregatedUserData: One of each, assembled by the ProfileLoader

SERIALIZATION:
Models built from GraphQL payloads use from_dict(); to_dict() produces
JSON-safe dicts for the web API. Timestamps are ISO 8601 strings.

USAGE:
    profile = UserProfile.from_dict(data["user"][0])
    event_id = profile.current_event_id
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .config import Config

__all__ = [
    "Cohort",
    "UserProfile",
    "XPTransaction",
    "ProgressRecord",
    "AuditStats",
    "RankingResult",
    "AggregatedUserData",
    "parse_timestamp",
]


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp from the API into an aware datetime.

    Handles the 'Z' suffix used by the platform. Naive timestamps are
    assumed to be UTC.

    Args:
        value: Timestamp such as '2024-03-01T09:15:00.123456+00:00'.

    Returns:
        Timezone-aware datetime.

    Raises:
        ValueError: If value is not an ISO 8601 timestamp.

    Example:
        >>> parse_timestamp("2024-03-01T09:15:00Z").year
        2024
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class Cohort:
    """Enrollment record; event_id is None for cohorts without an event."""

    event_id: int | None = None


@dataclass(frozen=True)
class UserProfile:
    """
    Signed-in user as returned by the current-user query.

    INVARIANT:
    The current event is the first non-null event id across cohorts, in
    source order (events flattened to their cohorts).
    """

    id: int
    login: str
    email: str = ""
    cohorts: tuple[Cohort, ...] = ()

    @property
    def current_event_id(self) -> int | None:
        """
        Resolve the current event from the enrollment records.

        Business context: Every XP, level and ranking query is scoped to a
        single event (the program run the student is enrolled in). Piscine
        cohorts and other enrollments usually carry a null event id, so
        the first non-null one in source order is the active program.

        Returns:
            First non-null cohort event id, or None when no cohort has one.

        Example:
            >>> UserProfile(1, "a", cohorts=(Cohort(None), Cohort(200))).current_event_id
            200
        """
        for cohort in self.cohorts:
            if cohort.event_id is not None:
                return cohort.event_id
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserProfile:
        """
        Build a profile from a GraphQL user object.

        Args:
            data: Dict with id, login, email and events[].cohorts[].eventId.

        Returns:
            UserProfile with cohorts flattened in source order.

        Raises:
            KeyError: If 'id' is missing.
        """
        cohorts: list[Cohort] = []
        for event in data.get("events") or []:
            for cohort in event.get("cohorts") or []:
                event_id = cohort.get("eventId")
                cohorts.append(Cohort(int(event_id) if event_id is not None else None))
        return cls(
            id=int(data["id"]),
            login=data.get("login") or "",
            email=data.get("email") or "",
            cohorts=tuple(cohorts),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dict."""
        return {
            "id": self.id,
            "login": self.login,
            "email": self.email,
            "current_event_id": self.current_event_id,
        }


@dataclass(frozen=True)
class XPTransaction:
    """Single XP gain. Amount treated as non-negative by the charts."""

    amount: int
    created_at: datetime
    path: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> XPTransaction:
        """
        Build from a GraphQL transaction object.

        Raises:
            KeyError: If amount or createdAt is missing.
            ValueError: If createdAt is not ISO 8601.
        """
        return cls(
            amount=int(data["amount"]),
            created_at=parse_timestamp(data["createdAt"]),
            path=data.get("path") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dict."""
        return {
            "amount": self.amount,
            "created_at": self.created_at.isoformat(),
            "path": self.path,
        }


@dataclass(frozen=True)
class ProgressRecord:
    """Graded attempt at a curriculum object (project, exercise, ...)."""

    id: int
    grade: float
    object_id: int
    object_name: str = ""
    object_type: str = ""

    @property
    def is_project(self) -> bool:
        """True when the graded object is a project."""
        return self.object_type == Config.PROJECT_KIND

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProgressRecord:
        """
        Build from a GraphQL progress row with its nested object.

        Raises:
            KeyError: If id or the object id is missing.
        """
        obj = data.get("object") or {}
        return cls(
            id=int(data["id"]),
            grade=float(data.get("grade") or 0),
            object_id=int(obj["id"]),
            object_name=obj.get("name") or "",
            object_type=obj.get("type") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dict."""
        return {
            "id": self.id,
            "grade": self.grade,
            "object_id": self.object_id,
            "object_name": self.object_name,
            "object_type": self.object_type,
        }


@dataclass(frozen=True)
class AuditStats:
    """
    Audit workload balance.

    The ratio is sourced from the backend and is not recomputed from
    done/received; the two can disagree (rounding, bonuses).
    """

    ratio: float = 0.0
    done: float = 0.0
    received: float = 0.0

    @property
    def total(self) -> float:
        """Combined audit weight given and received."""
        return self.done + self.received

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dict."""
        return {"ratio": self.ratio, "done": self.done, "received": self.received}


@dataclass(frozen=True)
class RankingResult:
    """1-based rank among users with positive XP; rank 0 means unavailable."""

    rank: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dict."""
        return {"rank": self.rank, "total": self.total}


@dataclass
class AggregatedUserData:
    """Complete result of one profile load; sole input to the display layer."""

    profile: UserProfile
    total_xp: int = 0
    level: float = 0
    projects: list[ProgressRecord] = field(default_factory=list)
    ranking: RankingResult = field(default_factory=RankingResult)
    audits_done: int = 0
    xp_timeline: list[XPTransaction] = field(default_factory=list)
    audit: AuditStats = field(default_factory=AuditStats)

    @property
    def projects_completed(self) -> int:
        """Number of distinct completed projects."""
        return len(self.projects)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the whole record to a JSON-safe dict.

        Returns:
            Dict with profile, scalar metrics, nested ranking/audit dicts
            and lists of projects and timeline transactions.
        """
        return {
            "profile": self.profile.to_dict(),
            "total_xp": self.total_xp,
            "level": self.level,
            "projects_completed": self.projects_completed,
            "projects": [p.to_dict() for p in self.projects],
            "ranking": self.ranking.to_dict(),
            "audits_done": self.audits_done,
            "xp_timeline": [t.to_dict() for t in self.xp_timeline],
            "audit": self.audit.to_dict(),
        }
