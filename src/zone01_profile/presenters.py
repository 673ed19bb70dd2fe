"""
Presenters for the Zone01 Profile dashboard.

PURPOSE: Testable display logic between AggregatedUserData and the UI.
AI CONTEXT: Pure data transformation - no I/O. Both the web pages and the
CLI text report are built from these view models.

DESIGN PRINCIPLES:
1. Presenters receive AggregatedUserData, return view models (dataclasses)
2. No dependencies on a specific UI framework
3. Fully unit-testable without mocking
4. Chart markup is produced here once and embedded verbatim by callers

DISPLAY RULES:
- Username falls back to 'Student' when the login is empty
- Level shows the whole level; the ring offset shows progress to the next
- Total XP uses byte-like units: '1.23 MB', '45.6 kB', '999 B'
- A zero audit ratio shows '0.0', '0 B' amounts and empty bars

USAGE:
    presenter = DashboardPresenter(data)
    overview = presenter.get_overview()
    print(presenter.render_report())
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .charts import render_audit_ratio, render_xp_timeline
from .config import Config
from .statistics import StatisticsEngine

if TYPE_CHECKING:
    from .models import AggregatedUserData

__all__ = [
    "DEFAULT_USERNAME",
    "format_total_xp",
    "format_audit_amount",
    "LevelViewModel",
    "AuditViewModel",
    "RankingViewModel",
    "ProfileOverview",
    "DashboardPresenter",
]

DEFAULT_USERNAME = "Student"


def format_total_xp(total_xp: float) -> str:
    """
    Format total XP with byte-like units.

    Business context: The platform displays XP the way it displays file
    sizes, so students recognise '412 kB' as their XP total.

    Args:
        total_xp: XP amount.

    Returns:
        Two decimals with ' MB' from one million, one decimal with ' kB'
        from one thousand, otherwise the raw value with ' B'.

    Example:
        >>> format_total_xp(1_234_567), format_total_xp(45_600), format_total_xp(999)
        ('1.23 MB', '45.6 kB', '999 B')
    """
    if total_xp >= 1_000_000:
        return f"{total_xp / 1_000_000:.2f} MB"
    if total_xp >= 1_000:
        return f"{total_xp / 1_000:.1f} kB"
    return f"{total_xp:g} B"


def format_audit_amount(amount: float) -> str:
    """
    Format audit weight for the audit card.

    Example:
        >>> format_audit_amount(1_500_000), format_audit_amount(2500)
        ('1.5 MB', '2.5 kB')
    """
    if amount >= 1_000_000:
        return f"{amount / 1_000_000:.1f} MB"
    if amount >= 1_000:
        return f"{amount / 1_000:.1f} kB"
    return f"{amount:g} B"


@dataclass
class LevelViewModel:
    """View model for the circular level indicator."""

    level: float = 0

    @property
    def whole_level(self) -> int:
        """Level rounded down, as shown inside the ring."""
        return StatisticsEngine().level_progress(self.level)[0]

    @property
    def progress(self) -> float:
        """Fraction of the way to the next level, in [0, 1)."""
        return StatisticsEngine().level_progress(self.level)[1]

    @property
    def circumference(self) -> float:
        """Ring circumference for stroke-dasharray."""
        return 2 * math.pi * Config.LEVEL_RING_RADIUS

    @property
    def dash_offset(self) -> float:
        """
        stroke-dashoffset for the progress ring.

        The full circumference hides the ring; zero shows it complete.

        Example:
            >>> round(LevelViewModel(12.25).dash_offset, 2)
            424.12
        """
        return self.circumference - self.progress * self.circumference


@dataclass
class AuditViewModel:
    """View model for the audit card and its two progress bars."""

    ratio: float = 0.0
    done: float = 0.0
    received: float = 0.0

    @property
    def is_empty(self) -> bool:
        """True when the backend reported no audit ratio."""
        return self.ratio == 0

    @property
    def ratio_display(self) -> str:
        """Ratio with one decimal, e.g. '1.2'."""
        return "0.0" if self.is_empty else f"{self.ratio:.1f}"

    @property
    def done_display(self) -> str:
        """Audit weight given."""
        return "0 B" if self.is_empty else format_audit_amount(self.done)

    @property
    def received_display(self) -> str:
        """Audit weight received."""
        return "0 B" if self.is_empty else format_audit_amount(self.received)

    @property
    def percentages(self) -> tuple[float, float]:
        """
        Bar widths in percent for (done, received).

        Returns:
            (0.0, 0.0) when the ratio is zero or both amounts are zero.
        """
        if self.is_empty:
            return 0.0, 0.0
        return StatisticsEngine().share_percentages(self.done, self.received)

    @property
    def done_percent(self) -> float:
        return self.percentages[0]

    @property
    def received_percent(self) -> float:
        return self.percentages[1]


@dataclass
class RankingViewModel:
    """View model for the cohort ranking card."""

    rank: int = 0
    total: int = 0

    @property
    def available(self) -> bool:
        """True when the user is ranked."""
        return self.rank > 0

    @property
    def display(self) -> str:
        """
        Compact rank text.

        Example:
            >>> RankingViewModel(3, 120).display
            '#3 of 120'
        """
        if not self.available:
            return "—"
        return f"#{self.rank} of {self.total}"


@dataclass
class ProfileOverview:
    """Complete view model for the profile page."""

    username: str = DEFAULT_USERNAME
    email: str = ""
    level: LevelViewModel = field(default_factory=LevelViewModel)
    total_xp_display: str = "0 B"
    projects_completed: int = 0
    project_names: list[str] = field(default_factory=list)
    audits_done: int = 0
    audit: AuditViewModel = field(default_factory=AuditViewModel)
    ranking: RankingViewModel = field(default_factory=RankingViewModel)
    xp_chart: str = ""
    audit_chart: str = ""


class DashboardPresenter:
    """
    Presenter for the profile page and the CLI report.

    Transforms one AggregatedUserData into view models. All methods are
    pure - no side effects.
    """

    def __init__(self, data: AggregatedUserData) -> None:
        """
        Initialize the presenter with loaded profile data.

        Business context: The presenter only ever sees a fully assembled
        record. A failed load never reaches it, so the page is either
        complete or not shown at all.

        Args:
            data: Result of ProfileLoader.load().

        Example:
            >>> overview = DashboardPresenter(data).get_overview()
            >>> overview.username
            'alice'
        """
        self.data = data

    def get_overview(self) -> ProfileOverview:
        """
        Build the complete profile page view model.

        Returns:
            ProfileOverview with display strings, card view models and both
            chart markups (placeholders when their data is empty).
        """
        data = self.data
        return ProfileOverview(
            username=data.profile.login or DEFAULT_USERNAME,
            email=data.profile.email,
            level=LevelViewModel(level=data.level or 0),
            total_xp_display=format_total_xp(data.total_xp),
            projects_completed=data.projects_completed,
            project_names=[p.object_name for p in data.projects],
            audits_done=data.audits_done or 0,
            audit=AuditViewModel(
                ratio=data.audit.ratio,
                done=data.audit.done,
                received=data.audit.received,
            ),
            ranking=RankingViewModel(rank=data.ranking.rank, total=data.ranking.total),
            xp_chart=render_xp_timeline(data.xp_timeline),
            audit_chart=render_audit_ratio(data.audit),
        )

    def render_report(self) -> str:
        """
        Plain-text profile summary for the terminal.

        Returns:
            Multi-line report with one metric per line.

        Example:
            >>> print(DashboardPresenter(data).render_report())
            Zone01 Profile: alice
            ...
        """
        ov = self.get_overview()
        event_id = self.data.profile.current_event_id
        lines = [
            f"Zone01 Profile: {ov.username}",
            "=" * 40,
            f"Email:              {ov.email or '—'}",
            f"Event:              {event_id if event_id is not None else '—'}",
            f"Level:              {ov.level.whole_level} "
            f"({ov.level.progress * 100:.0f}% to next)",
            f"Total XP:           {ov.total_xp_display}",
            f"Projects completed: {ov.projects_completed}",
            f"Audits done:        {ov.audits_done}",
            f"Audit ratio:        {ov.audit.ratio_display}",
            f"  Done:             {ov.audit.done_display} ({ov.audit.done_percent:.1f}%)",
            f"  Received:         {ov.audit.received_display} "
            f"({ov.audit.received_percent:.1f}%)",
            f"Ranking:            {ov.ranking.display}",
        ]
        if ov.project_names:
            lines.append("")
            lines.append("Completed projects:")
            lines.extend(f"  - {name}" for name in ov.project_names)
        return "\n".join(lines)
