"""Tests for presenters module."""

from __future__ import annotations

import math

import pytest

from zone01_profile.charts import AUDIT_PLACEHOLDER, TIMELINE_PLACEHOLDER
from zone01_profile.models import AggregatedUserData, RankingResult, UserProfile
from zone01_profile.presenters import (
    DEFAULT_USERNAME,
    AuditViewModel,
    DashboardPresenter,
    LevelViewModel,
    RankingViewModel,
    format_audit_amount,
    format_total_xp,
)


class TestFormatTotalXP:
    """Tests for byte-like XP formatting."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1_234_567, "1.23 MB"),
            (412_000, "412.0 kB"),
            (45_600, "45.6 kB"),
            (999, "999 B"),
            (0, "0 B"),
        ],
    )
    def test_units(self, value: int, expected: str) -> None:
        """Verifies MB, kB and B thresholds and precision."""
        assert format_total_xp(value) == expected

    def test_audit_amount_units(self) -> None:
        """Verifies audit amounts use one decimal for MB."""
        assert format_audit_amount(1_500_000) == "1.5 MB"
        assert format_audit_amount(2500) == "2.5 kB"
        assert format_audit_amount(12) == "12 B"


class TestLevelViewModel:
    """Tests for the level ring."""

    def test_progress_and_offset(self) -> None:
        """Verifies the ring offset reflects progress to the next level.

        Business context:
        The ring fills as the student approaches the next level; a quarter
        of the way means three quarters of the ring stays hidden.

        Arrangement:
        Level 12.25.

        Action:
        Read whole_level, progress and dash_offset.

        Assertion Strategy:
        12, 0.25 and 0.75 of the circumference.
        """
        vm = LevelViewModel(12.25)
        assert vm.whole_level == 12
        assert vm.progress == 0.25
        assert round(vm.dash_offset, 2) == 424.12

    def test_level_zero_hides_ring(self) -> None:
        """Verifies level 0 offsets the whole circumference."""
        vm = LevelViewModel(0)
        assert vm.dash_offset == vm.circumference
        assert math.isclose(vm.circumference, 2 * math.pi * 90)


class TestAuditViewModel:
    """Tests for the audit card."""

    def test_populated(self) -> None:
        """Verifies displays and bar widths."""
        vm = AuditViewModel(ratio=1.5, done=3000, received=1000)
        assert vm.ratio_display == "1.5"
        assert vm.done_display == "3.0 kB"
        assert vm.received_display == "1.0 kB"
        assert (vm.done_percent, vm.received_percent) == (75.0, 25.0)

    def test_zero_ratio_is_empty(self) -> None:
        """Verifies a zero ratio blanks the card even with amounts.

        Business context:
        The platform reports ratio 0 before any audit has been validated;
        showing partial amounts then would be misleading.

        Arrangement:
        Ratio 0 with non-zero amounts.

        Action:
        Read display values.

        Assertion Strategy:
        '0.0', '0 B' and empty bars.
        """
        vm = AuditViewModel(ratio=0, done=100, received=50)
        assert vm.is_empty
        assert vm.ratio_display == "0.0"
        assert vm.done_display == vm.received_display == "0 B"
        assert vm.percentages == (0.0, 0.0)


class TestRankingViewModel:
    """Tests for the ranking card."""

    def test_display(self) -> None:
        """Verifies rank text."""
        assert RankingViewModel(3, 120).display == "#3 of 120"

    def test_unranked(self) -> None:
        """Verifies rank 0 shows a dash."""
        vm = RankingViewModel(0, 40)
        assert not vm.available
        assert vm.display == "—"


class TestDashboardPresenter:
    """Tests for the page overview and text report."""

    def test_overview(self, sample_data: AggregatedUserData) -> None:
        """Verifies every card is populated from the aggregate."""
        ov = DashboardPresenter(sample_data).get_overview()

        assert ov.username == "alice"
        assert ov.total_xp_display == "412.0 kB"
        assert ov.level.whole_level == 12
        assert ov.projects_completed == 2
        assert ov.project_names == ["go-reloaded", "ascii-art"]
        assert ov.audits_done == 7
        assert ov.ranking.display == "#2 of 40"
        assert ov.xp_chart.startswith("<svg")
        assert ov.audit_chart.startswith("<svg")

    def test_empty_profile_uses_fallbacks(self) -> None:
        """Verifies an empty login and empty data use fallbacks and placeholders."""
        data = AggregatedUserData(profile=UserProfile(id=1, login=""))
        ov = DashboardPresenter(data).get_overview()

        assert ov.username == DEFAULT_USERNAME
        assert ov.total_xp_display == "0 B"
        assert ov.xp_chart == TIMELINE_PLACEHOLDER
        assert ov.audit_chart == AUDIT_PLACEHOLDER

    def test_render_report(self, sample_data: AggregatedUserData) -> None:
        """Verifies the terminal report lists every metric.

        Business context:
        'zone01-profile report' is piped into files and chat messages; the
        header and metric lines must stay stable.

        Arrangement:
        sample_data fixture (event 200, level 12.25).

        Action:
        Render the report.

        Assertion Strategy:
        Header, separator, key lines and the project list.
        """
        report = DashboardPresenter(sample_data).render_report()
        lines = report.splitlines()

        assert lines[0] == "Zone01 Profile: alice"
        assert lines[1] == "=" * 40
        assert "Event:              200" in lines
        assert "Level:              12 (25% to next)" in lines
        assert "Total XP:           412.0 kB" in lines
        assert "Ranking:            #2 of 40" in lines
        assert "  Done:             3.0 kB (75.0%)" in lines
        assert lines[-2:] == ["  - go-reloaded", "  - ascii-art"]

    def test_report_without_projects(self) -> None:
        """Verifies the project list is omitted when empty."""
        data = AggregatedUserData(
            profile=UserProfile(id=1, login="bob"), ranking=RankingResult()
        )
        report = DashboardPresenter(data).render_report()
        assert "Completed projects:" not in report
        assert "Ranking:            —" in report
