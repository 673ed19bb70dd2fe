"""
Statistics engine for the Zone01 Profile dashboard.

PURPOSE: Derived metrics computed client-side from GraphQL results.
AI CONTEXT: Pure data processing - no I/O, no rendering.

METRIC CATEGORIES:
1. XP Metrics: Sums of transaction amounts, cumulative series
2. Ranking: Position among users with positive XP in an event
3. Progress: Distinct completed projects
4. Audit: Done/received percentage shares
5. Level: Whole level and progress toward the next one

RANKING MODEL:
- Each user's XP = sum of their transaction amounts in the event
- Users with non-positive XP are not ranked
- Totals sorted descending; rank = first index equal to the user's XP + 1
- Ties share the first matching index (no secondary key)

USAGE:
    engine = StatisticsEngine()
    ranking = engine.calculate_ranking(user_xp, [100, 100, 50])
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from .config import Config
from .models import ProgressRecord, RankingResult, XPTransaction

__all__ = ["StatisticsEngine"]


class StatisticsEngine:
    """
    Calculator for profile statistics.

    DESIGN:
    - Stateless: Each method operates on provided data
    - Pure: No side effects, only data transformation
    - Configurable: Passing grade from Config or constructor
    """

    def __init__(self, passing_grade: float | None = None) -> None:
        """
        Initialize the engine.

        Args:
            passing_grade: Minimum grade counted as completed.
                Default: Config.PASSING_GRADE (1.0)
        """
        self.passing_grade = (
            passing_grade if passing_grade is not None else Config.PASSING_GRADE
        )

    def sum_amounts(self, transactions: Iterable[dict[str, Any]]) -> int:
        """
        Sum the 'amount' field of raw transaction rows.

        Rows with a missing or null amount count as zero.

        Args:
            transactions: GraphQL transaction objects.

        Returns:
            Integer total.

        Example:
            >>> StatisticsEngine().sum_amounts([{"amount": 5}, {"amount": 7}])
            12
        """
        return sum(int(t.get("amount") or 0) for t in transactions)

    def calculate_ranking(
        self, user_total: int, all_totals: Iterable[int]
    ) -> RankingResult:
        """
        Rank a user's XP total among all users' totals.

        Discards non-positive totals, sorts descending, and returns the
        first index whose value equals the user's total. The result does
        not depend on the order of all_totals.

        Business context: The ranking shows students where they stand in
        their cohort. Ties deliberately share the better (lower) rank
        number, as the platform leaderboard does not break ties either.

        Args:
            user_total: The signed-in user's XP in the event.
            all_totals: XP totals of every user in the event, in any order.
                May include the user's own total.

        Returns:
            RankingResult with 1-based rank and the number of ranked users.
            Rank is 0 when the user's total is not among the ranked totals
            (for example when the user has no XP yet).

        Example:
            >>> StatisticsEngine().calculate_ranking(100, [50, 100, 100])
            RankingResult(rank=1, total=3)
        """
        ranked = sorted((t for t in all_totals if t > 0), reverse=True)
        try:
            rank = ranked.index(user_total) + 1
        except ValueError:
            rank = 0
        return RankingResult(rank=rank, total=len(ranked))

    def select_completed_projects(
        self, records: Iterable[ProgressRecord]
    ) -> list[ProgressRecord]:
        """
        Filter progress records down to distinct completed projects.

        Keeps records with grade at or above the passing grade whose
        object kind is 'project'. When several records share an object id,
        the first one in input order wins.

        Business context: A project can be attempted several times (group
        retries, re-audits). Counting each object once gives the number the
        student actually completed.

        Args:
            records: Progress records in source order.

        Returns:
            List of records, one per completed project, in source order.

        Example:
            >>> len(StatisticsEngine().select_completed_projects(rows))
            2
        """
        seen: set[int] = set()
        completed: list[ProgressRecord] = []
        for record in records:
            if record.grade < self.passing_grade or not record.is_project:
                continue
            if record.object_id in seen:
                continue
            seen.add(record.object_id)
            completed.append(record)
        return completed

    def cumulative_series(
        self, transactions: Sequence[XPTransaction]
    ) -> list[tuple[datetime, int]]:
        """
        Running XP total over time.

        Args:
            transactions: XP transactions in ascending time order.

        Returns:
            List of (timestamp, cumulative amount) pairs, one per
            transaction. Non-decreasing for non-negative amounts; the last
            value equals the sum of all amounts.

        Example:
            >>> [v for _, v in engine.cumulative_series(txs)]  # amounts 10, 20, 30
            [10, 30, 60]
        """
        running = 0
        series: list[tuple[datetime, int]] = []
        for transaction in transactions:
            running += transaction.amount
            series.append((transaction.created_at, running))
        return series

    def share_percentages(self, done: float, received: float) -> tuple[float, float]:
        """
        Percentage shares of audit weight given and received.

        Returns:
            (done %, received %) summing to 100, or (0.0, 0.0) when both
            amounts are zero.

        Example:
            >>> StatisticsEngine().share_percentages(3, 1)
            (75.0, 25.0)
        """
        total = done + received
        if total <= 0:
            return 0.0, 0.0
        return done / total * 100, received / total * 100

    def level_progress(self, level: float) -> tuple[int, float]:
        """
        Split a level into the whole level and progress toward the next.

        Returns:
            (whole level, fraction in [0, 1)).

        Example:
            >>> StatisticsEngine().level_progress(12.25)
            (12, 0.25)
        """
        if level <= 0:
            return 0, 0.0
        whole = math.floor(level)
        return whole, level - whole
