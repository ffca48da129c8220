"""CTO Day Optimizer

Place a fixed budget of discretionary days off ("CTO days") next to
weekends, public holidays and company days off so they merge into long
contiguous breaks.

The allocator is greedy: starting from no CTO days it repeatedly tries
every remaining working weekday as a what-if, scores the resulting breaks
under the chosen strategy and commits the single best day, until the
budget is spent.  Each step is optimal given the previous ones; the
combination as a whole is not guaranteed to be.

Strategies:
  1. Balanced           - a blend of short breaks and longer vacations
  2. Mini Breaks        - several 5-6 day breaks
  3. Long Weekends      - many 3-4 day weekends
  4. Week-long Breaks   - 7-9 day getaways
  5. Extended Vacations - one or two runs of 10+ days
"""

from __future__ import annotations

import datetime
import enum
import logging
import math
from collections.abc import Iterable, Sequence

from ctoplan.breaks import find_breaks, find_runs, mark_breaks
from ctoplan.classifier import DateLike, build_calendar, parse_date
from ctoplan.errors import InvalidBudgetError, OptimizerError, PartialAllocationError
from ctoplan.models import (
    CalendarDay,
    CompanyDayOff,
    Holiday,
    OptimizationResult,
    OptimizationStrategy,
)
from ctoplan.scoring import resolve_strategy, score_lengths
from ctoplan.stats import compute_stats

logger = logging.getLogger(__name__)

# Scores this close (relative, or absolute near zero) are treated as equal so
# that the earlier date wins regardless of floating-point summation order.
_SCORE_REL_TOL = 1e-12
_SCORE_ABS_TOL = 1e-9


class AllocatorState(enum.Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    TERMINAL = "terminal"


# ---------------------------------------------------------------------------
# Allocator
# ---------------------------------------------------------------------------


class CTOAllocator:
    """Greedy, non-backtracking CTO day allocator.

    The allocator owns an arena of per-day flags addressed by index.  Only
    ``is_cto`` ever changes, one flip per committed day; candidate
    evaluation flips a flag, rescores and flips it back.  Once the budget is
    spent (or no candidate remains) the allocator is ``TERMINAL`` and only
    hands out immutable snapshots.
    """

    def __init__(
        self,
        days: Sequence[CalendarDay],
        budget: int,
        strategy: OptimizationStrategy | str = OptimizationStrategy.BALANCED,
        *,
        today: datetime.date,
        year: int | None = None,
    ):
        if isinstance(budget, bool) or not isinstance(budget, int) or budget <= 0:
            raise InvalidBudgetError(budget)

        self.strategy = resolve_strategy(strategy)
        self.budget = budget
        self.remaining = budget
        self.today = today
        self.state = AllocatorState.IDLE

        self._base: list[CalendarDay] = [d._replace(is_cto=False, is_part_of_break=False) for d in days]
        self.dates: list[datetime.date] = [d.date for d in self._base]
        self.year = year if year is not None else (self.dates[-1].year if self.dates else today.year)
        self.num_days = len(self._base)

        self.is_fixed_off: list[bool] = [d.is_fixed_off for d in self._base]
        self.is_cto: list[bool] = [False] * self.num_days
        # Working copy of "is off" used for what-if evaluation
        self._off: list[bool] = list(self.is_fixed_off)

        self.committed: list[int] = []
        self.current_score = self._score()

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _score(self) -> float:
        runs = find_runs(self._off)
        return score_lengths((end - start + 1 for start, end in runs), self.strategy)

    def candidates(self) -> list[int]:
        """Indices of days that may still become CTO, in date order."""
        return [
            i
            for i in range(self.num_days)
            if not self._off[i] and self.dates[i] >= self.today
        ]

    def evaluate(self, idx: int) -> float:
        """Score the calendar as if day *idx* were CTO, without keeping the change."""
        if self._off[idx]:
            raise OptimizerError(f"{self.dates[idx]} is already a day off.")
        self._off[idx] = True
        try:
            return self._score()
        finally:
            self._off[idx] = False

    def select(self) -> tuple[int, float] | None:
        """Return the best candidate and its score, or ``None`` if none remain.

        Candidates are visited in date order and only a strictly better
        score replaces the current best, so ties go to the earliest date.
        """
        best_idx: int | None = None
        best_score = -math.inf
        for idx in self.candidates():
            s = self.evaluate(idx)
            if s > best_score and not math.isclose(
                s, best_score, rel_tol=_SCORE_REL_TOL, abs_tol=_SCORE_ABS_TOL
            ):
                best_idx, best_score = idx, s
        if best_idx is None:
            return None
        return best_idx, best_score

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _commit(self, idx: int, new_score: float) -> None:
        logger.debug(
            "Committing CTO day %s (score %.2f -> %.2f, %d left)",
            self.dates[idx],
            self.current_score,
            new_score,
            self.remaining - 1,
        )
        self.is_cto[idx] = True
        self._off[idx] = True
        self.committed.append(idx)
        self.current_score = new_score
        self.remaining -= 1

    def run(self) -> OptimizationResult:
        """Spend the whole budget and return the final result.

        Raises :class:`PartialAllocationError` (carrying the partial result)
        when the window runs out of selectable weekdays first.
        """
        if self.state is not AllocatorState.TERMINAL:
            self.state = AllocatorState.SELECTING
            while self.remaining > 0:
                choice = self.select()
                if choice is None:
                    break
                self._commit(*choice)
            self.state = AllocatorState.TERMINAL

        result = self.snapshot()
        if self.remaining > 0:
            logger.warning(
                "Ran out of selectable weekdays: %d of %d CTO days unallocated",
                self.remaining,
                self.budget,
            )
            raise PartialAllocationError(result, self.remaining)
        return result

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def snapshot(self) -> OptimizationResult:
        """Immutable view of the current allocation."""
        days = [
            d._replace(is_cto=True) if cto else d
            for d, cto in zip(self._base, self.is_cto, strict=True)
        ]
        days = mark_breaks(days, find_breaks(days))
        # Re-detect so each Break holds the marked day records
        breaks = find_breaks(days)
        return OptimizationResult(
            days=tuple(days),
            breaks=tuple(breaks),
            stats=compute_stats(days, breaks),
            strategy=self.strategy,
            year=self.year,
            budget=self.budget,
            cto_order=tuple(self.dates[i] for i in self.committed),
        )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def optimize(
    number_of_days: int,
    strategy: OptimizationStrategy | str = OptimizationStrategy.BALANCED,
    year: int | None = None,
    holidays: Iterable[Holiday | tuple[DateLike, str]] = (),
    company_days_off: Iterable[CompanyDayOff] = (),
    weekend_days: Iterable[int] | None = None,
    today: DateLike | None = None,
) -> OptimizationResult:
    """Choose *number_of_days* CTO days for *year* under *strategy*.

    Parameters
    ----------
    number_of_days : int
        CTO budget; must be positive.
    strategy : OptimizationStrategy or str
        Weighting policy, by member or by value (``"longWeekends"`` …).
    year : int, optional
        Target year.  Defaults to the year of *today*.
    holidays : iterable of (date, name)
        Public holidays.  Dates may be ``date`` objects or ISO strings.
    company_days_off : iterable of CompanyDayOff
        Employer-mandated days off, single or recurring.
    weekend_days : iterable of int, optional
        Weekday indices (0 = Monday) that are weekends.  Defaults to Sat/Sun.
    today : date or str, optional
        Days before *today* are never selected.  Defaults to the real date.

    Raises
    ------
    InvalidBudgetError
        *number_of_days* is zero or negative.
    ValidationError
        A malformed date or unknown strategy.
    PartialAllocationError
        Not enough selectable weekdays remain; ``.result`` holds what was placed.
    """
    if isinstance(number_of_days, bool) or not isinstance(number_of_days, int) or number_of_days <= 0:
        raise InvalidBudgetError(number_of_days)

    resolved_today = parse_date(today) if today is not None else datetime.date.today()
    resolved_year = resolved_today.year if year is None else year
    resolved_strategy = resolve_strategy(strategy)

    days = build_calendar(
        resolved_year,
        resolved_today,
        weekend_days=weekend_days,
        holidays=holidays,
        company_days_off=company_days_off,
    )
    allocator = CTOAllocator(
        days,
        number_of_days,
        resolved_strategy,
        today=resolved_today,
        year=resolved_year,
    )
    result = allocator.run()
    logger.info(
        "Optimized %d CTO days for %d (%s): %d breaks, %d days off",
        number_of_days,
        resolved_year,
        resolved_strategy.value,
        len(result.breaks),
        result.stats.total_days_off,
    )
    return result
