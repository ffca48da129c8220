"""Data types shared by the classifier, break detector, scorer and allocator."""

from __future__ import annotations

import datetime
import enum
from typing import NamedTuple

# ---------------------------------------------------------------------------
# Break length boundaries
# ---------------------------------------------------------------------------

LONG_WEEKEND_MIN = 3
LONG_WEEKEND_MAX = 4
MINI_BREAK_MIN = 5
MINI_BREAK_MAX = 6
WEEK_LONG_MIN = 7
WEEK_LONG_MAX = 9
EXTENDED_MIN = 10

MIN_BREAK_DAYS = LONG_WEEKEND_MIN
"""Shortest run of off days that counts as a break."""

DEFAULT_WEEKEND_DAYS: frozenset[int] = frozenset({5, 6})
"""Saturday and Sunday, using ``datetime`` weekday numbering (0 = Monday)."""


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class BreakCategory(enum.Enum):
    LONG_WEEKEND = "longWeekend"
    MINI_BREAK = "miniBreak"
    WEEK_LONG = "weekLong"
    EXTENDED = "extended"


def break_category(length: int) -> BreakCategory | None:
    """Return the category for a run of *length* off days, or ``None`` if too short."""
    if length < LONG_WEEKEND_MIN:
        return None
    if length <= LONG_WEEKEND_MAX:
        return BreakCategory.LONG_WEEKEND
    if length <= MINI_BREAK_MAX:
        return BreakCategory.MINI_BREAK
    if length <= WEEK_LONG_MAX:
        return BreakCategory.WEEK_LONG
    return BreakCategory.EXTENDED


class OptimizationStrategy(str, enum.Enum):
    """Named weighting policy over break-length categories."""

    BALANCED = "balanced"
    MINI_BREAKS = "miniBreaks"
    LONG_WEEKENDS = "longWeekends"
    WEEK_LONG_BREAKS = "weekLongBreaks"
    EXTENDED_VACATIONS = "extendedVacations"

    @property
    def label(self) -> str:
        return _STRATEGY_TEXT[self][0]

    @property
    def description(self) -> str:
        return _STRATEGY_TEXT[self][1]


_STRATEGY_TEXT: dict[OptimizationStrategy, tuple[str, str]] = {
    OptimizationStrategy.BALANCED: (
        "Balanced Mix",
        "A smart blend of short breaks and longer vacations.",
    ),
    OptimizationStrategy.LONG_WEEKENDS: (
        "Long Weekends",
        f"More {LONG_WEEKEND_MIN}-{LONG_WEEKEND_MAX} day weekends throughout the year.",
    ),
    OptimizationStrategy.MINI_BREAKS: (
        "Mini Breaks",
        f"Several shorter {MINI_BREAK_MIN}-{MINI_BREAK_MAX} day breaks spread "
        "across the year.",
    ),
    OptimizationStrategy.WEEK_LONG_BREAKS: (
        "Week-long Breaks",
        f"Focused {WEEK_LONG_MIN}-{WEEK_LONG_MAX} day breaks for proper getaways.",
    ),
    OptimizationStrategy.EXTENDED_VACATIONS: (
        "Extended Vacations",
        f"Longer vacations of {EXTENDED_MIN}+ days for deeper relaxation.",
    ),
}


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class Holiday(NamedTuple):
    """A public holiday supplied by a holiday-calendar provider."""

    date: datetime.date
    name: str


class CompanyDayOff(NamedTuple):
    """An employer-mandated day off.

    A plain entry names a single ``date``.  A recurring entry sets
    ``weekday`` (0 = Monday … 6 = Sunday) together with an inclusive
    ``start_date`` / ``end_date`` range; every matching weekday in the
    range is a day off and ``date`` is ignored.
    """

    date: datetime.date | None
    name: str
    weekday: int | None = None
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None

    @property
    def is_recurring(self) -> bool:
        return (
            self.weekday is not None
            and self.start_date is not None
            and self.end_date is not None
        )


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


class CalendarDay(NamedTuple):
    """One date in the optimization window."""

    date: datetime.date
    is_weekend: bool = False
    is_public_holiday: bool = False
    holiday_name: str | None = None
    is_company_day_off: bool = False
    company_day_name: str | None = None
    is_cto: bool = False
    is_part_of_break: bool = False

    @property
    def is_fixed_off(self) -> bool:
        """Off regardless of what the allocator decides."""
        return self.is_weekend or self.is_public_holiday or self.is_company_day_off

    @property
    def is_off(self) -> bool:
        return self.is_fixed_off or self.is_cto


class Break(NamedTuple):
    """A maximal run of at least three consecutive days off."""

    start_date: datetime.date
    end_date: datetime.date
    days: tuple[CalendarDay, ...]
    total_days: int
    cto_days: int
    holidays: int
    weekends: int
    company_days_off: int

    @property
    def category(self) -> BreakCategory:
        category = break_category(self.total_days)
        if category is None:
            raise ValueError(
                f"A break needs at least {MIN_BREAK_DAYS} days, got {self.total_days}."
            )
        return category


class OptimizationStats(NamedTuple):
    total_cto_days: int
    total_public_holidays: int
    total_normal_weekends: int
    total_extended_weekends: int
    total_company_days_off: int
    total_days_off: int


class OptimizationResult(NamedTuple):
    """Read-only output of a single optimization run."""

    days: tuple[CalendarDay, ...]
    breaks: tuple[Break, ...]
    stats: OptimizationStats
    strategy: OptimizationStrategy
    year: int
    budget: int
    cto_order: tuple[datetime.date, ...]
    """CTO dates in the order the allocator committed them."""

    @property
    def cto_dates(self) -> list[datetime.date]:
        return [d.date for d in self.days if d.is_cto]
