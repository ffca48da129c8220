"""Break detection: merge adjacent off days into contiguous runs.

A *break* is a maximal run of at least :data:`~ctoplan.models.MIN_BREAK_DAYS`
consecutive days where every day is a weekend, public holiday, company day
off or CTO day.  Shorter runs (a lone weekend, say) still count as days off
but are not breaks.
"""

from __future__ import annotations

import datetime
from collections.abc import Sequence

from ctoplan.models import (
    MIN_BREAK_DAYS,
    Break,
    BreakCategory,
    CalendarDay,
    break_category,
)

__all__ = [
    "break_category",
    "count_extended_weekends",
    "find_breaks",
    "find_runs",
    "mark_breaks",
]


def find_runs(off: Sequence[bool], min_length: int = MIN_BREAK_DAYS) -> list[tuple[int, int]]:
    """Return ``(start, end)`` index pairs (inclusive) of off-runs of at least *min_length*."""
    runs: list[tuple[int, int]] = []
    start = -1
    for i, is_off in enumerate(off):
        if is_off:
            if start < 0:
                start = i
        elif start >= 0:
            if i - start >= min_length:
                runs.append((start, i - 1))
            start = -1
    if start >= 0 and len(off) - start >= min_length:
        runs.append((start, len(off) - 1))
    return runs


def _make_break(days: Sequence[CalendarDay]) -> Break:
    return Break(
        start_date=days[0].date,
        end_date=days[-1].date,
        days=tuple(days),
        total_days=len(days),
        cto_days=sum(1 for d in days if d.is_cto),
        holidays=sum(1 for d in days if d.is_public_holiday),
        weekends=sum(1 for d in days if d.is_weekend),
        company_days_off=sum(1 for d in days if d.is_company_day_off),
    )


def find_breaks(days: Sequence[CalendarDay]) -> list[Break]:
    """Scan *days* (in date order) and return every break, earliest first.

    A missing date between two entries ends the current run, so the result
    never spans a hole in the sequence.
    """
    breaks: list[Break] = []
    run: list[CalendarDay] = []
    one_day = datetime.timedelta(days=1)

    for day in days:
        if day.is_off and (not run or day.date - run[-1].date == one_day):
            run.append(day)
            continue
        if len(run) >= MIN_BREAK_DAYS:
            breaks.append(_make_break(run))
        run = [day] if day.is_off else []

    if len(run) >= MIN_BREAK_DAYS:
        breaks.append(_make_break(run))
    return breaks


def count_extended_weekends(days: Sequence[CalendarDay]) -> int:
    """Count long-weekend breaks (3-4 days) that contain at least one weekend day."""
    return sum(
        1
        for b in find_breaks(days)
        if b.category is BreakCategory.LONG_WEEKEND and b.weekends > 0
    )


def mark_breaks(days: Sequence[CalendarDay], breaks: Sequence[Break]) -> list[CalendarDay]:
    """Return a copy of *days* with ``is_part_of_break`` set from *breaks*."""
    in_break = {d.date for b in breaks for d in b.days}
    return [d._replace(is_part_of_break=d.date in in_break) for d in days]
