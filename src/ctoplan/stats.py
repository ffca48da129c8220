"""Summary counts over a final day sequence."""

from __future__ import annotations

from collections.abc import Sequence

from ctoplan.models import Break, CalendarDay, OptimizationStats


def compute_stats(days: Sequence[CalendarDay], breaks: Sequence[Break]) -> OptimizationStats:
    """Reduce *days* and their *breaks* to :class:`OptimizationStats`.

    Weekend days inside a break are "extended" weekends, the rest are
    "normal".  ``total_days_off`` counts each date once even when it is,
    say, both a holiday and a weekend.
    """
    in_break = {d.date for b in breaks for d in b.days}
    weekends_in_break = sum(1 for d in days if d.is_weekend and d.date in in_break)
    weekends = sum(1 for d in days if d.is_weekend)

    return OptimizationStats(
        total_cto_days=sum(1 for d in days if d.is_cto),
        total_public_holidays=sum(1 for d in days if d.is_public_holiday),
        total_normal_weekends=weekends - weekends_in_break,
        total_extended_weekends=weekends_in_break,
        total_company_days_off=sum(1 for d in days if d.is_company_day_off),
        total_days_off=sum(1 for d in days if d.is_off),
    )
