"""Plain-text and JSON rendering of an :class:`OptimizationResult`."""

from __future__ import annotations

import calendar
import datetime

from ctoplan.models import Break, OptimizationResult

_WIDTH = 64


def _date_range(block: Break) -> str:
    if block.start_date == block.end_date:
        return block.start_date.strftime("%a, %b %d")
    return f"{block.start_date.strftime('%a, %b %d')} -> {block.end_date.strftime('%a, %b %d')}"


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'s' if n != 1 else ''}"


def format_result(result: OptimizationResult) -> str:
    """Return a human-readable summary of an optimization result."""
    stats = result.stats
    lines: list[str] = [
        "",
        "=" * _WIDTH,
        f"  STRATEGY: {result.strategy.label}",
        f"  {result.strategy.description}",
        "=" * _WIDTH,
        f"  CTO days used: {stats.total_cto_days} / {result.budget}",
        f"  Total days off: {stats.total_days_off}",
        f"  Public holidays: {stats.total_public_holidays}",
        f"  Company days off: {stats.total_company_days_off}",
        f"  Weekend days: {stats.total_extended_weekends} in breaks, "
        f"{stats.total_normal_weekends} normal",
    ]
    in_breaks = sum(b.total_days for b in result.breaks)
    if stats.total_cto_days > 0:
        lines.append(
            f"  Efficiency: {in_breaks / stats.total_cto_days:.1f}x (break days per CTO day)"
        )
    lines.append("")

    lines.append("  Breaks:")
    lines.append("  " + "-" * (_WIDTH - 4))
    for i, block in enumerate(result.breaks, 1):
        lines.append(f"  {i:>2}. {_date_range(block)}  ({block.total_days} days)")
        parts: list[str] = []
        if block.cto_days:
            parts.append(f"{block.cto_days} CTO")
        if block.holidays:
            parts.append(_plural(block.holidays, "holiday"))
        if block.company_days_off:
            parts.append(f"{block.company_days_off} company")
        if block.weekends:
            parts.append(f"{block.weekends} weekend")
        lines.append(f"      {' + '.join(parts)}")
        lines.append("")

    lines.append("  Days to request off:")
    for d in result.cto_dates:
        lines.append(f"    -> {d.strftime('%A, %B %d, %Y')}")

    return "\n".join(lines)


def format_calendar_view(result: OptimizationResult) -> str:
    """Return a month-by-month calendar marking CTO, holiday and company days."""
    by_date = {d.date: d for d in result.days}
    active_months = {
        d.date.month
        for d in result.days
        if d.is_cto or d.is_public_holiday or d.is_company_day_off
    }
    if not active_months:
        return ""

    year = result.year
    lines: list[str] = [
        "",
        f"  Calendar View {year}",
        "  Legend: C=CTO  H=Holiday  O=Company day off",
        "",
    ]

    cal = calendar.Calendar(firstweekday=0)

    for month in sorted(active_months):
        lines.append(f"  {calendar.month_name[month]} {year}")
        lines.append("  Mo  Tu  We  Th  Fr  Sa  Su")

        row = ""
        for day_num, weekday in cal.itermonthdays2(year, month):
            if day_num == 0:
                row += "    "
            else:
                day = by_date.get(datetime.date(year, month, day_num))
                if day is not None and day.is_cto:
                    cell = f" {day_num:>2}C"
                elif day is not None and day.is_public_holiday:
                    cell = f" {day_num:>2}H"
                elif day is not None and day.is_company_day_off:
                    cell = f" {day_num:>2}O"
                else:
                    cell = f"  {day_num:>2}"
                row += cell

            if weekday == 6:
                lines.append(row)
                row = ""

        if row.strip():
            lines.append(row)
        lines.append("")

    return "\n".join(lines)


def result_to_dict(result: OptimizationResult) -> dict[str, object]:
    """JSON-serializable form of *result* (dates as ISO strings)."""
    return {
        "year": result.year,
        "strategy": result.strategy.value,
        "budget": result.budget,
        "cto_dates": [d.isoformat() for d in result.cto_dates],
        "cto_order": [d.isoformat() for d in result.cto_order],
        "breaks": [
            {
                "start_date": b.start_date.isoformat(),
                "end_date": b.end_date.isoformat(),
                "category": b.category.value,
                "total_days": b.total_days,
                "cto_days": b.cto_days,
                "holidays": b.holidays,
                "weekends": b.weekends,
                "company_days_off": b.company_days_off,
            }
            for b in result.breaks
        ],
        "stats": result.stats._asdict(),
    }
