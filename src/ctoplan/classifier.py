"""Fixed-day classification: weekends, public holidays and company days off.

Everything here is a pure lookup over externally supplied calendars.  The
only failure mode is a malformed date, which raises
:class:`~ctoplan.errors.ValidationError`.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable, Mapping

from ctoplan.errors import ValidationError
from ctoplan.models import DEFAULT_WEEKEND_DAYS, CalendarDay, CompanyDayOff, Holiday

DateLike = datetime.date | str


# ---------------------------------------------------------------------------
# Input normalisation
# ---------------------------------------------------------------------------


def parse_date(value: DateLike) -> datetime.date:
    """Coerce a ``date`` or ``YYYY-MM-DD`` string to a ``date``."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value.strip())
        except ValueError:
            raise ValidationError(f"Invalid date {value!r}. Use YYYY-MM-DD.") from None
    raise ValidationError(f"Expected a date or YYYY-MM-DD string, got {value!r}.")


def normalize_weekend_days(weekend_days: Iterable[int] | None) -> frozenset[int]:
    """Keep valid weekday indices (0-6); fall back to Sat/Sun when none remain."""
    if weekend_days is None:
        return DEFAULT_WEEKEND_DAYS
    valid = frozenset(
        d for d in weekend_days if isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6
    )
    return valid or DEFAULT_WEEKEND_DAYS


def holiday_lookup(
    holidays: Iterable[Holiday | tuple[DateLike, str]],
) -> dict[datetime.date, str]:
    """Map each holiday date to its name.  The first name listed for a date wins."""
    lookup: dict[datetime.date, str] = {}
    for d, name in holidays:
        lookup.setdefault(parse_date(d), name)
    return lookup


def expand_company_days(
    company_days_off: Iterable[CompanyDayOff],
) -> list[Holiday]:
    """Flatten recurring company days into one ``(date, name)`` entry per date.

    Output is sorted by date; a date claimed by several entries keeps the
    first name seen.
    """
    seen: dict[datetime.date, str] = {}
    for entry in company_days_off:
        if entry.is_recurring:
            start = parse_date(entry.start_date)  # type: ignore[arg-type]
            end = parse_date(entry.end_date)  # type: ignore[arg-type]
            if not 0 <= entry.weekday <= 6:  # type: ignore[operator]
                raise ValidationError(
                    f"Invalid weekday {entry.weekday!r} for company day {entry.name!r}; "
                    "expected 0 (Monday) to 6 (Sunday)."
                )
            if end < start:
                raise ValidationError(
                    f"Company day {entry.name!r} ends ({end}) before it starts ({start})."
                )
            # First matching weekday on or after start
            d = start + datetime.timedelta(days=(entry.weekday - start.weekday()) % 7)  # type: ignore[operator]
            while d <= end:
                seen.setdefault(d, entry.name)
                d += datetime.timedelta(weeks=1)
        else:
            if entry.date is None:
                raise ValidationError(
                    f"Company day {entry.name!r} needs a date or a weekday with a date range."
                )
            seen.setdefault(parse_date(entry.date), entry.name)
    return [Holiday(d, seen[d]) for d in sorted(seen)]


def company_day_lookup(company_days_off: Iterable[CompanyDayOff]) -> dict[datetime.date, str]:
    return dict(expand_company_days(company_days_off))


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify(
    date: DateLike,
    weekend_days: Iterable[int] | None = None,
    holidays: Mapping[datetime.date, str] | None = None,
    company_days_off: Mapping[datetime.date, str] | None = None,
) -> CalendarDay:
    """Return the :class:`CalendarDay` for *date* with ``is_cto`` unset."""
    d = parse_date(date)
    weekend = normalize_weekend_days(weekend_days)
    holiday_name = (holidays or {}).get(d)
    company_name = (company_days_off or {}).get(d)
    return CalendarDay(
        date=d,
        is_weekend=d.weekday() in weekend,
        is_public_holiday=holiday_name is not None,
        holiday_name=holiday_name,
        is_company_day_off=company_name is not None,
        company_day_name=company_name,
    )


def window_bounds(year: int, today: datetime.date) -> tuple[datetime.date, datetime.date]:
    """First and last date of the optimization window for *year*.

    The current year starts at *today*; any other year covers Jan 1 - Dec 31.
    """
    start = today if today.year == year else datetime.date(year, 1, 1)
    return start, datetime.date(year, 12, 31)


def build_calendar(
    year: int,
    today: datetime.date,
    weekend_days: Iterable[int] | None = None,
    holidays: Iterable[Holiday | tuple[DateLike, str]] = (),
    company_days_off: Iterable[CompanyDayOff] = (),
) -> list[CalendarDay]:
    """Classify every day of the optimization window, in date order."""
    weekend = normalize_weekend_days(weekend_days)
    hol = holiday_lookup(holidays)
    comp = company_day_lookup(company_days_off)

    start, end = window_bounds(year, today)
    num_days = (end - start).days + 1
    return [
        classify(start + datetime.timedelta(days=i), weekend, hol, comp)
        for i in range(num_days)
    ]
