"""Built-in public holiday presets.

These stand in for an external holiday-calendar provider: the CLI looks a
preset up and passes the resulting ``(date, name)`` list into
:func:`ctoplan.optimizer.optimize` explicitly.  The optimizer itself never
reaches for a default calendar.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable

from ctoplan.models import Holiday

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _nth_weekday(year: int, month: int, weekday: int, n: int) -> datetime.date:
    """Return the *n*-th occurrence of *weekday* in *month* of *year*.

    *weekday* follows ``datetime`` convention: 0 = Monday … 6 = Sunday.
    *n* is 1-based.
    """
    first = datetime.date(year, month, 1)
    delta = (weekday - first.weekday()) % 7
    return first + datetime.timedelta(days=delta, weeks=n - 1)


def _last_weekday(year: int, month: int, weekday: int) -> datetime.date:
    """Return the last occurrence of *weekday* in *month* of *year*."""
    if month == 12:
        last = datetime.date(year, 12, 31)
    else:
        last = datetime.date(year, month + 1, 1) - datetime.timedelta(days=1)
    return last - datetime.timedelta(days=(last.weekday() - weekday) % 7)


def _weekday_before(d: datetime.date, weekday: int) -> datetime.date:
    """Last *weekday* strictly before *d*."""
    delta = (d.weekday() - weekday) % 7 or 7
    return d - datetime.timedelta(days=delta)


def _easter_sunday(year: int) -> datetime.date:
    """Gregorian Easter (anonymous computus)."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return datetime.date(year, month, day + 1)


def _observed_us(d: datetime.date) -> datetime.date:
    """US federal rule: Saturday → Friday, Sunday → Monday."""
    if d.weekday() == 5:
        return d - datetime.timedelta(days=1)
    if d.weekday() == 6:
        return d + datetime.timedelta(days=1)
    return d


def _observed_ca(d: datetime.date) -> datetime.date:
    """Canadian rule: a weekend holiday moves to the following Monday."""
    if d.weekday() >= 5:
        return d + datetime.timedelta(days=7 - d.weekday())
    return d


# ---------------------------------------------------------------------------
# Country presets
# ---------------------------------------------------------------------------

PRESETS: dict[str, str] = {
    "ca": "Canadian statutory holidays",
    "us": "United States federal holidays",
}


def us_holidays(year: int) -> list[Holiday]:
    """US federal holidays (observed) for *year*."""
    return sorted(
        [
            Holiday(_observed_us(datetime.date(year, 1, 1)), "New Year's Day"),
            Holiday(_nth_weekday(year, 1, 0, 3), "Martin Luther King Jr. Day"),
            Holiday(_nth_weekday(year, 2, 0, 3), "Presidents' Day"),
            Holiday(_last_weekday(year, 5, 0), "Memorial Day"),
            Holiday(_observed_us(datetime.date(year, 6, 19)), "Juneteenth"),
            Holiday(_observed_us(datetime.date(year, 7, 4)), "Independence Day"),
            Holiday(_nth_weekday(year, 9, 0, 1), "Labor Day"),
            Holiday(_nth_weekday(year, 11, 3, 4), "Thanksgiving"),
            Holiday(_observed_us(datetime.date(year, 12, 25)), "Christmas Day"),
        ]
    )


def ca_holidays(year: int) -> list[Holiday]:
    """Canadian statutory holidays (observed) for *year*: ten days."""
    christmas = datetime.date(year, 12, 25)
    boxing = datetime.date(year, 12, 26)
    # Christmas and Boxing Day shift together so they never collide
    if christmas.weekday() == 5:  # Sat/Sun → Mon/Tue
        christmas, boxing = christmas + datetime.timedelta(days=2), boxing + datetime.timedelta(days=2)
    elif christmas.weekday() == 6:  # Sun/Mon → Tue/Mon
        christmas, boxing = christmas + datetime.timedelta(days=2), boxing
    elif christmas.weekday() == 4:  # Fri/Sat → Fri/Mon
        boxing = boxing + datetime.timedelta(days=2)

    return sorted(
        [
            Holiday(_observed_ca(datetime.date(year, 1, 1)), "New Year's Day"),
            Holiday(_easter_sunday(year) - datetime.timedelta(days=2), "Good Friday"),
            Holiday(_weekday_before(datetime.date(year, 5, 25), 0), "Victoria Day"),
            Holiday(_observed_ca(datetime.date(year, 7, 1)), "Canada Day"),
            Holiday(_nth_weekday(year, 8, 0, 1), "Civic Holiday"),
            Holiday(_nth_weekday(year, 9, 0, 1), "Labour Day"),
            Holiday(_nth_weekday(year, 10, 0, 2), "Thanksgiving"),
            Holiday(_observed_ca(datetime.date(year, 11, 11)), "Remembrance Day"),
            Holiday(christmas, "Christmas Day"),
            Holiday(boxing, "Boxing Day"),
        ]
    )


_PRESET_FNS: dict[str, Callable[[int], list[Holiday]]] = {
    "ca": ca_holidays,
    "us": us_holidays,
}


def get_holidays(country: str, year: int) -> list[Holiday]:
    """Return the holidays for the given *country* preset and *year*.

    Raises ``KeyError`` if the country is not supported.
    """
    fn = _PRESET_FNS.get(country.lower())
    if fn is None:
        supported = ", ".join(sorted(PRESETS))
        msg = f"Unknown country preset {country!r}. Supported: {supported}"
        raise KeyError(msg)
    return fn(year)
