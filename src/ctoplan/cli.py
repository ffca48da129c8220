"""Typer CLI for the CTO Day Optimizer."""

from __future__ import annotations

import datetime
import json
import logging
import pathlib
import sys

import typer

from ctoplan.classifier import parse_date
from ctoplan.errors import OptimizerError, PartialAllocationError, ValidationError
from ctoplan.holidays import PRESETS, get_holidays
from ctoplan.models import CompanyDayOff, Holiday, OptimizationResult, OptimizationStrategy
from ctoplan.optimizer import optimize as run_optimizer
from ctoplan.report import format_calendar_view, format_result, result_to_dict

app = typer.Typer(
    name="ctoplan",
    help="CTO Day Optimizer — place your discretionary days off next to "
    "weekends, holidays and company days off for the longest breaks.",
    add_completion=False,
)

STRATEGY_CHOICES = [s.value for s in OptimizationStrategy]


def _parse_date(value: str) -> datetime.date:
    """Parse a YYYY-MM-DD date string."""
    try:
        return parse_date(value)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from None


def _current_year() -> int:
    return datetime.date.today().year


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Config file
# ---------------------------------------------------------------------------


def _load_config(path: str) -> dict[str, object]:
    """Load and validate a JSON config file."""
    p = pathlib.Path(path)
    if not p.exists():
        raise _fail(f"Config file not found: {path}")

    try:
        data = json.loads(p.read_text())
    except json.JSONDecodeError as exc:
        raise _fail(f"Invalid JSON in config file: {exc}") from None

    if not isinstance(data, dict):
        raise _fail("Config file must contain a JSON object.")

    return data


def _holiday_from_config(raw: object) -> Holiday:
    if isinstance(raw, str):
        return Holiday(parse_date(raw), "Custom holiday")
    if isinstance(raw, dict) and "date" in raw:
        return Holiday(parse_date(raw["date"]), str(raw.get("name", "Custom holiday")))
    raise ValidationError(f"Invalid holiday entry {raw!r}: expected a date string or {{date, name}}.")


def _company_day_from_config(raw: object) -> CompanyDayOff:
    if isinstance(raw, str):
        return CompanyDayOff(parse_date(raw), "Company day off")
    if not isinstance(raw, dict):
        raise ValidationError(f"Invalid company day entry {raw!r}.")

    name = str(raw.get("name", "Company day off"))
    if "weekday" in raw:
        if "start_date" not in raw or "end_date" not in raw:
            raise ValidationError(
                f"Recurring company day {name!r} needs 'start_date' and 'end_date'."
            )
        return CompanyDayOff(
            date=None,
            name=name,
            weekday=int(raw["weekday"]),
            start_date=parse_date(raw["start_date"]),
            end_date=parse_date(raw["end_date"]),
        )
    if "date" not in raw:
        raise ValidationError(f"Company day {name!r} needs a 'date' or a 'weekday'.")
    return CompanyDayOff(parse_date(raw["date"]), name)


def _parse_company_day_option(value: str) -> CompanyDayOff:
    """Parse ``YYYY-MM-DD`` or ``YYYY-MM-DD=Name``."""
    date_part, _, name = value.partition("=")
    return CompanyDayOff(_parse_date(date_part), name.strip() or "Company day off")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def optimize(
    days: int = typer.Option(
        None,
        "--days",
        "-d",
        help="Number of CTO days to place.",
    ),
    strategy: str = typer.Option(
        None,
        "--strategy",
        "-s",
        help=f"Strategy: {', '.join(STRATEGY_CHOICES)}. Defaults to balanced.",
    ),
    year: int = typer.Option(
        None,
        "--year",
        "-y",
        help="Target year. Defaults to the current year.",
    ),
    today: str | None = typer.Option(
        None,
        "--today",
        help="Treat this date (YYYY-MM-DD) as today; earlier days are never picked.",
    ),
    country: str | None = typer.Option(
        None,
        "--country",
        "-c",
        help=f"Holiday preset ({', '.join(sorted(PRESETS))}). Use 'none' to skip. "
        "Defaults to us.",
    ),
    holiday: list[str] | None = typer.Option(  # noqa: B008
        None,
        "--holiday",
        "-H",
        help="Additional public holiday (YYYY-MM-DD). Repeatable.",
    ),
    company_day: list[str] | None = typer.Option(  # noqa: B008
        None,
        "--company-day",
        "-C",
        help="Company day off (YYYY-MM-DD or YYYY-MM-DD=Name). Repeatable.",
    ),
    weekend: list[int] | None = typer.Option(  # noqa: B008
        None,
        "--weekend",
        "-w",
        help="Weekend weekday index, 0=Monday … 6=Sunday. Repeatable. Defaults to 5 and 6.",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        help="Path to a JSON config file. Command-line options take precedence.",
    ),
    calendar: bool = typer.Option(
        True,
        "--calendar/--no-calendar",
        help="Show month-by-month calendar view.",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log each allocation step.",
    ),
) -> None:
    """Choose which days to take off for the longest breaks."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    data: dict[str, object] = _load_config(config) if config is not None else {}

    raw_budget = days if days is not None else data.get("days")
    if raw_budget is None:
        raise _fail("--days is required (or set 'days' in --config).")
    try:
        budget = int(raw_budget)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        raise _fail(f"Invalid number of CTO days {raw_budget!r}.") from None

    resolved_today = _parse_date(today) if today is not None else datetime.date.today()
    resolved_year = year if year is not None else int(data.get("year", resolved_today.year))  # type: ignore[arg-type]
    resolved_strategy = strategy if strategy is not None else str(data.get("strategy", "balanced"))
    resolved_country = country if country is not None else str(data.get("country", "us"))

    # Collect holidays
    holidays: list[Holiday] = []
    if resolved_country and resolved_country != "none":
        try:
            holidays.extend(get_holidays(resolved_country, resolved_year))
        except KeyError as exc:
            raise _fail(exc.args[0]) from None

    company_days: list[CompanyDayOff] = []
    try:
        holidays.extend(_holiday_from_config(h) for h in data.get("holidays", []))  # type: ignore[attr-defined]
        company_days.extend(
            _company_day_from_config(c) for c in data.get("company_days_off", [])  # type: ignore[attr-defined]
        )
    except (ValidationError, TypeError, ValueError) as exc:
        raise _fail(f"Invalid config file: {exc}") from None

    for h in holiday or []:
        holidays.append(Holiday(_parse_date(h), "Custom holiday"))
    for c in company_day or []:
        company_days.append(_parse_company_day_option(c))

    weekend_days = weekend or data.get("weekend_days")

    # Run
    unallocated = 0
    try:
        result = run_optimizer(
            budget,
            strategy=resolved_strategy,
            year=resolved_year,
            holidays=holidays,
            company_days_off=company_days,
            weekend_days=weekend_days,  # type: ignore[arg-type]
            today=resolved_today,
        )
    except PartialAllocationError as exc:
        typer.echo(f"Warning: {exc}", err=True)
        result = exc.result
        unallocated = exc.unallocated
    except OptimizerError as exc:
        raise _fail(str(exc)) from None

    # Output
    if output_json:
        _print_json(result, unallocated)
    else:
        _print_text(result, calendar)


def _print_text(result: OptimizationResult, show_calendar: bool) -> None:
    w = 64
    in_window = [d for d in result.days if d.is_public_holiday]
    typer.echo("=" * w)
    typer.echo("  CTO DAY OPTIMIZER")
    typer.echo("=" * w)
    typer.echo(f"  Year:              {result.year}")
    typer.echo(f"  CTO budget:        {result.budget} days")
    typer.echo(f"  Public holidays:   {len(in_window)}")
    typer.echo(f"  Company days off:  {result.stats.total_company_days_off}")
    typer.echo()
    for d in in_window:
        typer.echo(f"    {d.date.strftime('%a, %b %d'):>12}  {d.holiday_name}")

    typer.echo(format_result(result))
    if show_calendar:
        typer.echo(format_calendar_view(result))

    typer.echo()
    typer.echo("=" * w)


def _print_json(result: OptimizationResult, unallocated: int) -> None:
    output = result_to_dict(result)
    output["unallocated"] = unallocated
    json.dump(output, sys.stdout, indent=2)
    typer.echo()


@app.command()
def holidays(
    country: str = typer.Option(
        "us",
        "--country",
        "-c",
        help=f"Country preset ({', '.join(sorted(PRESETS))}).",
    ),
    year: int = typer.Option(
        None,
        "--year",
        "-y",
        help="Year to list holidays for. Defaults to the current year.",
    ),
) -> None:
    """List holidays for a country preset."""
    resolved_year = year if year is not None else _current_year()

    try:
        preset = get_holidays(country, resolved_year)
    except KeyError as exc:
        raise _fail(exc.args[0]) from None

    typer.echo(f"  {PRESETS[country.lower()]} — {resolved_year}")
    typer.echo()
    for d, name in preset:
        typer.echo(f"    {d.strftime('%a, %b %d'):>12}  {name}")


@app.command()
def strategies() -> None:
    """List the available optimization strategies."""
    for s in OptimizationStrategy:
        typer.echo(f"  {s.value:<18} {s.label}")
        typer.echo(f"  {'':<18} {s.description}")


def main() -> None:
    """Entry point for the CLI."""
    app()
