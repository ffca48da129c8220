from __future__ import annotations

import datetime
import json
import os
import tempfile

import pytest
from typer.testing import CliRunner

from ctoplan.cli import app
from ctoplan.holidays import ca_holidays, get_holidays, us_holidays

runner = CliRunner()

# Pin "today" so results do not depend on when the suite runs
BASE = ["optimize", "--year", "2025", "--today", "2025-01-01"]


def _write_config(data: dict[str, object]) -> str:
    """Write a JSON config to a temp file and return its path."""
    fd, path = tempfile.mkstemp(suffix=".json")
    with os.fdopen(fd, "w") as f:
        json.dump(data, f)
    return path


class TestOptimizeCommand:
    def test_optimize_basic(self) -> None:
        result = runner.invoke(app, [*BASE, "--days", "5", "--no-calendar"])
        assert result.exit_code == 0
        assert "CTO DAY OPTIMIZER" in result.output
        assert "STRATEGY: Balanced Mix" in result.output
        assert "CTO days used: 5 / 5" in result.output
        assert "Days to request off:" in result.output

    def test_optimize_strategy(self) -> None:
        result = runner.invoke(
            app, [*BASE, "--days", "4", "--strategy", "longWeekends", "--no-calendar"]
        )
        assert result.exit_code == 0
        assert "STRATEGY: Long Weekends" in result.output

    def test_optimize_json_output(self) -> None:
        result = runner.invoke(app, [*BASE, "--days", "5", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["year"] == 2025
        assert data["budget"] == 5
        assert data["strategy"] == "balanced"
        assert len(data["cto_dates"]) == 5
        assert data["stats"]["total_cto_days"] == 5
        assert data["unallocated"] == 0
        for block in data["breaks"]:
            assert block["total_days"] >= 3

    def test_optimize_canada(self) -> None:
        result = runner.invoke(app, [*BASE, "--days", "1", "--country", "ca", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["cto_dates"] == ["2025-12-24"]
        assert data["stats"]["total_public_holidays"] == 10

    def test_optimize_with_calendar(self) -> None:
        result = runner.invoke(app, [*BASE, "--days", "3", "--calendar"])
        assert result.exit_code == 0
        assert "Calendar View 2025" in result.output

    def test_optimize_invalid_strategy(self) -> None:
        result = runner.invoke(app, [*BASE, "--days", "5", "--strategy", "bogus"])
        assert result.exit_code == 1
        assert "Invalid strategy" in result.output

    def test_optimize_zero_days(self) -> None:
        result = runner.invoke(app, [*BASE, "--days", "0"])
        assert result.exit_code == 1
        assert "greater than 0" in result.output

    def test_optimize_days_required(self) -> None:
        result = runner.invoke(app, BASE)
        assert result.exit_code == 1
        assert "--days is required" in result.output

    def test_optimize_no_country(self) -> None:
        result = runner.invoke(
            app,
            [*BASE, "--days", "2", "--country", "none", "--holiday", "2025-12-25", "--no-calendar"],
        )
        assert result.exit_code == 0
        assert "Public holidays:   1" in result.output

    def test_optimize_custom_holiday(self) -> None:
        result = runner.invoke(
            app, [*BASE, "--days", "2", "--holiday", "2025-03-17", "--no-calendar"]
        )
        assert result.exit_code == 0
        # 9 US holidays + 1 custom = 10
        assert "Public holidays:   10" in result.output

    def test_optimize_invalid_country(self) -> None:
        result = runner.invoke(app, [*BASE, "--days", "5", "--country", "zz"])
        assert result.exit_code == 1
        assert "Unknown country preset" in result.output

    def test_optimize_invalid_today(self) -> None:
        result = runner.invoke(app, ["optimize", "--days", "2", "--today", "2025-02-30"])
        assert result.exit_code != 0

    def test_optimize_company_day(self) -> None:
        result = runner.invoke(
            app,
            [*BASE, "--days", "2", "--country", "none", "--company-day", "2025-01-03=Office closed", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["stats"]["total_company_days_off"] == 1
        assert "2025-01-03" not in data["cto_dates"]

    def test_optimize_custom_weekend(self) -> None:
        result = runner.invoke(
            app, [*BASE, "--days", "2", "--country", "none", "-w", "4", "-w", "5", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        for d in data["cto_dates"]:
            assert datetime.date.fromisoformat(d).weekday() not in (4, 5)

    def test_optimize_partial_allocation(self) -> None:
        result = runner.invoke(
            app,
            [
                "optimize",
                "--days",
                "5",
                "--year",
                "2025",
                "--today",
                "2025-12-29",
                "--country",
                "none",
                "--no-calendar",
            ],
        )
        assert result.exit_code == 0
        assert "Warning: Only 3 of 5" in result.output
        assert "CTO days used: 3 / 5" in result.output


class TestConfigFile:
    def test_config_supplies_inputs(self) -> None:
        path = _write_config(
            {
                "year": 2025,
                "days": 3,
                "strategy": "weekLongBreaks",
                "country": "none",
                "holidays": [{"date": "2025-07-01", "name": "Canada Day"}, "2025-12-25"],
                "company_days_off": [
                    {"date": "2025-12-24", "name": "Christmas Eve"},
                    {
                        "name": "Summer Fridays",
                        "weekday": 4,
                        "start_date": "2025-07-01",
                        "end_date": "2025-08-31",
                    },
                ],
            }
        )
        try:
            result = runner.invoke(app, ["optimize", "--config", path, "--today", "2025-01-01", "--json"])
            assert result.exit_code == 0
            data = json.loads(result.output)
            assert data["year"] == 2025
            assert data["strategy"] == "weekLongBreaks"
            assert data["budget"] == 3
            assert data["stats"]["total_public_holidays"] == 2
            assert data["stats"]["total_company_days_off"] == 10
        finally:
            os.unlink(path)

    def test_options_override_config(self) -> None:
        path = _write_config({"year": 2025, "days": 3, "strategy": "miniBreaks", "country": "none"})
        try:
            result = runner.invoke(
                app,
                [
                    "optimize",
                    "--config",
                    path,
                    "--today",
                    "2025-01-01",
                    "--days",
                    "2",
                    "--strategy",
                    "extendedVacations",
                    "--json",
                ],
            )
            assert result.exit_code == 0
            data = json.loads(result.output)
            assert data["budget"] == 2
            assert data["strategy"] == "extendedVacations"
        finally:
            os.unlink(path)

    def test_config_file_not_found(self) -> None:
        result = runner.invoke(app, ["optimize", "--config", "/nonexistent/config.json"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_config_invalid_json(self) -> None:
        fd, path = tempfile.mkstemp(suffix=".json")
        with os.fdopen(fd, "w") as f:
            f.write("not json{{{")
        try:
            result = runner.invoke(app, ["optimize", "--config", path])
            assert result.exit_code == 1
            assert "Invalid JSON" in result.output
        finally:
            os.unlink(path)

    def test_config_not_an_object(self) -> None:
        path = _write_config([1, 2, 3])  # type: ignore[arg-type]
        try:
            result = runner.invoke(app, ["optimize", "--config", path])
            assert result.exit_code == 1
            assert "JSON object" in result.output
        finally:
            os.unlink(path)

    def test_config_bad_company_day(self) -> None:
        path = _write_config(
            {"days": 2, "country": "none", "company_days_off": [{"name": "Nameless"}]}
        )
        try:
            result = runner.invoke(app, [*BASE, "--config", path])
            assert result.exit_code == 1
            assert "Invalid config file" in result.output
        finally:
            os.unlink(path)


class TestHolidaysCommand:
    def test_holidays_default(self) -> None:
        result = runner.invoke(app, ["holidays", "--year", "2025"])
        assert result.exit_code == 0
        assert "United States federal holidays" in result.output
        assert "New Year" in result.output
        assert "Christmas" in result.output

    def test_holidays_canada(self) -> None:
        result = runner.invoke(app, ["holidays", "--country", "ca", "--year", "2025"])
        assert result.exit_code == 0
        assert "Canadian statutory holidays" in result.output
        assert "Victoria Day" in result.output
        assert "Boxing Day" in result.output

    def test_holidays_invalid_country(self) -> None:
        result = runner.invoke(app, ["holidays", "--country", "zz"])
        assert result.exit_code == 1
        assert "Unknown country preset" in result.output


class TestStrategiesCommand:
    def test_lists_every_strategy(self) -> None:
        result = runner.invoke(app, ["strategies"])
        assert result.exit_code == 0
        for value in ("balanced", "miniBreaks", "longWeekends", "weekLongBreaks", "extendedVacations"):
            assert value in result.output


class TestHolidayPresets:
    def test_us_holidays_count(self) -> None:
        assert len(us_holidays(2025)) == 9

    def test_us_holidays_sorted(self) -> None:
        dates = [d for d, _ in us_holidays(2025)]
        assert dates == sorted(dates)

    def test_us_holidays_observed_saturday(self) -> None:
        # July 4, 2026 falls on Saturday -> observed Friday July 3
        dates = {d for d, _ in us_holidays(2026)}
        assert datetime.date(2026, 7, 3) in dates

    def test_us_holidays_observed_sunday(self) -> None:
        # July 4, 2021 falls on Sunday -> observed Monday July 5
        dates = {d for d, _ in us_holidays(2021)}
        assert datetime.date(2021, 7, 5) in dates

    def test_ca_holidays_2025(self) -> None:
        assert [d for d, _ in ca_holidays(2025)] == [
            datetime.date(2025, 1, 1),
            datetime.date(2025, 4, 18),
            datetime.date(2025, 5, 19),
            datetime.date(2025, 7, 1),
            datetime.date(2025, 8, 4),
            datetime.date(2025, 9, 1),
            datetime.date(2025, 10, 13),
            datetime.date(2025, 11, 11),
            datetime.date(2025, 12, 25),
            datetime.date(2025, 12, 26),
        ]

    def test_ca_christmas_on_saturday(self) -> None:
        # Dec 25, 2021 is a Saturday -> Mon 27 / Tue 28
        dates = {d: n for d, n in ca_holidays(2021)}
        assert dates[datetime.date(2021, 12, 27)] == "Christmas Day"
        assert dates[datetime.date(2021, 12, 28)] == "Boxing Day"

    def test_ca_canada_day_on_sunday(self) -> None:
        # Jul 1, 2029 is a Sunday -> observed Monday Jul 2
        dates = {d: n for d, n in ca_holidays(2029)}
        assert dates[datetime.date(2029, 7, 2)] == "Canada Day"

    def test_get_holidays_unknown_country(self) -> None:
        with pytest.raises(KeyError):
            get_holidays("xx", 2025)

    def test_get_holidays_case_insensitive(self) -> None:
        assert len(get_holidays("CA", 2025)) == 10
