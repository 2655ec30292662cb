from __future__ import annotations

import datetime as dt
import json
from pathlib import Path

import pytest

from incident_explorer.tasks.normalization import (
    DEFAULT_ALIAS_MAP,
    UNKNOWN_LOCATION,
    AliasResolver,
    Report,
    normalize_date,
    normalize_place,
    normalize_records,
    repair_date_string,
)
from incident_explorer.tasks.record_parser import parse_raw_text


def test_blank_day_is_repaired_to_first() -> None:
    assert normalize_date("3/  /1998") == normalize_date("3/1/1998") == dt.date(1998, 3, 1)


def test_blank_month_and_day_are_repaired() -> None:
    assert repair_date_string("  /  /2001") == "1/1/2001"
    assert normalize_date("  /  /2001") == dt.date(2001, 1, 1)


@pytest.mark.parametrize("raw", ["", "   ", None, "not a date", "13/1/1998", "2/30/1998"])
def test_invalid_dates_become_none(raw) -> None:
    assert normalize_date(raw) is None


def test_spacing_around_slashes_is_tolerated() -> None:
    assert normalize_date(" 4 / 12 / 1998 ") == dt.date(1998, 4, 12)


def test_alias_resolution_is_lookup_with_identity_fallback() -> None:
    resolver = AliasResolver()
    for alias, canonical in DEFAULT_ALIAS_MAP.items():
        assert resolver(alias) == canonical
        assert resolver(resolver(alias)) == canonical
    assert resolver("Someone Else") == "Someone Else"


def test_alias_lookup_is_case_sensitive() -> None:
    resolver = AliasResolver()
    assert resolver("boris") == "boris"
    assert resolver("Boris") == "Boris Bugarov"


def test_alias_map_from_json(tmp_path: Path) -> None:
    path = tmp_path / "aliases.json"
    path.write_text(json.dumps({"Al": "Alice"}), encoding="utf-8")
    resolver = AliasResolver.from_json(path)
    assert resolver("Al") == "Alice"
    assert resolver("Boris") == "Boris"


def test_alias_map_must_be_object(tmp_path: Path) -> None:
    path = tmp_path / "aliases.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        AliasResolver.from_json(path)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Region/District/City", "Region"),
        ("District/City", "District"),
        ("City", "City"),
        ("   /   ", UNKNOWN_LOCATION),
        ("", UNKNOWN_LOCATION),
        (" North / Lowtown / Harbor / Dock 4 ", "Lowtown"),
        ("A//B", "A"),
    ],
)
def test_normalize_place(raw: str, expected: str) -> None:
    assert normalize_place(raw) == expected


def test_normalize_records_keeps_persons_aligned(alias_text: str) -> None:
    reports = normalize_records(parse_raw_text(alias_text))
    first = reports[0]
    assert first.persons == ("Boris", "Boris Bugarov", "Pyotr")
    assert first.persons_resolved == ("Boris Bugarov", "Boris Bugarov", "Pyotr Sofrygin")
    for report in reports:
        assert len(report.persons_resolved) == len(report.persons)


def test_organizations_are_not_alias_resolved() -> None:
    text = "REPORT\nID: 1\nORGANIZATIONS: Boris\n"
    (report,) = normalize_records(parse_raw_text(text))
    assert report.organizations == ("Boris",)


def test_places_clean_keeps_unknown_entries(alias_text: str) -> None:
    reports = {r.id: r for r in normalize_records(parse_raw_text(alias_text))}
    assert reports["B1"].places_clean == ("Lowtown", "Harbor")
    assert reports["B2"].places == ("Harbor", "/")
    assert reports["B2"].places_clean == ("Harbor", UNKNOWN_LOCATION)


def test_report_dates(alias_text: str) -> None:
    reports = {r.id: r for r in normalize_records(parse_raw_text(alias_text))}
    assert reports["B1"].date == dt.date(2001, 1, 5)
    assert reports["B2"].date == dt.date(2001, 1, 1)
    assert reports["B3"].date is None
    assert reports["B3"].raw_date == "not a date"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("3/1/98", dt.date(1998, 3, 1)),
        ("12/25/03", dt.date(2003, 12, 25)),
        ("7/ /49", dt.date(2049, 7, 1)),
        ("7/4/50", dt.date(1950, 7, 4)),
    ],
)
def test_two_digit_years(raw: str, expected: dt.date) -> None:
    assert normalize_date(raw) == expected


@pytest.mark.parametrize("raw", ["2/30/98", "3/1/9", "3/1/19988"])
def test_invalid_short_dates_become_none(raw: str) -> None:
    assert normalize_date(raw) is None


def test_reports_are_hashable_and_ignore_extra() -> None:
    text = "REPORT\nID: 9\nSOURCE: tip line\nPERSONS: Boris\n"
    (report,) = normalize_records(parse_raw_text(text))
    assert report.extra == {"source": "tip line"}
    twin = Report(id=report.id, date=report.date, persons=report.persons,
                  persons_resolved=report.persons_resolved)
    assert hash(report) == hash(twin)
    assert report == twin
    assert len({report, twin}) == 1
