"""Per-report normalization: dates, person aliases and place hierarchies.

Provides:
    * :class:`Report` the normalized, immutable record
    * :func:`normalize_date` partial-date repair + parsing
    * :class:`AliasResolver` canonical person names
    * :func:`normalize_place` hierarchy → display-level location
    * :func:`normalize_records` applies all of the above to parsed records
"""
from __future__ import annotations

import datetime as dt
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from incident_explorer.tasks.record_parser import RawRecord, ReportField, split_multi_value

UNKNOWN_LOCATION = "Unknown"
PLACE_DELIMITER = "/"

# "3/  /1998" -> "3/1/1998" and "  /  /1998" (or "/ /1998") -> "1/1/1998"
_BLANK_DAY_RE = re.compile(r"(\d+)/\s*/(\d{4}|\d{2}\b)")
_BLANK_MONTH_DAY_RE = re.compile(r"^\s*/\s*/(\d{4}|\d{2}\b)")
_SLASH_SPACING_RE = re.compile(r"\s*/\s*")
DATE_FORMAT = "%m/%d/%Y"
# two-digit years: 00-49 -> 2000s, 50-99 -> 1900s
_SHORT_YEAR_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2})$")
SHORT_YEAR_PIVOT = 50

DEFAULT_ALIAS_MAP: Dict[str, str] = {
    "Abu Hafs": "Abdillah Zinedine",
    "Mehdi Rafiki": "Abdillah Zinedine",
    "Fr. Augustin Dominique": "Abdal al Hawsawi",
    "Omar Blakely": "Rifai Qasim",
    "Ronald": "Satam Derwish",
    "R. Derwish": "Satam Derwish",
    "Ronald Derwish": "Satam Derwish",
    "Ralph Bean": "Raeed Beandali",
    "Reginald Cooper": "Mahmud al-Dahab",
    "Boris": "Boris Bugarov",
    "Pyotr": "Pyotr Sofrygin",
    "Sofrygin": "Pyotr Sofrygin",
    "A. Somad": "Abu Somad",
    "Y. Bafaba": "Yazid Bafaba",
    "Hafs or Halfs": "Abdillah Zinedine",
    "al Quso": "Jamal al Quso",
    "Dr. Badawi": "Fahd al Badawi",
    "Yasir Salman": "Saeed Hasham",
    "Hamid Qatada": "Saeed Hasham",
}


@dataclass(frozen=True)
class Report:
    """A normalized incident report.

    ``persons_resolved`` is always index-aligned with ``persons``.
    ``date`` is ``None`` when the source date was missing or invalid.
    """
    id: str
    date: Optional[dt.date]
    persons: Tuple[str, ...] = ()
    persons_resolved: Tuple[str, ...] = ()
    organizations: Tuple[str, ...] = ()
    places: Tuple[str, ...] = ()
    places_clean: Tuple[str, ...] = ()
    description: str = ""
    raw_date: str = ""
    extra: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False)

    def mentions(self, entity: str) -> bool:
        """True if ``entity`` is one of the report's persons or organizations."""
        return entity in self.persons_resolved or entity in self.organizations

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat() if self.date else None,
            "reportdate": self.raw_date,
            "persons": list(self.persons),
            "persons_resolved": list(self.persons_resolved),
            "organizations": list(self.organizations),
            "places": list(self.places),
            "places_clean": list(self.places_clean),
            "reportdescription": self.description,
        }


def repair_date_string(raw: str) -> str:
    """Fill a blank day (and month) with ``1`` so the string can be parsed."""
    repaired = _BLANK_DAY_RE.sub(r"\1/1/\2", raw, count=1)
    return _BLANK_MONTH_DAY_RE.sub(r"1/1/\1", repaired, count=1)


def normalize_date(raw: Optional[str]) -> Optional[dt.date]:
    """Convert a ``month/day/year`` string into a date.

    Unknown days are treated as the 1st of the month. Two-digit years follow
    the 50 pivot (``98`` is 1998, ``03`` is 2003). Anything empty or not a
    real calendar date after repair yields ``None``; this never raises.

    Args:
        raw: Source ``REPORTDATE`` text, possibly ``None``.

    Returns:
        Parsed date or ``None``.
    """
    if not raw or not raw.strip():
        return None
    candidate = _SLASH_SPACING_RE.sub("/", repair_date_string(raw).strip())
    try:
        return dt.datetime.strptime(candidate, DATE_FORMAT).date()
    except ValueError:
        pass
    short = _SHORT_YEAR_RE.match(candidate)
    if short is None:
        return None
    month, day, yy = (int(g) for g in short.groups())
    year = 2000 + yy if yy < SHORT_YEAR_PIVOT else 1900 + yy
    try:
        return dt.date(year, month, day)
    except ValueError:
        return None


class AliasResolver:
    """Exact-match alias table for person names.

    Lookups are case and punctuation sensitive; unmapped names come back
    unchanged. Only person mentions go through the resolver.
    """

    def __init__(self, alias_map: Optional[Mapping[str, str]] = None):
        self._aliases: Dict[str, str] = dict(DEFAULT_ALIAS_MAP if alias_map is None else alias_map)

    @classmethod
    def from_json(cls, path: str | Path) -> "AliasResolver":
        """Load an ``{alias: canonical}`` table from a JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Alias map in {path} must be a JSON object")
        return cls({str(k): str(v) for k, v in data.items()})

    def __call__(self, name: str) -> str:
        return self._aliases.get(name, name)

    def resolve_all(self, names: List[str] | Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(self(n) for n in names)

    def aliases(self) -> Dict[str, str]:
        """Copy of the alias table."""
        return dict(self._aliases)


def normalize_place(raw: str) -> str:
    """Reduce ``region / district / city`` style strings to one location.

    No segments gives ``Unknown``; one or two segments give the first; three
    or more give the third-from-last segment.
    """
    parts = [p.strip() for p in raw.split(PLACE_DELIMITER)]
    parts = [p for p in parts if p]
    if not parts:
        return UNKNOWN_LOCATION
    if len(parts) > 2:
        return parts[-3]
    return parts[0]


def normalize_record(record: RawRecord, resolver: AliasResolver) -> Report:
    """Build a :class:`Report` from a raw record."""
    raw_date = record.get(ReportField.REPORTDATE)
    persons = tuple(split_multi_value(record.get(ReportField.PERSONS)))
    places = tuple(split_multi_value(record.get(ReportField.PLACES)))
    return Report(
        id=record.id,
        date=normalize_date(raw_date),
        persons=persons,
        persons_resolved=resolver.resolve_all(persons),
        organizations=tuple(split_multi_value(record.get(ReportField.ORGANIZATIONS))),
        places=places,
        places_clean=tuple(p for p in (normalize_place(x) for x in places) if p),
        description=record.get(ReportField.REPORTDESCRIPTION),
        raw_date=raw_date,
        extra=dict(record.unknown),
    )


def normalize_records(records: List[RawRecord], resolver: Optional[AliasResolver] = None) -> List[Report]:
    """Normalize every parsed record, keeping file order.

    Args:
        records: Output of :func:`~incident_explorer.tasks.record_parser.parse_raw_text`.
        resolver: Alias table; the built-in table when omitted.

    Returns:
        One :class:`Report` per record.
    """
    resolver = resolver or AliasResolver()
    return [normalize_record(r, resolver) for r in records]
