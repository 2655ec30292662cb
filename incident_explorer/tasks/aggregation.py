"""Count summaries for the location bar chart and the monthly timeline."""
from __future__ import annotations

import datetime as dt
import os
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from incident_explorer.tasks.normalization import UNKNOWN_LOCATION, Report

LOCATION_TOP_N = int(os.getenv("LOCATION_TOP_N", "20"))


@dataclass(frozen=True)
class LocationCount:
    location: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"location": self.location, "count": self.count}


@dataclass(frozen=True)
class MonthCount:
    date: dt.date
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "count": self.count}


class LocationAggregator:
    """Occurrences of each cleaned location, most frequent first.

    Every ``places_clean`` entry counts, so a report naming the same city
    twice contributes two. ``Unknown`` is never counted. Ties keep the order
    of first appearance.
    """

    def aggregate(self, reports: Iterable[Report]) -> List[LocationCount]:
        counts: Counter[str] = Counter()
        for report in reports:
            for location in report.places_clean:
                if location != UNKNOWN_LOCATION:
                    counts[location] += 1
        ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
        return [LocationCount(loc, n) for loc, n in ranked]

    @staticmethod
    def top(location_counts: List[LocationCount], n: int = LOCATION_TOP_N) -> List[LocationCount]:
        """Head of an aggregate, for charts that only draw the top ``n`` bars."""
        return location_counts[:n]


class TimelineAggregator:
    """Reports per calendar month, oldest first; undated reports are skipped."""

    @staticmethod
    def month_key(date: dt.date) -> dt.date:
        return date.replace(day=1)

    def aggregate(self, reports: Iterable[Report]) -> List[MonthCount]:
        counts: Counter[dt.date] = Counter()
        for report in reports:
            if report.date is not None:
                counts[self.month_key(report.date)] += 1
        return [MonthCount(month, n) for month, n in sorted(counts.items())]
