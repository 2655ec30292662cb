"""Load the dataset text and turn it into the cross-referenced data model.

The only I/O happens in :func:`load_source_text`; :func:`build_dataset` is a
pure function of the text and the alias table, and the :class:`Dataset` it
returns is treated as read-only by every consumer.

Environment
-----------
DATASET_PATH     # default source (path or http(s) URL), "dataset.txt"
ALIAS_MAP_PATH   # optional JSON {alias: canonical} replacing the built-in table
SOURCE_TIMEOUT   # seconds allowed for URL sources (default 30)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from incident_explorer.errors import LoadFailure
from incident_explorer.tasks.aggregation import (
    LocationAggregator,
    LocationCount,
    MonthCount,
    TimelineAggregator,
)
from incident_explorer.tasks.entity_graph import EntityCatalog, GraphBuilder, Network
from incident_explorer.tasks.normalization import AliasResolver, Report, normalize_records
from incident_explorer.tasks.record_parser import parse_raw_text

DATASET_PATH = os.getenv("DATASET_PATH", "dataset.txt")
SOURCE_TIMEOUT = int(os.getenv("SOURCE_TIMEOUT", "30"))

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

log = logging.getLogger(__name__)


def set_up_logger(level: int = logging.INFO) -> logging.Logger:
    """Configure a root logger for console output."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    return logging.getLogger("incident_explorer")


@dataclass(frozen=True)
class Dataset:
    """Everything the views need, computed once per source text."""
    reports: List[Report]
    entities: EntityCatalog
    network: Network
    location_counts: List[LocationCount]
    timeline: List[MonthCount]

    def report_by_id(self, report_id: str) -> Optional[Report]:
        for r in self.reports:
            if r.id == report_id:
                return r
        return None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready data model: ``allReports``, ``allEntities``, ``vizData``."""
        return {
            "allReports": [r.to_dict() for r in self.reports],
            "allEntities": self.entities.to_dict(),
            "vizData": {
                "network": self.network.to_dict(),
                "locationCounts": [c.to_dict() for c in self.location_counts],
                "timelineData": [m.to_dict() for m in self.timeline],
            },
        }


def load_source_text(source: str | Path = DATASET_PATH, timeout: int = SOURCE_TIMEOUT) -> str:
    """Read the raw dataset from a local path or an ``http(s)`` URL.

    Args:
        source: File path or URL.
        timeout: Request timeout in seconds for URL sources.

    Returns:
        The full text.

    Raises:
        LoadFailure: The source is missing, unreachable or not UTF-8 text.
    """
    src = str(source)
    if src.startswith(("http://", "https://")):
        try:
            resp = requests.get(src, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise LoadFailure(src, str(exc)) from exc
        return resp.text
    try:
        return Path(src).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadFailure(src, str(exc)) from exc


def default_resolver() -> AliasResolver:
    """Alias table from ``ALIAS_MAP_PATH`` if set, else the built-in one.

    Raises:
        LoadFailure: ``ALIAS_MAP_PATH`` is unreadable or not a JSON object.
    """
    alias_path = os.getenv("ALIAS_MAP_PATH")
    if alias_path:
        try:
            return AliasResolver.from_json(alias_path)
        except (OSError, ValueError) as exc:
            raise LoadFailure(alias_path, str(exc)) from exc
    return AliasResolver()


def build_dataset(raw_text: str, resolver: Optional[AliasResolver] = None) -> Dataset:
    """Run parse → normalize → catalog/graph/aggregates over the raw text.

    Args:
        raw_text: Contents of the dataset file.
        resolver: Alias table; :func:`default_resolver` when omitted.

    Returns:
        The immutable :class:`Dataset`.
    """
    records = parse_raw_text(raw_text)
    reports = normalize_records(records, resolver or default_resolver())
    catalog = EntityCatalog.from_reports(reports)
    network = GraphBuilder(catalog).build(reports)
    dataset = Dataset(
        reports=reports,
        entities=catalog,
        network=network,
        location_counts=LocationAggregator().aggregate(reports),
        timeline=TimelineAggregator().aggregate(reports),
    )
    log.info(
        "Dataset built | reports=%d | persons=%d | organizations=%d | links=%d",
        len(reports), len(catalog.persons), len(catalog.organizations), len(network.links),
    )
    return dataset


def load_dataset(source: str | Path = DATASET_PATH, resolver: Optional[AliasResolver] = None) -> Dataset:
    """:func:`load_source_text` followed by :func:`build_dataset`."""
    return build_dataset(load_source_text(source), resolver)
