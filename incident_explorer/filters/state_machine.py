"""Cross-filter selection state shared by the network, location and time views.

Provides:
    * :class:`Selection` the immutable filter state (at most one dimension set)
    * :func:`recompute` pure filtering + highlight derivation
    * :class:`FilterStateMachine` one entry point per selection event

Selecting a dimension clears the other two. Reselecting the active entity or
location toggles it off. Recomputation is synchronous and total; unknown
entities or locations simply match nothing.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

from incident_explorer.tasks.entity_graph import Link, Network
from incident_explorer.tasks.normalization import Report

TimeRange = Tuple[dt.date, dt.date]
Predicate = Callable[[Report], bool]


@dataclass(frozen=True)
class Selection:
    entity: Optional[str] = None
    location: Optional[str] = None
    time_range: Optional[TimeRange] = None

    @property
    def is_empty(self) -> bool:
        return self.entity is None and self.location is None and self.time_range is None

    def active_dimensions(self) -> List[str]:
        return [name for name in ("entity", "location", "time_range") if getattr(self, name) is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entity": self.entity,
            "location": self.location,
            "timeRange": [d.isoformat() for d in self.time_range] if self.time_range else None,
        }


@dataclass(frozen=True)
class FilterResult:
    """What the rendering layer needs after each selection event.

    ``entity_highlight`` and ``link_highlight`` are ``None`` unless an entity is
    selected; ``location_highlight`` is ``None`` unless a location is. ``None``
    means every node, link or bar renders at full emphasis.
    """
    selection: Selection
    reports: List[Report]
    entity_highlight: Optional[FrozenSet[str]] = None
    link_highlight: Optional[List[Link]] = None
    location_highlight: Optional[str] = None

    @property
    def report_count(self) -> int:
        return len(self.reports)

    def is_location_highlighted(self, location: str) -> bool:
        return self.location_highlight is None or self.location_highlight == location

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selection": self.selection.to_dict(),
            "reportCount": self.report_count,
            "reports": [r.to_dict() for r in self.reports],
            "entityHighlight": sorted(self.entity_highlight) if self.entity_highlight is not None else None,
            "linkHighlight": [l.to_dict() for l in self.link_highlight] if self.link_highlight is not None else None,
            "locationHighlight": self.location_highlight,
        }


def _as_date(value: dt.date) -> dt.date:
    # datetime is a date subclass but does not compare with plain dates
    return value.date() if isinstance(value, dt.datetime) else value


def entity_predicate(entity: str) -> Predicate:
    return lambda r: r.mentions(entity)


def location_predicate(location: str) -> Predicate:
    return lambda r: location in r.places_clean


def time_range_predicate(time_range: TimeRange) -> Predicate:
    start, end = time_range
    return lambda r: r.date is not None and start <= r.date <= end


def predicates_for(selection: Selection) -> List[Predicate]:
    """One predicate per active dimension; they compose with logical AND."""
    preds: List[Predicate] = []
    if selection.entity is not None:
        preds.append(entity_predicate(selection.entity))
    if selection.location is not None:
        preds.append(location_predicate(selection.location))
    if selection.time_range is not None:
        preds.append(time_range_predicate(selection.time_range))
    return preds


def recompute(selection: Selection, reports: Sequence[Report], network: Optional[Network] = None) -> FilterResult:
    """Filter ``reports`` by ``selection`` and derive highlight sets.

    Args:
        selection: Current filter state.
        reports: Full normalized report list (order is preserved).
        network: Co-occurrence graph used for the entity neighbor set.

    Returns:
        :class:`FilterResult` for the rendering layer.
    """
    preds = predicates_for(selection)
    filtered = [r for r in reports if all(p(r) for p in preds)]

    entity_highlight: Optional[FrozenSet[str]] = None
    link_highlight: Optional[List[Link]] = None
    if selection.entity is not None:
        if network is not None:
            entity_highlight = network.neighbors(selection.entity)
            link_highlight = network.incident_links(selection.entity)
        else:
            entity_highlight = frozenset({selection.entity})
            link_highlight = []

    return FilterResult(
        selection=selection,
        reports=filtered,
        entity_highlight=entity_highlight,
        link_highlight=link_highlight,
        location_highlight=selection.location,
    )


Listener = Callable[[FilterResult], None]


@dataclass
class FilterStateMachine:
    """Owns the selection and republishes a :class:`FilterResult` per event.

    Attributes:
        reports: Full report list, never mutated.
        network: Graph for neighbor highlighting (optional).
        selection: Current state; starts empty.
        result: Output of the latest recompute.
    """
    reports: Sequence[Report]
    network: Optional[Network] = None
    selection: Selection = field(default_factory=Selection)
    result: FilterResult = field(init=False)
    _listeners: List[Listener] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self.result = recompute(self.selection, self.reports, self.network)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every transition; returns an unsubscribe hook."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _transition(self, selection: Selection) -> FilterResult:
        self.selection = selection
        self.result = recompute(selection, self.reports, self.network)
        for listener in list(self._listeners):
            listener(self.result)
        return self.result

    def select_entity(self, entity: str) -> FilterResult:
        """Node click: toggle ``entity`` and clear location and time range."""
        if self.selection.entity == entity:
            return self._transition(Selection())
        return self._transition(Selection(entity=entity))

    def focus_entity(self, entity: str) -> FilterResult:
        """Entity mention click in the report list: select without toggling."""
        return self._transition(Selection(entity=entity))

    def select_location(self, location: str) -> FilterResult:
        """Bar click: toggle ``location`` and clear entity and time range."""
        if self.selection.location == location:
            return self._transition(Selection())
        return self._transition(Selection(location=location))

    def select_time_range(self, start: dt.date, end: dt.date) -> FilterResult:
        """Brush end: keep reports dated within ``[start, end]`` inclusive."""
        start, end = _as_date(start), _as_date(end)
        if start > end:
            start, end = end, start
        return self._transition(Selection(time_range=(start, end)))

    def clear_time_range(self) -> FilterResult:
        """Brush cleared: like any brush event it leaves every dimension empty."""
        return self._transition(Selection())

    def reset(self) -> FilterResult:
        return self._transition(Selection())
