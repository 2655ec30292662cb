"""Entity catalog and co-occurrence graph over normalized reports.

Workflow:
    * :class:`EntityCatalog` collects canonical persons and organizations.
    * :class:`GraphBuilder` links every pair of distinct entities named in the
      same report (first report wins, one edge per unordered pair).
    * :class:`Network` wraps the result for JSON output and neighbor lookups.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

import networkx as nx

from incident_explorer.tasks.normalization import Report

PERSON = "person"
ORGANIZATION = "organization"


class EntityCatalog:
    """De-duplicated, insertion-ordered persons and organizations.

    Attributes:
        persons: Canonical person names in order of first appearance.
        organizations: Organization names in order of first appearance.
    """
    def __init__(self, persons: Iterable[str] = (), organizations: Iterable[str] = ()):
        self.persons: List[str] = list(dict.fromkeys(persons))
        self.organizations: List[str] = list(dict.fromkeys(organizations))

    @classmethod
    def from_reports(cls, reports: Iterable[Report]) -> "EntityCatalog":
        persons: List[str] = []
        organizations: List[str] = []
        for r in reports:
            persons.extend(r.persons_resolved)
            organizations.extend(r.organizations)
        return cls(persons, organizations)

    def __contains__(self, name: object) -> bool:
        return name in self.persons or name in self.organizations

    def kind_of(self, name: str) -> Optional[str]:
        """Return ``person``/``organization`` or ``None`` for unknown names."""
        if name in self.persons:
            return PERSON
        if name in self.organizations:
            return ORGANIZATION
        return None

    def names(self) -> List[str]:
        return self.persons + self.organizations

    def to_dict(self) -> Dict[str, List[str]]:
        return {"persons": list(self.persons), "organizations": list(self.organizations)}


@dataclass(frozen=True)
class Link:
    source: str
    target: str
    report_id: str

    def touches(self, name: str) -> bool:
        return self.source == name or self.target == name

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "target": self.target, "reportId": self.report_id}


@dataclass
class Network:
    """Nodes, links and the backing undirected graph."""
    nodes: List[Dict[str, str]]
    links: List[Link]
    graph: nx.Graph = field(repr=False)

    def neighbors(self, name: str) -> FrozenSet[str]:
        """``name`` plus every entity directly linked to it."""
        if name not in self.graph:
            return frozenset({name})
        return frozenset(self.graph.neighbors(name)) | {name}

    def incident_links(self, name: str) -> List[Link]:
        return [link for link in self.links if link.touches(name)]

    def to_dict(self) -> Dict[str, Any]:
        return {"nodes": [dict(n) for n in self.nodes], "links": [link.to_dict() for link in self.links]}


def pair_key(a: str, b: str) -> Tuple[str, str]:
    """Canonical key for an unordered entity pair."""
    return (a, b) if a <= b else (b, a)


class GraphBuilder:
    """Build the co-occurrence :class:`Network`.

    The set of seen pair keys belongs to the builder instance and is reset at
    the start of every :meth:`build`. Work is O(sum of k^2) over per-report entity
    counts k, which is fine while reports name a handful of entities.
    """

    def __init__(self, catalog: EntityCatalog):
        self.catalog = catalog
        self._seen: Set[Tuple[str, str]] = set()

    def build(self, reports: Iterable[Report]) -> Network:
        """Create nodes for the catalog and one edge per new co-occurring pair.

        Args:
            reports: Normalized reports in corpus order.

        Returns:
            :class:`Network` whose links keep the id of the first report that
            produced each pair.
        """
        G = nx.Graph()
        nodes: List[Dict[str, str]] = []
        for name in self.catalog.persons:
            nodes.append({"id": name, "type": PERSON})
            G.add_node(name, type=PERSON)
        for name in self.catalog.organizations:
            nodes.append({"id": name, "type": ORGANIZATION})
            if not G.has_node(name):
                G.add_node(name, type=ORGANIZATION)

        self._seen = set()
        links: List[Link] = []
        for report in reports:
            entities = list(report.persons_resolved) + list(report.organizations)
            for i in range(len(entities)):
                for j in range(i + 1, len(entities)):
                    source, target = entities[i], entities[j]
                    if source == target:
                        continue
                    key = pair_key(source, target)
                    if key in self._seen:
                        continue
                    self._seen.add(key)
                    links.append(Link(source, target, report.id))
                    G.add_edge(source, target, report_id=report.id)
        return Network(nodes=nodes, links=links, graph=G)


def build_network(reports: List[Report], catalog: Optional[EntityCatalog] = None) -> Network:
    """Convenience wrapper: catalog (if not given) plus a fresh builder."""
    catalog = catalog or EntityCatalog.from_reports(reports)
    return GraphBuilder(catalog).build(reports)
