"""Locate entity mentions inside report descriptions.

The report list renders these spans as clickable; a click feeds
``Mention.entity`` into :meth:`FilterStateMachine.focus_entity`.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from incident_explorer.tasks.entity_graph import EntityCatalog
from incident_explorer.tasks.normalization import AliasResolver


@dataclass(frozen=True)
class Mention:
    start: int
    end: int
    text: str
    entity: str

    def to_dict(self) -> Dict[str, object]:
        return {"start": self.start, "end": self.end, "text": self.text, "entity": self.entity}


class MentionFinder:
    """Exact, word-bounded matching of catalog names and their known aliases.

    Longer names are tried first so ``Ronald Derwish`` wins over ``Ronald``.
    """

    def __init__(self, catalog: EntityCatalog, resolver: Optional[AliasResolver] = None):
        self.resolver = resolver or AliasResolver()
        names = set(catalog.names())
        names.update(alias for alias, canonical in self.resolver.aliases().items() if canonical in catalog)
        names.discard("")
        self._pattern: Optional[re.Pattern[str]] = None
        if names:
            ordered = sorted(names, key=lambda n: (-len(n), n))
            self._pattern = re.compile(r"\b(" + "|".join(re.escape(n) for n in ordered) + r")\b")

    def find(self, description: str) -> List[Mention]:
        if self._pattern is None or not description:
            return []
        return [
            Mention(m.start(), m.end(), m.group(0), self.resolver(m.group(0)))
            for m in self._pattern.finditer(description)
        ]
