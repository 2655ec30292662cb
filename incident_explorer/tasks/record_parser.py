"""Tolerant line-based parser for the incident report text file.

File layout::

    REPORT
    ID: 1234
    REPORTDATE: 3/ /1998
    PERSONS: Alice; Bob
    REPORTDESCRIPTION: first line of the text
    continues on the next line

Workflow:
    * :func:`split_blocks` cuts the text on ``REPORT`` separator lines.
    * :func:`parse_block` turns one block into a :class:`RawRecord`.
    * :func:`parse_raw_text` runs both and drops blocks without an id.
    * :func:`split_multi_value` splits ``;`` lists (used by normalization).
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional

BLOCK_SEPARATOR = "REPORT"
FIELD_RE = re.compile(r"^([A-Z]+):\s*(.*)")
MULTI_VALUE_DELIMITER = ";"

log = logging.getLogger(__name__)


class ReportField(str, Enum):
    """Field headers the pipeline understands (lower-cased on output)."""

    ID = "id"
    REPORTDATE = "reportdate"
    PERSONS = "persons"
    PLACES = "places"
    ORGANIZATIONS = "organizations"
    REPORTDESCRIPTION = "reportdescription"

    @classmethod
    def lookup(cls, header: str) -> Optional["ReportField"]:
        try:
            return cls(header.lower())
        except ValueError:
            return None


@dataclass
class RawRecord:
    """One parsed block: trimmed field text, nothing split or converted yet.

    Attributes:
        fields: Recognized fields keyed by :class:`ReportField`.
        unknown: Any other header found in the block, keyed by lower-cased name.
    """
    fields: Dict[ReportField, str] = field(default_factory=dict)
    unknown: Dict[str, str] = field(default_factory=dict)

    def get(self, name: ReportField, default: str = "") -> str:
        return self.fields.get(name, default)

    @property
    def id(self) -> str:
        return self.fields.get(ReportField.ID, "")

    def set(self, header: str, value: str) -> None:
        """Store a field value, routing unrecognized headers to ``unknown``."""
        known = ReportField.lookup(header)
        if known is None:
            self.unknown[header.lower()] = value
        else:
            self.fields[known] = value


def split_blocks(raw_text: str, separator: str = BLOCK_SEPARATOR) -> Iterator[List[str]]:
    """Yield the lines of each block delimited by ``separator`` lines.

    Text before the first separator is treated as a block of its own, so a file
    that omits the leading ``REPORT`` still parses. Empty blocks are skipped.
    """
    current: List[str] = []
    for line in raw_text.replace("\r\n", "\n").split("\n"):
        if line.rstrip() == separator:
            if any(current):
                yield current
            current = []
            continue
        current.append(line)
    if any(current):
        yield current


def parse_block(lines: List[str]) -> RawRecord:
    """Parse the lines of one block into a :class:`RawRecord`.

    A line matching ``UPPERCASE: value`` opens a field; any other line is a
    continuation of the open field. Values are space-joined then trimmed, so
    blank continuation lines survive until that final trim. Lines before the
    first header are ignored.

    Args:
        lines: Lines of the block, without the separator.

    Returns:
        Record with every header found (the last occurrence wins on repeats).
    """
    record = RawRecord()
    header: Optional[str] = None
    content: List[str] = []
    for line in lines:
        match = FIELD_RE.match(line)
        if match:
            if header is not None:
                record.set(header, " ".join(content).strip())
            header = match.group(1)
            content = [match.group(2)]
        elif header is not None:
            content.append(line)
    if header is not None:
        record.set(header, " ".join(content).strip())
    return record


def parse_raw_text(raw_text: str, separator: str = BLOCK_SEPARATOR) -> List[RawRecord]:
    """Parse the whole dataset text into raw records.

    Blocks without a non-empty ``ID`` field are dropped silently; that is the
    only validation performed.

    Args:
        raw_text: Full contents of the dataset file.
        separator: Block separator keyword (a line holding only this word).

    Returns:
        Records in file order.
    """
    records: List[RawRecord] = []
    dropped = 0
    for lines in split_blocks(raw_text, separator):
        record = parse_block(lines)
        if record.id:
            records.append(record)
        else:
            dropped += 1
    if dropped:
        log.debug("Skipped %d block(s) without an ID field", dropped)
    return records


def split_multi_value(value: str, delimiter: str = MULTI_VALUE_DELIMITER) -> List[str]:
    """Split a ``;`` list into trimmed, non-empty entries (order kept)."""
    if not value:
        return []
    return [part.strip() for part in value.split(delimiter) if part.strip()]
