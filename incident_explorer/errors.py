"""Exceptions raised by the incident pipeline.

Only loading the source text can fail. Every later stage is total: missing
ids drop the block, bad dates become ``None``, unknown aliases and places fall
back to pass-through and ``Unknown``.
"""
from __future__ import annotations


class LoadFailure(Exception):
    """The source text could not be fetched or decoded.

    Fatal for the session; callers surface ``str(exc)`` to the user and stop.
    """

    def __init__(self, source: str, reason: str):
        super().__init__(f"Failed to load {source}: {reason}")
        self.source = source
        self.reason = reason
