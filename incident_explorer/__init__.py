"""
Incident Explorer

Turns a flat text file of incident reports into a cross-referenced data
model (normalized reports, entity catalog, co-occurrence network, location
and monthly aggregates) and keeps a single cross-filter selection in sync
for the network, location and timeline views.

Entry points:
- load_dataset(): read a source and build the Dataset
- build_dataset(): same, from text already in memory
- FilterStateMachine: selection events -> filtered reports + highlights
"""

from .errors import LoadFailure
from .filters.state_machine import FilterStateMachine, Selection
from .pipeline import Dataset, build_dataset, load_dataset

__all__ = [
    "Dataset",
    "FilterStateMachine",
    "LoadFailure",
    "Selection",
    "build_dataset",
    "load_dataset",
]
