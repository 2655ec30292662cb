"""Flow description utilities independent of Prefect.

This module contains ONLY static metadata describing the dataset
processing flow DAG so that tools (e.g. documentation builders or CI
environments) can introspect the pipeline structure without having
Prefect installed or importable.
"""
from __future__ import annotations

TASKS = (
    "t_create_run_dir",
    "t_load",
    "t_parse",
    "t_normalize",
    "t_graph",
    "t_locations",
    "t_timeline",
    "t_persist",
)

EDGES = (
    ("t_create_run_dir", "t_load"),
    ("t_load", "t_parse"),
    ("t_parse", "t_normalize"),
    ("t_normalize", "t_graph"),
    ("t_normalize", "t_locations"),
    ("t_normalize", "t_timeline"),
    ("t_graph", "t_persist"),
    ("t_locations", "t_persist"),
    ("t_timeline", "t_persist"),
)


def describe_flow() -> str:
    """Return a human-readable textual description of the flow DAG.

    The flow (named ``dataset_processing``) is a linear parse/normalize
    chain that fans out into the graph and the two aggregates, which join
    again when the artifacts are persisted.

    Returns:
        Multi-line string describing nodes and edges.
    """
    lines = [
        "Flow: dataset_processing",
        "Nodes (tasks): " + ", ".join(TASKS),
        "Edges:",
    ]
    lines.extend(f"  {a} -> {b}" for a, b in EDGES)
    return "\n".join(lines)


__all__ = ["describe_flow", "TASKS", "EDGES"]
