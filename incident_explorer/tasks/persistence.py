"""Persistence and run directory management utilities.

Responsibilities:
    * Create a uniquely named run directory under ``ARTIFACTS_DIR``
    * Persist lightweight JSON metadata about the source dataset
    * Write the data model pieces (reports, network, aggregates) as JSON
"""
from __future__ import annotations
from pathlib import Path
from datetime import datetime, timezone
import json
import os
import uuid
from typing import Any, Dict

ARTIFACTS_ROOT = Path(os.getenv("ARTIFACTS_DIR", "artifacts"))

DATASET_FILES = {
    "reports.json": "allReports",
    "entities.json": "allEntities",
}
VIZ_FILES = {
    "network.json": "network",
    "locations.json": "locationCounts",
    "timeline.json": "timelineData",
}


def create_run_directory(source: str | Path, root: str | Path | None = None) -> Path:
    """Create a new run directory and metadata file.

    Directory naming convention: ``run_<UTC_YYYYMMDD_HHMMSS>_<8hex>``.

    Args:
        source: Path or URL of the dataset text (recorded for provenance only).
        root: Parent directory; ``ARTIFACTS_DIR`` when omitted.

    Returns:
        Path to the created run directory.
    """
    root = Path(root) if root is not None else ARTIFACTS_ROOT
    root.mkdir(parents=True, exist_ok=True)
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    run_id = f"run_{ts}_{uuid.uuid4().hex[:8]}"
    run_dir = root / run_id
    run_dir.mkdir(parents=True, exist_ok=True)
    meta = {"source": str(source), "run_id": run_id, "created_utc": ts}
    (run_dir / "meta.json").write_text(json.dumps(meta, indent=2), encoding="utf-8")
    return run_dir


def save_json(path: str | Path, data: Any):
    """Write a JSON value to disk with UTF-8 encoding.

    Args:
        path: Destination file path (parent dirs must exist).
        data: Value to serialize as JSON.
    """
    path = Path(path)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def persist_dataset(run_dir: str | Path, model: Dict[str, Any]) -> Dict[str, str]:
    """Split a ``Dataset.to_dict()`` model into one JSON file per view.

    Args:
        run_dir: Existing run directory.
        model: Output of :meth:`incident_explorer.pipeline.Dataset.to_dict`.

    Returns:
        Mapping file name -> written path.
    """
    run_dir = Path(run_dir)
    written: Dict[str, str] = {}
    for fname, key in DATASET_FILES.items():
        save_json(run_dir / fname, model[key])
        written[fname] = str(run_dir / fname)
    for fname, key in VIZ_FILES.items():
        save_json(run_dir / fname, model["vizData"][key])
        written[fname] = str(run_dir / fname)
    return written
