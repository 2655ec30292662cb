"""JSONL event logs for pipeline runs and dashboard selections.

Two streams live under ``<ARTIFACTS_DIR>/metrics/``:
    * ``run-<UTC>.jsonl``: environment line plus one line per flow stage
    * ``selections-<UTC day>.jsonl``: one line per selection event the API handles
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar, TYPE_CHECKING
import datetime as dt
import json
import platform
import socket
import time

if TYPE_CHECKING:
    from incident_explorer.filters.state_machine import FilterResult

T = TypeVar("T")


def _now_iso():
    return dt.datetime.now(dt.timezone.utc).isoformat()


class JsonlLogger:
    """Append-only JSONL file; every event gets a ``ts`` if it lacks one."""
    def __init__(self, path: Path):
        path.parent.mkdir(parents=True, exist_ok=True)
        self.path = path

    def write(self, event: Dict[str, Any]) -> None:
        event.setdefault("ts", _now_iso())
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")


def _metrics_file(artifacts_dir: Path, prefix: str, stamp: str) -> JsonlLogger:
    return JsonlLogger(artifacts_dir / "metrics" / f"{prefix}-{dt.datetime.now(dt.timezone.utc).strftime(stamp)}.jsonl")


def make_run_logger(artifacts_dir: Path) -> JsonlLogger:
    """Logger for one dataset_processing run (one file per run)."""
    return _metrics_file(artifacts_dir, "run", "%Y%m%d-%H%M%S")


def make_selections_logger(artifacts_dir: Path) -> JsonlLogger:
    """Daily logger for selection events received by the API."""
    return _metrics_file(artifacts_dir, "selections", "%Y%m%d")


class StageClock:
    """Times pipeline stages, logging each one and keeping a ``{stage: ms}`` map.

    Example:
        clock = StageClock(logger)
        records = clock.run("t_parse", t_parse, raw_text)
        clock.timings  # {"t_parse": 1.2}
    """
    def __init__(self, logger: JsonlLogger, source: str):
        self.logger = logger
        self.source = source
        self.timings: Dict[str, float] = {}

    def run(self, stage: str, fn: Callable[..., T], *args: Any) -> T:
        """Call ``fn(*args)``; the stage is logged even when it raises."""
        t0 = time.perf_counter()
        event: Dict[str, Any] = {"type": "stage", "stage": stage, "source": self.source}
        try:
            return fn(*args)
        except Exception as exc:
            event["error"] = repr(exc)
            raise
        finally:
            t_ms = (time.perf_counter() - t0) * 1000.0
            self.timings[stage] = t_ms
            event["t_ms"] = round(t_ms, 3)
            self.logger.write(event)

    def total(self) -> float:
        return sum(self.timings.values())


def log_env(logger: JsonlLogger, artifacts_dir: Path, source: str) -> None:
    """Record host, interpreter and dataset source at the start of a run."""
    logger.write({
        "type": "env",
        "host": socket.gethostname(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "artifacts_dir": str(artifacts_dir.resolve()),
        "source": source,
    })


def log_selection(logger: Optional[JsonlLogger], event: str, result: "FilterResult") -> None:
    """Record a selection event with the state it produced and how many reports matched."""
    if logger is None:
        return
    logger.write({
        "type": "selection",
        "event": event,
        "selection": result.selection.to_dict(),
        "active": result.selection.active_dimensions(),
        "reports": result.report_count,
    })
