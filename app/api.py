from __future__ import annotations

import datetime as dt
import logging
import os
import threading
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query

from incident_explorer.errors import LoadFailure
from incident_explorer.filters.highlight import MentionFinder
from incident_explorer.filters.state_machine import FilterStateMachine
from incident_explorer.metrics import log_selection, make_selections_logger
from incident_explorer.pipeline import default_resolver, load_dataset

load_dotenv()
ART = Path(os.getenv("ARTIFACTS_DIR", "./artifacts")).resolve()
DATASET = os.getenv("DATASET_PATH", "dataset.txt")

log = logging.getLogger("api")

# one dataset and one selection per process; sync routes run in a threadpool
state = {"dataset": None, "machine": None, "mentions": None, "error": None, "events": None}
lock = threading.Lock()


def init_state(source: str = DATASET) -> None:
    """Load the dataset once; a failure leaves the service in its error state."""
    state.update(dataset=None, machine=None, mentions=None, error=None)
    try:
        resolver = default_resolver()
        dataset = load_dataset(source, resolver)
    except LoadFailure as exc:
        log.error("%s", exc)
        state["error"] = str(exc)
        return
    state["dataset"] = dataset
    state["machine"] = FilterStateMachine(dataset.reports, dataset.network)
    state["mentions"] = MentionFinder(dataset.entities, resolver)
    state["events"] = make_selections_logger(ART)


@asynccontextmanager
async def lifespan(app):
    init_state(DATASET)
    yield
    state.update(dataset=None, machine=None, mentions=None, error=None, events=None)


app = FastAPI(title="Incident Explorer", lifespan=lifespan)


def _require_loaded():
    if state["error"] is not None or state["dataset"] is None:
        raise HTTPException(status_code=503, detail=state["error"] or "Dataset not loaded")
    return state["dataset"], state["machine"]


def _apply(event: str, fn, *args):
    _, machine = _require_loaded()
    with lock:
        result = fn(machine, *args)
    log_selection(state["events"], event, result)
    return result.to_dict()


@app.get("/dataset")
def dataset():
    data, _ = _require_loaded()
    return data.to_dict()


@app.get("/state")
def current_state():
    _, machine = _require_loaded()
    return machine.result.to_dict()


@app.post("/select/entity")
def select_entity(name: str = Query(..., description="Canonical entity name")):
    return _apply("select_entity", FilterStateMachine.select_entity, name)


@app.post("/focus/entity")
def focus_entity(name: str = Query(..., description="Canonical entity name")):
    return _apply("focus_entity", FilterStateMachine.focus_entity, name)


@app.post("/select/location")
def select_location(name: str = Query(..., description="Cleaned location")):
    return _apply("select_location", FilterStateMachine.select_location, name)


@app.post("/select/time-range")
def select_time_range(start: dt.date, end: dt.date):
    return _apply("select_time_range", FilterStateMachine.select_time_range, start, end)


@app.delete("/select/time-range")
def clear_time_range():
    return _apply("clear_time_range", FilterStateMachine.clear_time_range)


@app.post("/reset")
def reset():
    return _apply("reset", FilterStateMachine.reset)


@app.get("/reports/{report_id}/mentions")
def report_mentions(report_id: str):
    data, _ = _require_loaded()
    report = data.report_by_id(report_id)
    if report is None:
        raise HTTPException(status_code=404, detail=f"Unknown report {report_id}")
    return {"id": report.id, "mentions": [m.to_dict() for m in state["mentions"].find(report.description)]}
