import json
import logging
from typing import Any, Dict, List

from fastapi import FastAPI
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import BaseModel, Field

from trackalloc.config import AllocatorConfig, configure_logging
from trackalloc.core.errors import RailwayError
from trackalloc.core.track import Track
from trackalloc.core.track_reader import format_track, parse_track
from trackalloc.sim.audit import write_audit
from trackalloc.sim.scenario import allocation_json, allocation_summary, run_allocation, train_ids
from trackalloc.store.db import (
    delete_run,
    delete_track,
    get_run,
    get_track,
    init_db,
    list_runs_by_track,
    list_tracks,
    save_run,
    save_track,
)

configure_logging(AllocatorConfig())
logger = logging.getLogger(__name__)

app = FastAPI(title="Track Allocation API")
init_db()


class TrackIn(BaseModel):
    name: str = "track"
    description: str


class SegmentIn(BaseModel):
    junction: str
    branch: str
    start: int
    end: int


class TrainIn(BaseModel):
    id: str | None = None
    occupied: List[SegmentIn]
    requested: List[SegmentIn]


class AllocationIn(BaseModel):
    name: str | None = None
    trains: List[TrainIn] = Field(default_factory=list)


class InlineAllocationIn(AllocationIn):
    track: str


def _error(exc: RailwayError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc), "kind": type(exc).__name__})


def _not_found(what: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": f"{what} not found"})


def _track_info(track: Track) -> Dict[str, Any]:
    return {
        "sections": len(track),
        "junctions": sorted(j.name for j in track.get_junctions()),
    }


def _payload(body: AllocationIn) -> Dict[str, Any]:
    trains = []
    for i, t in enumerate(body.trains):
        trains.append({
            "id": t.id or f"T{i}",
            "occupied": [s.model_dump() for s in t.occupied],
            "requested": [s.model_dump() for s in t.requested],
        })
    return {"trains": trains}


def _allocate(track: Track, payload: Dict[str, Any]) -> Dict[str, Any]:
    decisions = run_allocation(track, payload)
    return {
        "allocations": allocation_json(decisions, train_ids(payload)),
        "kpis": allocation_summary(decisions),
    }


@app.get("/")
async def root() -> RedirectResponse:
    # Redirect base URL to interactive docs to avoid 404 confusion
    return RedirectResponse(url="/docs")


@app.get("/favicon.ico")
async def favicon() -> Response:
    return Response(status_code=204)


@app.post("/tracks/validate")
async def validate_track(body: TrackIn):
    try:
        track = parse_track(body.description)
    except RailwayError as exc:
        return _error(exc)
    return {"valid": True, **_track_info(track), "description": format_track(track)}


@app.post("/tracks")
async def create_track(body: TrackIn):
    try:
        track = parse_track(body.description)
    except RailwayError as exc:
        return _error(exc)
    tid = save_track(body.name, format_track(track))
    return {"id": tid, **_track_info(track)}


@app.get("/tracks")
async def tracks(offset: int = 0, limit: int = 50) -> Dict[str, Any]:
    return {"items": list_tracks(offset=offset, limit=limit)}


@app.get("/tracks/{tid}")
async def track_details(tid: int):
    row = get_track(tid)
    if not row:
        return _not_found("track")
    track = parse_track(row["description"])
    return {"track": {**row, **_track_info(track)}}


@app.delete("/tracks/{tid}")
async def delete_track_api(tid: int) -> Dict[str, Any]:
    ok = delete_track(tid)
    return {"deleted": bool(ok)}


@app.post("/allocate")
async def allocate_inline(body: InlineAllocationIn):
    payload = _payload(body)
    try:
        track = parse_track(body.track)
        resp = _allocate(track, payload)
    except RailwayError as exc:
        logger.warning("allocation rejected: %s", exc)
        return _error(exc)
    write_audit({
        "type": "allocate",
        "kpis": resp["kpis"],
        "count": len(payload["trains"]),
    })
    return resp


@app.post("/tracks/{tid}/allocate")
async def allocate_on_saved_track(tid: int, body: AllocationIn):
    row = get_track(tid)
    if not row:
        return _not_found("track")
    payload = _payload(body)
    try:
        resp = _allocate(parse_track(row["description"]), payload)
    except RailwayError as exc:
        logger.warning("allocation on track %d rejected: %s", tid, exc)
        return _error(exc)
    rid = save_run(
        track_id=tid,
        input_payload=payload,
        allocations=resp["allocations"],
        kpis=resp["kpis"],
        name=body.name,
    )
    write_audit({
        "type": "allocate",
        "track_id": tid,
        "run_id": rid,
        "kpis": resp["kpis"],
        "count": len(payload["trains"]),
    })
    return {"run_id": rid, **resp}


@app.get("/tracks/{tid}/runs")
async def list_runs_for_track(tid: int, offset: int = 0, limit: int = 50) -> Dict[str, Any]:
    return {"items": list_runs_by_track(tid, offset=offset, limit=limit)}


@app.get("/runs/{rid}")
async def get_run_details(rid: int):
    r = get_run(rid)
    if not r:
        return _not_found("run")
    # Decode JSON fields
    r["input_payload"] = json.loads(r["input_payload"])
    r["allocations"] = json.loads(r["allocations"])
    r["kpis"] = json.loads(r["kpis"])
    return {"run": r}


@app.delete("/runs/{rid}")
async def delete_run_api(rid: int) -> Dict[str, Any]:
    ok = delete_run(rid)
    return {"deleted": bool(ok)}
