from typing import Any, Dict, List

from trackalloc.core.allocator import Decision, allocate_with_decisions
from trackalloc.core.errors import InvalidArgumentError
from trackalloc.core.location import Segment
from trackalloc.core.models import Branch, Junction, JunctionBranch
from trackalloc.core.route import Route
from trackalloc.core.track import Track

# Payload shape shared by the API, the CLI and saved runs:
# {"trains": [{"id": "T1",
#              "occupied": [{"junction": "j0", "branch": "FACING", "start": 0, "end": 3}],
#              "requested": [...]}]}
# List order is priority order. Each segment names its departing endpoint; the
# section is whichever one the track attaches there.


def build_segment(track: Track, item: Dict[str, Any]) -> Segment:
    if not isinstance(item, dict):
        raise InvalidArgumentError(f"segment must be an object, got {item!r}")
    missing = [k for k in ("junction", "branch", "start", "end") if k not in item]
    if missing:
        raise InvalidArgumentError(f"segment is missing {', '.join(missing)}")
    end_point = JunctionBranch(Junction(item["junction"]), Branch.parse(item["branch"]))
    section = track.get_track_section(end_point.junction, end_point.branch)
    if section is None:
        raise InvalidArgumentError(f"no section attached at {end_point}")
    return Segment(section, end_point, item["start"], item["end"])


def build_route(track: Track, items: List[Dict[str, Any]]) -> Route:
    return Route(build_segment(track, it) for it in (items or []))


def segment_json(seg: Segment) -> Dict[str, Any]:
    return {
        "junction": seg.departing_end_point.junction.name,
        "branch": seg.departing_end_point.branch.value,
        "start": seg.start_offset,
        "end": seg.end_offset,
        "section": str(seg.section),
    }


def route_json(route: Route) -> List[Dict[str, Any]]:
    return [segment_json(s) for s in route]


def train_ids(payload: Dict[str, Any]) -> List[str]:
    return [str(t.get("id", f"T{i}")) for i, t in enumerate(payload.get("trains", []))]


def run_allocation(track: Track, payload: Dict[str, Any]) -> List[Decision]:
    trains = payload.get("trains", [])
    occupied = [build_route(track, t.get("occupied")) for t in trains]
    requested = [build_route(track, t.get("requested")) for t in trains]
    return allocate_with_decisions(occupied, requested, track=track)


def allocation_json(decisions: List[Decision], ids: List[str]) -> List[Dict[str, Any]]:
    out = []
    for d in decisions:
        cut = None
        if d.cut is not None:
            cut = {
                "segment_index": d.segment_index,
                "offset": d.cut.offset,
                "reason": d.cut.reason.value,
                "blocked_by": ids[d.cut.blocker],
            }
        out.append({
            "train_id": ids[d.train],
            "segments": route_json(d.route),
            "held": d.held,
            "truncated": d.truncated,
            "cut": cut,
        })
    return out


def allocation_summary(decisions: List[Decision]) -> Dict[str, int]:
    # basic KPIs for one decision cycle
    return {
        "total_trains": len(decisions),
        "held": sum(1 for d in decisions if d.held),
        "truncated": sum(1 for d in decisions if d.truncated and not d.held),
        "granted_in_full": sum(1 for d in decisions if not d.truncated),
        "granted_distance": sum(d.route.distance() for d in decisions),
    }
