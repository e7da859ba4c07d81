from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .errors import InvalidTrackError, PreconditionError
from .location import Segment
from .route import Route
from .track import Track

logger = logging.getLogger(__name__)

# Priority allocator:
# - Trains are decided in index order; index 0 has the highest priority
# - Train i must avoid the occupied route of every other train and the
#   allocation already granted to every train before it
# - Each requested segment is cut to the furthest point that keeps one unit
#   clear of every blocker; the first cut ends the allocation


class CutReason(Enum):
    BLOCKED_AT_START = "blocked_at_start"
    SECTION_CONFLICT = "section_conflict"
    JUNCTION_CONFLICT = "junction_conflict"


@dataclass(frozen=True)
class Cut:
    offset: int  # last offset the train may reach; below the segment start when blocked
    reason: CutReason
    blocker: int  # index of the train whose route forced the cut


@dataclass(frozen=True)
class Decision:
    train: int
    route: Route
    segment_index: Optional[int] = None  # requested segment where the cut happened
    cut: Optional[Cut] = None

    @property
    def held(self) -> bool:
        return self.route.is_empty()

    @property
    def truncated(self) -> bool:
        return self.cut is not None


Blocker = Tuple[int, Segment]


def allocate(occupied: Sequence[Route], requested: Sequence[Route], track=None) -> List[Route]:
    """Return, for each train, the longest safe prefix of its requested route.

    `occupied[i]` is where train i is now and `requested[i]` where it wants
    to go. Neither input is modified.
    """
    return [d.route for d in allocate_with_decisions(occupied, requested, track=track)]


def allocate_with_decisions(occupied: Sequence[Route], requested: Sequence[Route], track=None) -> List[Decision]:
    _check_preconditions(occupied, requested, track)
    decisions: List[Decision] = []
    for i, request in enumerate(requested):
        blockers: List[Blocker] = [(j, seg) for j, route in enumerate(occupied) if j != i for seg in route]
        blockers += [(d.train, seg) for d in decisions for seg in d.route]
        decision = _allocate_one(i, request, blockers)
        if decision.cut is not None:
            logger.debug(
                "train %d cut at segment %d offset %d (%s, blocked by train %d)",
                i, decision.segment_index, decision.cut.offset, decision.cut.reason.value, decision.cut.blocker,
            )
        decisions.append(decision)
    logger.info(
        "allocated %d trains: %d held, %d truncated",
        len(decisions),
        sum(1 for d in decisions if d.held),
        sum(1 for d in decisions if d.truncated),
    )
    return decisions


def _allocate_one(train: int, request: Route, blockers: List[Blocker]) -> Decision:
    granted: List[Segment] = []
    for idx, seg in enumerate(request):
        cut = _binding_cut(seg, blockers)
        if cut is None:
            granted.append(seg)
            continue
        if cut.offset >= seg.start_offset:
            granted.append(seg.with_end(cut.offset))
        return Decision(train=train, route=Route(granted), segment_index=idx, cut=cut)
    return Decision(train=train, route=Route(granted))


def _binding_cut(seg: Segment, blockers: List[Blocker]) -> Optional[Cut]:
    best: Optional[Cut] = None
    for owner, other in blockers:
        cut = _cut_against(seg, owner, other)
        if cut is not None and (best is None or cut.offset < best.offset):
            best = cut
    return best


def _cut_against(seg: Segment, owner: int, other: Segment) -> Optional[Cut]:
    """How far `seg` may run before touching `other`, or None if they never meet."""
    if other.contains(seg.first_location):
        return Cut(seg.start_offset - 1, CutReason.BLOCKED_AT_START, owner)
    if other.section == seg.section:
        lo, hi = other.span_from(seg.departing_end_point)
        # first point failed the containment test, so an overlap starts past it
        if lo <= seg.end_offset and hi >= seg.start_offset:
            return Cut(lo - 1, CutReason.SECTION_CONFLICT, owner)
    if other.contains(seg.last_location):
        # only a shared far junction is left; stop one unit short of it
        return Cut(seg.end_offset - 1, CutReason.JUNCTION_CONFLICT, owner)
    return None


def _check_preconditions(occupied: Sequence[Route], requested: Sequence[Route], track) -> None:
    if occupied is None or requested is None:
        raise PreconditionError("occupied and requested must not be None")
    if len(occupied) != len(requested):
        raise PreconditionError(f"{len(occupied)} occupied routes but {len(requested)} requested routes")
    for label, routes in (("occupied", occupied), ("requested", requested)):
        for i, route in enumerate(routes):
            if route is None:
                raise PreconditionError(f"{label}[{i}] is None")
            if not isinstance(route, Route):
                raise PreconditionError(f"{label}[{i}] is not a Route: {route!r}")
            if route.is_empty():
                raise PreconditionError(f"{label}[{i}] is empty")
            if track is not None and not route.on_track(track):
                raise PreconditionError(f"{label}[{i}] uses a section that is not on the track")
    if track is None:
        # without a track, the routes must at least fit on one consistent track
        scratch = Track()
        try:
            for route in list(occupied) + list(requested):
                for section in route.sections():
                    scratch.add_section(section)
        except InvalidTrackError as exc:
            raise PreconditionError(f"routes do not lie on one track: {exc}") from exc
    for i in range(len(occupied)):
        for j in range(i + 1, len(occupied)):
            if occupied[i].intersects(occupied[j]):
                raise PreconditionError(f"occupied routes of trains {i} and {j} intersect")
