from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence, Tuple

from .errors import InvalidArgumentError, NullInputError
from .location import Segment
from .models import Section


class Route(Sequence[Segment]):
    """An ordered, physically contiguous run of segments.

    Consecutive segments meet at a junction: the earlier one runs to its far
    end, the later one starts at offset 0, and the approaching junction of the
    first is the departing junction of the second.
    """

    __slots__ = ("_segments",)

    def __init__(self, segments: Iterable[Segment] = ()):
        if segments is None:
            raise NullInputError("segments must not be None")
        items: Tuple[Segment, ...] = tuple(segments)
        for idx, seg in enumerate(items):
            if seg is None:
                raise NullInputError(f"segment {idx} must not be None")
            if not isinstance(seg, Segment):
                raise InvalidArgumentError(f"segment {idx} is not a Segment: {seg!r}")
        for idx, (prev, nxt) in enumerate(zip(items, items[1:]), start=1):
            if not prev.reaches_far_end() or nxt.start_offset != 0:
                raise InvalidArgumentError(f"segment {idx} does not continue from the end of segment {idx - 1}")
            if prev.approaching_end_point.junction != nxt.departing_end_point.junction:
                raise InvalidArgumentError(
                    f"segment {idx} departs {nxt.departing_end_point.junction}, "
                    f"expected {prev.approaching_end_point.junction}"
                )
        self._segments = items

    @classmethod
    def empty(cls) -> "Route":
        return cls(())

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    def is_empty(self) -> bool:
        return not self._segments

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            return Route(self._segments[idx])
        return self._segments[idx]

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Route):
            return self._segments == other._segments
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._segments)

    def __repr__(self) -> str:
        return f"Route({list(self._segments)!r})"

    def __str__(self) -> str:
        if not self._segments:
            return "<empty route>"
        return " -> ".join(str(s) for s in self._segments)

    def sections(self) -> List[Section]:
        return [s.section for s in self._segments]

    def distance(self) -> int:
        return sum(s.length for s in self._segments)

    def on_track(self, track) -> bool:
        return all(track.contains(s.section) for s in self._segments)

    def intersects(self, other: "Route") -> bool:
        return any(a.intersects(b) for a in self._segments for b in other)

    def is_prefix_of(self, other: "Route") -> bool:
        """True if this route is `other` cut short: the same leading
        segments, the last one possibly ending earlier."""
        if len(self) > len(other):
            return False
        if not self._segments:
            return True
        *head, last = self._segments
        if list(head) != list(other.segments[: len(head)]):
            return False
        ref = other[len(head)]
        return (
            last.section == ref.section
            and last.departing_end_point == ref.departing_end_point
            and last.start_offset == ref.start_offset
            and last.end_offset <= ref.end_offset
        )
