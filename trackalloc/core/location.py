from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Hashable, Tuple

from .errors import InvalidArgumentError, require
from .models import Distance, Junction, JunctionBranch, Section


def _check_offset(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True, eq=False)
class Location:
    """A point on the track, `offset` units along `section` from `end_point`.

    The same physical point can be named several ways: a point at a junction
    (offset 0) can be reached from any section touching that junction, and a
    point inside a section can be measured from either end. Equality compares
    physical points, so all of these names compare (and hash) equal.
    """

    section: Section
    end_point: JunctionBranch
    offset: Distance

    def __post_init__(self) -> None:
        require(self.section, "section")
        require(self.end_point, "end_point")
        require(self.offset, "offset")
        _check_offset(self.offset, "offset")
        if self.end_point not in self.section.end_points:
            raise InvalidArgumentError(f"{self.end_point} is not an endpoint of section {self.section}")
        if not 0 <= self.offset < self.section.length:
            raise InvalidArgumentError(
                f"offset {self.offset} out of range [0, {self.section.length}) for section {self.section}"
            )

    def at_a_junction(self) -> bool:
        return self.offset == 0

    @property
    def junction(self) -> Junction | None:
        return self.end_point.junction if self.offset == 0 else None

    def distance_from(self, end_point: JunctionBranch) -> Distance:
        """Offset of this point measured from `end_point` of the same section."""
        if end_point == self.end_point:
            return self.offset
        self.section.other_end_point(end_point)
        return self.section.length - self.offset

    def on_section(self, section: Section) -> bool:
        require(section, "section")
        if self.at_a_junction():
            return self.end_point.junction in section.junctions()
        return section == self.section

    def _point_key(self) -> Hashable:
        if self.offset == 0:
            return ("junction", self.end_point.junction)
        anchor, _ = self.section.ordered_end_points()
        return ("section", self.section, self.distance_from(anchor))

    def check_invariant(self) -> bool:
        return (
            self.section.check_invariant()
            and self.end_point in self.section.end_points
            and 0 <= self.offset < self.section.length
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Location):
            return NotImplemented
        return self._point_key() == other._point_key()

    def __hash__(self) -> int:
        return hash(self._point_key())

    def __str__(self) -> str:
        if self.offset == 0:
            return str(self.end_point.junction)
        return f"Distance {self.offset} from {self.end_point.junction} along the {self.end_point.branch} branch"


@dataclass(frozen=True)
class Segment:
    """The part of `section` between two offsets, travelled away from
    `departing_end_point`.

    Offsets are measured from the departing endpoint and satisfy
    ``0 <= start_offset <= end_offset <= section.length``. An end offset equal
    to the length means the segment runs up to the far junction.
    """

    section: Section
    departing_end_point: JunctionBranch
    start_offset: Distance
    end_offset: Distance

    def __post_init__(self) -> None:
        require(self.section, "section")
        require(self.departing_end_point, "departing_end_point")
        require(self.start_offset, "start_offset")
        require(self.end_offset, "end_offset")
        _check_offset(self.start_offset, "start_offset")
        _check_offset(self.end_offset, "end_offset")
        if self.departing_end_point not in self.section.end_points:
            raise InvalidArgumentError(f"{self.departing_end_point} is not an endpoint of section {self.section}")
        if not 0 <= self.start_offset <= self.end_offset <= self.section.length:
            raise InvalidArgumentError(
                f"offsets [{self.start_offset}, {self.end_offset}] invalid for section {self.section}"
            )

    @property
    def approaching_end_point(self) -> JunctionBranch:
        return self.section.other_end_point(self.departing_end_point)

    @property
    def length(self) -> Distance:
        return self.end_offset - self.start_offset

    def reaches_far_end(self) -> bool:
        return self.end_offset == self.section.length

    def location_at(self, distance: Distance) -> Location:
        if distance == self.section.length:
            return Location(self.section, self.approaching_end_point, 0)
        return Location(self.section, self.departing_end_point, distance)

    @property
    def first_location(self) -> Location:
        return self.location_at(self.start_offset)

    @property
    def last_location(self) -> Location:
        return self.location_at(self.end_offset)

    def span_from(self, end_point: JunctionBranch) -> Tuple[Distance, Distance]:
        """Closed interval covered by this segment, measured from `end_point`."""
        if end_point == self.departing_end_point:
            return self.start_offset, self.end_offset
        self.section.other_end_point(end_point)
        length = self.section.length
        return length - self.end_offset, length - self.start_offset

    def junctions(self) -> FrozenSet[Junction]:
        touched = set()
        if self.start_offset == 0:
            touched.add(self.departing_end_point.junction)
        if self.reaches_far_end():
            touched.add(self.approaching_end_point.junction)
        return frozenset(touched)

    def contains(self, location: Location) -> bool:
        require(location, "location")
        if location.at_a_junction():
            return location.end_point.junction in self.junctions()
        if location.section != self.section:
            return False
        distance = location.distance_from(self.departing_end_point)
        return self.start_offset <= distance <= self.end_offset

    def intersects(self, other: "Segment") -> bool:
        require(other, "other")
        if self.junctions() & other.junctions():
            return True
        if self.section != other.section:
            return False
        lo, hi = other.span_from(self.departing_end_point)
        return lo <= self.end_offset and hi >= self.start_offset

    def with_end(self, end_offset: Distance) -> "Segment":
        return Segment(self.section, self.departing_end_point, self.start_offset, end_offset)

    def __str__(self) -> str:
        return f"[{self.start_offset}, {self.end_offset}] of ({self.section}) from {self.departing_end_point}"
