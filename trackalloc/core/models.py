from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Tuple

from .errors import InvalidArgumentError, NullInputError, require

Distance = int


class Branch(Enum):
    """The three connection slots a junction offers."""

    FACING = "FACING"
    NORMAL = "NORMAL"
    REVERSE = "REVERSE"

    @classmethod
    def parse(cls, token: str | None) -> "Branch":
        # exact keyword match only; "facing" is not a branch
        require(token, "branch token")
        try:
            return cls[token]
        except KeyError:
            raise InvalidArgumentError(f"unknown branch {token!r}") from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Junction:
    name: str

    def __post_init__(self) -> None:
        require(self.name, "junction name")
        if not isinstance(self.name, str):
            raise InvalidArgumentError(f"junction name must be a string, got {type(self.name).__name__}")
        if not self.name or any(ch.isspace() for ch in self.name):
            raise InvalidArgumentError(f"invalid junction name {self.name!r}")

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class JunctionBranch:
    """A connection point of a junction (an endpoint of a section)."""

    junction: Junction
    branch: Branch

    def __post_init__(self) -> None:
        require(self.junction, "junction")
        require(self.branch, "branch")

    def sort_key(self) -> Tuple[str, str]:
        return (self.junction.name, self.branch.value)

    def __str__(self) -> str:
        return f"{self.junction} {self.branch}"


@dataclass(frozen=True, eq=False)
class Section:
    """A length-bearing edge of the track between two distinct endpoints.

    Two sections are equal when their lengths match and their endpoint sets
    match, regardless of the order the endpoints were given in.
    """

    length: Distance
    end_point1: JunctionBranch
    end_point2: JunctionBranch

    def __post_init__(self) -> None:
        require(self.end_point1, "end_point1")
        require(self.end_point2, "end_point2")
        if isinstance(self.length, bool) or not isinstance(self.length, int):
            raise InvalidArgumentError(f"section length must be an integer, got {self.length!r}")
        if self.length <= 0:
            raise InvalidArgumentError(f"section length must be positive, got {self.length}")
        if self.end_point1 == self.end_point2:
            raise InvalidArgumentError(f"section endpoints must differ, got {self.end_point1} twice")

    @property
    def end_points(self) -> FrozenSet[JunctionBranch]:
        return frozenset((self.end_point1, self.end_point2))

    def ordered_end_points(self) -> Tuple[JunctionBranch, JunctionBranch]:
        a, b = sorted((self.end_point1, self.end_point2), key=JunctionBranch.sort_key)
        return a, b

    def other_end_point(self, end_point: JunctionBranch) -> JunctionBranch:
        if end_point is None:
            raise NullInputError("end_point must not be None")
        if end_point == self.end_point1:
            return self.end_point2
        if end_point == self.end_point2:
            return self.end_point1
        raise InvalidArgumentError(f"{end_point} is not an endpoint of section {self}")

    def junctions(self) -> FrozenSet[Junction]:
        return frozenset((self.end_point1.junction, self.end_point2.junction))

    def is_loop(self) -> bool:
        return self.end_point1.junction == self.end_point2.junction

    def check_invariant(self) -> bool:
        return self.length > 0 and self.end_point1 != self.end_point2

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Section):
            return NotImplemented
        return self.length == other.length and self.end_points == other.end_points

    def __hash__(self) -> int:
        return hash((self.length, self.end_points))

    def __str__(self) -> str:
        a, b = self.ordered_end_points()
        return f"{self.length} {a} {b}"
