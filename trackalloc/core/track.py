from __future__ import annotations

import logging
from typing import Dict, Iterator, Set

from .errors import InvalidTrackError, NullInputError
from .models import Branch, Junction, JunctionBranch, Section

logger = logging.getLogger(__name__)


class Track:
    """A railway track: a set of sections where each endpoint (a junction
    branch) connects to at most one section.

    Mutation is not synchronised; callers sharing a track across threads must
    serialise `add_section`/`remove_section` themselves.
    """

    def __init__(self) -> None:
        self._sections: Set[Section] = set()
        # endpoint -> the one section attached to it
        self._by_end_point: Dict[JunctionBranch, Section] = {}

    def add_section(self, section: Section) -> None:
        if section is None:
            raise NullInputError("section must not be None")
        if section in self._sections:
            return
        for end_point in section.end_points:
            existing = self._by_end_point.get(end_point)
            if existing is not None:
                raise InvalidTrackError(
                    f"cannot add section ({section}): endpoint {end_point} already connects section ({existing})"
                )
        self._sections.add(section)
        for end_point in section.end_points:
            self._by_end_point[end_point] = section
        logger.debug("added section %s", section)

    def remove_section(self, section: Section | None) -> None:
        if section is None or section not in self._sections:
            return
        self._sections.discard(section)
        for end_point in section.end_points:
            self._by_end_point.pop(end_point, None)
        logger.debug("removed section %s", section)

    def contains(self, section: Section | None) -> bool:
        return section is not None and section in self._sections

    __contains__ = contains

    def get_junctions(self) -> Set[Junction]:
        return {ep.junction for ep in self._by_end_point}

    def get_track_section(self, junction: Junction, branch: Branch) -> Section | None:
        if junction is None or branch is None:
            raise NullInputError("junction and branch must not be None")
        return self._by_end_point.get(JunctionBranch(junction, branch))

    def __iter__(self) -> Iterator[Section]:
        return iter(list(self._sections))

    def __len__(self) -> int:
        return len(self._sections)

    def __str__(self) -> str:
        return "\n".join(sorted(str(s) for s in self._sections))

    def check_invariant(self) -> bool:
        seen: Dict[JunctionBranch, Section] = {}
        for section in self._sections:
            for end_point in section.end_points:
                if end_point in seen and seen[end_point] != section:
                    return False
                seen[end_point] = section
        return seen == self._by_end_point
