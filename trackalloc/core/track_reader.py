"""Read and write the line-oriented track description format.

Each line describes one section with five whitespace-separated
tokens::

    <length> <junction-1> <BRANCH-1> <junction-2> <BRANCH-2>

e.g. ``9 j0 FACING j1 NORMAL``. Branch tokens are FACING, NORMAL or REVERSE.
No two lines may describe equivalent sections or share an endpoint.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

from .errors import FormatError, InvalidArgumentError, InvalidTrackError, TrackReadError
from .models import Branch, Junction, JunctionBranch, Section
from .track import Track

logger = logging.getLogger(__name__)

TRACK_SUFFIX = ".txt"


def parse_section(line: str, line_number: int | None = None) -> Section:
    tokens = line.split()
    if len(tokens) != 5:
        raise FormatError(f"expected 5 tokens, got {len(tokens)}", line_number, line)
    length_tok, j1, b1, j2, b2 = tokens
    try:
        length = int(length_tok)
    except ValueError:
        raise FormatError(f"section length {length_tok!r} is not an integer", line_number, line) from None
    try:
        end_point1 = JunctionBranch(Junction(j1), Branch.parse(b1))
        end_point2 = JunctionBranch(Junction(j2), Branch.parse(b2))
        return Section(length, end_point1, end_point2)
    except InvalidArgumentError as exc:
        raise FormatError(str(exc), line_number, line) from exc


def parse_track(text: str) -> Track:
    if text is None:
        raise FormatError("track description must not be None")
    track = Track()
    # endpoint -> (line number, section) of the line that first used it
    seen: Dict[JunctionBranch, tuple] = {}
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            raise FormatError("blank line, expected 5 tokens", number, raw)
        section = parse_section(line, number)
        if track.contains(section):
            raise FormatError(f"duplicate section ({section})", number, line)
        for end_point in section.end_points:
            if end_point in seen:
                first_line, other = seen[end_point]
                raise FormatError(
                    f"endpoint {end_point} already used by section ({other}) on line {first_line}", number, line
                )
        try:
            track.add_section(section)
        except InvalidTrackError as exc:
            raise FormatError(str(exc), number, line) from exc
        for end_point in section.end_points:
            seen[end_point] = (number, section)
    logger.debug("parsed track with %d sections", len(track))
    return track


def read_track(path: str | Path) -> Track:
    path = Path(path)
    if path.suffix != TRACK_SUFFIX:
        raise TrackReadError(f"track file must be a {TRACK_SUFFIX} file: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TrackReadError(f"error reading track file {path}: {exc}") from exc
    logger.info("loaded track description from %s", path)
    return parse_track(text)


def format_track(track: Track) -> str:
    text = str(track)
    return text + "\n" if text else ""
