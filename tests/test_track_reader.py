import pytest

from trackalloc.core.errors import FormatError, TrackReadError
from trackalloc.core.models import Branch, Junction
from trackalloc.core.track_reader import format_track, parse_section, parse_track, read_track

SAMPLE = """\
10 j0 NORMAL j1 FACING
8 j1 NORMAL j2 NORMAL
8 j1 REVERSE j2 REVERSE
10 j2 FACING j3 FACING
"""


def test_parse_sample_track():
    track = parse_track(SAMPLE)
    assert len(track) == 4
    assert {j.name for j in track.get_junctions()} == {"j0", "j1", "j2", "j3"}
    assert track.get_track_section(Junction("j1"), Branch.REVERSE).length == 8
    assert track.check_invariant()


def test_format_round_trip_is_stable():
    text = format_track(parse_track(SAMPLE))
    assert format_track(parse_track(text)) == text
    assert text.endswith("\n")


def test_parse_section_line():
    s = parse_section("  5 a FACING b REVERSE ")
    assert s.length == 5
    assert str(s) == "5 a FACING b REVERSE"


@pytest.mark.parametrize(
    "text, fragment",
    [
        ("10 j0 NORMAL j1", "expected 5 tokens"),
        ("10 j0 NORMAL j1 FACING extra", "expected 5 tokens"),
        ("ten j0 NORMAL j1 FACING", "not an integer"),
        ("0 j0 NORMAL j1 FACING", "positive"),
        ("10 j0 normal j1 FACING", "unknown branch"),
        ("10 j0 NORMAL j0 NORMAL", "must differ"),
        ("10 j0 NORMAL j1 FACING\n10 j1 FACING j0 NORMAL", "duplicate section"),
        ("10 j0 NORMAL j1 FACING\n4 j1 FACING j2 NORMAL", "already used"),
    ],
)
def test_format_errors(text, fragment):
    with pytest.raises(FormatError) as info:
        parse_track(text)
    assert fragment in str(info.value)
    assert info.value.line_number == len(text.splitlines())
    assert info.value.line == text.splitlines()[-1].strip()


def test_read_track_from_file(tmp_path):
    path = tmp_path / "track.txt"
    path.write_text(SAMPLE, encoding="utf-8")
    assert len(read_track(path)) == 4


def test_read_track_requires_txt(tmp_path):
    path = tmp_path / "track.csv"
    path.write_text(SAMPLE, encoding="utf-8")
    with pytest.raises(TrackReadError):
        read_track(path)


def test_read_track_missing_file(tmp_path):
    with pytest.raises(TrackReadError) as info:
        read_track(tmp_path / "missing.txt")
    assert isinstance(info.value, OSError)


def test_blank_line_is_a_format_error():
    with pytest.raises(FormatError) as info:
        parse_track("9 j0 FACING j1 FACING\n\n5 j2 FACING j3 NORMAL\n")
    assert info.value.line_number == 2
    with pytest.raises(FormatError) as info:
        parse_track("9 j0 FACING j1 FACING\n   \n")
    assert info.value.line_number == 2
