import pytest

from trackalloc.core.errors import InvalidArgumentError, NullInputError
from trackalloc.core.location import Location, Segment
from trackalloc.core.models import Branch, Junction, JunctionBranch, Section
from trackalloc.core.route import Route
from trackalloc.core.track import Track


def jb(name: str, branch: str) -> JunctionBranch:
    return JunctionBranch(Junction(name), Branch[branch])


# j1 --A(10)-- j2 --B(6)-- j3
A = Section(10, jb("j1", "FACING"), jb("j2", "NORMAL"))
B = Section(6, jb("j2", "FACING"), jb("j3", "NORMAL"))


def test_segment_derived_values():
    seg = Segment(A, jb("j1", "FACING"), 2, 10)
    assert seg.approaching_end_point == jb("j2", "NORMAL")
    assert seg.length == 8
    assert seg.reaches_far_end()
    assert seg.first_location == Location(A, jb("j1", "FACING"), 2)
    # the far end is the junction itself
    assert seg.last_location == Location(B, jb("j2", "FACING"), 0)
    assert seg.span_from(jb("j2", "NORMAL")) == (0, 8)
    assert seg.junctions() == {Junction("j2")}


def test_segment_rejects_bad_offsets():
    with pytest.raises(InvalidArgumentError):
        Segment(A, jb("j1", "FACING"), 5, 4)
    with pytest.raises(InvalidArgumentError):
        Segment(A, jb("j1", "FACING"), 0, 11)
    with pytest.raises(InvalidArgumentError):
        Segment(A, jb("j1", "FACING"), -1, 4)
    with pytest.raises(InvalidArgumentError):
        Segment(A, jb("j3", "NORMAL"), 0, 4)
    with pytest.raises(NullInputError):
        Segment(A, None, 0, 4)


def test_contains_measures_from_either_end():
    seg = Segment(A, jb("j2", "NORMAL"), 3, 5)
    assert seg.contains(Location(A, jb("j1", "FACING"), 6))
    assert seg.contains(Location(A, jb("j2", "NORMAL"), 3))
    assert not seg.contains(Location(A, jb("j1", "FACING"), 4))
    assert not seg.contains(Location(A, jb("j1", "FACING"), 0))
    with pytest.raises(NullInputError):
        seg.contains(None)


def test_contains_junction_point_from_another_section():
    seg = Segment(A, jb("j1", "FACING"), 4, 10)
    assert seg.contains(Location(B, jb("j2", "FACING"), 0))
    assert not seg.contains(Location(B, jb("j2", "FACING"), 1))


def test_intersects():
    a = Segment(A, jb("j1", "FACING"), 0, 4)
    assert a.intersects(Segment(A, jb("j2", "NORMAL"), 6, 9))
    assert not a.intersects(Segment(A, jb("j2", "NORMAL"), 0, 5))
    # touching only through junction j2
    assert Segment(A, jb("j1", "FACING"), 8, 10).intersects(Segment(B, jb("j2", "FACING"), 0, 1))
    assert not Segment(A, jb("j1", "FACING"), 8, 9).intersects(Segment(B, jb("j2", "FACING"), 0, 1))


def test_route_must_be_contiguous():
    r = Route([Segment(A, jb("j1", "FACING"), 3, 10), Segment(B, jb("j2", "FACING"), 0, 4)])
    assert len(r) == 2
    assert r.distance() == 11
    assert r.sections() == [A, B]
    with pytest.raises(InvalidArgumentError):
        Route([Segment(A, jb("j1", "FACING"), 3, 9), Segment(B, jb("j2", "FACING"), 0, 4)])
    with pytest.raises(InvalidArgumentError):
        Route([Segment(A, jb("j1", "FACING"), 3, 10), Segment(B, jb("j2", "FACING"), 1, 4)])
    with pytest.raises(InvalidArgumentError):
        Route([Segment(A, jb("j1", "FACING"), 3, 10), Segment(B, jb("j3", "NORMAL"), 0, 4)])
    with pytest.raises(NullInputError):
        Route([None])
    with pytest.raises(NullInputError):
        Route(None)


def test_route_value_semantics():
    segs = [Segment(A, jb("j1", "FACING"), 3, 10), Segment(B, jb("j2", "FACING"), 0, 4)]
    assert Route(segs) == Route(list(segs))
    assert hash(Route(segs)) == hash(Route(segs))
    assert Route(segs)[0] == segs[0]
    assert Route(segs)[:1] == Route(segs[:1])
    assert Route.empty().is_empty()
    assert str(Route.empty()) == "<empty route>"


def test_prefix():
    full = Route([Segment(A, jb("j1", "FACING"), 3, 10), Segment(B, jb("j2", "FACING"), 0, 4)])
    assert Route.empty().is_prefix_of(full)
    assert full.is_prefix_of(full)
    assert Route([Segment(A, jb("j1", "FACING"), 3, 7)]).is_prefix_of(full)
    assert Route([Segment(A, jb("j1", "FACING"), 3, 10), Segment(B, jb("j2", "FACING"), 0, 2)]).is_prefix_of(full)
    assert not Route([Segment(A, jb("j1", "FACING"), 4, 7)]).is_prefix_of(full)
    assert not Route([Segment(A, jb("j2", "NORMAL"), 0, 7)]).is_prefix_of(full)
    assert not full.is_prefix_of(full[:1])


def test_route_on_track():
    track = Track()
    track.add_section(A)
    r = Route([Segment(A, jb("j1", "FACING"), 3, 10), Segment(B, jb("j2", "FACING"), 0, 4)])
    assert not r.on_track(track)
    track.add_section(B)
    assert r.on_track(track)
