"""Benchmark allocation time for varying numbers of trains on a line track.

Usage:
    python scripts/benchmark_allocation.py -Min 10 -Max 50 -Step 10 -RouteLen 4
    python -m scripts.benchmark_allocation -Min 10 -Max 50 -Step 10 -RouteLen 4

Notes:
    - Allocation cost grows as O(N^2 * L^2) for N trains with routes of L segments.
"""

from __future__ import annotations
import argparse, random, statistics, json, time, os, sys
from typing import List, Tuple

# Ensure project root on path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from trackalloc.core.allocator import allocate_with_decisions  # type: ignore
from trackalloc.core.location import Segment  # type: ignore
from trackalloc.core.models import Branch, Junction, JunctionBranch, Section  # type: ignore
from trackalloc.core.route import Route  # type: ignore
from trackalloc.core.track import Track  # type: ignore


def build_line_track(num_sections: int) -> Tuple[Track, List[Section]]:
    # j0 NORMAL -- j1 FACING, j1 NORMAL -- j2 FACING, ...
    track = Track()
    sections: List[Section] = []
    for i in range(num_sections):
        length = random.randint(5, 20)
        sec = Section(
            length,
            JunctionBranch(Junction(f"j{i}"), Branch.NORMAL),
            JunctionBranch(Junction(f"j{i+1}"), Branch.FACING),
        )
        track.add_section(sec)
        sections.append(sec)
    return track, sections


def departing(sec: Section) -> JunctionBranch:
    return next(ep for ep in sec.end_points if ep.branch is Branch.NORMAL)


def build_random_trains(n: int, sections: List[Section], avg_route_len: int) -> Tuple[List[Route], List[Route]]:
    starts = sorted(random.sample(range(len(sections)), n))
    occupied: List[Route] = []
    requested: List[Route] = []
    for k in starts:
        sec = sections[k]
        occupied.append(Route([Segment(sec, departing(sec), 0, 2)]))
        length = max(1, min(len(sections) - k, int(random.gauss(avg_route_len, 1))))
        segs = [Segment(s, departing(s), 0, s.length) for s in sections[k:k + length]]
        requested.append(Route(segs))
    # shuffle priority order, keeping each occupied/requested pair together
    pairs = list(zip(occupied, requested))
    random.shuffle(pairs)
    return [p[0] for p in pairs], [p[1] for p in pairs]


def run_once(n_trains: int, sections: List[Section], avg_route_len: int) -> dict:
    occupied, requested = build_random_trains(n_trains, sections, avg_route_len)
    t0 = time.perf_counter()
    decisions = allocate_with_decisions(occupied, requested)
    dt = time.perf_counter() - t0
    return {
        "n_trains": n_trains,
        "routes_mean_len": statistics.fmean(len(r) for r in requested) if requested else 0.0,
        "elapsed_s": dt,
        "held": sum(1 for d in decisions if d.held),
        "truncated": sum(1 for d in decisions if d.truncated),
    }


def main():
    p = argparse.ArgumentParser()
    p.add_argument('-Min', type=int, default=10)
    p.add_argument('-Max', type=int, default=50)
    p.add_argument('-Step', type=int, default=10)
    p.add_argument('-RouteLen', type=int, default=4)
    p.add_argument('-Repeats', type=int, default=3)
    p.add_argument('-Seed', type=int, default=42)
    p.add_argument('-Out', type=str, default='')
    a = p.parse_args()

    random.seed(a.Seed)
    _, sections = build_line_track(a.Max * 2)
    results = []
    for n in range(a.Min, a.Max + 1, a.Step):
        runs = [run_once(n, sections, a.RouteLen) for _ in range(a.Repeats)]
        row = {
            "n_trains": n,
            "elapsed_mean_s": statistics.fmean(r["elapsed_s"] for r in runs),
            "held_mean": statistics.fmean(r["held"] for r in runs),
            "truncated_mean": statistics.fmean(r["truncated"] for r in runs),
        }
        results.append(row)
        print(f"N={n:4d} mean={row['elapsed_mean_s']*1000:.2f}ms held={row['held_mean']:.1f} truncated={row['truncated_mean']:.1f}")
    if a.Out:
        with open(a.Out, 'w') as f:
            json.dump(results, f, indent=2)
        print(f"Wrote {len(results)} rows -> {a.Out}")


if __name__ == '__main__':
    main()
