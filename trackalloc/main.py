import json
import sys
from pathlib import Path
from typing import Any, Dict

from trackalloc.config import AllocatorConfig, configure_logging
from trackalloc.core.track import Track
from trackalloc.core.track_reader import read_track
from trackalloc.sim.scenario import allocation_json, allocation_summary, run_allocation, train_ids

DATA_DIR = Path(__file__).parent / "data"


def load_track(path: str | None = None) -> Track:
    return read_track(path or AllocatorConfig().sample_track)


def load_trains(path: str | None = None) -> Dict[str, Any]:
    return json.loads(Path(path or DATA_DIR / "sample_trains.json").read_text(encoding="utf-8"))


if __name__ == "__main__":
    configure_logging()
    args = sys.argv[1:]
    track = load_track(args[0] if args else None)
    payload = load_trains(args[1] if len(args) > 1 else None)

    decisions = run_allocation(track, payload)

    print("KPIs:", allocation_summary(decisions))
    for item in allocation_json(decisions, train_ids(payload)):
        segs = ", ".join(f"{s['junction']} {s['branch']} [{s['start']}, {s['end']}]" for s in item["segments"])
        status = "held" if item["held"] else ("truncated" if item["truncated"] else "granted")
        print(f"{item['train_id']}: {status}: {segs or '-'}")
