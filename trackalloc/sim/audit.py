import json
from pathlib import Path
from typing import Any, Dict

from trackalloc.config import AllocatorConfig

AUDIT_DIR = Path(AllocatorConfig().audit_dir)
AUDIT_FILE = AUDIT_DIR / "events.jsonl"


def write_audit(event: Dict[str, Any]) -> None:
    # append a JSONL entry
    AUDIT_FILE.parent.mkdir(parents=True, exist_ok=True)
    with AUDIT_FILE.open("a", encoding="utf-8") as f:
        f.write(json.dumps(event, ensure_ascii=False) + "\n")
