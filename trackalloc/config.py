from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

# Load .env early (no error if missing)
load_dotenv()

PACKAGE_DIR = Path(__file__).parent


@dataclass(frozen=True)
class AllocatorConfig:
    # sqlite file for saved tracks and allocation runs
    db_path: str = os.getenv("TRACKALLOC_DB_PATH", str(PACKAGE_DIR.parent / "data" / "trackalloc.db"))
    # directory receiving events.jsonl
    audit_dir: str = os.getenv("TRACKALLOC_AUDIT_DIR", str(PACKAGE_DIR.parent / "audit"))
    log_level: str = os.getenv("TRACKALLOC_LOG_LEVEL", "INFO").upper()
    sample_track: str = os.getenv("TRACKALLOC_SAMPLE_TRACK", str(PACKAGE_DIR / "data" / "sample_track.txt"))

    @property
    def numeric_log_level(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.INFO


def configure_logging(cfg: AllocatorConfig | None = None) -> None:
    cfg = cfg or AllocatorConfig()
    logging.basicConfig(
        level=cfg.numeric_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
