import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

from trackalloc.config import AllocatorConfig

DB_PATH: Path = Path(AllocatorConfig().db_path)


def set_db_path(path: Path) -> None:
    global DB_PATH
    DB_PATH = Path(path)


def _conn() -> sqlite3.Connection:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    with _conn() as conn:
        cur = conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS tracks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                description TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS runs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                track_id INTEGER,
                name TEXT,
                input_payload TEXT NOT NULL,
                allocations TEXT NOT NULL,
                kpis TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY(track_id) REFERENCES tracks(id)
            )
            """
        )
        conn.commit()


def save_track(name: str, description: str) -> int:
    with _conn() as conn:
        cur = conn.cursor()
        cur.execute("INSERT INTO tracks(name, description) VALUES(?, ?)", (name, description))
        conn.commit()
        return int(cur.lastrowid)


def list_tracks(offset: int = 0, limit: int = 50) -> List[Dict[str, Any]]:
    with _conn() as conn:
        rows = conn.execute(
            "SELECT id, name, created_at FROM tracks ORDER BY id DESC LIMIT ? OFFSET ?",
            (limit, offset),
        ).fetchall()
        return [dict(r) for r in rows]


def get_track(tid: int) -> Optional[Dict[str, Any]]:
    with _conn() as conn:
        r = conn.execute("SELECT id, name, description, created_at FROM tracks WHERE id=?", (tid,)).fetchone()
        return dict(r) if r else None


def delete_track(tid: int) -> bool:
    with _conn() as conn:
        cur = conn.cursor()
        # Delete runs first, then the track
        cur.execute("DELETE FROM runs WHERE track_id=?", (tid,))
        cur.execute("DELETE FROM tracks WHERE id=?", (tid,))
        conn.commit()
        return cur.rowcount > 0


def save_run(
    track_id: Optional[int],
    input_payload: Dict[str, Any],
    allocations: List[Dict[str, Any]],
    kpis: Dict[str, Any],
    name: Optional[str] = None,
) -> int:
    with _conn() as conn:
        cur = conn.cursor()
        cur.execute(
            "INSERT INTO runs(track_id, name, input_payload, allocations, kpis) VALUES(?,?,?,?,?)",
            (
                track_id,
                name,
                json.dumps(input_payload, ensure_ascii=False),
                json.dumps(allocations, ensure_ascii=False),
                json.dumps(kpis, ensure_ascii=False),
            ),
        )
        conn.commit()
        return int(cur.lastrowid)


def get_run(rid: int) -> Optional[Dict[str, Any]]:
    with _conn() as conn:
        r = conn.execute("SELECT * FROM runs WHERE id=?", (rid,)).fetchone()
        return dict(r) if r else None


def list_runs_by_track(tid: int, offset: int = 0, limit: int = 50) -> List[Dict[str, Any]]:
    with _conn() as conn:
        rows = conn.execute(
            "SELECT id, name, created_at FROM runs WHERE track_id=? ORDER BY id DESC LIMIT ? OFFSET ?",
            (tid, limit, offset),
        ).fetchall()
        return [dict(r) for r in rows]


def delete_run(rid: int) -> bool:
    with _conn() as conn:
        cur = conn.cursor()
        cur.execute("DELETE FROM runs WHERE id=?", (rid,))
        conn.commit()
        return cur.rowcount > 0
