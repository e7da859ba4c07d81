import httpx
import pytest
from pathlib import Path

from httpx import ASGITransport

from trackalloc.api import app
from trackalloc.store.db import set_db_path, init_db

TRACK = "10 j0 NORMAL j1 FACING\n8 j1 NORMAL j2 NORMAL\n"


@pytest.mark.asyncio
async def test_persistence_flow(tmp_path):
    # Isolate DB and audit log to temp files
    db_file = Path(tmp_path) / "unit.db"
    set_db_path(db_file)
    init_db()
    from trackalloc.sim import audit as audit_mod
    audit_mod.AUDIT_FILE = tmp_path / "events.jsonl"

    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        # 1) Save a track
        r = await client.post("/tracks", json={"name": "branch-line", "description": TRACK})
        assert r.status_code == 200
        tid = r.json().get("id")
        assert isinstance(tid, int)
        assert r.json()["sections"] == 2

        # 2) It is listed and can be fetched
        r = await client.get("/tracks")
        assert any(it.get("id") == tid for it in r.json()["items"])
        r = await client.get(f"/tracks/{tid}")
        assert r.json()["track"]["name"] == "branch-line"
        assert r.json()["track"]["junctions"] == ["j0", "j1", "j2"]

        # 3) Allocate on the saved track
        body = {
            "name": "first",
            "trains": [
                {
                    "id": "A",
                    "occupied": [{"junction": "j0", "branch": "NORMAL", "start": 0, "end": 2}],
                    "requested": [{"junction": "j0", "branch": "NORMAL", "start": 0, "end": 9}],
                },
                {
                    "id": "B",
                    "occupied": [{"junction": "j1", "branch": "FACING", "start": 3, "end": 4}],
                    "requested": [{"junction": "j1", "branch": "FACING", "start": 3, "end": 4}],
                },
            ],
        }
        r = await client.post(f"/tracks/{tid}/allocate", json=body)
        assert r.status_code == 200
        data = r.json()
        rid = data["run_id"]
        assert isinstance(rid, int)
        # B sits at 6..7 measured from j0, so A stops at 5
        assert data["allocations"][0]["segments"][0]["end"] == 5
        assert data["kpis"]["truncated"] == 1

        # 4) The run is stored with decoded fields
        r = await client.get(f"/runs/{rid}")
        run = r.json()["run"]
        assert run["name"] == "first"
        assert run["input_payload"]["trains"][0]["id"] == "A"
        assert run["allocations"] == data["allocations"]
        r = await client.get(f"/tracks/{tid}/runs")
        assert [it["id"] for it in r.json()["items"]] == [rid]

        # 5) Deleting the track removes its runs
        r = await client.delete(f"/tracks/{tid}")
        assert r.json()["deleted"] is True
        r = await client.get(f"/runs/{rid}")
        assert r.status_code == 404
        r = await client.get(f"/tracks/{tid}")
        assert r.status_code == 404
        r = await client.post(f"/tracks/{tid}/allocate", json=body)
        assert r.status_code == 404
