"""
Tests for GET /api/checkin-events and POST /api/checkin-events/invalidate-cache.
The RPC client dependency is overridden with an in-memory fake.
"""

from __future__ import annotations

import pytest
from eth_abi import encode as abi_encode

from checkin_rewards.api_server.deps import get_checkin_client
from checkin_rewards.chain.events import CHECKIN_EVENT_TOPIC, address_topic

USER = "0x1111111111111111111111111111111111111111"
USER_2 = "0x2222222222222222222222222222222222222222"


def make_log(user: str, checkpoint_id: int, block: int) -> dict:
    return {
        "topics": [CHECKIN_EVENT_TOPIC, address_topic(user)],
        "data": "0x" + abi_encode(["uint256", "uint256"], [checkpoint_id, 100]).hex(),
        "blockNumber": hex(block),
        "transactionHash": f"0x{block:064x}",
    }


class FakeRpc:
    def __init__(self, logs: list[dict]):
        self.logs = logs
        self.log_calls = 0

    async def get_logs(self, address, topics, *, from_block="earliest", to_block="latest"):
        self.log_calls += 1
        return list(self.logs)

    async def get_block(self, number: int):
        return {"number": hex(number), "timestamp": hex(1_700_000_000 + number)}


@pytest.fixture
def fake_rpc(app):
    rpc = FakeRpc([make_log(USER, 1, 10), make_log(USER_2, 2, 30), make_log(USER, 1, 20)])
    app.dependency_overrides[get_checkin_client] = lambda: rpc
    yield rpc
    app.dependency_overrides.clear()


def test_events_json_sorted_and_paginated(client, fake_rpc):
    r = client.get("/api/checkin-events", params={"limit": 2})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert [e["blockNumber"] for e in body["events"]] == ["30", "20"]
    assert body["events"][0]["timestamp"] == 1_700_000_030
    assert body["pagination"] == {"total": 3, "limit": 2, "offset": 0, "hasMore": True}
    assert body["cache"]["wasCached"] is False
    assert body["cache"]["refreshed"] is True

    r = client.get("/api/checkin-events", params={"limit": 2, "offset": 2})
    body = r.json()
    assert [e["blockNumber"] for e in body["events"]] == ["10"]
    assert body["pagination"]["hasMore"] is False
    assert body["cache"]["wasCached"] is True
    assert fake_rpc.log_calls == 1


def test_timestamps_do_not_mutate_cache(client, fake_rpc, app):
    client.get("/api/checkin-events")
    cached = app.state.event_cache._entry.events
    assert all(e.timestamp is None for e in cached)


def test_events_checkpoint_filter(client, fake_rpc):
    r = client.get("/api/checkin-events", params={"checkpoint": 1})
    body = r.json()
    assert body["pagination"]["total"] == 2
    assert {e["checkpointId"] for e in body["events"]} == {"1"}


def test_events_refresh_requeries(client, fake_rpc):
    client.get("/api/checkin-events")
    r = client.get("/api/checkin-events", params={"refresh": "true"})
    assert r.json()["cache"]["refreshed"] is True
    assert fake_rpc.log_calls == 2


def test_events_csv_export(client, fake_rpc):
    r = client.get("/api/checkin-events", params={"export": "csv"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert r.headers["content-disposition"].startswith('attachment; filename="checkin-events-')
    assert r.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    lines = r.text.splitlines()
    assert lines[0] == "user,checkpointId,points,blockNumber,transactionHash,timestamp"
    assert len(lines) == 4


def test_events_rpc_failure_returns_500(client, app):
    class BrokenRpc:
        async def get_logs(self, *args, **kwargs):
            raise RuntimeError("rpc down")

    app.dependency_overrides[get_checkin_client] = lambda: BrokenRpc()
    try:
        r = client.get("/api/checkin-events")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Failed to fetch CheckIn events"}


def test_invalidate_cache(client, fake_rpc):
    client.get("/api/checkin-events")
    r = client.post("/api/checkin-events/invalidate-cache")
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Cache invalidated successfully"
    assert body["data"]["before"]["isCached"] is True
    assert body["data"]["before"]["eventCount"] == 3
    assert body["data"]["after"] == {"isCached": False, "lastUpdated": None, "expiresAt": None, "eventCount": 0}
    r = client.get("/api/checkin-events")
    assert r.json()["cache"]["wasCached"] is False
    assert fake_rpc.log_calls == 2


def test_events_negative_paging_rejected(client, fake_rpc):
    r = client.get("/api/checkin-events", params={"limit": -1})
    assert r.status_code == 400
    assert r.json()["error"].startswith("limit: ")
    r = client.get("/api/checkin-events", params={"offset": -2})
    assert r.status_code == 400
    assert r.json()["error"].startswith("offset: ")
    assert fake_rpc.log_calls == 0
