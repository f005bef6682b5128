from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError


async def ingest(client, **overrides):
    payload = {
        "source": "discord",
        "author": "devops_dan",
        "content": "Workers keeps returning 1101 errors",
        **overrides,
    }
    resp = await client.post("/api/feedback", json=payload)
    assert resp.status_code == 201
    return resp.json()["item"]


@pytest.mark.asyncio
async def test_empty_queue(client):
    resp = await client.get("/api/queue")
    assert resp.status_code == 200
    assert resp.json() == {"item": None, "remaining": 0}


@pytest.mark.asyncio
async def test_review_flow(client):
    a = await ingest(client, source_id="a", urgency="critical", created_at="2024-01-15T10:00:00Z")
    b = await ingest(client, source_id="b", urgency="critical", created_at="2024-01-15T09:00:00Z")
    c = await ingest(client, source_id="c", urgency="high", created_at="2024-01-15T08:00:00Z")

    seen = []
    for expected_remaining in (3, 2, 1):
        queue = (await client.get("/api/queue")).json()
        assert queue["remaining"] == expected_remaining
        seen.append(queue["item"]["id"])
        resp = await client.post("/api/triage", json={"id": queue["item"]["id"], "status": "escalate"})
        assert resp.status_code == 200
        assert resp.json() == {"success": True}

    assert seen == [b["id"], a["id"], c["id"]]
    assert (await client.get("/api/queue")).json() == {"item": None, "remaining": 0}


@pytest.mark.asyncio
async def test_triage_unknown_item_returns_not_found(client):
    resp = await client.post("/api/triage", json={"id": 999, "status": "escalate"})
    assert resp.status_code == 404
    body = resp.json()
    assert body["error"] == "not_found"
    assert "999" in body["detail"]


@pytest.mark.asyncio
async def test_triage_invalid_status(client):
    item = await ingest(client)

    resp = await client.post("/api/triage", json={"id": item["id"], "status": "urgent"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_status"

    resp_missing = await client.post("/api/triage", json={"id": item["id"]})
    assert resp_missing.status_code == 400
    assert resp_missing.json()["error"] == "invalid_status"

    queue = (await client.get("/api/queue")).json()
    assert queue["item"]["id"] == item["id"]


@pytest.mark.asyncio
async def test_triage_missing_id_is_rejected(client):
    resp = await client.post("/api/triage", json={"status": "escalate"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_stats(client):
    bug = await ingest(client, source="github", source_id="1", category="bug")
    await ingest(client, source="github", source_id="2", category="bug")
    await ingest(client, source="support", source_id="3", category="question")
    noise = await ingest(client, source="twitter", source_id="4", category="praise")

    await client.post("/api/triage", json={"id": bug["id"], "status": "escalate"})
    await client.post("/api/triage", json={"id": noise["id"], "status": "noise"})

    resp = await client.get("/api/stats")
    assert resp.status_code == 200
    stats = resp.json()

    assert stats["triaged_today"] == 2
    assert stats["pending"] == 2
    assert sorted(stats["by_decision"], key=lambda d: d["triage_status"]) == [
        {"triage_status": "escalate", "count": 1},
        {"triage_status": "noise", "count": 1},
    ]
    assert stats["emerging_themes"] == [
        {"category": "bug", "count": 2},
        {"category": "question", "count": 1},
    ]
    assert sorted(stats["by_source"], key=lambda d: d["source"]) == [
        {"source": "github", "count": 1},
        {"source": "support", "count": 1},
    ]


@pytest.mark.asyncio
async def test_triaged_list_and_resolve(client):
    escalated = await ingest(client, source_id="e")
    backlog = await ingest(client, source_id="b")
    await ingest(client, source_id="pending")

    await client.post("/api/triage", json={"id": backlog["id"], "status": "backlog"})
    await client.post("/api/triage", json={"id": escalated["id"], "status": "escalate"})

    listed = (await client.get("/api/triaged")).json()["items"]
    assert [i["id"] for i in listed] == [escalated["id"], backlog["id"]]

    resp = await client.post("/api/resolve", json={"id": escalated["id"], "resolved": True})
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    open_items = (await client.get("/api/triaged", params={"status": "escalate"})).json()["items"]
    assert open_items == []

    with_resolved = (
        await client.get("/api/triaged", params={"status": "escalate", "resolved": "true"})
    ).json()["items"]
    assert [i["id"] for i in with_resolved] == [escalated["id"]]
    assert with_resolved[0]["resolved_at"] is not None

    await client.post("/api/resolve", json={"id": escalated["id"], "resolved": False})
    reopened = (await client.get("/api/triaged", params={"status": "escalate"})).json()["items"]
    assert [i["id"] for i in reopened] == [escalated["id"]]
    assert reopened[0]["resolved_at"] is None


@pytest.mark.asyncio
async def test_triaged_list_rejects_unknown_status(client):
    resp = await client.get("/api/triaged", params={"status": "urgent"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_status"


@pytest.mark.asyncio
async def test_resolve_validation(client):
    item = await ingest(client)
    await client.post("/api/triage", json={"id": item["id"], "status": "backlog"})

    resp = await client.post("/api/resolve", json={"id": item["id"], "resolved": "true"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_input"

    resp_missing = await client.post("/api/resolve", json={"id": 424242, "resolved": True})
    assert resp_missing.status_code == 404
    assert resp_missing.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_store_failure_is_surfaced(client):
    failure = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with patch("app.api.triage.next_pending", new=AsyncMock(side_effect=failure)):
        resp = await client.get("/api/queue")

    assert resp.status_code == 503
    assert resp.json()["error"] == "store_unavailable"
