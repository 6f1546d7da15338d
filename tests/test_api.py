# tests/test_api.py

import pytest
from fastapi.testclient import TestClient

from dbqueue.backend.app.db import get_db
from dbqueue.backend.app.main import app


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_jobs_scenario_over_http(client):
    r = client.post("/queues/jobs/messages", json={"content": {"task": "resize", "w": 100}})
    assert r.status_code == 201
    message_id = r.json()["id"]

    r = client.post("/queues/jobs/claim", json={"count": 1})
    assert r.status_code == 200
    [message] = r.json()
    assert message["id"] == message_id
    assert message["status"] == "processing"
    assert message["content"] == {"task": "resize", "w": 100}

    r = client.delete(f"/queues/jobs/messages/{message_id}")
    assert r.status_code == 204

    assert client.get("/queues/jobs/messages", params={"count": 10}).json() == []


def test_peek_and_stats(client):
    for n in range(3):
        client.post("/queues/jobs/messages", json={"content": n})
    client.post("/queues/jobs/claim", json={"count": 1, "mode": "worker"})

    peeked = client.get("/queues/jobs/messages").json()
    assert [m["content"] for m in peeked] == [1, 2]
    assert all(m["status"] == "pending" for m in peeked)

    stats = client.get("/queues/jobs/stats").json()
    assert stats == {"queue": "jobs", "pending": 2, "processing": 1}


def test_eater_claim_over_http(client):
    client.post("/queues/jobs/messages", json={"content": "bye"})
    r = client.post("/queues/jobs/claim", json={"count": 5, "mode": "eater"})
    assert [m["content"] for m in r.json()] == ["bye"]
    assert client.get("/queues/jobs/stats").json()["pending"] == 0


def test_requeue_over_http(client):
    client.post("/queues/jobs/messages", json={"content": "slow"})
    client.post("/queues/jobs/claim", json={"count": 1})

    r = client.post("/queues/jobs/requeue", json={"older_than": 0})
    assert r.json() == {"requeued": 1}
    assert client.get("/queues/jobs/stats").json()["pending"] == 1


def test_bad_queue_name_is_a_400(client):
    r = client.post("/queues/" + "x" * 26 + "/messages", json={"content": 1})
    assert r.status_code == 400
    assert "Bad queue name" in r.json()["detail"]


def test_oversized_content_is_a_400(client):
    r = client.post("/queues/jobs/messages", json={"content": "a" * 70000})
    assert r.status_code == 400
    assert client.get("/queues/jobs/stats").json()["pending"] == 0


def test_claim_count_is_capped(client, monkeypatch):
    monkeypatch.setenv("MAX_CLAIM_COUNT", "5")
    r = client.post("/queues/jobs/claim", json={"count": 6})
    assert r.status_code == 400


def test_unknown_mode_is_rejected(client):
    r = client.post("/queues/jobs/claim", json={"count": 1, "mode": "reader"})
    assert r.status_code == 422
