"""API integration tests for the recipient and activity endpoints."""

from __future__ import annotations

ALICE = "0x1111111111111111111111111111111111111111"
BOB = "0x2222222222222222222222222222222222222222"


def test_recipients_empty(client):
    response = client.get("/api/v1/recipients")
    assert response.status_code == 200
    assert response.json() == []


def test_add_search_delete_recipient(client):
    response = client.post("/api/v1/recipients", json={"name": "Alice", "address": ALICE})
    assert response.status_code == 201, response.text
    alice = response.json()
    assert alice["name"] == "Alice"
    assert alice["createdAt"] > 0

    client.post("/api/v1/recipients", json={"name": "Bob", "address": BOB})

    assert len(client.get("/api/v1/recipients").json()) == 2
    found = client.get("/api/v1/recipients", params={"q": "ali"}).json()
    assert [r["id"] for r in found] == [alice["id"]]

    response = client.delete(f"/api/v1/recipients/{alice['id']}")
    assert response.status_code == 200
    assert [r["name"] for r in client.get("/api/v1/recipients").json()] == ["Bob"]


def test_add_duplicate_recipient(client):
    client.post("/api/v1/recipients", json={"name": "Alice", "address": ALICE})
    response = client.post("/api/v1/recipients", json={"name": "Other", "address": ALICE})
    assert response.status_code == 400
    assert response.json()["detail"] == "This address is already saved"


def test_add_invalid_address(client):
    response = client.post("/api/v1/recipients", json={"name": "Alice", "address": "nope"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid Ethereum address"


def test_delete_missing_recipient(client):
    response = client.delete("/api/v1/recipients/recipient_0_missing")
    assert response.status_code == 404


def test_activity_log_roundtrip(client):
    entry = {
        "kind": "payroll_execution",
        "hash": "0x" + "cd" * 32,
        "createdAt": 1_700_000_000_000,
        "chainId": 42429,
        "title": "Payroll PAYROLL-2024-01",
    }
    response = client.post("/api/v1/activity", json=entry)
    assert response.status_code == 201
    assert len(response.json()) == 1

    client.post("/api/v1/activity", json={**entry, "title": "retried"})
    entries = client.get("/api/v1/activity").json()
    assert len(entries) == 1
    assert entries[0]["title"] == "retried"

    assert client.delete("/api/v1/activity").status_code == 204
    assert client.get("/api/v1/activity").json() == []
