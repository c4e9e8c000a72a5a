from __future__ import annotations

from fastapi.testclient import TestClient

from custodia.runtime.app import create_app
from custodia.runtime.ledger import LedgerSubstrate

OWNER = "0x" + "a" * 40
FARMER = "0x" + "b" * 40
TRUCKER = "0x" + "c" * 40


class _FakeClock:
    def __init__(self, t: float) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t


def _client(t: float = 100.0) -> tuple[TestClient, _FakeClock, LedgerSubstrate]:
    clock = _FakeClock(t)
    ledger = LedgerSubstrate(OWNER, clock=clock)
    return TestClient(create_app(ledger)), clock, ledger


def _as(caller: str) -> dict[str, str]:
    return {"X-Caller": caller}


def _register_milk(client: TestClient) -> int:
    res = client.post(
        "/api/products",
        json={"name": "Milk", "category": "Dairy", "productionDate": 100, "expiryDate": 1000, "initialLocation": "Farm"},
        headers=_as(FARMER),
    )
    assert res.status_code == 200, res.text
    return int(res.json()["id"])


def test_register_and_read_back() -> None:
    client, _, _ = _client()
    pid = _register_milk(client)
    assert pid == 1

    info = client.get(f"/api/products/{pid}")
    assert info.status_code == 200
    assert info.json() == {
        "id": 1,
        "name": "Milk",
        "category": "Dairy",
        "producer": FARMER,
        "currentOwner": FARMER,
        "productionDate": 100,
        "expiryDate": 1000,
        "freshnessScore": 100,
        "isActive": True,
        "locations": ["Farm"],
    }

    registry = client.get("/api/registry").json()
    assert registry["owner"] == OWNER
    assert registry["totalProducts"] == 1
    assert registry["now"] == 100


def test_milk_scenario_over_http() -> None:
    client, clock, _ = _client()
    pid = _register_milk(client)

    clock.t = 200.0
    res = client.post(f"/api/products/{pid}/transfer", json={"newOwner": TRUCKER, "newLocation": "Warehouse"}, headers=_as(FARMER))
    assert res.status_code == 200, res.text

    info = client.get(f"/api/products/{pid}").json()
    assert info["currentOwner"] == TRUCKER
    assert info["locations"] == ["Farm", "Warehouse"]

    history = client.get(f"/api/products/{pid}/transfers").json()
    assert history == [{"from": FARMER, "to": TRUCKER, "timestamp": 200, "location": "Warehouse"}]


def test_error_kinds_map_to_status_codes() -> None:
    client, clock, _ = _client()
    pid = _register_milk(client)

    future = client.post(
        "/api/products",
        json={"name": "Eggs", "category": "Dairy", "productionDate": 101, "expiryDate": 1000, "initialLocation": "Farm"},
        headers=_as(FARMER),
    )
    assert future.status_code == 400
    assert future.json()["error"] == "InvalidTiming"

    empty = client.post(
        "/api/products",
        json={"name": "", "category": "Dairy", "productionDate": 1, "expiryDate": 1000, "initialLocation": "Farm"},
        headers=_as(FARMER),
    )
    assert empty.status_code == 400
    assert empty.json()["error"] == "InvalidInput"

    stolen = client.post(f"/api/products/{pid}/transfer", json={"newOwner": TRUCKER, "newLocation": "Ditch"}, headers=_as(TRUCKER))
    assert stolen.status_code == 403
    assert stolen.json()["error"] == "Unauthorized"

    missing = client.get("/api/products/42")
    assert missing.status_code == 404
    assert missing.json()["error"] == "NotFound"

    clock.t = 1001.0
    late = client.put(f"/api/products/{pid}/freshness", json={"score": 50}, headers=_as(OWNER))
    assert late.status_code == 409
    assert late.json()["error"] == "Expired"

    assert client.get(f"/api/products/{pid}/expired").json() == {"id": pid, "expired": True}


def test_mutations_require_caller_header() -> None:
    client, _, _ = _client()
    res = client.post(
        "/api/products",
        json={"name": "Milk", "category": "Dairy", "productionDate": 1, "expiryDate": 1000, "initialLocation": "Farm"},
    )
    assert res.status_code == 401
    assert client.get("/api/registry").json()["totalProducts"] == 0


def test_malformed_bodies_are_invalid_input() -> None:
    client, _, _ = _client()
    pid = _register_milk(client)

    for body in ({}, {"score": "high"}, {"score": True}, {"score": 50.5}):
        res = client.put(f"/api/products/{pid}/freshness", json=body, headers=_as(OWNER))
        assert res.status_code == 400, body
        assert res.json()["error"] == "InvalidInput"

    for score in (0, 101):
        res = client.put(f"/api/products/{pid}/freshness", json={"score": score}, headers=_as(OWNER))
        assert res.status_code == 400

    ok = client.put(f"/api/products/{pid}/freshness", json={"score": 1}, headers=_as(OWNER))
    assert ok.status_code == 200
    assert client.get(f"/api/products/{pid}").json()["freshnessScore"] == 1


def test_events_endpoint_streams_freshness_history() -> None:
    client, clock, _ = _client()
    pid = _register_milk(client)

    for t, score in ((150.0, 90), (160.0, 80), (170.0, 70)):
        clock.t = t
        assert client.put(f"/api/products/{pid}/freshness", json={"score": score}, headers=_as(OWNER)).status_code == 200

    body = client.get("/api/events", params={"since": 1}).json()
    assert body["latestSeq"] == 4
    assert [(e["kind"], e["score"], e["timestamp"]) for e in body["events"]] == [
        ("FreshnessUpdated", 90, 150),
        ("FreshnessUpdated", 80, 160),
        ("FreshnessUpdated", 70, 170),
    ]

    assert client.get("/api/events", params={"since": -1}).status_code == 400
    first = client.get("/api/events").json()["events"][0]
    assert first == {"seq": 1, "kind": "ProductRegistered", "productId": pid, "producer": FARMER, "name": "Milk"}


def test_updater_administration_over_http() -> None:
    client, _, _ = _client()
    pid = _register_milk(client)
    inspector = "inspector-7"

    assert client.get(f"/api/updaters/{OWNER}").json()["authorized"] is True
    assert client.get(f"/api/updaters/{inspector}").json()["authorized"] is False

    denied = client.put(f"/api/updaters/{inspector}", headers=_as(FARMER))
    assert denied.status_code == 403

    for _ in range(2):
        assert client.put(f"/api/updaters/{inspector}", headers=_as(OWNER)).status_code == 200
    assert client.get(f"/api/updaters/{inspector}").json()["authorized"] is True
    assert client.put(f"/api/products/{pid}/freshness", json={"score": 66}, headers=_as(inspector)).status_code == 200

    for _ in range(2):
        assert client.delete(f"/api/updaters/{inspector}", headers=_as(OWNER)).status_code == 200
    assert client.get(f"/api/updaters/{inspector}").json()["authorized"] is False
    assert client.put(f"/api/products/{pid}/freshness", json={"score": 65}, headers=_as(inspector)).status_code == 403


def test_apps_do_not_share_registries() -> None:
    a, _, _ = _client()
    b, _, _ = _client()
    _register_milk(a)
    assert a.get("/api/registry").json()["totalProducts"] == 1
    assert b.get("/api/registry").json()["totalProducts"] == 0


def test_updater_identity_segment_is_percent_decoded() -> None:
    client, _, ledger = _client()

    res = client.put("/api/updaters/lab%2F7%3Fx%3D1%23night", headers=_as(OWNER))
    assert res.status_code == 200
    assert ledger.is_authorized_updater("lab/7?x=1#night") is True
    assert ledger.is_authorized_updater("lab") is False

    got = client.get("/api/updaters/lab%2F7%3Fx%3D1%23night").json()
    assert got == {"identity": "lab/7?x=1#night", "authorized": True}


def test_zero_caller_header_is_rejected_on_registration() -> None:
    client, _, _ = _client()
    res = client.post(
        "/api/products",
        json={"name": "Milk", "category": "Dairy", "productionDate": 1, "expiryDate": 1000, "initialLocation": "Farm"},
        headers=_as("0x" + "0" * 40),
    )
    assert res.status_code == 400
    assert res.json()["error"] == "InvalidInput"
    assert client.get("/api/registry").json()["totalProducts"] == 0
