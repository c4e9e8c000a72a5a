from __future__ import annotations

import threading

import pytest

from custodia.core import Expired, NotFound
from custodia.runtime.ledger import LedgerSubstrate

OWNER = "registry-owner"


class _FakeClock:
    def __init__(self, t: float) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t


def test_ledger_injects_clock_time_into_transfers() -> None:
    clock = _FakeClock(100.0)
    ledger = LedgerSubstrate(OWNER, clock=clock)
    pid = ledger.register_product("Milk", "Dairy", 100, 1000, "Farm", caller="farmer")

    clock.t = 200.9
    ledger.transfer_product(pid, "trucker", "Warehouse", caller="farmer")

    history = ledger.get_transfer_history(pid)
    assert [(t.from_owner, t.to_owner, t.timestamp, t.location) for t in history] == [("farmer", "trucker", 200, "Warehouse")]


def test_ledger_time_never_goes_backwards() -> None:
    clock = _FakeClock(500.0)
    ledger = LedgerSubstrate(OWNER, clock=clock)
    assert ledger.now() == 500

    clock.t = 400.0
    assert ledger.now() == 500

    clock.t = 600.0
    assert ledger.now() == 600


def test_ledger_expiry_uses_its_own_clock() -> None:
    clock = _FakeClock(100.0)
    ledger = LedgerSubstrate(OWNER, clock=clock)
    pid = ledger.register_product("Milk", "Dairy", 50, 1000, "Farm", caller="farmer")

    clock.t = 1000.0
    assert ledger.is_product_expired(pid) is False
    ledger.update_freshness(pid, 55, caller=OWNER)

    clock.t = 1001.0
    assert ledger.is_product_expired(pid) is True
    with pytest.raises(Expired):
        ledger.update_freshness(pid, 10, caller=OWNER)
    assert ledger.get_product_info(pid).freshness_score == 55


def test_ledger_instances_do_not_share_state() -> None:
    a = LedgerSubstrate(OWNER, clock=_FakeClock(10.0))
    b = LedgerSubstrate(OWNER, clock=_FakeClock(10.0))
    a.register_product("Milk", "Dairy", 1, 100, "Farm", caller="farmer")

    assert a.get_total_products() == 1
    assert b.get_total_products() == 0
    with pytest.raises(NotFound):
        b.get_product_info(1)


def test_concurrent_registrations_get_unique_dense_ids() -> None:
    ledger = LedgerSubstrate(OWNER, clock=_FakeClock(10.0))
    ids: list[int] = []
    ids_lock = threading.Lock()

    def _worker(n: int) -> None:
        for i in range(n):
            pid = ledger.register_product(f"item-{i}", "Misc", 1, 100, "Dock", caller="farmer")
            with ids_lock:
                ids.append(pid)

    threads = [threading.Thread(target=_worker, args=(25,)) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(ids) == list(range(1, 201))
    assert ledger.get_total_products() == 200
    latest, events = ledger.events()
    assert latest == 200
    assert [e.seq for e in events] == list(range(1, 201))
