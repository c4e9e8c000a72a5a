from __future__ import annotations

import threading
import time
from typing import Callable

from ..core.events import RegistryEvent
from ..core.products import Product, Transfer
from ..core.registry import Registry

Clock = Callable[[], float]


class LedgerSubstrate:
    """Serialized execution context around one `Registry`.

    Supplies what the registry expects from its environment:
    - one request at a time (a single re-entrant lock),
    - a timestamp that never goes backwards between requests,
    - the caller identity, passed through from the transport.
    """

    def __init__(self, owner: str, *, clock: Clock | None = None) -> None:
        self._lock = threading.RLock()
        self._clock: Clock = clock if clock is not None else time.time
        self._last_now = 0
        self.registry = Registry(owner)

    def _now_locked(self) -> int:
        now = max(int(self._clock()), self._last_now)
        self._last_now = now
        return now

    def now(self) -> int:
        with self._lock:
            return self._now_locked()

    @property
    def owner(self) -> str:
        return self.registry.owner

    def revision(self) -> int:
        with self._lock:
            return self.registry.revision

    def register_product(
        self,
        name: str,
        category: str,
        production_date: int,
        expiry_date: int,
        initial_location: str,
        *,
        caller: str,
    ) -> int:
        with self._lock:
            return self.registry.register_product(
                name,
                category,
                production_date,
                expiry_date,
                initial_location,
                caller=caller,
                now=self._now_locked(),
            )

    def transfer_product(self, product_id: int, new_owner: str, new_location: str, *, caller: str) -> None:
        with self._lock:
            self.registry.transfer_product(product_id, new_owner, new_location, caller=caller, now=self._now_locked())

    def update_freshness(self, product_id: int, new_score: int, *, caller: str) -> None:
        with self._lock:
            self.registry.update_freshness(product_id, new_score, caller=caller, now=self._now_locked())

    def add_authorized_updater(self, identity: str, *, caller: str) -> None:
        with self._lock:
            self.registry.add_authorized_updater(identity, caller=caller)

    def remove_authorized_updater(self, identity: str, *, caller: str) -> None:
        with self._lock:
            self.registry.remove_authorized_updater(identity, caller=caller)

    def is_authorized_updater(self, identity: str) -> bool:
        with self._lock:
            return self.registry.is_authorized_updater(identity)

    def get_product_info(self, product_id: int) -> Product:
        with self._lock:
            return self.registry.get_product_info(product_id)

    def get_transfer_history(self, product_id: int) -> list[Transfer]:
        with self._lock:
            return self.registry.get_transfer_history(product_id)

    def is_product_expired(self, product_id: int) -> bool:
        with self._lock:
            return self.registry.is_product_expired(product_id, now=self._now_locked())

    def get_total_products(self) -> int:
        with self._lock:
            return self.registry.get_total_products()

    def events(self, since: int = 0) -> tuple[int, list[RegistryEvent]]:
        with self._lock:
            return self.registry.latest_event_seq(), self.registry.events(since)
