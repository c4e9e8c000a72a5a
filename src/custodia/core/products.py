from __future__ import annotations

from dataclasses import dataclass

MIN_FRESHNESS = 1
MAX_FRESHNESS = 100


@dataclass(frozen=True, kw_only=True)
class Product:
    """Snapshot of one tracked item.

    Notes:
    - Records are replaced, never mutated in place. `locations` is a tuple so a
      snapshot handed to a caller cannot be changed behind the registry's back.
    - `is_active` is a reserved soft-delete flag. No operation clears it.
    """

    id: int
    name: str
    category: str
    producer: str
    current_owner: str
    production_date: int
    expiry_date: int
    freshness_score: int = MAX_FRESHNESS
    is_active: bool = True
    locations: tuple[str, ...] = ()

    def is_expired_at(self, now: int) -> bool:
        return int(now) > int(self.expiry_date)

    @property
    def transfer_count(self) -> int:
        return len(self.locations) - 1


@dataclass(frozen=True)
class Transfer:
    from_owner: str
    to_owner: str
    timestamp: int
    location: str
