from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

EventKind = Literal[
    "ProductRegistered",
    "ProductTransferred",
    "FreshnessUpdated",
]


@dataclass(frozen=True, kw_only=True)
class EventBase:
    """A notification emitted by exactly one committed mutation.

    `seq` is registry-wide, 1-based and strictly increasing.
    """

    seq: int
    kind: EventKind
    product_id: int


@dataclass(frozen=True, kw_only=True)
class ProductRegistered(EventBase):
    kind: Literal["ProductRegistered"] = "ProductRegistered"
    producer: str
    name: str


@dataclass(frozen=True, kw_only=True)
class ProductTransferred(EventBase):
    kind: Literal["ProductTransferred"] = "ProductTransferred"
    from_owner: str
    to_owner: str
    timestamp: int


@dataclass(frozen=True, kw_only=True)
class FreshnessUpdated(EventBase):
    kind: Literal["FreshnessUpdated"] = "FreshnessUpdated"
    score: int
    timestamp: int


RegistryEvent = Union[ProductRegistered, ProductTransferred, FreshnessUpdated]


@dataclass
class EventLog:
    _events: list[RegistryEvent] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._events)

    @property
    def next_seq(self) -> int:
        return len(self._events) + 1

    @property
    def latest_seq(self) -> int:
        return len(self._events)

    def append(self, event: RegistryEvent) -> RegistryEvent:
        if int(event.seq) != self.next_seq:
            raise ValueError(f"event seq {event.seq} out of order, expected {self.next_seq}")
        self._events.append(event)
        return event

    def since(self, seq: int = 0) -> list[RegistryEvent]:
        # seq == index of the event after it, since numbering is dense from 1.
        start = max(0, int(seq))
        return list(self._events[start:])
