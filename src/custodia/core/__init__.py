from __future__ import annotations

from .errors import Expired, InvalidInput, InvalidTiming, NotFound, RegistryError, Unauthorized, error_for_kind
from .events import EventLog, FreshnessUpdated, ProductRegistered, ProductTransferred, RegistryEvent
from .identity import ZERO_IDENTITY, normalize_identity, require_identity
from .products import MAX_FRESHNESS, MIN_FRESHNESS, Product, Transfer
from .registry import Registry

__all__ = [
    "Registry",
    "Product",
    "Transfer",
    "MIN_FRESHNESS",
    "MAX_FRESHNESS",
    "RegistryEvent",
    "ProductRegistered",
    "ProductTransferred",
    "FreshnessUpdated",
    "EventLog",
    "ZERO_IDENTITY",
    "normalize_identity",
    "require_identity",
    "RegistryError",
    "InvalidInput",
    "InvalidTiming",
    "NotFound",
    "Unauthorized",
    "Expired",
    "error_for_kind",
]
