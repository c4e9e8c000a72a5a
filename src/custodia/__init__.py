from __future__ import annotations

from .core import (
    Expired,
    InvalidInput,
    InvalidTiming,
    NotFound,
    Product,
    Registry,
    RegistryError,
    Transfer,
    Unauthorized,
)
from .runtime import CustodiaServer, LedgerSubstrate, create_app, run
from .sdk import CustodiaClient

__all__ = [
    "run",
    "create_app",
    "Registry",
    "LedgerSubstrate",
    "CustodiaServer",
    "CustodiaClient",
    "Product",
    "Transfer",
    "RegistryError",
    "InvalidInput",
    "InvalidTiming",
    "NotFound",
    "Unauthorized",
    "Expired",
]
