from __future__ import annotations

from .app import create_app
from .ledger import LedgerSubstrate
from .server import CustodiaServer, run

__all__ = ["create_app", "LedgerSubstrate", "CustodiaServer", "run"]
