from __future__ import annotations

import os

from fastapi import FastAPI

from ..api import create_api_app
from .ledger import Clock, LedgerSubstrate

DEFAULT_OWNER = "0x" + "0" * 39 + "1"


def default_owner() -> str:
    return os.getenv("CUSTODIA_OWNER", "").strip() or DEFAULT_OWNER


def create_app(
    ledger: LedgerSubstrate | None = None,
    *,
    owner: str | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """Create the API app around a ledger.

    A fresh ledger is built when none is passed, so every app owns its own
    registry state.
    """

    if ledger is None:
        ledger = LedgerSubstrate(owner or default_owner(), clock=clock)
    elif owner is not None or clock is not None:
        raise ValueError("owner/clock cannot be combined with an explicit ledger")
    return create_api_app(ledger)
