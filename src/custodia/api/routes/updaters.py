from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request

from ...runtime.ledger import LedgerSubstrate
from ..parsing import require_caller


def mount_updaters_api(app: FastAPI, ledger: LedgerSubstrate) -> None:
    """Mount freshness-updater administration. Writes are owner-only."""

    @app.get("/api/updaters/{identity:path}")
    def is_authorized_updater(identity: str) -> dict[str, Any]:
        return {"identity": identity, "authorized": bool(ledger.is_authorized_updater(identity))}

    @app.put("/api/updaters/{identity:path}")
    def add_authorized_updater(identity: str, request: Request) -> dict[str, bool]:
        ledger.add_authorized_updater(identity, caller=require_caller(request))
        return {"ok": True}

    @app.delete("/api/updaters/{identity:path}")
    def remove_authorized_updater(identity: str, request: Request) -> dict[str, bool]:
        ledger.remove_authorized_updater(identity, caller=require_caller(request))
        return {"ok": True}
