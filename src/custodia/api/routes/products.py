from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request

from ...core.projection import product_to_dict, transfer_to_dict
from ...runtime.ledger import LedgerSubstrate
from ..parsing import parse_int, parse_str, require_caller


def mount_products_api(app: FastAPI, ledger: LedgerSubstrate) -> None:
    """Mount product registration, custody and freshness endpoints."""

    @app.post("/api/products")
    def register_product(body: dict, request: Request) -> dict[str, Any]:
        """Register a product owned by the calling identity.

        Body:
          - name: str
          - category: str
          - productionDate: int (unix seconds, not in the future)
          - expiryDate: int (after productionDate)
          - initialLocation: str
        """

        caller = require_caller(request)
        product_id = ledger.register_product(
            parse_str(body.get("name"), field="name"),
            parse_str(body.get("category"), field="category"),
            parse_int(body.get("productionDate"), field="productionDate"),
            parse_int(body.get("expiryDate"), field="expiryDate"),
            parse_str(body.get("initialLocation"), field="initialLocation"),
            caller=caller,
        )
        return {"ok": True, "id": int(product_id)}

    @app.get("/api/products/{product_id}")
    def get_product_info(product_id: int) -> dict[str, Any]:
        return product_to_dict(ledger.get_product_info(product_id))

    @app.get("/api/products/{product_id}/transfers")
    def get_transfer_history(product_id: int) -> list[dict[str, Any]]:
        return [transfer_to_dict(t) for t in ledger.get_transfer_history(product_id)]

    @app.get("/api/products/{product_id}/expired")
    def is_product_expired(product_id: int) -> dict[str, Any]:
        return {"id": int(product_id), "expired": bool(ledger.is_product_expired(product_id))}

    @app.post("/api/products/{product_id}/transfer")
    def transfer_product(product_id: int, body: dict, request: Request) -> dict[str, bool]:
        caller = require_caller(request)
        ledger.transfer_product(
            product_id,
            parse_str(body.get("newOwner"), field="newOwner"),
            parse_str(body.get("newLocation"), field="newLocation"),
            caller=caller,
        )
        return {"ok": True}

    @app.put("/api/products/{product_id}/freshness")
    def update_freshness(product_id: int, body: dict, request: Request) -> dict[str, bool]:
        caller = require_caller(request)
        ledger.update_freshness(product_id, parse_int(body.get("score"), field="score"), caller=caller)
        return {"ok": True}
