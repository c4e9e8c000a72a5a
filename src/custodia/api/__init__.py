from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..core.errors import InvalidInput, RegistryError
from ..core.projection import event_to_dict
from ..runtime.ledger import LedgerSubstrate
from .parsing import parse_int
from .routes import mount_products_api, mount_updaters_api

_STATUS_BY_KIND: dict[str, int] = {
    "InvalidInput": 400,
    "InvalidTiming": 400,
    "Unauthorized": 403,
    "NotFound": 404,
    "Expired": 409,
}


def error_response(ex: RegistryError) -> JSONResponse:
    status = _STATUS_BY_KIND.get(ex.kind, 400)
    return JSONResponse(status_code=status, content={"error": ex.kind, "detail": str(ex)})


def create_api_app(ledger: LedgerSubstrate) -> FastAPI:
    app = FastAPI(title="custodia", version="0.1.0")
    app.state.ledger = ledger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RegistryError)
    async def _registry_error(request: Request, ex: RegistryError) -> JSONResponse:  # noqa: ARG001
        return error_response(ex)

    mount_products_api(app, ledger)
    mount_updaters_api(app, ledger)

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/registry")
    def registry_info() -> dict[str, Any]:
        return {
            "owner": ledger.owner,
            "totalProducts": int(ledger.get_total_products()),
            "revision": int(ledger.revision()),
            "now": int(ledger.now()),
        }

    @app.get("/api/events")
    def events(since: str | None = None) -> dict[str, Any]:
        # Polling endpoint: the notification stream is the only freshness history.
        since_v = parse_int(since, field="since") if since is not None else 0
        if since_v < 0:
            raise InvalidInput("since must be >= 0")
        latest, items = ledger.events(since_v)
        return {"latestSeq": int(latest), "events": [event_to_dict(e) for e in items]}

    return app


__all__ = ["create_api_app", "error_response"]
