from __future__ import annotations

from typing import Any
from urllib.parse import quote

from ..core.errors import error_for_kind
from ..core.events import RegistryEvent
from ..core.products import Product, Transfer
from ..core.projection import event_from_dict, product_from_dict, transfer_from_dict

CALLER_HEADER = "X-Caller"


def _segment(identity: str) -> str:
    # Identities are opaque; "/", "?" and "#" must not reshape the URL.
    return quote(str(identity), safe="")


class CustodiaClient:
    """HTTP client for a running custodia server.

    Every mutating call is made as `caller`, sent in the X-Caller header.
    Registry rejections come back as the matching `RegistryError` subclass.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8000", *, caller: str | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.caller = caller

    def with_caller(self, caller: str) -> "CustodiaClient":
        return CustodiaClient(self.base_url, caller=caller)

    def _headers(self, *, write: bool) -> dict[str, str]:
        if self.caller is None:
            if write:
                raise ValueError("caller is required for mutating requests; use with_caller()")
            return {}
        return {CALLER_HEADER: self.caller}

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        write: bool = False,
        timeout_s: float = 10.0,
    ) -> Any:
        import httpx

        headers = self._headers(write=write)
        with httpx.Client(base_url=self.base_url, timeout=timeout_s) as client:
            res = client.request(method, path, json=json, params=params, headers=headers)

        if res.status_code >= 400:
            try:
                payload = res.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                err_cls = error_for_kind(str(payload.get("error", "")))
                if err_cls is not None:
                    raise err_cls(str(payload.get("detail", "")))
            raise RuntimeError(f"{method} {path} failed: {res.status_code} {res.text}")

        return res.json()

    # -- mutations ----------------------------------------------------------

    def register_product(
        self,
        name: str,
        category: str,
        production_date: int,
        expiry_date: int,
        initial_location: str,
        *,
        timeout_s: float = 10.0,
    ) -> int:
        """Register a product owned by this client's caller and return its id."""

        body = {
            "name": name,
            "category": category,
            "productionDate": production_date,
            "expiryDate": expiry_date,
            "initialLocation": initial_location,
        }
        data = self._request("POST", "/api/products", json=body, write=True, timeout_s=timeout_s)
        pid = data.get("id")
        if pid is None:
            raise RuntimeError(f"Register request returned invalid response: {data}")
        return int(pid)

    def transfer_product(self, product_id: int, new_owner: str, new_location: str, *, timeout_s: float = 10.0) -> None:
        body = {"newOwner": new_owner, "newLocation": new_location}
        self._request("POST", f"/api/products/{int(product_id)}/transfer", json=body, write=True, timeout_s=timeout_s)

    def update_freshness(self, product_id: int, score: int, *, timeout_s: float = 10.0) -> None:
        self._request("PUT", f"/api/products/{int(product_id)}/freshness", json={"score": score}, write=True, timeout_s=timeout_s)

    def add_authorized_updater(self, identity: str, *, timeout_s: float = 10.0) -> None:
        self._request("PUT", f"/api/updaters/{_segment(identity)}", write=True, timeout_s=timeout_s)

    def remove_authorized_updater(self, identity: str, *, timeout_s: float = 10.0) -> None:
        self._request("DELETE", f"/api/updaters/{_segment(identity)}", write=True, timeout_s=timeout_s)

    # -- queries ------------------------------------------------------------

    def get_product_info(self, product_id: int, *, timeout_s: float = 10.0) -> Product:
        return product_from_dict(self._request("GET", f"/api/products/{int(product_id)}", timeout_s=timeout_s))

    def get_transfer_history(self, product_id: int, *, timeout_s: float = 10.0) -> list[Transfer]:
        data = self._request("GET", f"/api/products/{int(product_id)}/transfers", timeout_s=timeout_s)
        return [transfer_from_dict(t) for t in data]

    def is_product_expired(self, product_id: int, *, timeout_s: float = 10.0) -> bool:
        data = self._request("GET", f"/api/products/{int(product_id)}/expired", timeout_s=timeout_s)
        return bool(data.get("expired"))

    def get_total_products(self, *, timeout_s: float = 10.0) -> int:
        return int(self._request("GET", "/api/registry", timeout_s=timeout_s)["totalProducts"])

    def owner(self, *, timeout_s: float = 10.0) -> str:
        return str(self._request("GET", "/api/registry", timeout_s=timeout_s)["owner"])

    def is_authorized_updater(self, identity: str, *, timeout_s: float = 10.0) -> bool:
        data = self._request("GET", f"/api/updaters/{_segment(identity)}", timeout_s=timeout_s)
        return bool(data.get("authorized"))

    def events(self, since: int = 0, *, timeout_s: float = 10.0) -> list[RegistryEvent]:
        data = self._request("GET", "/api/events", params={"since": str(int(since))}, timeout_s=timeout_s)
        return [event_from_dict(e) for e in data.get("events", [])]
