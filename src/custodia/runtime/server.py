from __future__ import annotations

import contextlib
import logging
import os
import socket
import threading
import time
from dataclasses import dataclass

import uvicorn

from ..sdk.client import CustodiaClient
from .app import create_app, default_owner
from .ledger import LedgerSubstrate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustodiaServer:
    host: str
    port: int
    url: str
    ledger: LedgerSubstrate

    @property
    def base_url(self) -> str:
        return self.url.rstrip("/")

    def client(self, caller: str | None = None) -> CustodiaClient:
        """Return an HTTP client bound to this server acting as `caller`."""
        return CustodiaClient(self.base_url, caller=caller)


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def _normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


def _is_server_alive(base_url: str, *, timeout_s: float = 0.2) -> bool:
    """Best-effort check that a custodia server is reachable."""

    import httpx

    try:
        with httpx.Client(base_url=base_url, timeout=timeout_s) as client:
            r = client.get("/healthz")
            if r.status_code != 200:
                return False
            data = r.json()
            return bool(data.get("ok"))
    except (httpx.HTTPError, ValueError):
        return False


def _wait_until_alive(base_url: str, *, timeout_s: float) -> bool:
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        if _is_server_alive(base_url):
            return True
        time.sleep(0.02)
    return False


def run(
    *,
    host: str = "127.0.0.1",
    port: int = 0,
    owner: str | None = None,
    log_level: str = "info",
    access_log: bool = False,
    new_server: bool = False,
    connect_timeout_s: float = 0.2,
    startup_timeout_s: float = 5.0,
) -> CustodiaServer | CustodiaClient:
    """Serve a registry over HTTP with a single Python call.

    Behavior:
    - If CUSTODIA_URL is set, we *attach* to that existing server (client mode) unless
      `new_server=True`.
    - Otherwise, if `port != 0` and a server is already reachable at http://{host}:{port},
      we attach to it (client mode) unless `new_server=True`.
    - Otherwise we start a new local server in a daemon thread and return a `CustodiaServer`.

    Notes:
    - `port=0` means "pick a free port", so there's nothing to attach to.
    - The registry owner is `owner`, else CUSTODIA_OWNER, else a fixed default identity.
      An attached client has no caller; use `with_caller()` before mutating.
    """

    env_url = _normalize_base_url(os.getenv("CUSTODIA_URL", ""))

    # 1) Try attaching to an explicitly provided server.
    if env_url and not new_server:
        if _is_server_alive(env_url, timeout_s=connect_timeout_s):
            logger.info("attaching to existing server at %s (CUSTODIA_URL)", env_url)
            return CustodiaClient(env_url)

    # 2) Try attaching to host/port if they are explicitly chosen.
    if port != 0 and not new_server:
        default_url = _normalize_base_url(f"http://{host}:{port}")
        if _is_server_alive(default_url, timeout_s=connect_timeout_s):
            logger.info("attaching to existing server at %s", default_url)
            return CustodiaClient(default_url)

    # 3) Start a fresh server.
    if port == 0:
        port = _find_free_port(host)

    ledger = LedgerSubstrate(owner or default_owner())
    app = create_app(ledger)

    config = uvicorn.Config(app, host=host, port=port, log_level=log_level, access_log=access_log)
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    url = f"http://{host}:{port}/"
    if not _wait_until_alive(url.rstrip("/"), timeout_s=startup_timeout_s):
        raise RuntimeError(f"custodia server did not start on {url} within {startup_timeout_s}s")

    logger.info("custodia server listening on %s (owner %s)", url, ledger.owner)
    return CustodiaServer(host=host, port=port, url=url, ledger=ledger)
