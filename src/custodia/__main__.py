from __future__ import annotations

import argparse
import logging

from .runtime.server import run


def main() -> None:
    p = argparse.ArgumentParser(prog="custodia", description="custodia: product custody and freshness ledger")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--owner", default=None, help="registry owner identity (default: $CUSTODIA_OWNER)")
    p.add_argument("--log-level", default="info", choices=["critical", "error", "warning", "info", "debug"])
    args = p.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    srv = run(host=args.host, port=args.port, owner=args.owner, log_level=args.log_level, new_server=True)
    print(srv.url)

    # Block forever (so it behaves like a normal CLI server)
    import time

    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
