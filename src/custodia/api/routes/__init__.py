from __future__ import annotations

from .products import mount_products_api
from .updaters import mount_updaters_api

__all__ = ["mount_products_api", "mount_updaters_api"]
