from __future__ import annotations

from .client import CustodiaClient

__all__ = ["CustodiaClient"]
