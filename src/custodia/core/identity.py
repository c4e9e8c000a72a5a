from __future__ import annotations

import re
from typing import Any

from .errors import InvalidInput

ZERO_IDENTITY = "0x" + "0" * 40

_HEX_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_identity(value: Any, *, field: str = "identity") -> str:
    """Return the canonical form of a caller identity.

    Address-like identities (``0x`` + 40 hex digits) compare case-insensitively,
    so they are lower-cased. Any other non-empty string is only stripped.
    """

    if not isinstance(value, str):
        raise InvalidInput(f"{field} must be a string")
    ident = value.strip()
    if not ident:
        raise InvalidInput(f"{field} cannot be empty")
    if _HEX_ADDRESS.match(ident):
        ident = ident.lower()
    return ident


def is_zero_identity(ident: str) -> bool:
    return ident == ZERO_IDENTITY


def require_identity(value: Any, *, field: str = "identity") -> str:
    ident = normalize_identity(value, field=field)
    if is_zero_identity(ident):
        raise InvalidInput(f"{field} cannot be the zero identity")
    return ident
