from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request

from ..core.errors import InvalidInput

CALLER_HEADER = "X-Caller"


def parse_int(value: Any, *, field: str) -> int:
    """Strict integer parsing for JSON bodies and query params.

    JSON booleans and fractional numbers are rejected rather than coerced.
    """

    if value is None:
        raise InvalidInput(f"Missing {field}")
    if isinstance(value, bool):
        raise InvalidInput(f"Invalid {field}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidInput(f"Invalid {field}")
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError as ex:
        raise InvalidInput(f"Invalid {field}") from ex


def parse_str(value: Any, *, field: str) -> str:
    if value is None:
        raise InvalidInput(f"Missing {field}")
    if not isinstance(value, str):
        raise InvalidInput(f"Invalid {field}")
    return value


def require_caller(request: Request) -> str:
    caller = str(request.headers.get(CALLER_HEADER, "")).strip()
    if not caller:
        raise HTTPException(status_code=401, detail=f"Missing {CALLER_HEADER} header")
    return caller
