from __future__ import annotations


class RegistryError(Exception):
    """Base class for every rejected registry request.

    A raised `RegistryError` always means the request had no effect on state.
    """

    kind: str = "RegistryError"


class InvalidInput(RegistryError, ValueError):
    kind = "InvalidInput"


class InvalidTiming(RegistryError, ValueError):
    kind = "InvalidTiming"


class NotFound(RegistryError, LookupError):
    kind = "NotFound"


class Unauthorized(RegistryError, PermissionError):
    kind = "Unauthorized"


class Expired(RegistryError):
    kind = "Expired"


_ERRORS_BY_KIND: dict[str, type[RegistryError]] = {
    cls.kind: cls for cls in (InvalidInput, InvalidTiming, NotFound, Unauthorized, Expired)
}


def error_for_kind(kind: str) -> type[RegistryError] | None:
    return _ERRORS_BY_KIND.get(str(kind))
