from __future__ import annotations

from .service import EventListener, Registry

__all__ = ["EventListener", "Registry"]
