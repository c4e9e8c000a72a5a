from __future__ import annotations

from typing import Any

from .events import FreshnessUpdated, ProductRegistered, ProductTransferred, RegistryEvent
from .products import Product, Transfer


def product_to_dict(p: Product) -> dict[str, Any]:
    return {
        "id": int(p.id),
        "name": p.name,
        "category": p.category,
        "producer": p.producer,
        "currentOwner": p.current_owner,
        "productionDate": int(p.production_date),
        "expiryDate": int(p.expiry_date),
        "freshnessScore": int(p.freshness_score),
        "isActive": bool(p.is_active),
        "locations": list(p.locations),
    }


def product_from_dict(data: dict[str, Any]) -> Product:
    return Product(
        id=int(data["id"]),
        name=str(data["name"]),
        category=str(data["category"]),
        producer=str(data["producer"]),
        current_owner=str(data["currentOwner"]),
        production_date=int(data["productionDate"]),
        expiry_date=int(data["expiryDate"]),
        freshness_score=int(data["freshnessScore"]),
        is_active=bool(data.get("isActive", True)),
        locations=tuple(str(loc) for loc in data.get("locations", [])),
    )


def transfer_to_dict(t: Transfer) -> dict[str, Any]:
    return {
        "from": t.from_owner,
        "to": t.to_owner,
        "timestamp": int(t.timestamp),
        "location": t.location,
    }


def transfer_from_dict(data: dict[str, Any]) -> Transfer:
    return Transfer(
        from_owner=str(data["from"]),
        to_owner=str(data["to"]),
        timestamp=int(data["timestamp"]),
        location=str(data["location"]),
    )


def event_to_dict(e: RegistryEvent) -> dict[str, Any]:
    base = {
        "seq": int(e.seq),
        "kind": e.kind,
        "productId": int(e.product_id),
    }

    if isinstance(e, ProductRegistered):
        return {**base, "producer": e.producer, "name": e.name}

    if isinstance(e, ProductTransferred):
        return {**base, "from": e.from_owner, "to": e.to_owner, "timestamp": int(e.timestamp)}

    if isinstance(e, FreshnessUpdated):
        return {**base, "score": int(e.score), "timestamp": int(e.timestamp)}

    raise TypeError(f"Unsupported event type: {type(e).__name__}")


def event_from_dict(data: dict[str, Any]) -> RegistryEvent:
    kind = data.get("kind")
    seq = int(data["seq"])
    product_id = int(data["productId"])

    if kind == "ProductRegistered":
        return ProductRegistered(seq=seq, product_id=product_id, producer=str(data["producer"]), name=str(data["name"]))
    if kind == "ProductTransferred":
        return ProductTransferred(
            seq=seq,
            product_id=product_id,
            from_owner=str(data["from"]),
            to_owner=str(data["to"]),
            timestamp=int(data["timestamp"]),
        )
    if kind == "FreshnessUpdated":
        return FreshnessUpdated(seq=seq, product_id=product_id, score=int(data["score"]), timestamp=int(data["timestamp"]))

    raise ValueError(f"Unsupported event kind: {kind!r}")
