from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable

from ..errors import Expired, InvalidInput, InvalidTiming, NotFound, Unauthorized
from ..events import EventLog, FreshnessUpdated, ProductRegistered, ProductTransferred, RegistryEvent
from ..identity import normalize_identity, require_identity
from ..products import MAX_FRESHNESS, MIN_FRESHNESS, Product, Transfer

logger = logging.getLogger(__name__)

EventListener = Callable[[RegistryEvent], None]


class Registry:
    """Products, their custody history and the freshness updater set.

    The registry has no locking of its own. Whoever owns the instance must
    serialize calls (see `custodia.runtime.ledger.LedgerSubstrate`). Every
    operation validates everything before it writes, so a raised
    `RegistryError` means nothing changed.
    """

    def __init__(self, owner: str) -> None:
        self._owner = require_identity(owner, field="owner")
        self._products: dict[int, Product] = {}
        self._transfers: dict[int, list[Transfer]] = {}
        self._authorized: dict[str, bool] = {}
        self._next_id = 1
        self._revision = 0
        self._events = EventLog()
        self._listeners: list[EventListener] = []

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def revision(self) -> int:
        return self._revision

    # -- validation helpers -------------------------------------------------

    @staticmethod
    def _require_text(value: Any, *, field: str) -> str:
        if not isinstance(value, str) or not value:
            raise InvalidInput(f"{field} cannot be empty")
        return value

    @staticmethod
    def _require_timestamp(value: Any, *, field: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInput(f"{field} must be an integer timestamp")
        if value < 0:
            raise InvalidInput(f"{field} must be >= 0")
        return int(value)

    @staticmethod
    def _require_score(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInput("score must be an integer")
        if value < MIN_FRESHNESS or value > MAX_FRESHNESS:
            raise InvalidInput(f"score must be between {MIN_FRESHNESS} and {MAX_FRESHNESS}")
        return int(value)

    def _require_active(self, product_id: Any) -> Product:
        if isinstance(product_id, bool) or not isinstance(product_id, int):
            raise NotFound(f"Unknown product: {product_id!r}")
        product = self._products.get(product_id)
        if product is None or not product.is_active:
            raise NotFound(f"Unknown product: {product_id}")
        return product

    def _require_owner_caller(self, caller: str) -> None:
        if normalize_identity(caller, field="caller") != self._owner:
            raise Unauthorized("only the registry owner may manage updaters")

    # -- notifications ------------------------------------------------------

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def events(self, since: int = 0) -> list[RegistryEvent]:
        return self._events.since(since)

    def latest_event_seq(self) -> int:
        return self._events.latest_seq

    def _emit(self, event: RegistryEvent) -> RegistryEvent:
        self._events.append(event)
        # State is already committed; a failing listener must not turn it into a reported failure.
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("listener failed for event %d (%s)", event.seq, event.kind)
        return event

    # -- mutations ----------------------------------------------------------

    def register_product(
        self,
        name: str,
        category: str,
        production_date: int,
        expiry_date: int,
        initial_location: str,
        *,
        caller: str,
        now: int,
    ) -> int:
        try:
            producer = require_identity(caller, field="caller")
            name_v = self._require_text(name, field="name")
            category_v = self._require_text(category, field="category")
            if not isinstance(initial_location, str):
                raise InvalidInput("initial_location must be a string")
            produced = self._require_timestamp(production_date, field="production_date")
            expires = self._require_timestamp(expiry_date, field="expiry_date")
            now_v = self._require_timestamp(now, field="now")
            if produced > now_v:
                raise InvalidTiming("production_date cannot be in the future")
            if expires <= produced:
                raise InvalidTiming("expiry_date must be after production_date")
        except (InvalidInput, InvalidTiming) as ex:
            logger.debug("register_product rejected: %s", ex)
            raise

        product_id = self._next_id
        product = Product(
            id=product_id,
            name=name_v,
            category=category_v,
            producer=producer,
            current_owner=producer,
            production_date=produced,
            expiry_date=expires,
            freshness_score=MAX_FRESHNESS,
            is_active=True,
            locations=(initial_location,),
        )

        self._products[product_id] = product
        self._transfers[product_id] = []
        self._next_id += 1
        self._revision += 1
        logger.info("product %d registered by %s (%s)", product_id, producer, name_v)
        self._emit(ProductRegistered(seq=self._events.next_seq, product_id=product_id, producer=producer, name=name_v))
        return product_id

    def transfer_product(
        self,
        product_id: int,
        new_owner: str,
        new_location: str,
        *,
        caller: str,
        now: int,
    ) -> None:
        try:
            product = self._require_active(product_id)
            if normalize_identity(caller, field="caller") != product.current_owner:
                raise Unauthorized("only the current owner may transfer a product")
            to_owner = require_identity(new_owner, field="new_owner")
            if to_owner == product.current_owner:
                raise InvalidInput("new_owner is already the current owner")
            location = self._require_text(new_location, field="new_location")
            ts = self._require_timestamp(now, field="now")
        except (InvalidInput, NotFound, Unauthorized) as ex:
            logger.debug("transfer_product(%r) rejected: %s", product_id, ex)
            raise

        from_owner = product.current_owner
        updated = replace(product, current_owner=to_owner, locations=product.locations + (location,))

        self._products[product.id] = updated
        self._transfers[product.id].append(Transfer(from_owner=from_owner, to_owner=to_owner, timestamp=ts, location=location))
        self._revision += 1
        logger.info("product %d transferred %s -> %s at %s", product.id, from_owner, to_owner, location)
        self._emit(
            ProductTransferred(
                seq=self._events.next_seq,
                product_id=product.id,
                from_owner=from_owner,
                to_owner=to_owner,
                timestamp=ts,
            )
        )

    def update_freshness(self, product_id: int, new_score: int, *, caller: str, now: int) -> None:
        try:
            product = self._require_active(product_id)
            if not self.is_authorized_updater(caller):
                raise Unauthorized("caller may not update freshness scores")
            score = self._require_score(new_score)
            ts = self._require_timestamp(now, field="now")
            if product.is_expired_at(ts):
                raise Expired(f"product {product.id} expired at {product.expiry_date}")
        except (InvalidInput, NotFound, Unauthorized, Expired) as ex:
            logger.debug("update_freshness(%r) rejected: %s", product_id, ex)
            raise

        self._products[product.id] = replace(product, freshness_score=score)
        self._revision += 1
        logger.info("product %d freshness set to %d", product.id, score)
        self._emit(FreshnessUpdated(seq=self._events.next_seq, product_id=product.id, score=score, timestamp=ts))

    # -- administration -----------------------------------------------------

    def add_authorized_updater(self, identity: str, *, caller: str) -> None:
        self._require_owner_caller(caller)
        ident = require_identity(identity)
        if self._authorized.get(ident):
            return
        self._authorized[ident] = True
        self._revision += 1
        logger.info("authorized updater added: %s", ident)

    def remove_authorized_updater(self, identity: str, *, caller: str) -> None:
        self._require_owner_caller(caller)
        ident = normalize_identity(identity)
        if not self._authorized.pop(ident, False):
            return
        self._revision += 1
        logger.info("authorized updater removed: %s", ident)

    def is_authorized_updater(self, identity: str) -> bool:
        ident = normalize_identity(identity)
        return ident == self._owner or bool(self._authorized.get(ident))

    # -- queries ------------------------------------------------------------

    def get_product_info(self, product_id: int) -> Product:
        return self._require_active(product_id)

    def get_transfer_history(self, product_id: int) -> list[Transfer]:
        product = self._require_active(product_id)
        return list(self._transfers[product.id])

    def is_product_expired(self, product_id: int, *, now: int) -> bool:
        product = self._require_active(product_id)
        return product.is_expired_at(self._require_timestamp(now, field="now"))

    def get_total_products(self) -> int:
        return self._next_id - 1
