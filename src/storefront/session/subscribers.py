"""Change notifications for the shopper session.

ShopperSession raises events; the storefront publishes them on an
EffectBus once an action has completed. Persistence subscribes here, and
so can any view layer that needs to re-render cart or wishlist counts.
"""

import json
from collections import defaultdict
from datetime import UTC, datetime

from storefront.persistence.state import LocalStore, StateKey
from storefront.session.events import CartUpdated, OrderBackedUp, WishlistUpdated
from storefront.utils.logging import logger


class EffectBus:
    """Synchronous publish/subscribe keyed by event class.

    Handlers run in subscription order. A failing handler is not isolated:
    its exception propagates to the publisher.
    """

    def __init__(self) -> None:
        self._handlers = defaultdict(list)

    def subscribe(self, event_cls, handler) -> None:
        self._handlers[event_cls].append(handler)

    def unsubscribe(self, event_cls, handler) -> None:
        if handler in self._handlers[event_cls]:
            self._handlers[event_cls].remove(handler)

    def publish(self, events) -> None:
        for event in events:
            for handler in list(self._handlers[type(event)]):
                handler(event)


def register_persistence(bus: EffectBus, store: LocalStore) -> None:
    """Write cart, wishlist, and order backups through to ``store``."""

    def persist_cart(event: CartUpdated) -> None:
        store.write(StateKey.CART, json.loads(event.lines))

    def persist_wishlist(event: WishlistUpdated) -> None:
        store.write(StateKey.WISHLIST, json.loads(event.entries))

    def backup_order(event: OrderBackedUp) -> None:
        submitted_at = event.submitted_at or datetime.now(UTC)
        record = {**json.loads(event.order), "date": submitted_at.isoformat()}
        backups = store.append(StateKey.ORDERS, record)
        logger.info("Order backed up locally", backups=len(backups))

    bus.subscribe(CartUpdated, persist_cart)
    bus.subscribe(WishlistUpdated, persist_wishlist)
    bus.subscribe(OrderBackedUp, backup_order)
