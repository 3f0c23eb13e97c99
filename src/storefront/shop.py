"""Storefront application service.

Wires the shopper session to the catalogue, the persisted state and the
merchant API. Each action runs one session transition, publishes the
resulting events on the effect bus and reports what happened as an
``Outcome``. Rejected actions surface as an error notification and leave
the session untouched.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.catalogue.cache import CatalogueCache
from storefront.persistence.state import LocalStore, StateKey
from storefront.remote import get_api
from storefront.remote.port import RemoteServiceError, StorefrontAPI
from storefront.session.events import NotificationRaised
from storefront.session.session import NotificationTone, ShopperSession
from storefront.session.subscribers import EffectBus, register_persistence
from storefront.utils.logging import logger


@dataclass(frozen=True)
class Outcome:
    """Result of one storefront action."""

    stage: str
    effects: tuple = field(default_factory=tuple)
    error: dict | None = None
    value: object = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def events_of(self, event_cls) -> list:
        return [e for e in self.effects if isinstance(e, event_cls)]

    def notifications(self) -> list[tuple[str, str]]:
        return [(e.message, e.tone) for e in self.events_of(NotificationRaised)]


def _first_message(messages: dict) -> str:
    for errors in messages.values():
        if isinstance(errors, (list, tuple)) and errors:
            return str(errors[0])
        if errors:
            return str(errors)
    return "Something went wrong"


class Storefront:
    def __init__(
        self,
        api: StorefrontAPI | None = None,
        store: LocalStore | None = None,
        bus: EffectBus | None = None,
    ) -> None:
        self.api = api or get_api()
        self.store = store or LocalStore()
        self.bus = bus or EffectBus()
        register_persistence(self.bus, self.store)

        self.catalogue = CatalogueCache(self.api, self.store)
        self.session = ShopperSession.create(
            cart=self.store.read(StateKey.CART, default=[]),
            wishlist=self.store.read(StateKey.WISHLIST, default=[]),
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def load(self):
        """Initial catalogue load."""
        return self.catalogue.refresh()

    def on_focus(self):
        """The shopper came back to the storefront; products may have changed."""
        return self.catalogue.refresh()

    # -------------------------------------------------------------------
    # Browsing queries
    # -------------------------------------------------------------------
    def products(self, category=None, term=None):
        return self.catalogue.search(term, category)

    def categories(self) -> list[tuple[str, str]]:
        return [(c, CatalogueCache.category_label(c)) for c in self.catalogue.categories]

    def backups(self) -> list[dict]:
        return self.store.read(StateKey.ORDERS, default=[])

    # -------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------
    def _drain(self) -> tuple:
        events = tuple(self.session._events)
        self.session._events.clear()
        self.bus.publish(events)
        return events

    def _reject(self, messages: dict) -> Outcome:
        self.session._events.clear()
        self.session.notify(_first_message(messages), NotificationTone.ERROR)
        return Outcome(stage=self.session.stage, effects=self._drain(), error=messages)

    def _run(self, action, *args, not_found="Product not found") -> Outcome:
        try:
            value = action(*args)
        except ValidationError as exc:
            return self._reject(exc.messages)
        except ObjectNotFoundError as exc:
            logger.info("Action on unknown product", error=str(exc))
            return self._reject({"product": [not_found]})

        return Outcome(stage=self.session.stage, effects=self._drain(), value=value)

    def _with_product(self, product_id, action, *args, not_found="Product not found") -> Outcome:
        try:
            product = self.catalogue.find(product_id)
        except ObjectNotFoundError:
            return self._reject({"product": [not_found]})
        return self._run(action, product, *args, not_found=not_found)

    # -------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------
    def open_product(self, product_id) -> Outcome:
        return self._with_product(product_id, self.session.open_product, not_found="Product details not found")

    def select_size(self, product_id, size) -> Outcome:
        return self._with_product(product_id, self.session.select_size, size)

    def select_color(self, product_id, color) -> Outcome:
        return self._with_product(product_id, self.session.select_color, color)

    def close_product(self) -> Outcome:
        return self._run(self.session.close_product)

    def add_to_cart(self, product_id) -> Outcome:
        return self._with_product(product_id, self.session.add_to_cart)

    def add_wishlist_entry_to_cart(self, product_id) -> Outcome:
        return self._run(self.session.add_wishlist_entry_to_cart, product_id)

    def remove_from_cart(self, line_id) -> Outcome:
        return self._run(self.session.remove_from_cart, line_id)

    def toggle_wishlist(self, product_id) -> Outcome:
        return self._with_product(product_id, self.session.toggle_wishlist)

    def remove_from_wishlist(self, product_id) -> Outcome:
        return self._run(self.session.remove_from_wishlist, product_id)

    def open_cart(self) -> Outcome:
        return self._run(self.session.open_cart)

    def close_cart(self) -> Outcome:
        return self._run(self.session.close_cart)

    def open_wishlist(self) -> Outcome:
        return self._run(self.session.open_wishlist)

    def go_home(self) -> Outcome:
        return self._run(self.session.go_home)

    def proceed_to_checkout(self) -> Outcome:
        return self._run(self.session.proceed_to_checkout)

    def submit_checkout(self, customer_name, phone1, phone2, address) -> Outcome:
        """Submit the cart as an order.

        The merchant API is called exactly once. Whether it accepts the order,
        rejects it or cannot be reached, the order is backed up locally and
        the cart is cleared; only the final stage differs.
        """
        try:
            order = self.session.begin_submission(customer_name, phone1, phone2, address)
        except ValidationError as exc:
            return self._reject(exc.messages)

        effects = self._drain()

        accepted = False
        try:
            result = self.api.submit_order(order.to_payload())
        except RemoteServiceError as exc:
            logger.error("Order submission failed, saving offline", error=str(exc), total=order.total)
        except Exception:
            logger.exception("Unexpected error submitting order, saving offline", total=order.total)
        else:
            accepted = result.accepted
            if accepted:
                logger.info("Order submitted", status_code=result.status_code, total=order.total)
            else:
                logger.warning(
                    "Order rejected by merchant API, saving offline",
                    status_code=result.status_code,
                    reason=result.failure_reason,
                )

        self.session.complete_submission(order, accepted, submitted_at=datetime.now(UTC))
        effects += self._drain()

        return Outcome(stage=self.session.stage, effects=effects, value=order)
