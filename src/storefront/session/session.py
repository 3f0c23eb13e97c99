"""ShopperSession aggregate — the cart/checkout state machine.

The session is the single writer of the shopper's cart and wishlist. Every
method either raises (ValidationError / ObjectNotFoundError) without changing
anything, or changes state and raises domain events describing the effects
to perform: persist, render, notify, navigate.

State Machine:
    BROWSING → DETAIL_SELECTION → BROWSING (add to cart / close)
    BROWSING → CART_REVIEW → CHECKOUT_FORM → SUBMITTING → CONFIRMED | SAVED_OFFLINE
    CONFIRMED and SAVED_OFFLINE behave like BROWSING for what comes next.
"""

import json
import time
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Float, HasMany, Identifier, String, Text

from storefront.catalogue.product import NO_COLOR, NO_SIZE
from storefront.checkout.order import Order
from storefront.checkout.validation import validate_checkout_form
from storefront.domain import storefront
from storefront.session.events import (
    CartUpdated,
    CheckoutFormReset,
    DetailPromptUpdated,
    NotificationRaised,
    OrderBackedUp,
    OrderPlaced,
    OrderSubmissionStarted,
    ViewChanged,
    WishlistUpdated,
)
from storefront.utils.logging import logger


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ShopperStage(Enum):
    BROWSING = "Browsing"
    DETAIL_SELECTION = "DetailSelection"
    CART_REVIEW = "CartReview"
    CHECKOUT_FORM = "CheckoutForm"
    SUBMITTING = "Submitting"
    CONFIRMED = "Confirmed"
    SAVED_OFFLINE = "SavedOffline"


class NotificationTone(Enum):
    SUCCESS = "success"
    ERROR = "error"
    REGULAR = "regular"


class View(Enum):
    HOME = "home"
    PRODUCT_DETAIL = "product_detail"
    CART = "cart"
    CHECKOUT = "checkout"
    WISHLIST = "wishlist"


_AFTER_CHECKOUT = {
    ShopperStage.BROWSING,
    ShopperStage.DETAIL_SELECTION,
    ShopperStage.CART_REVIEW,
}

# State machine transition map
_VALID_TRANSITIONS = {
    ShopperStage.BROWSING: {ShopperStage.DETAIL_SELECTION, ShopperStage.CART_REVIEW},
    ShopperStage.DETAIL_SELECTION: {ShopperStage.BROWSING},
    ShopperStage.CART_REVIEW: {ShopperStage.BROWSING, ShopperStage.CHECKOUT_FORM},
    ShopperStage.CHECKOUT_FORM: {
        ShopperStage.SUBMITTING,
        ShopperStage.CART_REVIEW,
        ShopperStage.BROWSING,  # Back navigation
    },
    ShopperStage.SUBMITTING: {ShopperStage.CONFIRMED, ShopperStage.SAVED_OFFLINE},
    ShopperStage.CONFIRMED: _AFTER_CHECKOUT,
    ShopperStage.SAVED_OFFLINE: _AFTER_CHECKOUT,
}

ORDER_SUCCESS_MESSAGE = "Your order has been confirmed successfully! We will contact you soon."


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="ShopperSession")
class CartLine:
    """One purchasable selection in the cart.

    The line id is a millisecond clock reading taken when the line was
    added, so two lines for the same product stay distinct.
    """

    name = String(required=True, max_length=255)
    price = Float(required=True)
    image = Text()
    description = Text()
    size = String(max_length=100, default=NO_SIZE)
    color = String(max_length=100, default=NO_COLOR)
    color_image = Text()

    @invariant.post
    def price_must_be_positive(self):
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": ["Price must be greater than zero"]})

    def to_record(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "price": self.price,
            "image": self.image or "",
            "description": self.description or "",
            "size": self.size or NO_SIZE,
            "color": self.color or NO_COLOR,
            "color_image": self.color_image,
        }


@storefront.entity(part_of="ShopperSession")
class WishlistEntry:
    """A product saved for later. At most one entry per product."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True)
    image = Text()
    description = Text()

    @invariant.post
    def price_must_be_positive(self):
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": ["Price must be greater than zero"]})

    def to_record(self) -> dict:
        return {
            "id": str(self.product_id),
            "name": self.name,
            "price": self.price,
            "image": self.image or "",
            "description": self.description or "",
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class ShopperSession:
    stage = String(choices=ShopperStage, default=ShopperStage.BROWSING.value)
    cart_lines = HasMany(CartLine)
    wishlist_entries = HasMany(WishlistEntry)
    current_product_id = Identifier()
    selected_size = String(max_length=100)
    selected_color = String(max_length=100)
    submission_in_flight = Boolean(default=False)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, cart=None, wishlist=None):
        """Start a session from persisted cart and wishlist records."""
        session = cls(stage=ShopperStage.BROWSING.value)

        for record in cart or []:
            try:
                session.add_cart_lines(
                    CartLine(
                        id=str(record["id"]),
                        name=record["name"],
                        price=record["price"],
                        image=record.get("image"),
                        description=record.get("description"),
                        size=record.get("size") or NO_SIZE,
                        color=record.get("color") or NO_COLOR,
                        color_image=record.get("color_image"),
                    )
                )
            except (KeyError, TypeError, ValidationError) as exc:
                logger.warning("Skipping unreadable cart line", record=record, error=str(exc))

        for record in wishlist or []:
            try:
                session.add_wishlist_entries(
                    WishlistEntry(
                        product_id=str(record["id"]),
                        name=record["name"],
                        price=record["price"],
                        image=record.get("image"),
                        description=record.get("description"),
                    )
                )
            except (KeyError, TypeError, ValidationError) as exc:
                logger.warning("Skipping unreadable wishlist entry", record=record, error=str(exc))

        return session

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def cart_count(self) -> int:
        return len(self.cart_lines)

    def cart_total(self) -> float:
        return sum(line.price for line in self.cart_lines)

    def cart_records(self) -> list[dict]:
        return [line.to_record() for line in self.cart_lines]

    def wishlist_count(self) -> int:
        return len(self.wishlist_entries)

    def wishlist_records(self) -> list[dict]:
        return [entry.to_record() for entry in self.wishlist_entries]

    def in_wishlist(self, product_id) -> bool:
        return self._wishlist_entry(product_id) is not None

    def detail_prompt(self, product):
        """Label of the add-to-cart control, whether it is enabled, and
        whether the request-order affordance replaces it."""
        if not product.is_purchasable:
            return "Not Available", False, True
        if product.requires_size and not self.selected_size:
            return "Select size first", False, False
        if product.requires_color and not self.selected_color:
            return "Select color first", False, False
        return "Add to Cart", True, False

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = ShopperStage(self.stage)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"stage": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _assert_not_submitting(self):
        if self.submission_in_flight:
            raise ValidationError({"checkout": ["An order is already being submitted"]})

    def _assert_viewing(self, product):
        if ShopperStage(self.stage) != ShopperStage.DETAIL_SELECTION or str(self.current_product_id) != str(
            product.id
        ):
            raise ValidationError({"product": ["Open the product details first"]})

    def _clear_selection(self):
        self.current_product_id = None
        self.selected_size = None
        self.selected_color = None

    def _next_line_id(self) -> str:
        token = time.time_ns() // 1_000_000
        taken = [int(line.id) for line in self.cart_lines if str(line.id).isdigit()]
        if taken and token <= max(taken):
            token = max(taken) + 1
        return str(token)

    def _wishlist_entry(self, product_id):
        return next((e for e in self.wishlist_entries if str(e.product_id) == str(product_id)), None)

    def notify(self, message, tone=NotificationTone.REGULAR):
        self.raise_(NotificationRaised(message=message, tone=tone.value))

    def _raise_cart_updated(self):
        self.raise_(
            CartUpdated(
                count=self.cart_count(),
                total=self.cart_total(),
                lines=json.dumps(self.cart_records()),
            )
        )

    def _raise_wishlist_updated(self):
        self.raise_(
            WishlistUpdated(
                count=self.wishlist_count(),
                entries=json.dumps(self.wishlist_records()),
            )
        )

    def _raise_prompt(self, product):
        label, can_add, request_order = self.detail_prompt(product)
        self.raise_(
            DetailPromptUpdated(
                product_id=str(product.id),
                label=label,
                can_add_to_cart=can_add,
                show_request_order=request_order,
                image=product.image_for_color(self.selected_color) or product.primary_image,
            )
        )

    # -------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------
    def _leave_to(self, view):
        self._assert_not_submitting()
        if ShopperStage(self.stage) != ShopperStage.BROWSING:
            self._assert_can_transition(ShopperStage.BROWSING)
            self.stage = ShopperStage.BROWSING.value
        self._clear_selection()
        self.raise_(ViewChanged(view=view.value))

    def go_home(self):
        self._leave_to(View.HOME)

    def open_wishlist(self):
        self._leave_to(View.WISHLIST)

    # -------------------------------------------------------------------
    # Product detail
    # -------------------------------------------------------------------
    def open_product(self, product):
        """Show a product's details; selections start empty."""
        self._assert_not_submitting()
        self._assert_can_transition(ShopperStage.DETAIL_SELECTION)

        self.stage = ShopperStage.DETAIL_SELECTION.value
        self.current_product_id = str(product.id)
        self.selected_size = None
        self.selected_color = None

        self.raise_(ViewChanged(view=View.PRODUCT_DETAIL.value))
        self._raise_prompt(product)

    def select_size(self, product, size):
        self._assert_viewing(product)
        if size not in product.sizes:
            raise ValidationError({"size": [f"Size {size} is not offered for this product"]})

        self.selected_size = size
        self._raise_prompt(product)

    def select_color(self, product, color):
        self._assert_viewing(product)
        if color not in product.colors:
            raise ValidationError({"color": [f"Color {color} is not offered for this product"]})

        self.selected_color = color
        self._raise_prompt(product)

    def close_product(self):
        if ShopperStage(self.stage) != ShopperStage.DETAIL_SELECTION:
            raise ValidationError({"product": ["No product details are open"]})
        self._leave_to(View.HOME)

    # -------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------
    def add_to_cart(self, product):
        """Add the open product with the current selections as a new cart line."""
        self._assert_viewing(product)

        if not product.is_purchasable:
            raise ValidationError({"product": ["This product is not available currently"]})
        if product.requires_size and not self.selected_size:
            raise ValidationError({"size": ["Please select size first"]})
        if product.requires_color and not self.selected_color:
            raise ValidationError({"color": ["Please select color first"]})

        self.add_cart_lines(
            CartLine(
                id=self._next_line_id(),
                name=product.name,
                price=product.price,
                image=product.primary_image,
                description=product.description,
                size=self.selected_size or NO_SIZE,
                color=self.selected_color or NO_COLOR,
                color_image=product.image_for_color(self.selected_color),
            )
        )

        self.stage = ShopperStage.BROWSING.value
        self._clear_selection()

        self._raise_cart_updated()
        self.notify("The product has been added to the cart successfully!", NotificationTone.SUCCESS)
        self.raise_(ViewChanged(view=View.HOME.value))

    def add_wishlist_entry_to_cart(self, product_id):
        """Copy a wishlist entry into the cart with default size and colour."""
        self._assert_not_submitting()

        entry = self._wishlist_entry(product_id)
        if entry is None:
            raise ObjectNotFoundError(f"Product `{product_id}` is not in the wishlist")

        self.add_cart_lines(
            CartLine(
                id=self._next_line_id(),
                name=entry.name,
                price=entry.price,
                image=entry.image,
                description=entry.description,
            )
        )

        self._raise_cart_updated()
        self.notify("Product added to cart successfully!", NotificationTone.SUCCESS)

    def remove_from_cart(self, line_id):
        self._assert_not_submitting()

        line = next((li for li in self.cart_lines if str(li.id) == str(line_id)), None)
        if line is None:
            raise ValidationError({"line_id": ["Item not found in cart"]})

        self.remove_cart_lines(line)

        self._raise_cart_updated()
        self.notify("Product removed from cart", NotificationTone.ERROR)

    def open_cart(self):
        """Show the cart. Always allowed, even when empty."""
        self._assert_not_submitting()
        self._assert_can_transition(ShopperStage.CART_REVIEW)

        self.stage = ShopperStage.CART_REVIEW.value
        self._clear_selection()
        self.raise_(ViewChanged(view=View.CART.value))

    def close_cart(self):
        if ShopperStage(self.stage) != ShopperStage.CART_REVIEW:
            raise ValidationError({"cart": ["The cart is not open"]})
        self._leave_to(View.HOME)

    # -------------------------------------------------------------------
    # Wishlist
    # -------------------------------------------------------------------
    def toggle_wishlist(self, product) -> bool:
        """Add the product to the wishlist, or remove it if already there.

        Returns True when the product was added.
        """
        self._assert_not_submitting()

        entry = self._wishlist_entry(product.id)
        if entry is not None:
            self.remove_wishlist_entries(entry)
        else:
            self.add_wishlist_entries(
                WishlistEntry(
                    product_id=str(product.id),
                    name=product.name,
                    price=product.price,
                    image=product.primary_image,
                    description=product.description,
                )
            )

        self._raise_wishlist_updated()
        if entry is not None:
            self.notify("Product removed from wishlist", NotificationTone.ERROR)
            return False

        self.notify("Product added to wishlist!", NotificationTone.SUCCESS)
        return True

    def remove_from_wishlist(self, product_id):
        self._assert_not_submitting()

        entry = self._wishlist_entry(product_id)
        if entry is not None:
            self.remove_wishlist_entries(entry)

        self._raise_wishlist_updated()
        self.notify("Product removed from wishlist", NotificationTone.ERROR)

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def proceed_to_checkout(self):
        self._assert_not_submitting()
        self._assert_can_transition(ShopperStage.CHECKOUT_FORM)
        if not self.cart_lines:
            raise ValidationError({"cart": ["Cart is empty!"]})

        self.stage = ShopperStage.CHECKOUT_FORM.value
        self.raise_(ViewChanged(view=View.CHECKOUT.value))

    def begin_submission(self, customer_name, phone1, phone2, address) -> Order:
        """Validate the checkout form and snapshot the cart into an Order.

        Only one submission may be in flight; the guard stays up until
        complete_submission() runs.
        """
        self._assert_not_submitting()
        self._assert_can_transition(ShopperStage.SUBMITTING)
        if not self.cart_lines:
            raise ValidationError({"cart": ["Cart is empty!"]})

        validate_checkout_form(customer_name, phone1, phone2, address)

        order = Order.from_cart(
            self.cart_lines,
            customer_name=customer_name,
            phone1=phone1,
            phone2=phone2,
            address=address,
        )

        self.stage = ShopperStage.SUBMITTING.value
        self.submission_in_flight = True

        self.raise_(OrderSubmissionStarted(item_count=len(order.items), total=order.total))
        return order

    def complete_submission(self, order, accepted, submitted_at=None):
        """Finish checkout once the remote attempt has resolved.

        The order is backed up locally whatever the remote outcome, then the
        cart is cleared and the shopper is sent home.
        """
        if not self.submission_in_flight:
            raise ValidationError({"checkout": ["No order is being submitted"]})

        outcome = ShopperStage.CONFIRMED if accepted else ShopperStage.SAVED_OFFLINE
        self._assert_can_transition(outcome)

        self.stage = outcome.value
        self.submission_in_flight = False

        self.raise_(
            OrderBackedUp(
                order=json.dumps(order.to_payload()),
                submitted_at=submitted_at or datetime.now(UTC),
            )
        )

        for line in list(self.cart_lines):
            self.remove_cart_lines(line)
        self._raise_cart_updated()

        self.notify(ORDER_SUCCESS_MESSAGE, NotificationTone.SUCCESS)
        self.raise_(ViewChanged(view=View.HOME.value, replace_history=True))
        self.raise_(CheckoutFormReset(reason="order_placed"))
        self.raise_(OrderPlaced(outcome=outcome.value, total=order.total))
