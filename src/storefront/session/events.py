"""Domain events for the ShopperSession aggregate.

Each event is an effect the storefront must carry out: persist, render,
notify, or navigate.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="ShopperSession")
class ViewChanged:
    """The shopper moved to another view."""

    __version__ = 1

    view = String(required=True, max_length=50)
    replace_history = Boolean(default=False)


@storefront.event(part_of="ShopperSession")
class DetailPromptUpdated:
    """The add-to-cart control of the product detail view must be redrawn."""

    __version__ = 1

    product_id = Identifier(required=True)
    label = String(required=True, max_length=50)
    can_add_to_cart = Boolean(required=True)
    show_request_order = Boolean(default=False)
    image = Text()


@storefront.event(part_of="ShopperSession")
class CartUpdated:
    """The cart changed; carries the full cart for write-through persistence."""

    __version__ = 1

    count = Integer(required=True)
    total = Float(required=True)
    lines = Text(required=True)  # JSON: list of cart line records


@storefront.event(part_of="ShopperSession")
class WishlistUpdated:
    """The wishlist changed; carries the full wishlist."""

    __version__ = 1

    count = Integer(required=True)
    entries = Text(required=True)  # JSON: list of wishlist entry records


@storefront.event(part_of="ShopperSession")
class NotificationRaised:
    """A message for the shopper."""

    __version__ = 1

    message = Text(required=True)
    tone = String(required=True, max_length=20)


@storefront.event(part_of="ShopperSession")
class OrderSubmissionStarted:
    """An order is on its way to the merchant API; submitting is disabled."""

    __version__ = 1

    item_count = Integer(required=True)
    total = Float(required=True)


@storefront.event(part_of="ShopperSession")
class OrderBackedUp:
    """An order must be appended to the local backup log."""

    __version__ = 1

    order = Text(required=True)  # JSON: order payload
    submitted_at = DateTime(required=True)


@storefront.event(part_of="ShopperSession")
class OrderPlaced:
    """Checkout finished, remotely confirmed or saved offline."""

    __version__ = 1

    outcome = String(required=True, max_length=20)
    total = Float(required=True)


@storefront.event(part_of="ShopperSession")
class CheckoutFormReset:
    """The checkout form fields must be cleared."""

    __version__ = 1

    reason = String(max_length=50)
