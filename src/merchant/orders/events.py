"""Domain events for merchant orders."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from merchant.domain import merchant


@merchant.event(part_of="Order")
class OrderReceived:
    """A storefront order was accepted and is awaiting the merchant."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_name = String(required=True, max_length=255)
    item_count = Integer(required=True)
    total = Float(required=True)
    created_at = DateTime(required=True)
