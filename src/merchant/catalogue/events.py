"""Domain events for the merchant catalogue."""

from protean.fields import Float, Identifier, String

from merchant.domain import merchant


@merchant.event(part_of="Product")
class ProductAdded:
    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True)
    category = String(max_length=100)


@merchant.event(part_of="Category")
class CategoryAdded:
    __version__ = 1

    category_id = Identifier(required=True)
    name = String(required=True, max_length=100)
