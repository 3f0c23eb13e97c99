"""Storefront bounded context — the shopper-facing side of the shop.

Owns the browsing session: the catalogue cache, cart, wishlist, and the
checkout flow that submits orders to the merchant API while keeping a
local backup of every order.
"""

from protean.domain import Domain

storefront = Domain(name="storefront")
