"""BDD tests for the wishlist."""

from pytest_bdd import parsers, scenarios, then, when
from storefront.persistence.state import StateKey

scenarios("features/wishlist.feature")


@when(parsers.cfparse('the shopper toggles "{name}" in the wishlist'))
def toggle(shop, find_product, result, name):
    result["outcome"] = shop.toggle_wishlist(find_product(name).id)


@when(parsers.cfparse('the shopper removes "{name}" from the wishlist'))
def remove(shop, find_product, result, name):
    result["outcome"] = shop.remove_from_wishlist(find_product(name).id)


@when(parsers.cfparse('the shopper adds "{name}" from the wishlist to the cart'))
def wishlist_to_cart(shop, find_product, result, name):
    result["outcome"] = shop.add_wishlist_entry_to_cart(find_product(name).id)


@then(parsers.cfparse('the wishlist holds only "{name}"'))
def wishlist_holds_only(shop, find_product, store, name):
    expected = str(find_product(name).id)
    assert [e["id"] for e in shop.session.wishlist_records()] == [expected]
    assert [e["id"] for e in store.read(StateKey.WISHLIST)] == [expected]


@then(parsers.cfparse('the cart line has size "{size}" and color "{color}"'))
def cart_line_options(shop, size, color):
    line = shop.session.cart_lines[-1]
    assert (line.size, line.color) == (size, color)
