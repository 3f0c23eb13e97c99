"""Shared BDD fixtures and step definitions for the Storefront domain."""

import pytest
from pytest_bdd import given, parsers, then
from storefront.persistence.state import StateKey
from storefront.session.session import ShopperStage


@pytest.fixture()
def result():
    """Container for the outcome of the last When step."""
    return {"outcome": None}


def product_named(shop, name):
    return next(p for p in shop.catalogue.products if p.name == name)


@pytest.fixture()
def find_product(shop):
    """Look up a loaded catalogue product by name."""
    return lambda name: product_named(shop, name)


def _add_record(shop, fake_api, **record):
    record.setdefault("id", 100 + len(fake_api.products))
    record.setdefault("quantity", 5)
    record.setdefault("available", True)
    fake_api.products.append(record)
    shop.on_focus()


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the catalogue has a product "{name}" with id {product_id:d} priced {price:g}'))
def catalogue_has_priced_product(shop, fake_api, name, product_id, price):
    _add_record(shop, fake_api, id=product_id, name=name, price=price)


@given(parsers.cfparse('the catalogue has a product "{name}" with sizes "{sizes}" and colors "{colors}"'))
def catalogue_has_product_with_options(shop, fake_api, name, sizes, colors):
    _add_record(shop, fake_api, name=name, price=250.0, sizes=sizes.split(","), colors=colors.split(","))


@given(parsers.cfparse('the cart contains "{name}"'))
def cart_contains(shop, name):
    product = product_named(shop, name)
    shop.open_product(product.id)
    if product.requires_size:
        shop.select_size(product.id, product.sizes[0])
    if product.requires_color:
        shop.select_color(product.id, product.colors[0])
    outcome = shop.add_to_cart(product.id)
    assert outcome.ok, outcome.error


@given(parsers.cfparse('"{name}" is in the wishlist'))
def in_wishlist(shop, name):
    shop.toggle_wishlist(product_named(shop, name).id)


@given("the merchant API is unreachable")
def api_unreachable(fake_api):
    fake_api.configure(unreachable=True)


@given(parsers.cfparse("the merchant API rejects orders with status {status:d}"))
def api_rejects(fake_api, status):
    fake_api.configure(should_succeed=False, status_code=status, failure_reason="Invalid order")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the stage is "{stage}"'))
def stage_is(shop, stage):
    assert shop.session.stage == ShopperStage(stage).value


@then(parsers.cfparse('the shopper sees "{message}" as {article} {tone} notification'))
def shopper_sees(result, message, article, tone):
    assert (message, tone) in result["outcome"].notifications()


@then(parsers.cfparse("the cart has {count:d} line"))
@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_lines(shop, count):
    assert shop.session.cart_count() == count


@then("the cart is empty")
def cart_is_empty(shop, store):
    assert shop.session.cart_count() == 0
    assert store.read(StateKey.CART) == []


@then(parsers.cfparse("the local backup holds {count:d} order with total {total:g}"))
def backup_holds(store, count, total):
    backups = store.read(StateKey.ORDERS, default=[])
    assert len(backups) == count
    assert backups[-1]["total"] == total
    assert "date" in backups[-1]


@then("the local backup is empty")
def backup_empty(store):
    assert store.read(StateKey.ORDERS, default=[]) == []
