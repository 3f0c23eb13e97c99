"""Tests for the Storefront application service and its write-through persistence."""

from storefront.persistence.state import StateKey
from storefront.session.events import CartUpdated, OrderPlaced, ViewChanged
from storefront.session.session import ShopperStage
from storefront.shop import Storefront

FORM = {
    "customer_name": "Mona Adel",
    "phone1": "01012345678",
    "phone2": "",
    "address": "12 Nile St, Cairo",
}


def _fill_cart(shop):
    shop.open_product(2)
    shop.add_to_cart(2)
    shop.open_product(1)
    shop.select_size(1, "L")
    shop.select_color(1, "Grey")
    shop.add_to_cart(1)


def _checkout(shop):
    _fill_cart(shop)
    shop.open_cart()
    shop.proceed_to_checkout()
    return shop.submit_checkout(**FORM)


class TestLoading:
    def test_load_fills_catalogue(self, shop):
        assert len(shop.products()) == 4

    def test_products_filter_by_category_and_term(self, shop):
        assert [p.name for p in shop.products(category="hoodies")] == ["Classic Hoodie"]
        assert [p.name for p in shop.products(category="all", term="jogger")] == ["Jogger Sweatpants"]

    def test_categories_are_labelled(self, shop):
        assert ("hoodies", "Hoodies") in shop.categories()

    def test_focus_reloads_products(self, shop, fake_api):
        fake_api.products.append({"id": 5, "name": "Track Set", "price": 700, "quantity": 1, "available": True})
        shop.on_focus()
        assert len(shop.products()) == 5

    def test_restores_persisted_cart_and_wishlist(self, fake_api, store):
        store.write(StateKey.CART, [{"id": "1", "name": "Logo Cap", "price": 120.0}])
        store.write(StateKey.WISHLIST, [{"id": "2", "name": "Logo Cap", "price": 120.0}])

        shop = Storefront(api=fake_api, store=store)

        assert shop.session.cart_count() == 1
        assert shop.session.in_wishlist("2")


class TestActions:
    def test_successful_action_reports_effects(self, shop):
        outcome = shop.open_product(1)

        assert outcome.ok
        assert outcome.stage == ShopperStage.DETAIL_SELECTION.value
        assert outcome.events_of(ViewChanged)[0].view == "product_detail"
        assert shop.session._events == []

    def test_rejected_action_becomes_error_notification(self, shop):
        shop.open_product(1)
        outcome = shop.add_to_cart(1)

        assert not outcome.ok
        assert outcome.error == {"size": ["Please select size first"]}
        assert outcome.notifications() == [("Please select size first", "error")]
        assert outcome.stage == ShopperStage.DETAIL_SELECTION.value

    def test_unknown_product_detail(self, shop):
        outcome = shop.open_product(404)

        assert outcome.notifications() == [("Product details not found", "error")]
        assert outcome.stage == ShopperStage.BROWSING.value

    def test_unknown_product_for_wishlist(self, shop):
        outcome = shop.toggle_wishlist(404)
        assert outcome.notifications() == [("Product not found", "error")]

    def test_missing_wishlist_entry(self, shop):
        outcome = shop.add_wishlist_entry_to_cart(404)
        assert outcome.notifications() == [("Product not found", "error")]

    def test_empty_cart_checkout(self, shop):
        shop.open_cart()
        outcome = shop.proceed_to_checkout()

        assert outcome.notifications() == [("Cart is empty!", "error")]
        assert outcome.stage == ShopperStage.CART_REVIEW.value

    def test_toggle_reports_whether_added(self, shop):
        assert shop.toggle_wishlist(1).value is True
        assert shop.toggle_wishlist(1).value is False


class TestWriteThrough:
    def test_cart_changes_are_persisted(self, shop, store):
        _fill_cart(shop)

        persisted = store.read(StateKey.CART)
        assert [line["name"] for line in persisted] == ["Logo Cap", "Classic Hoodie"]
        assert persisted[1]["color_image"] == "https://cdn.example.com/hoodie-grey.jpg"

    def test_removal_is_persisted(self, shop, store):
        _fill_cart(shop)
        first = shop.session.cart_lines[0].id

        shop.remove_from_cart(first)

        assert [line["name"] for line in store.read(StateKey.CART)] == ["Classic Hoodie"]

    def test_wishlist_is_persisted(self, shop, store):
        shop.toggle_wishlist(3)
        assert store.read(StateKey.WISHLIST)[0]["name"] == "Rain Jacket"

    def test_restart_sees_same_cart(self, shop, fake_api, store):
        _fill_cart(shop)

        restarted = Storefront(api=fake_api, store=store)

        assert restarted.session.cart_records() == shop.session.cart_records()

    def test_extra_subscribers_see_effects(self, shop):
        seen = []
        shop.bus.subscribe(CartUpdated, lambda e: seen.append(e.count))

        _fill_cart(shop)

        assert seen == [1, 2]


class TestSubmitCheckout:
    def test_accepted_order_is_confirmed(self, shop, fake_api):
        outcome = _checkout(shop)

        assert outcome.stage == ShopperStage.CONFIRMED.value
        assert outcome.events_of(OrderPlaced)[0].outcome == "Confirmed"
        assert len(fake_api.orders) == 1

    def test_remote_is_called_exactly_once_with_payload(self, shop, fake_api):
        _checkout(shop)

        submissions = [c for c in fake_api.calls if c["method"] == "submit_order"]
        assert len(submissions) == 1
        payload = submissions[0]["payload"]
        assert payload["customerName"] == "Mona Adel"
        assert payload["total"] == 570.0
        assert "phone2" not in payload

    def test_rejected_order_is_saved_offline(self, shop, fake_api):
        fake_api.configure(should_succeed=False, status_code=400, failure_reason="Invalid order")
        outcome = _checkout(shop)
        assert outcome.stage == ShopperStage.SAVED_OFFLINE.value

    def test_unreachable_api_saves_offline(self, shop, fake_api):
        fake_api.configure(unreachable=True)
        outcome = _checkout(shop)
        assert outcome.stage == ShopperStage.SAVED_OFFLINE.value

    def test_backup_written_for_every_outcome(self, shop, fake_api, store):
        _checkout(shop)
        fake_api.configure(unreachable=True)
        _checkout(shop)

        backups = store.read(StateKey.ORDERS)
        assert len(backups) == 2
        assert all("date" in b for b in backups)
        assert backups[0]["items"][1] == {"name": "Classic Hoodie", "price": 450.0, "size": "L", "color": "Grey"}

    def test_cart_cleared_and_persisted_empty(self, shop, store):
        _checkout(shop)

        assert shop.session.cart_count() == 0
        assert store.read(StateKey.CART) == []

    def test_same_notification_for_both_outcomes(self, shop, fake_api):
        confirmed = _checkout(shop)
        fake_api.configure(unreachable=True)
        offline = _checkout(shop)

        assert confirmed.notifications() == offline.notifications()

    def test_invalid_form_does_not_call_remote(self, shop, fake_api):
        _fill_cart(shop)
        shop.open_cart()
        shop.proceed_to_checkout()

        outcome = shop.submit_checkout(**{**FORM, "phone2": "123"})

        assert outcome.notifications() == [("Phone number 2 must be 11 digits", "error")]
        assert outcome.stage == ShopperStage.CHECKOUT_FORM.value
        assert not [c for c in fake_api.calls if c["method"] == "submit_order"]
        assert shop.backups() == []

    def test_guard_released_after_completion(self, shop):
        _checkout(shop)
        assert shop.session.submission_in_flight is False

    def test_unexpected_adapter_error_saves_offline(self, shop, fake_api, store, monkeypatch):
        def reset_connection(payload):
            raise ConnectionResetError("Connection reset by peer")

        monkeypatch.setattr(fake_api, "submit_order", reset_connection)

        outcome = _checkout(shop)

        assert outcome.stage == ShopperStage.SAVED_OFFLINE.value
        assert shop.session.submission_in_flight is False
        assert len(store.read(StateKey.ORDERS)) == 1
        assert store.read(StateKey.CART) == []
        assert shop.go_home().ok


def test_backups_are_listed_for_the_cli(shop):
    from manage import read_backups

    _checkout(shop)

    backups = read_backups()
    assert len(backups) == 1
    assert backups[0]["customerName"] == "Mona Adel"
