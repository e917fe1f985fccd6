"""Tests for the Store's cart operations."""

import asyncio

import pytest


@pytest.fixture
def loaded_store(store):
    asyncio.run(store.load_catalog())
    return store


class TestAddToCart:
    def test_new_line_snapshots_product(self, loaded_store):
        product = loaded_store.get_product("P1")

        assert loaded_store.add_to_cart(product, 2) is True

        [item] = loaded_store.cart
        assert item.product == product
        assert item.quantity == 2
        assert item.id != product.id

    def test_default_quantity_is_one(self, loaded_store):
        loaded_store.add_to_cart(loaded_store.get_product("P3"))

        assert loaded_store.cart[0].quantity == 1

    def test_repeated_adds_merge_into_one_line(self, loaded_store):
        product = loaded_store.get_product("P3")
        loaded_store.add_to_cart(product, 2)
        first_id = loaded_store.cart[0].id

        loaded_store.add_to_cart(product, 3)

        assert len(loaded_store.cart) == 1
        assert loaded_store.cart[0].quantity == 5
        assert loaded_store.cart[0].id == first_id

    def test_over_stock_add_is_rejected_without_change(self, loaded_store):
        product = loaded_store.get_product("P2")  # stock 2
        assert loaded_store.add_to_cart(product, 2) is True
        before = loaded_store.state

        assert loaded_store.add_to_cart(product, 1) is False

        assert loaded_store.state is before
        assert loaded_store.cart[0].quantity == 2

    def test_new_line_over_stock_is_rejected(self, loaded_store):
        product = loaded_store.get_product("P1")  # stock 5

        assert loaded_store.add_to_cart(product, 6) is False
        assert loaded_store.cart == []

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_is_rejected(self, loaded_store, quantity):
        assert loaded_store.add_to_cart(loaded_store.get_product("P1"), quantity) is False
        assert loaded_store.cart == []

    def test_sequence_never_exceeds_stock(self, loaded_store):
        product = loaded_store.get_product("P1")  # stock 5

        for quantity in [1, 3, 2, 1, 1, 4]:
            loaded_store.add_to_cart(product, quantity)
            assert loaded_store.cart[0].quantity <= product.stock

        assert loaded_store.cart[0].quantity == 5

    def test_out_of_stock_product_cannot_be_added(self, store, make_product):
        sold_out = make_product(stock=0)

        assert store.add_to_cart(sold_out) is False


class TestUpdateCartItem:
    def test_sets_exact_quantity(self, loaded_store):
        loaded_store.add_to_cart(loaded_store.get_product("P3"), 1)
        item_id = loaded_store.cart[0].id

        assert loaded_store.update_cart_item(item_id, 7) is True
        assert loaded_store.cart[0].quantity == 7

    def test_zero_removes_line(self, loaded_store):
        loaded_store.add_to_cart(loaded_store.get_product("P3"), 1)
        item_id = loaded_store.cart[0].id

        assert loaded_store.update_cart_item(item_id, 0) is True
        assert loaded_store.cart == []

    def test_quantity_above_stock_is_rejected(self, loaded_store):
        loaded_store.add_to_cart(loaded_store.get_product("P1"), 1)  # stock 5
        item_id = loaded_store.cart[0].id
        before = loaded_store.state

        assert loaded_store.update_cart_item(item_id, 6) is False
        assert loaded_store.state is before

    def test_quantity_equal_to_stock_is_allowed(self, loaded_store):
        loaded_store.add_to_cart(loaded_store.get_product("P1"), 1)
        item_id = loaded_store.cart[0].id

        assert loaded_store.update_cart_item(item_id, 5) is True

    def test_unknown_item_is_ignored(self, loaded_store):
        assert loaded_store.update_cart_item("missing", 1) is False
        assert loaded_store.update_cart_item("missing", 0) is False

    def test_negative_quantity_is_rejected(self, loaded_store):
        loaded_store.add_to_cart(loaded_store.get_product("P1"), 2)

        assert loaded_store.update_cart_item(loaded_store.cart[0].id, -1) is False
        assert loaded_store.cart[0].quantity == 2


class TestRemoveAndClear:
    def test_remove_targets_one_line(self, loaded_store):
        loaded_store.add_to_cart(loaded_store.get_product("P1"))
        loaded_store.add_to_cart(loaded_store.get_product("P3"))
        first = loaded_store.cart[0]

        assert loaded_store.remove_from_cart(first.id) is True
        assert [i.product.id for i in loaded_store.cart] == ["P3"]

    def test_remove_missing_is_noop(self, loaded_store):
        before = loaded_store.state

        assert loaded_store.remove_from_cart("missing") is False
        assert loaded_store.state is before

    def test_clear_cart(self, loaded_store):
        loaded_store.add_to_cart(loaded_store.get_product("P1"))
        loaded_store.add_to_cart(loaded_store.get_product("P3"))

        loaded_store.clear_cart()

        assert loaded_store.cart == []


class TestCartTotals:
    def test_item_count_and_total(self, loaded_store):
        loaded_store.add_to_cart(loaded_store.get_product("P1"), 2)  # 25000
        loaded_store.add_to_cart(loaded_store.get_product("P3"), 3)  # 28000

        assert loaded_store.cart_item_count == 5
        assert loaded_store.cart_total == 2 * 25000 + 3 * 28000

    def test_available_stock_accounts_for_cart(self, loaded_store):
        loaded_store.add_to_cart(loaded_store.get_product("P1"), 2)

        assert loaded_store.available_stock("P1") == 3
        assert loaded_store.available_stock("P3") == 10
        assert loaded_store.available_stock("unknown") == 0

    def test_cart_property_returns_copy(self, loaded_store):
        loaded_store.add_to_cart(loaded_store.get_product("P1"))

        loaded_store.cart.clear()

        assert len(loaded_store.cart) == 1
