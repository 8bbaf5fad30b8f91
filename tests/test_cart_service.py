import pytest

from domain.exceptions import InsufficientStockError, ProductNotFoundError
from services.cart_service import (
    add_by_barcode,
    add_to_cart,
    cart_item_count,
    find_by_barcode,
    remove_from_cart,
    update_quantity,
)


def test_add_new_product_creates_line(make_product):
    milk = make_product(price=2.5, stock_quantity=4)

    cart = add_to_cart([], milk)

    assert len(cart) == 1
    assert cart[0].product_id == milk.id
    assert cart[0].quantity == 1
    assert cart[0].total == pytest.approx(2.5)
    assert cart[0].stock_quantity == 4


def test_add_existing_product_increments_quantity(make_product):
    milk = make_product(price=2.5, stock_quantity=4)
    cart = add_to_cart([], milk)

    cart = add_to_cart(cart, milk, 2)

    assert len(cart) == 1
    assert cart[0].quantity == 3
    assert cart[0].total == pytest.approx(7.5)


def test_add_beyond_stock_is_rejected_and_cart_unchanged(make_product):
    milk = make_product(stock_quantity=2)
    cart = add_to_cart([], milk, 2)
    before = list(cart)

    with pytest.raises(InsufficientStockError) as exc:
        add_to_cart(cart, milk)

    assert exc.value.available == 2
    assert str(exc.value) == "Only 2 items available"
    assert cart == before


def test_add_more_than_stock_to_empty_cart_is_rejected(make_product):
    with pytest.raises(InsufficientStockError):
        add_to_cart([], make_product(stock_quantity=1), 5)


def test_add_does_not_mutate_input(make_product):
    cart = []
    add_to_cart(cart, make_product())
    assert cart == []


def test_update_quantity_sets_new_total(make_product):
    milk = make_product(price=3.0, stock_quantity=10)
    cart = add_to_cart([], milk)

    cart = update_quantity(cart, [milk], milk.id, 4)

    assert cart[0].quantity == 4
    assert cart[0].total == pytest.approx(12.0)


def test_update_quantity_to_zero_removes_line(make_product):
    milk = make_product()
    cart = add_to_cart([], milk)

    assert update_quantity(cart, [milk], milk.id, 0) == []


def test_update_quantity_above_stock_is_rejected(make_product):
    milk = make_product(stock_quantity=3)
    cart = add_to_cart([], milk, 3)

    with pytest.raises(InsufficientStockError):
        update_quantity(cart, [milk], milk.id, 4)

    assert cart[0].quantity == 3


def test_update_quantity_for_product_missing_from_catalog_is_allowed(make_product):
    milk = make_product(stock_quantity=3)
    cart = add_to_cart([], milk)

    cart = update_quantity(cart, [], milk.id, 5)

    assert cart[0].quantity == 5


def test_remove_from_cart(make_product):
    a = make_product(id="a")
    b = make_product(id="b")
    cart = add_to_cart(add_to_cart([], a), b)

    cart = remove_from_cart(cart, "a")

    assert [line.product_id for line in cart] == ["b"]
    assert cart_item_count(cart) == 1


def test_find_by_barcode_trims_input(make_product):
    milk = make_product(barcode="6001234")
    assert find_by_barcode([milk], "  6001234 ") is milk


def test_find_by_barcode_blank_returns_none(make_product):
    assert find_by_barcode([make_product(barcode="1")], "   ") is None


def test_find_by_barcode_unknown_raises(make_product):
    with pytest.raises(ProductNotFoundError):
        find_by_barcode([make_product(barcode="1")], "999")


def test_add_by_barcode_adds_one_unit(make_product):
    milk = make_product(barcode="6001234")

    cart, product = add_by_barcode([], [milk], "6001234")

    assert product is milk
    assert cart[0].quantity == 1


def test_add_by_barcode_blank_input_leaves_cart(make_product):
    milk = make_product(barcode="6001234")
    cart = add_to_cart([], milk)

    new_cart, product = add_by_barcode(cart, [milk], "  ")

    assert product is None
    assert new_cart == cart
