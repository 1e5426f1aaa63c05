"""Unit tests for the Order aggregate and its business rules."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from orderkernel.domain.errors import (
    AlreadyCancelled,
    CurrencyMismatch,
    EmptyItems,
    EmptyOrder,
    InvalidLineItem,
    InvalidStatus,
    ItemNotFound,
    OrderNotModifiable,
)
from orderkernel.domain.exceptions import InvariantViolation
from orderkernel.domain.model.email import Email
from orderkernel.domain.model.money import Money
from orderkernel.domain.model.order import (
    TAX_RATE,
    Order,
    OrderLineItem,
    OrderStatus,
)
from orderkernel.domain.result import Err, Ok

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _email(raw: str = "alice@example.com") -> Email:
    return Email.create(raw).unwrap()


def _item(
    product_id: str = "P1",
    qty: int = 2,
    price: int = 10000,
    currency: str = "USD",
    name: str = "Widget",
) -> OrderLineItem:
    """Helper to build a valid line item."""
    return OrderLineItem.create(product_id, name, Money(price, currency), qty).unwrap()


def _order(*items: OrderLineItem, tax_rate: Decimal = TAX_RATE) -> Order:
    return Order.create("O1", _email(), items or [_item()], tax_rate=tax_rate, now=NOW).unwrap()


class TestOrderLineItem:

    def test_line_total(self):
        assert _item(qty=3, price=1500).line_total == Money(4500)

    def test_zero_price_rejected(self):
        result = OrderLineItem.create("P1", "Widget", Money(0, "USD"), 1)
        assert result.is_err()
        assert isinstance(result.error, InvalidLineItem)
        assert "unit price must be positive" in result.error.reason

    def test_negative_price_rejected(self):
        assert OrderLineItem.create("P1", "Widget", Money(-100), 1).is_err()

    @pytest.mark.parametrize("qty", [0, -3])
    def test_non_positive_quantity_rejected(self, qty):
        result = OrderLineItem.create("P1", "Widget", Money(100), qty)
        assert result == Err(InvalidLineItem("P1", "quantity must be positive"))

    def test_non_integer_quantity_rejected(self):
        assert OrderLineItem.create("P1", "Widget", Money(100), 1.5).is_err()

    @pytest.mark.parametrize("product_id", ["", "   "])
    def test_empty_product_id_rejected(self, product_id):
        result = OrderLineItem.create(product_id, "Widget", Money(100), 1)
        assert result == Err(InvalidLineItem(product_id, "product id is required"))

    def test_name_defaults_to_product_id(self):
        assert OrderLineItem.create(" P1 ", "", Money(100), 1).unwrap().product_name == "P1"
        assert OrderLineItem.create("P1", None, Money(100), 1).unwrap().product_name == "P1"

    def test_non_string_name_rejected(self):
        result = OrderLineItem.create("P1", 42, Money(100), 1)
        assert result == Err(InvalidLineItem("P1", "product name must be a string, got int"))

    def test_constructor_guards_invariants(self):
        with pytest.raises(InvariantViolation, match="unit price must be positive"):
            OrderLineItem("P1", "Widget", Money(0), 1)


class TestOrderCreation:

    def test_happy_path(self):
        order = _order()
        assert order.id == "O1"
        assert order.customer_email == _email()
        assert order.status == OrderStatus.PENDING
        assert order.currency == "USD"
        assert order.tax_rate == Decimal("0.08")
        assert order.created_at == NOW
        assert order.confirmed_at is None
        assert order.cancelled_at is None
        assert order.version == 0

    def test_empty_items_rejected(self):
        assert Order.create("O1", _email(), []) == Err(EmptyItems())

    def test_mixed_currencies_rejected(self):
        result = Order.create("O1", _email(), [_item("P1"), _item("P2", currency="EUR")])
        assert result == Err(CurrencyMismatch("USD", "EUR"))

    def test_currency_taken_from_items(self):
        assert _order(_item(currency="EUR")).currency == "EUR"

    def test_items_are_stored_as_tuple(self):
        order = Order.create("O1", _email(), [_item()]).unwrap()
        assert isinstance(order.items, tuple)

    def test_immutable(self):
        order = _order()
        with pytest.raises(FrozenInstanceError):
            order.status = OrderStatus.CONFIRMED


class TestOrderPricing:

    def test_subtotal_tax_total(self):
        order = _order(_item("P1", qty=2, price=10000))
        assert order.subtotal == Money(20000, "USD")
        assert order.tax == Money(1600, "USD")
        assert order.total == Money(21600, "USD")

    def test_subtotal_sums_lines(self):
        order = _order(_item("P1", qty=3, price=1500), _item("P2", qty=5, price=2500))
        assert order.subtotal == Money(17000)

    def test_tax_rounds_to_nearest_cent(self):
        order = _order(_item(qty=1, price=1234))
        assert order.tax == Money(99)
        assert order.total == Money(1333)

    def test_custom_tax_rate(self):
        order = _order(_item(qty=1, price=1000), tax_rate=Decimal("0.2"))
        assert order.tax == Money(200)
        assert order.total == Money(1200)

    def test_zero_tax_rate(self):
        order = _order(_item(qty=1, price=1000), tax_rate=Decimal("0"))
        assert order.total == Money(1000)

    def test_negative_tax_rate_is_invariant_violation(self):
        with pytest.raises(InvariantViolation, match="non-negative"):
            _order(tax_rate=Decimal("-0.1"))

    def test_total_is_deterministic(self):
        order = _order(_item("P1", qty=3, price=999), _item("P2", qty=1, price=1))
        assert order.total == order.total

    def test_mixed_currency_subtotal_is_invariant_violation(self):
        order = Order(id="X", customer_email=_email(), items=(_item("P1"), _item("P2", currency="EUR")))
        with pytest.raises(InvariantViolation, match="mixes currencies"):
            order.subtotal

    def test_item_count(self):
        assert _order(_item("P1", qty=2), _item("P2", qty=3)).item_count == 5


class TestOrderConfirm:

    def test_confirm(self):
        order = _order()
        result = order.confirm(now=NOW)
        assert result.is_ok()
        confirmed = result.value
        assert confirmed.status == OrderStatus.CONFIRMED
        assert confirmed.confirmed_at == NOW

    def test_confirm_does_not_mutate_receiver(self):
        order = _order()
        order.confirm()
        assert order.status == OrderStatus.PENDING
        assert order.confirmed_at is None

    def test_confirm_stamps_current_time_by_default(self):
        confirmed = _order().confirm().unwrap()
        assert confirmed.confirmed_at is not None
        assert confirmed.confirmed_at.tzinfo is not None

    def test_confirm_twice_rejected(self):
        confirmed = _order().confirm().unwrap()
        assert confirmed.confirm() == Err(InvalidStatus("O1", "CONFIRMED", "confirm"))

    def test_confirm_cancelled_rejected(self):
        cancelled = _order().cancel().unwrap()
        assert cancelled.confirm() == Err(InvalidStatus("O1", "CANCELLED", "confirm"))

    def test_confirm_empty_order_rejected(self):
        emptied = _order(_item("P1")).remove_item("P1").unwrap()
        assert not emptied.can_confirm
        assert emptied.confirm() == Err(EmptyOrder("O1"))

    def test_can_confirm(self):
        order = _order()
        assert order.can_confirm
        assert not order.confirm().unwrap().can_confirm

    def test_confirmed_at_requires_confirmed_status(self):
        with pytest.raises(InvariantViolation, match="confirmed_at"):
            Order(id="X", customer_email=_email(), items=(_item(),), confirmed_at=NOW)

    def test_confirmed_status_requires_confirmed_at(self):
        with pytest.raises(InvariantViolation, match="confirmed_at"):
            Order(
                id="X",
                customer_email=_email(),
                items=(_item(),),
                status=OrderStatus.CONFIRMED,
            )


class TestOrderCancel:

    def test_cancel_pending(self):
        cancelled = _order().cancel(now=NOW).unwrap()
        assert cancelled.status == OrderStatus.CANCELLED
        assert cancelled.cancelled_at == NOW

    def test_cancel_confirmed_clears_confirmed_at(self):
        cancelled = _order().confirm().unwrap().cancel().unwrap()
        assert cancelled.status == OrderStatus.CANCELLED
        assert cancelled.confirmed_at is None
        assert cancelled.cancelled_at is not None

    def test_cancel_twice_rejected(self):
        cancelled = _order().cancel().unwrap()
        result = cancelled.cancel()
        assert result == Err(AlreadyCancelled("O1"))
        assert str(result.error) == "Order O1 is already cancelled"


class TestOrderAddItem:

    def test_add_new_product_appends(self):
        order = _order(_item("P1")).add_item(_item("P2", qty=1, price=500)).unwrap()
        assert [i.product_id for i in order.items] == ["P1", "P2"]
        assert order.subtotal == Money(20500)

    def test_add_same_product_merges_quantities(self):
        order = _order(_item("P1", qty=2))
        updated = order.add_item(_item("P1", qty=3)).unwrap()
        assert len(updated.items) == 1
        assert updated.items[0].quantity == 5
        assert order.items[0].quantity == 2

    def test_merge_keeps_locked_unit_price(self):
        order = _order(_item("P1", qty=1, price=1000))
        updated = order.add_item(_item("P1", qty=1, price=9999)).unwrap()
        assert updated.items[0].unit_price == Money(1000)
        assert updated.items[0].quantity == 2

    def test_merge_keeps_line_position(self):
        order = _order(_item("P1"), _item("P2"))
        updated = order.add_item(_item("P1", qty=1)).unwrap()
        assert [i.product_id for i in updated.items] == ["P1", "P2"]

    def test_add_to_confirmed_rejected(self):
        confirmed = _order().confirm().unwrap()
        assert confirmed.add_item(_item("P2")) == Err(OrderNotModifiable("O1", "CONFIRMED"))

    def test_add_to_cancelled_rejected(self):
        cancelled = _order().cancel().unwrap()
        assert cancelled.add_item(_item("P2")) == Err(OrderNotModifiable("O1", "CANCELLED"))

    def test_add_other_currency_rejected(self):
        result = _order().add_item(_item("P2", currency="EUR"))
        assert result == Err(CurrencyMismatch("USD", "EUR"))

    def test_add_after_emptying(self):
        emptied = _order(_item("P1")).remove_item("P1").unwrap()
        refilled = emptied.add_item(_item("P9", qty=1)).unwrap()
        assert refilled.can_confirm


class TestOrderRemoveItem:

    def test_remove(self):
        order = _order(_item("P1"), _item("P2"))
        updated = order.remove_item("P1").unwrap()
        assert [i.product_id for i in updated.items] == ["P2"]
        assert len(order.items) == 2

    def test_remove_missing_product(self):
        order = _order(_item("P1"))
        assert order.remove_item("NOPE") == Err(ItemNotFound("O1", "NOPE"))
        assert [i.product_id for i in order.items] == ["P1"]

    def test_remove_from_confirmed_rejected(self):
        confirmed = _order().confirm().unwrap()
        assert confirmed.remove_item("P1") == Err(OrderNotModifiable("O1", "CONFIRMED"))

    def test_remove_last_item_leaves_empty_pending_order(self):
        emptied = _order(_item("P1")).remove_item("P1").unwrap()
        assert emptied.items == ()
        assert emptied.status == OrderStatus.PENDING
        assert emptied.subtotal == Money(0)


def test_transitions_keep_version():
    order = _order()
    assert order.confirm().unwrap().version == order.version
    assert isinstance(order.add_item(_item("P2")), Ok)
