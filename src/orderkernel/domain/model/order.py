"""Order aggregate: the core of the domain.

The Order is an aggregate root that owns its line items.  All business
invariants are enforced here.  Orders are immutable: every transition
returns a new ``Order`` inside a ``Result`` and leaves the receiver
untouched, so one instance can be shared by any number of readers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Iterable

from orderkernel.domain.errors import (
    AlreadyCancelled,
    CurrencyMismatch,
    DomainError,
    EmptyItems,
    EmptyOrder,
    InvalidLineItem,
    InvalidStatus,
    ItemNotFound,
    NonPositiveTotal,
    OrderNotModifiable,
)
from orderkernel.domain.exceptions import InvariantViolation
from orderkernel.domain.model.email import Email
from orderkernel.domain.model.money import DEFAULT_CURRENCY, Money
from orderkernel.domain.result import Err, Ok, Result


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
TAX_RATE = Decimal("0.08")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _line_item_problem(
    product_id: object, product_name: object, unit_price: object, quantity: object
) -> str | None:
    if not isinstance(product_id, str) or not product_id.strip():
        return "product id is required"
    if product_name is not None and not isinstance(product_name, str):
        return f"product name must be a string, got {type(product_name).__name__}"
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        return f"quantity must be an integer, got {type(quantity).__name__}"
    if quantity <= 0:
        return "quantity must be positive"
    if not isinstance(unit_price, Money):
        return "unit price must be Money"
    if not unit_price.is_positive():
        return f"unit price must be positive, got {unit_price}"
    return None


@dataclass(frozen=True)
class OrderLineItem:
    """One priced, quantified product line.

    The unit price is a snapshot taken when the line was created and is
    never recalculated (price lock).
    """

    product_id: str
    product_name: str
    unit_price: Money
    quantity: int

    def __post_init__(self) -> None:
        problem = _line_item_problem(
            self.product_id, self.product_name, self.unit_price, self.quantity
        )
        if problem is not None:
            raise InvariantViolation(
                f"Invalid line item {self.product_id!r}: {problem}; "
                f"use OrderLineItem.create()"
            )

    @staticmethod
    def create(
        product_id: str,
        product_name: str,
        unit_price: Money,
        quantity: int,
    ) -> Result[OrderLineItem, InvalidLineItem]:
        problem = _line_item_problem(product_id, product_name, unit_price, quantity)
        if problem is not None:
            return Err(InvalidLineItem(str(product_id), problem))
        product_id = product_id.strip()
        name = (product_name or "").strip() or product_id
        return Ok(OrderLineItem(product_id, name, unit_price, quantity))

    @property
    def line_total(self) -> Money:
        return self.unit_price.multiply(self.quantity)

    def with_quantity(self, quantity: int) -> OrderLineItem:
        return replace(self, quantity=quantity)


@dataclass(frozen=True)
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces the
    creation rules.  The constructor only checks structural invariants
    so the repository can reconstitute persisted orders.

    Transitions::

        PENDING -> CONFIRMED -> CANCELLED
        PENDING -> CANCELLED

    Nothing leaves CANCELLED and nothing returns to PENDING.
    """

    id: str
    customer_email: Email
    items: tuple[OrderLineItem, ...]
    status: OrderStatus = OrderStatus.PENDING
    currency: str = DEFAULT_CURRENCY
    tax_rate: Decimal = TAX_RATE  # locked at order-creation time
    created_at: datetime = field(default_factory=_utcnow)
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    version: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "tax_rate", Decimal(str(self.tax_rate)))
        if (self.status == OrderStatus.CONFIRMED) != (self.confirmed_at is not None):
            raise InvariantViolation(
                f"Order {self.id}: confirmed_at must be set if and only if "
                f"status is CONFIRMED"
            )
        if (self.status == OrderStatus.CANCELLED) != (self.cancelled_at is not None):
            raise InvariantViolation(
                f"Order {self.id}: cancelled_at must be set if and only if "
                f"status is CANCELLED"
            )
        if not self.tax_rate.is_finite() or self.tax_rate < 0:
            raise InvariantViolation(f"Tax rate must be non-negative, got {self.tax_rate}")

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_id: str,
        customer_email: Email,
        items: Iterable[OrderLineItem],
        tax_rate: Decimal = TAX_RATE,
        now: datetime | None = None,
    ) -> Result[Order, EmptyItems | CurrencyMismatch]:
        """Create a new PENDING order.

        At least one item is required, and all items must share one
        currency.
        """
        items = tuple(items)
        if not items:
            return Err(EmptyItems())

        currency = items[0].unit_price.currency
        for item in items[1:]:
            if item.unit_price.currency != currency:
                return Err(CurrencyMismatch(currency, item.unit_price.currency))

        return Ok(
            Order(
                id=order_id,
                customer_email=customer_email,
                items=items,
                currency=currency,
                tax_rate=tax_rate,
                created_at=now or _utcnow(),
            )
        )

    # --- State transitions ----------------------------------------------------

    def confirm(self, now: datetime | None = None) -> Result[Order, DomainError]:
        """Transition PENDING -> CONFIRMED and stamp ``confirmed_at``."""
        if self.status != OrderStatus.PENDING:
            return Err(InvalidStatus(self.id, self.status.value, "confirm"))
        if not self.items:
            return Err(EmptyOrder(self.id))
        total = self.total
        if not total.is_positive():
            return Err(NonPositiveTotal(self.id, str(total)))
        return Ok(
            replace(self, status=OrderStatus.CONFIRMED, confirmed_at=now or _utcnow())
        )

    def cancel(self, now: datetime | None = None) -> Result[Order, DomainError]:
        """Transition PENDING|CONFIRMED -> CANCELLED."""
        if self.status == OrderStatus.CANCELLED:
            return Err(AlreadyCancelled(self.id))
        return Ok(
            replace(
                self,
                status=OrderStatus.CANCELLED,
                confirmed_at=None,
                cancelled_at=now or _utcnow(),
            )
        )

    def add_item(self, item: OrderLineItem) -> Result[Order, DomainError]:
        """Add a line, merging quantities with an existing line for the same
        product.  A merged line keeps its original unit price.
        """
        if self.status != OrderStatus.PENDING:
            return Err(OrderNotModifiable(self.id, self.status.value))
        if item.unit_price.currency != self.currency:
            return Err(CurrencyMismatch(self.currency, item.unit_price.currency))

        existing = self.find_item(item.product_id)
        if existing is None:
            return Ok(replace(self, items=self.items + (item,)))

        merged = existing.with_quantity(existing.quantity + item.quantity)
        items = tuple(merged if i.product_id == item.product_id else i for i in self.items)
        return Ok(replace(self, items=items))

    def remove_item(self, product_id: str) -> Result[Order, DomainError]:
        """Drop the line for *product_id*.

        Removing the last line is allowed; such an order cannot be
        confirmed until an item is added again.
        """
        if self.status != OrderStatus.PENDING:
            return Err(OrderNotModifiable(self.id, self.status.value))
        if self.find_item(product_id) is None:
            return Err(ItemNotFound(self.id, product_id))
        items = tuple(i for i in self.items if i.product_id != product_id)
        return Ok(replace(self, items=items))

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        result = Money.zero(self.currency)
        for item in self.items:
            summed = result.add(item.line_total)
            if summed.is_err():
                # Mixed-currency carts are unsupported; reaching here is a bug.
                raise InvariantViolation(
                    f"Order {self.id} mixes currencies: {summed.error}"
                )
            result = summed.value
        return result

    @property
    def tax(self) -> Money:
        return self.subtotal.multiply(self.tax_rate)

    @property
    def total(self) -> Money:
        return self.subtotal.add(self.tax).unwrap()

    @property
    def can_confirm(self) -> bool:
        return (
            self.status == OrderStatus.PENDING
            and bool(self.items)
            and self.total.is_positive()
        )

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def find_item(self, product_id: str) -> OrderLineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None
