"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from orderkernel.domain.model.money import Money
from orderkernel.domain.model.order import Order

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class LineItemSpec:
    """Input: one product line as requested by the caller."""

    product_id: str
    product_name: str
    unit_price: Money
    quantity: int


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    customer_email: str
    status: str
    currency: str
    items: list[OrderLineItemDTO]
    subtotal: str
    tax: str
    total: str
    created_at: str
    confirmed_at: str | None = None
    cancelled_at: str | None = None
    payment_reference: str | None = None


def order_to_dto(order: Order, payment_reference: str | None = None) -> OrderDTO:
    return OrderDTO(
        id=order.id,
        customer_email=str(order.customer_email),
        status=order.status.value,
        currency=order.currency,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        subtotal=str(order.subtotal),
        tax=str(order.tax),
        total=str(order.total),
        created_at=order.created_at.strftime(_TIMESTAMP_FORMAT),
        confirmed_at=(
            order.confirmed_at.strftime(_TIMESTAMP_FORMAT) if order.confirmed_at else None
        ),
        cancelled_at=(
            order.cancelled_at.strftime(_TIMESTAMP_FORMAT) if order.cancelled_at else None
        ),
        payment_reference=payment_reference,
    )
