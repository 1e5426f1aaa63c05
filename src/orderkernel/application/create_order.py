"""Application service: Create Order use case.

Orchestrates value-object validation, the Order factory and the
repository.  The tax rate is injected by the composition root and
locked into each new order.
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from orderkernel.application.dto import LineItemSpec, OrderDTO, order_to_dto
from orderkernel.domain.errors import DomainError
from orderkernel.domain.model.email import Email
from orderkernel.domain.model.order import TAX_RATE, Order, OrderLineItem
from orderkernel.domain.repository.order_repository import OrderRepository
from orderkernel.domain.result import Ok, Result

log = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(self, order_repo: OrderRepository, tax_rate: Decimal = TAX_RATE) -> None:
        self._order_repo = order_repo
        self._tax_rate = tax_rate

    def handle(
        self, customer_email: str, item_specs: list[LineItemSpec]
    ) -> Result[OrderDTO, DomainError]:
        """Create a new PENDING order.

        Steps:
        1. Validate the customer email.
        2. Build OrderLineItems (each price is a snapshot).
        3. Let the Order aggregate validate the creation rules.
        4. Persist and return a DTO.
        """
        email = Email.create(customer_email)
        if email.is_err():
            log.info("order_rejected", reason=str(email.error))
            return email

        line_items: list[OrderLineItem] = []
        for spec in item_specs:
            item = OrderLineItem.create(
                product_id=spec.product_id,
                product_name=spec.product_name,
                unit_price=spec.unit_price,
                quantity=spec.quantity,
            )
            if item.is_err():
                log.info("order_rejected", reason=str(item.error))
                return item
            line_items.append(item.value)

        order_id = self._order_repo.next_id()
        if order_id.is_err():
            log.error("order_id_unavailable", reason=str(order_id.error))
            return order_id

        created = Order.create(
            order_id.value,
            email.value,
            line_items,
            tax_rate=self._tax_rate,
        )
        if created.is_err():
            log.info("order_rejected", reason=str(created.error))
            return created
        order = created.value

        saved = self._order_repo.save(order)
        if saved.is_err():
            log.error("order_save_failed", order_id=order.id, reason=str(saved.error))
            return saved

        log.info(
            "order_created",
            order_id=order.id,
            customer=str(order.customer_email),
            lines=len(order.items),
            total=str(order.total),
        )
        return Ok(order_to_dto(order))

