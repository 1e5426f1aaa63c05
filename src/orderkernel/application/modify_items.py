"""Application services: Add Item and Remove Item use cases.

Both load a PENDING order, apply the change on the aggregate and save
the new version.  The aggregate decides whether the change is allowed.
"""

from __future__ import annotations

import structlog

from orderkernel.application.dto import LineItemSpec, OrderDTO, order_to_dto
from orderkernel.domain.errors import DomainError
from orderkernel.domain.model.order import OrderLineItem
from orderkernel.domain.repository.order_repository import OrderRepository
from orderkernel.domain.result import Ok, Result

log = structlog.get_logger(__name__)


class AddItemHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, spec: LineItemSpec) -> Result[OrderDTO, DomainError]:
        item = OrderLineItem.create(
            product_id=spec.product_id,
            product_name=spec.product_name,
            unit_price=spec.unit_price,
            quantity=spec.quantity,
        )
        if item.is_err():
            return item

        found = self._order_repo.get_by_id(order_id)
        if found.is_err():
            return found

        updated = found.value.add_item(item.value)
        if updated.is_err():
            log.info("add_item_rejected", order_id=order_id, reason=str(updated.error))
            return updated
        order = updated.value

        saved = self._order_repo.save(order)
        if saved.is_err():
            log.error("order_save_failed", order_id=order_id, reason=str(saved.error))
            return saved

        log.info(
            "item_added",
            order_id=order_id,
            product_id=item.value.product_id,
            quantity=order.find_item(item.value.product_id).quantity,
        )
        return Ok(order_to_dto(order))


class RemoveItemHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, product_id: str) -> Result[OrderDTO, DomainError]:
        found = self._order_repo.get_by_id(order_id)
        if found.is_err():
            return found

        updated = found.value.remove_item(product_id)
        if updated.is_err():
            log.info("remove_item_rejected", order_id=order_id, reason=str(updated.error))
            return updated
        order = updated.value

        saved = self._order_repo.save(order)
        if saved.is_err():
            log.error("order_save_failed", order_id=order_id, reason=str(saved.error))
            return saved

        log.info("item_removed", order_id=order_id, product_id=product_id)
        return Ok(order_to_dto(order))
