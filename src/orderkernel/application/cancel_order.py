"""Application service: Cancel Order use case.

PENDING and CONFIRMED orders can be cancelled.  Refunding a charged
order is left to the payment provider's own back office.
"""

from __future__ import annotations

import structlog

from orderkernel.application.dto import OrderDTO, order_to_dto
from orderkernel.domain.errors import DomainError
from orderkernel.domain.model.order import OrderStatus
from orderkernel.domain.repository.order_repository import OrderRepository
from orderkernel.domain.result import Ok, Result

log = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str) -> Result[OrderDTO, DomainError]:
        found = self._order_repo.get_by_id(order_id)
        if found.is_err():
            return found
        previous = found.value

        cancelled = previous.cancel()
        if cancelled.is_err():
            log.info("cancel_rejected", order_id=order_id, reason=str(cancelled.error))
            return cancelled
        order = cancelled.value

        saved = self._order_repo.save(order)
        if saved.is_err():
            log.error("order_save_failed", order_id=order_id, reason=str(saved.error))
            return saved

        log.info(
            "order_cancelled",
            order_id=order_id,
            was_confirmed=previous.status == OrderStatus.CONFIRMED,
        )
        return Ok(order_to_dto(order))
