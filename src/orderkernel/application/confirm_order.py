"""Application service: Confirm Order use case.

Orchestrates the Order aggregate (state transition), the payment
gateway (charge the total), the repository and the notifier.

Ordering matters:
1. The aggregate must accept the transition before anyone is charged.
2. A declined payment leaves the stored order untouched (still PENDING).
3. If saving fails after a successful charge, the error carries the
   payment reference so the charge can be reconciled.
4. The notification goes out only after the confirmed order is saved;
   failing to send it does not undo the confirmation.
"""

from __future__ import annotations

import structlog

from orderkernel.application.dto import OrderDTO, order_to_dto
from orderkernel.domain.errors import DomainError, PaymentNotRecorded
from orderkernel.domain.repository.order_repository import OrderRepository
from orderkernel.domain.result import Err, Ok, Result
from orderkernel.domain.service.order_notifier import OrderNotifier
from orderkernel.domain.service.payment_gateway import PaymentGateway

log = structlog.get_logger(__name__)


class ConfirmOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payment_gateway: PaymentGateway,
        notifier: OrderNotifier,
    ) -> None:
        self._order_repo = order_repo
        self._payment_gateway = payment_gateway
        self._notifier = notifier

    def handle(self, order_id: str) -> Result[OrderDTO, DomainError]:
        found = self._order_repo.get_by_id(order_id)
        if found.is_err():
            return found

        confirmed = found.value.confirm()
        if confirmed.is_err():
            log.info("confirm_rejected", order_id=order_id, reason=str(confirmed.error))
            return confirmed
        order = confirmed.value

        charged = self._payment_gateway.charge(order.total, order.customer_email)
        if charged.is_err():
            log.warning("payment_declined", order_id=order_id, reason=str(charged.error))
            return charged
        reference = charged.value

        saved = self._order_repo.save(order)
        if saved.is_err():
            # The charge went through but the order was not stored.
            log.error(
                "order_save_failed",
                order_id=order_id,
                payment_reference=str(reference),
                reason=str(saved.error),
            )
            return Err(PaymentNotRecorded(order_id, str(reference), str(saved.error)))

        log.info(
            "order_confirmed",
            order_id=order_id,
            total=str(order.total),
            payment_reference=str(reference),
        )

        notified = self._notifier.send_order_confirmation(order)
        if notified.is_err():
            log.warning(
                "confirmation_not_sent", order_id=order_id, reason=str(notified.error)
            )

        return Ok(order_to_dto(order, payment_reference=str(reference)))
