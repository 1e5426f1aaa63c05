"""Notifier that records order confirmations in the log instead of
sending email."""

from __future__ import annotations

import structlog

from orderkernel.domain.errors import NotificationFailed
from orderkernel.domain.model.order import Order
from orderkernel.domain.result import Ok, Result
from orderkernel.domain.service.order_notifier import OrderNotifier

log = structlog.get_logger(__name__)


class LoggingNotifier(OrderNotifier):

    def send_order_confirmation(self, order: Order) -> Result[None, NotificationFailed]:
        log.info(
            "order_confirmation_sent",
            order_id=order.id,
            to=str(order.customer_email),
            total=str(order.total),
        )
        return Ok(None)
