"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions, and the tax rate is
passed in explicitly rather than read from global state.
"""

from __future__ import annotations

from orderkernel.application.cancel_order import CancelOrderHandler
from orderkernel.application.confirm_order import ConfirmOrderHandler
from orderkernel.application.create_order import CreateOrderHandler
from orderkernel.application.modify_items import AddItemHandler, RemoveItemHandler
from orderkernel.application.show_order import ListOrdersHandler, ShowOrderHandler
from orderkernel.infrastructure.config import Settings
from orderkernel.infrastructure.gateways.logging_notifier import LoggingNotifier
from orderkernel.infrastructure.gateways.manual_payment_gateway import (
    ManualPaymentGateway,
)
from orderkernel.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)


def order_repository(settings: Settings) -> JsonOrderRepository:
    return JsonOrderRepository(settings.orders_file)


def create_order_handler(settings: Settings) -> CreateOrderHandler:
    return CreateOrderHandler(order_repository(settings), tax_rate=settings.tax_rate)


def show_order_handler(settings: Settings) -> ShowOrderHandler:
    return ShowOrderHandler(order_repository(settings))


def list_orders_handler(settings: Settings) -> ListOrdersHandler:
    return ListOrdersHandler(order_repository(settings))


def add_item_handler(settings: Settings) -> AddItemHandler:
    return AddItemHandler(order_repository(settings))


def remove_item_handler(settings: Settings) -> RemoveItemHandler:
    return RemoveItemHandler(order_repository(settings))


def confirm_order_handler(settings: Settings) -> ConfirmOrderHandler:
    return ConfirmOrderHandler(
        order_repository(settings),
        payment_gateway=ManualPaymentGateway(),
        notifier=LoggingNotifier(),
    )


def cancel_order_handler(settings: Settings) -> CancelOrderHandler:
    return CancelOrderHandler(order_repository(settings))
