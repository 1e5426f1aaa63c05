"""Port for telling customers about their orders."""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderkernel.domain.errors import NotificationFailed
from orderkernel.domain.model.order import Order
from orderkernel.domain.result import Result


class OrderNotifier(ABC):

    @abstractmethod
    def send_order_confirmation(self, order: Order) -> Result[None, NotificationFailed]:
        """Notify the customer that *order* has been confirmed."""
