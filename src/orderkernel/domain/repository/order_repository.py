"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderkernel.domain.errors import (
    ConcurrentModification,
    OrderNotFound,
    PersistenceFailure,
)
from orderkernel.domain.model.order import Order
from orderkernel.domain.result import Result


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> Result[str, PersistenceFailure]:
        """Generate the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Result[Order, OrderNotFound | PersistenceFailure]:
        """Return the stored order, or ``OrderNotFound``."""

    @abstractmethod
    def save(
        self, order: Order
    ) -> Result[str, ConcurrentModification | PersistenceFailure]:
        """Persist a new or updated order and return its ID.

        ``order.version`` must equal the stored version (0 for a new
        order); otherwise another writer got there first and
        ``ConcurrentModification`` is returned.
        """

    @abstractmethod
    def list_all(self) -> Result[list[Order], PersistenceFailure]:
        """Return every stored order, oldest first."""
