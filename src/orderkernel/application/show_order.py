"""Application service: Show Order and List Orders use cases (queries)."""

from __future__ import annotations

from orderkernel.application.dto import OrderDTO, order_to_dto
from orderkernel.domain.errors import OrderNotFound, PersistenceFailure
from orderkernel.domain.repository.order_repository import OrderRepository
from orderkernel.domain.result import Result


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str) -> Result[OrderDTO, OrderNotFound | PersistenceFailure]:
        return self._order_repo.get_by_id(order_id).map(order_to_dto)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, status: str | None = None) -> Result[list[OrderDTO], PersistenceFailure]:
        """Return all orders, optionally only those in *status*."""

        def to_dtos(orders):
            if status is not None:
                orders = [o for o in orders if o.status.value == status.upper()]
            return [order_to_dto(o) for o in orders]

        return self._order_repo.list_all().map(to_dtos)
