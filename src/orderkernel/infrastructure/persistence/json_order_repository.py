"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import fcntl
import json
import re
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Iterator

import structlog

from orderkernel.domain.errors import (
    ConcurrentModification,
    OrderNotFound,
    PersistenceFailure,
)
from orderkernel.domain.exceptions import DomainException
from orderkernel.domain.model.email import Email
from orderkernel.domain.model.money import Money
from orderkernel.domain.model.order import Order, OrderLineItem, OrderStatus
from orderkernel.domain.repository.order_repository import OrderRepository
from orderkernel.domain.result import Err, Ok, Result

log = structlog.get_logger(__name__)

ID_PREFIX = "ORD-"
_GENERATED_ID = re.compile(rf"^{ID_PREFIX}(\d+)$")


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock_path = file_path.with_name(f".{file_path.name}.lock")
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> Result[str, PersistenceFailure]:
        loaded = self._read_raw()
        if loaded.is_err():
            return loaded
        numbers = [
            int(match.group(1))
            for match in (_GENERATED_ID.match(str(o.get("id"))) for o in loaded.value)
            if match
        ]
        return Ok(f"{ID_PREFIX}{max(numbers, default=0) + 1:05d}")

    def get_by_id(self, order_id: str) -> Result[Order, OrderNotFound | PersistenceFailure]:
        loaded = self._read_raw()
        if loaded.is_err():
            return loaded
        for raw in loaded.value:
            if raw.get("id") == order_id:
                return self._decode(raw)
        return Err(OrderNotFound(order_id))

    def list_all(self) -> Result[list[Order], PersistenceFailure]:
        loaded = self._read_raw()
        if loaded.is_err():
            return loaded
        orders: list[Order] = []
        for raw in loaded.value:
            decoded = self._decode(raw)
            if decoded.is_err():
                return decoded
            orders.append(decoded.value)
        return Ok(orders)

    def save(
        self, order: Order
    ) -> Result[str, ConcurrentModification | PersistenceFailure]:
        # Load, version check and write form one critical section.
        try:
            with self._lock():
                return self._save_locked(order)
        except OSError as exc:
            return Err(PersistenceFailure(str(exc)))

    def _save_locked(
        self, order: Order
    ) -> Result[str, ConcurrentModification | PersistenceFailure]:
        loaded = self._read_raw()
        if loaded.is_err():
            return loaded
        orders = loaded.value

        index = next((i for i, raw in enumerate(orders) if raw.get("id") == order.id), None)
        stored_version = orders[index].get("version", 0) if index is not None else 0
        if order.version != stored_version:
            return Err(ConcurrentModification(order.id, order.version, stored_version))

        raw = self._to_raw(order)
        raw["version"] = order.version + 1

        # Upsert: replace if exists, otherwise append
        if index is None:
            orders.append(raw)
        else:
            orders[index] = raw

        self._persist_raw(orders)

        log.debug("order_saved", order_id=order.id, version=raw["version"])
        return Ok(order.id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "customer_email": str(order.customer_email),
            "status": order.status.value,
            "currency": order.currency,
            "tax_rate": str(order.tax_rate),
            "created_at": order.created_at.isoformat(),
            "confirmed_at": _isoformat(order.confirmed_at),
            "cancelled_at": _isoformat(order.cancelled_at),
            "version": order.version,
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "unit_price_minor_units": item.unit_price.amount_minor_units,
                    "currency": item.unit_price.currency,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderLineItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                unit_price=Money(i["unit_price_minor_units"], i["currency"]),
                quantity=i["quantity"],
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            customer_email=Email(raw["customer_email"]),
            items=tuple(items),
            status=OrderStatus(raw["status"]),
            currency=raw["currency"],
            tax_rate=Decimal(raw["tax_rate"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            confirmed_at=_parse_datetime(raw.get("confirmed_at")),
            cancelled_at=_parse_datetime(raw.get("cancelled_at")),
            version=raw["version"],
        )

    def _decode(self, raw: dict) -> Result[Order, PersistenceFailure]:
        try:
            return Ok(self._to_domain(raw))
        except (KeyError, TypeError, ArithmeticError, ValueError, DomainException) as exc:
            log.error("corrupt_order_record", order_id=raw.get("id"), error=repr(exc))
            return Err(PersistenceFailure(f"corrupt record for order {raw.get('id')!r}: {exc!r}"))

    # --- File helpers ---------------------------------------------------------

    def _read_raw(self) -> Result[list[dict], PersistenceFailure]:
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            return Err(PersistenceFailure(f"cannot read {self._file_path}: {exc}"))
        if not isinstance(data, list) or not all(isinstance(o, dict) for o in data):
            return Err(PersistenceFailure(f"{self._file_path} is not a list of orders"))
        return Ok(data)

    def _persist_raw(self, orders: list[dict]) -> None:
        # Atomic replace; readers never see a partial file.
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(orders, indent=2) + "\n", encoding="utf-8")
        tmp_path.replace(self._file_path)

    @contextmanager
    def _lock(self) -> Iterator[None]:
        """Hold an exclusive lock on the orders file for read-modify-write."""
        with open(self._lock_path, "w") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
