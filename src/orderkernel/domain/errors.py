"""Typed error values returned inside ``Err`` results.

Every business failure the kernel can report is one of these frozen
values.  They compare by value, so tests and callers can match them
directly, and ``str(error)`` gives a message suitable for display.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DomainError:
    """Base class for all error values."""

    @property
    def message(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        return self.message


# --- Value object construction ------------------------------------------------


@dataclass(frozen=True)
class InvalidEmail(DomainError):
    raw: str
    reason: str

    @property
    def message(self) -> str:
        return f"Invalid email {self.raw!r}: {self.reason}"


@dataclass(frozen=True)
class InvalidLineItem(DomainError):
    product_id: str
    reason: str

    @property
    def message(self) -> str:
        return f"Invalid line item {self.product_id!r}: {self.reason}"


@dataclass(frozen=True)
class CurrencyMismatch(DomainError):
    left: str
    right: str

    @property
    def message(self) -> str:
        return f"Cannot combine {self.left} with {self.right}"


# --- Order aggregate ----------------------------------------------------------


@dataclass(frozen=True)
class EmptyItems(DomainError):

    @property
    def message(self) -> str:
        return "Order must contain at least one item"


@dataclass(frozen=True)
class EmptyOrder(DomainError):
    order_id: str

    @property
    def message(self) -> str:
        return f"Order {self.order_id} has no items"


@dataclass(frozen=True)
class InvalidStatus(DomainError):
    order_id: str
    status: str
    action: str

    @property
    def message(self) -> str:
        return f"Cannot {self.action} order {self.order_id} in {self.status} status"


@dataclass(frozen=True)
class OrderNotModifiable(DomainError):
    order_id: str
    status: str

    @property
    def message(self) -> str:
        return (
            f"Order {self.order_id} is {self.status}; "
            f"items can only change while PENDING"
        )


@dataclass(frozen=True)
class ItemNotFound(DomainError):
    order_id: str
    product_id: str

    @property
    def message(self) -> str:
        return f"Product {self.product_id!r} not found in order {self.order_id}"


@dataclass(frozen=True)
class AlreadyCancelled(DomainError):
    order_id: str

    @property
    def message(self) -> str:
        return f"Order {self.order_id} is already cancelled"


@dataclass(frozen=True)
class NonPositiveTotal(DomainError):
    order_id: str
    total: str

    @property
    def message(self) -> str:
        return f"Order {self.order_id} total {self.total} must be positive"


# --- Collaborator boundaries --------------------------------------------------


@dataclass(frozen=True)
class OrderNotFound(DomainError):
    order_id: str

    @property
    def message(self) -> str:
        return f"Order {self.order_id} not found"


@dataclass(frozen=True)
class ConcurrentModification(DomainError):
    order_id: str
    expected_version: int
    actual_version: int

    @property
    def message(self) -> str:
        return (
            f"Order {self.order_id} was modified concurrently "
            f"(expected version {self.expected_version}, "
            f"found {self.actual_version})"
        )


@dataclass(frozen=True)
class PersistenceFailure(DomainError):
    reason: str

    @property
    def message(self) -> str:
        return f"Order storage failed: {self.reason}"


@dataclass(frozen=True)
class PaymentDeclined(DomainError):
    reason: str

    @property
    def message(self) -> str:
        return f"Payment declined: {self.reason}"


@dataclass(frozen=True)
class PaymentNotRecorded(DomainError):
    """The charge succeeded but the confirmed order could not be stored."""

    order_id: str
    payment_reference: str
    reason: str

    @property
    def message(self) -> str:
        return (
            f"Order {self.order_id} was charged (payment {self.payment_reference}) "
            f"but could not be saved: {self.reason}"
        )


@dataclass(frozen=True)
class NotificationFailed(DomainError):
    reason: str

    @property
    def message(self) -> str:
        return f"Could not send notification: {self.reason}"
