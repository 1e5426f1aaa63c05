"""Port for charging customers.

The kernel never charges anyone itself; the confirm use case calls a
gateway after the order has accepted the transition.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from orderkernel.domain.errors import PaymentDeclined
from orderkernel.domain.model.email import Email
from orderkernel.domain.model.money import Money
from orderkernel.domain.result import Result


@dataclass(frozen=True)
class PaymentReference:
    """Opaque identifier of a successful charge."""

    value: str

    def __str__(self) -> str:
        return self.value


class PaymentGateway(ABC):

    @abstractmethod
    def charge(
        self, amount: Money, customer_email: Email
    ) -> Result[PaymentReference, PaymentDeclined]:
        """Charge *amount* to the customer identified by *customer_email*."""
