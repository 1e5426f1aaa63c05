"""Payment gateway for shops that settle payments outside the system.

Every positive charge is accepted and given a local reference that
staff reconcile against invoices; no money moves here.
"""

from __future__ import annotations

import uuid

import structlog

from orderkernel.domain.errors import PaymentDeclined
from orderkernel.domain.model.email import Email
from orderkernel.domain.model.money import Money
from orderkernel.domain.result import Err, Ok, Result
from orderkernel.domain.service.payment_gateway import PaymentGateway, PaymentReference

log = structlog.get_logger(__name__)


class ManualPaymentGateway(PaymentGateway):

    def charge(
        self, amount: Money, customer_email: Email
    ) -> Result[PaymentReference, PaymentDeclined]:
        if not amount.is_positive():
            return Err(PaymentDeclined(f"amount {amount} is not chargeable"))
        reference = PaymentReference(f"MANUAL-{uuid.uuid4().hex[:12].upper()}")
        log.info(
            "payment_recorded",
            reference=str(reference),
            amount=str(amount),
            currency=amount.currency,
            customer=str(customer_email),
        )
        return Ok(reference)
