"""Money value object.

Amounts are stored as an integer count of minor units (cents) so that
no floating-point drift can creep into prices, taxes or totals.

Simplification: every supported currency is assumed to have 100 minor
units per major unit and is rendered with a ``$`` sign.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from orderkernel.domain.errors import CurrencyMismatch
from orderkernel.domain.exceptions import InvariantViolation
from orderkernel.domain.result import Err, Ok, Result

MINOR_UNITS_PER_MAJOR = 100
DEFAULT_CURRENCY = "USD"


@dataclass(frozen=True)
class Money:
    """Monetary amount in a single currency.

    Immutable: ``add``, ``subtract`` and ``multiply`` return new values.
    Combining two currencies is reported as ``CurrencyMismatch``, never
    coerced.
    """

    amount_minor_units: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        # bool is an int subclass but never a valid amount
        if not isinstance(self.amount_minor_units, int) or isinstance(
            self.amount_minor_units, bool
        ):
            raise InvariantViolation(
                "Money amount must be an integer number of minor units, "
                f"got {type(self.amount_minor_units).__name__}"
            )
        if not isinstance(self.currency, str) or len(self.currency.strip()) != 3:
            raise InvariantViolation(
                f"Currency must be a three-letter code, got {self.currency!r}"
            )
        object.__setattr__(self, "currency", self.currency.strip().upper())

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def create(amount_minor_units: int, currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(amount_minor_units, currency)

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(0, currency)

    @staticmethod
    def of(amount: str | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Parse a major-unit amount such as ``"12.34"`` into Money.

        Raises ``ValueError`` for input that is not a number or that has
        more precision than the minor unit allows.
        """
        try:
            major = Decimal(str(amount).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Invalid money amount: {amount!r}") from exc
        if not major.is_finite():
            raise ValueError(f"Invalid money amount: {amount!r}")
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, _digits(major) + 3)
            minor = major * MINOR_UNITS_PER_MAJOR
        if minor != minor.to_integral_value():
            raise ValueError(
                f"Money amount {amount!r} has more than two decimal places"
            )
        return Money(int(minor), currency)

    # --- Arithmetic -----------------------------------------------------------

    def add(self, other: Money) -> Result[Money, CurrencyMismatch]:
        if self.currency != other.currency:
            return Err(CurrencyMismatch(self.currency, other.currency))
        return Ok(Money(self.amount_minor_units + other.amount_minor_units, self.currency))

    def subtract(self, other: Money) -> Result[Money, CurrencyMismatch]:
        if self.currency != other.currency:
            return Err(CurrencyMismatch(self.currency, other.currency))
        return Ok(Money(self.amount_minor_units - other.amount_minor_units, self.currency))

    def multiply(self, factor: int | float | Decimal) -> Money:
        """Scale by *factor*, rounding to the nearest minor unit.

        Ties round half up, away from zero: 0.5 becomes 1 and -0.5
        becomes -1.  Negative factors produce credits.
        """
        if isinstance(factor, int):
            return Money(self.amount_minor_units * int(factor), self.currency)
        scale = Decimal(str(factor))
        if not scale.is_finite():
            raise InvariantViolation(f"Cannot multiply Money by {factor!r}")
        amount = Decimal(self.amount_minor_units)
        # Wide enough that the product and its rounding stay exact.
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, _digits(amount) + _digits(scale) + 2)
            scaled = (amount * scale).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return Money(int(scaled), self.currency)

    # --- Predicates -----------------------------------------------------------

    def is_positive(self) -> bool:
        return self.amount_minor_units > 0

    def is_zero(self) -> bool:
        return self.amount_minor_units == 0

    def is_negative(self) -> bool:
        return self.amount_minor_units < 0

    # --- Display --------------------------------------------------------------

    def format(self) -> str:
        sign = "-" if self.amount_minor_units < 0 else ""
        major, minor = divmod(abs(self.amount_minor_units), MINOR_UNITS_PER_MAJOR)
        return f"{sign}${major}.{minor:02d}"

    def __str__(self) -> str:
        return self.format()


def _digits(value: Decimal) -> int:
    sign, digits, exponent = value.as_tuple()
    return len(digits) + max(exponent, 0)
