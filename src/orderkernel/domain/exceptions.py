"""Domain-level exceptions.

Expected business outcomes are returned as typed error values (see
``orderkernel.domain.errors``).  Exceptions are reserved for programmer
errors: code that breaks an invariant the caller was responsible for.
"""


class DomainException(Exception):
    """Base class for all domain exceptions."""


class InvariantViolation(DomainException):
    """A precondition or invariant was broken by the calling code."""


class UnwrapError(DomainException):
    """``unwrap()`` was called on an ``Err`` result."""

    def __init__(self, error: object) -> None:
        self.error = error
        super().__init__(f"Called unwrap() on an Err: {error}")
