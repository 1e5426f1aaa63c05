"""Email value object."""

from __future__ import annotations

from dataclasses import dataclass

from orderkernel.domain.errors import InvalidEmail
from orderkernel.domain.exceptions import InvariantViolation
from orderkernel.domain.result import Err, Ok, Result

MAX_EMAIL_LENGTH = 255


def _problem(address: str) -> str | None:
    """Return why a normalized *address* is invalid, or None."""
    if not address:
        return "address is empty"
    if len(address) > MAX_EMAIL_LENGTH:
        return f"address is longer than {MAX_EMAIL_LENGTH} characters"
    if "@" not in address:
        return "address must contain '@'"
    local, _, domain = address.rpartition("@")
    if not local:
        return "local part is empty"
    if not domain:
        return "domain part is empty"
    return None


def _normalize(raw: str) -> str:
    return raw.strip().lower()


@dataclass(frozen=True)
class Email:
    """A validated, normalized (trimmed, lowercased) email address.

    Build instances with ``Email.create()``.  The constructor re-checks
    the same rules and raises ``InvariantViolation``, so there is no way
    to hold an Email that did not pass validation.

    Format checking is deliberately minimal: one ``@`` with non-empty
    parts on either side.
    """

    address: str

    def __post_init__(self) -> None:
        if not isinstance(self.address, str):
            raise InvariantViolation("Email address must be a string")
        if self.address != _normalize(self.address):
            raise InvariantViolation(
                f"Email address {self.address!r} is not normalized; use Email.create()"
            )
        problem = _problem(self.address)
        if problem is not None:
            raise InvariantViolation(f"Invalid email {self.address!r}: {problem}")

    @staticmethod
    def create(raw: str) -> Result[Email, InvalidEmail]:
        if not isinstance(raw, str):
            return Err(InvalidEmail(repr(raw), "address must be a string"))
        address = _normalize(raw)
        problem = _problem(address)
        if problem is not None:
            return Err(InvalidEmail(raw, problem))
        return Ok(Email(address))

    @property
    def local_part(self) -> str:
        return self.address.rpartition("@")[0]

    @property
    def domain(self) -> str:
        return self.address.rpartition("@")[2]

    def __str__(self) -> str:
        return self.address
