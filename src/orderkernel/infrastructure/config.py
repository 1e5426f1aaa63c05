"""Runtime configuration.

Settings are assembled once by the CLI (from options or their
``ORDERKERNEL_*`` environment variables) and handed to the composition
root.  Nothing else reads the environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path

from orderkernel.domain.model.order import TAX_RATE

ENV_PREFIX = "ORDERKERNEL"
DEFAULT_DATA_DIR = Path("data")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    tax_rate: Decimal = TAX_RATE
    log_level: str = "WARNING"
    json_logs: bool = False

    @property
    def orders_file(self) -> Path:
        return self.data_dir / "orders.json"


def parse_tax_rate(raw: str | Decimal) -> Decimal:
    """Parse a tax rate such as ``"0.08"``; must be finite and non-negative."""
    try:
        rate = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid tax rate: {raw!r}") from exc
    if not rate.is_finite() or rate < 0:
        raise ValueError(f"Tax rate must be a non-negative number, got {raw!r}")
    return rate
