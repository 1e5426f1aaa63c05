"""Tests for runtime settings."""

import json
from decimal import Decimal
from pathlib import Path

import pytest
import structlog

from orderkernel.infrastructure.config import Settings, parse_tax_rate
from orderkernel.infrastructure.log_config import configure_logging


def test_defaults():
    settings = Settings()
    assert settings.tax_rate == Decimal("0.08")
    assert settings.orders_file == Path("data") / "orders.json"


@pytest.mark.parametrize("raw, expected", [("0.08", Decimal("0.08")), (" 0 ", Decimal("0"))])
def test_parse_tax_rate(raw, expected):
    assert parse_tax_rate(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "-0.1", "NaN", "Infinity"])
def test_parse_tax_rate_rejects(raw):
    with pytest.raises(ValueError):
        parse_tax_rate(raw)


def test_json_logs_go_to_stderr(capsys):
    configure_logging("INFO", json_logs=True)
    log = structlog.get_logger("orderkernel.test")

    log.debug("hidden")
    log.info("order_created", order_id="ORD-00001")

    captured = capsys.readouterr()
    assert captured.out == ""
    event = json.loads(captured.err.strip())
    assert event["event"] == "order_created"
    assert event["order_id"] == "ORD-00001"
    assert event["level"] == "info"
    assert "timestamp" in event
