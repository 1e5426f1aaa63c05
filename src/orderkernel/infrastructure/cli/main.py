from pathlib import Path

import click

from orderkernel.infrastructure.cli.order_commands import (
    order_add_item,
    order_cancel,
    order_confirm,
    order_create,
    order_list,
    order_remove_item,
    order_show,
)
from orderkernel.infrastructure.config import (
    DEFAULT_DATA_DIR,
    ENV_PREFIX,
    LOG_LEVELS,
    Settings,
    parse_tax_rate,
)
from orderkernel.infrastructure.log_config import configure_logging


def _tax_rate_option(ctx: click.Context, param: click.Parameter, value: str):
    try:
        return parse_tax_rate(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_DATA_DIR,
    show_default=True,
    envvar=f"{ENV_PREFIX}_DATA_DIR",
    help="Directory holding orders.json.",
)
@click.option(
    "--tax-rate",
    default="0.08",
    show_default=True,
    envvar=f"{ENV_PREFIX}_TAX_RATE",
    callback=_tax_rate_option,
    help="Tax rate locked into newly created orders.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar=f"{ENV_PREFIX}_LOG_LEVEL",
)
@click.option(
    "--json-logs",
    is_flag=True,
    default=False,
    envvar=f"{ENV_PREFIX}_JSON_LOGS",
    help="Emit log events as JSON lines.",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Path, tax_rate, log_level: str, json_logs: bool) -> None:
    """orderkernel: order pricing and lifecycle"""
    configure_logging(log_level, json_logs)
    ctx.obj = Settings(
        data_dir=data_dir,
        tax_rate=tax_rate,
        log_level=log_level.upper(),
        json_logs=json_logs,
    )


@cli.group()
def order() -> None:
    """Manage orders."""


# Register subcommands
order.add_command(order_add_item)
order.add_command(order_cancel)
order.add_command(order_confirm)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_remove_item)
order.add_command(order_show)
