"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from orderkernel.application.dto import LineItemSpec, OrderDTO
from orderkernel.domain.exceptions import InvariantViolation
from orderkernel.domain.model.money import DEFAULT_CURRENCY, Money
from orderkernel.domain.result import Result
from orderkernel.infrastructure import bootstrap
from orderkernel.infrastructure.config import Settings

pass_settings = click.make_pass_decorator(Settings)


def _parse_item(raw: str, currency: str) -> LineItemSpec:
    """Parse 'P1:Widget:15.00:3' (id:name:price:qty) into a LineItemSpec."""
    if raw.count(":") < 3:
        raise click.BadParameter(
            f"Invalid item format '{raw}'. Expected 'ProductId:Name:Price:Quantity'."
        )
    product_id, rest = raw.split(":", 1)
    name, price_str, qty_str = rest.rsplit(":", 2)
    try:
        qty = int(qty_str)
    except ValueError:
        raise click.BadParameter(
            f"Invalid quantity '{qty_str}' for product '{product_id}'."
        )
    try:
        price = Money.of(price_str, currency)
    except (ValueError, InvariantViolation) as exc:
        raise click.BadParameter(f"{exc} for product '{product_id}'.")
    return LineItemSpec(
        product_id=product_id.strip(),
        product_name=name.strip(),
        unit_price=price,
        quantity=qty,
    )


def _unwrap(result: Result):
    """Turn an ``Err`` into a CLI error (exit code 1)."""
    if result.is_err():
        raise click.ClickException(str(result.error))
    return result.value


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_email}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.confirmed_at:
        click.echo(f"Confirmed: {dto.confirmed_at}")
    if dto.cancelled_at:
        click.echo(f"Cancelled: {dto.cancelled_at}")
    click.echo()

    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Subtotal':<27} {dto.subtotal:>20}")
    click.echo(f"  {'Tax':<27} {dto.tax:>20}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")


@click.command("create")
@click.option("--email", required=True, help="Customer email address.")
@click.option(
    "--item",
    "items",
    required=True,
    multiple=True,
    help="Line item as 'ProductId:Name:Price:Quantity'. Repeatable.",
)
@click.option("--currency", default=DEFAULT_CURRENCY, show_default=True)
@pass_settings
def order_create(settings: Settings, email: str, items: tuple[str, ...], currency: str) -> None:
    """Create a new pending order."""
    specs = [_parse_item(raw, currency) for raw in items]
    handler = bootstrap.create_order_handler(settings)
    dto = _unwrap(handler.handle(customer_email=email, item_specs=specs))

    click.echo(f"Order {dto.id} created  (status={dto.status})")
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
@pass_settings
def order_show(settings: Settings, order_id: str) -> None:
    """Show details of an existing order."""
    handler = bootstrap.show_order_handler(settings)
    _display_order(_unwrap(handler.handle(order_id)))


@click.command("list")
@click.option(
    "--status",
    type=click.Choice(["PENDING", "CONFIRMED", "CANCELLED"], case_sensitive=False),
    default=None,
    help="Only list orders in this status.",
)
@pass_settings
def order_list(settings: Settings, status: str | None) -> None:
    """List orders."""
    dtos = _unwrap(bootstrap.list_orders_handler(settings).handle(status))
    if not dtos:
        click.echo("No orders.")
        return
    click.echo(f"  {'ID':<12} {'Status':<10} {'Customer':<30} {'Total':>10}")
    click.echo(f"  {'-'*65}")
    for dto in dtos:
        click.echo(
            f"  {dto.id:<12} {dto.status:<10} {dto.customer_email:<30} {dto.total:>10}"
        )


@click.command("add-item")
@click.option("--id", "order_id", required=True, help="Order ID to change.")
@click.option("--item", "raw_item", required=True, help="Line item as 'ProductId:Name:Price:Quantity'.")
@click.option("--currency", default=DEFAULT_CURRENCY, show_default=True)
@pass_settings
def order_add_item(settings: Settings, order_id: str, raw_item: str, currency: str) -> None:
    """Add a line to a pending order (merges with an existing product line)."""
    spec = _parse_item(raw_item, currency)
    handler = bootstrap.add_item_handler(settings)
    _display_order(_unwrap(handler.handle(order_id, spec)))


@click.command("remove-item")
@click.option("--id", "order_id", required=True, help="Order ID to change.")
@click.option("--product", "product_id", required=True, help="Product ID to remove.")
@pass_settings
def order_remove_item(settings: Settings, order_id: str, product_id: str) -> None:
    """Remove a product line from a pending order."""
    handler = bootstrap.remove_item_handler(settings)
    _display_order(_unwrap(handler.handle(order_id, product_id)))


@click.command("confirm")
@click.option("--id", "order_id", required=True, help="Order ID to confirm.")
@pass_settings
def order_confirm(settings: Settings, order_id: str) -> None:
    """Confirm a pending order (charges the total)."""
    handler = bootstrap.confirm_order_handler(settings)
    dto = _unwrap(handler.handle(order_id))
    click.echo(
        f"Order {dto.id} confirmed: charged {dto.total} (payment {dto.payment_reference})."
    )


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
@pass_settings
def order_cancel(settings: Settings, order_id: str) -> None:
    """Cancel a pending or confirmed order."""
    handler = bootstrap.cancel_order_handler(settings)
    dto = _unwrap(handler.handle(order_id))
    click.echo(f"Order {dto.id} cancelled.")
