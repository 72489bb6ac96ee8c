"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.dto import AddressSpec, CheckoutRequest, OrderView
from storefront.domain.model.value_objects import OwnerKey
from storefront.infrastructure.bootstrap import build_storefront
from storefront.infrastructure.cli.cart_commands import display_cart
from storefront.infrastructure.cli.options import owner_options, unwrap
from storefront.infrastructure.config import Settings


def _display_order(view: OrderView) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {view.order_number}  (status={view.status})")
    click.echo(f"ID:       {view.id}")
    click.echo(f"Customer: {view.customer_email}")
    click.echo(f"Created:  {view.created_at}")
    if view.tracking_number:
        click.echo(f"Tracking: {view.tracking_number}")
    click.echo()

    click.echo(f"  {'Product':<20} {'Variant':<10} {'SKU':<12} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*72}")
    for item in view.items:
        click.echo(
            f"  {item.product_name:<20} {item.variant_name:<10} {item.sku:<12} "
            f"{item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*72}")
    click.echo(f"  {'Subtotal':<60} {view.subtotal:>11}")
    click.echo(f"  {'Shipping (' + (view.shipping_method or '-') + ')':<60} {view.shipping_cost:>11}")
    click.echo(f"  {'Tax':<60} {view.tax_amount:>11}")
    if view.discount_amount != "0.00":
        click.echo(f"  {'Discount':<60} {'-' + view.discount_amount:>11}")
    click.echo(f"  {'Order Total':<60} {view.total:>11} {view.currency}")


@click.command("create")
@click.option("--email", required=True, help="Customer email.")
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option("--address", "address_line1", required=True, help="Street address.")
@click.option("--address2", "address_line2", default="", help="Apartment, suite, etc.")
@click.option("--city", required=True)
@click.option("--state", default="")
@click.option("--postal-code", required=True)
@click.option("--country", required=True)
@click.option("--phone", default=None)
@click.option("--shipping-method", default="standard", show_default=True,
              help="express, standard, free, or any other method (flat rate).")
@click.option("--notes", default=None)
@owner_options
@click.pass_obj
def order_create(
    settings: Settings,
    email: str,
    first_name: str,
    last_name: str,
    address_line1: str,
    address_line2: str,
    city: str,
    state: str,
    postal_code: str,
    country: str,
    phone: str | None,
    shipping_method: str,
    notes: str | None,
    owner: OwnerKey,
) -> None:
    """Place an order from the current cart."""
    request = CheckoutRequest(
        customer_email=email,
        shipping_address=AddressSpec(
            first_name=first_name,
            last_name=last_name,
            address_line1=address_line1,
            address_line2=address_line2,
            city=city,
            state=state,
            postal_code=postal_code,
            country=country,
            phone=phone or "",
        ),
        shipping_method=shipping_method,
        customer_phone=phone,
        notes=notes,
    )
    view = unwrap(build_storefront(settings).create_order(owner, request))
    click.echo(f"Order {view.order_number} created.")
    _display_order(view)


@click.command("show")
@click.option("--number", "order_number", required=True, help="Order number (ORD-YYYY-NNNNNN).")
@owner_options
@click.pass_obj
def order_show(settings: Settings, order_number: str, owner: OwnerKey) -> None:
    """Show details of an existing order."""
    _display_order(unwrap(build_storefront(settings).get_order_by_number(order_number, owner)))


@click.command("list")
@owner_options
@click.pass_obj
def order_list(settings: Settings, owner: OwnerKey) -> None:
    """List the signed-in user's orders, newest first."""
    orders = unwrap(build_storefront(settings).list_orders(owner))
    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Number':<18} {'Status':<10} {'Items':>5} {'Total':>12}  Created")
    click.echo("-" * 68)
    for o in orders:
        click.echo(
            f"{o.order_number:<18} {o.status:<10} {o.item_count:>5} "
            f"{o.total + ' ' + o.currency:>12}  {o.created_at}"
        )


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
@click.option("--reason", default=None, help="Cancellation reason.")
@owner_options
@click.pass_obj
def order_cancel(settings: Settings, order_id: str, reason: str | None, owner: OwnerKey) -> None:
    """Cancel an order and return its stock."""
    view = unwrap(build_storefront(settings).cancel_order(order_id, owner, reason))
    click.echo(f"Order {view.order_number} cancelled.")


@click.command("reorder")
@click.option("--id", "order_id", required=True, help="Order ID to copy into the cart.")
@owner_options
@click.pass_obj
def order_reorder(settings: Settings, order_id: str, owner: OwnerKey) -> None:
    """Copy a past order's items back into the cart."""
    outcome = unwrap(build_storefront(settings).reorder(order_id, owner))
    click.echo(
        f"Added {outcome.items_added} item(s), "
        f"{outcome.items_partially_added} partially, "
        f"skipped {outcome.items_skipped}."
    )
    for reason in outcome.reasons:
        click.echo(f"  - {reason}")
    display_cart(outcome.cart)


@click.command("pay")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--method", "payment_method", default=None, help="Payment method.")
@click.option("--reference", "payment_reference", default=None, help="Payment reference.")
@click.option("--note", default=None, help="Admin note.")
@owner_options
@click.pass_obj
def order_pay(
    settings: Settings,
    order_id: str,
    payment_method: str | None,
    payment_reference: str | None,
    note: str | None,
    owner: OwnerKey,
) -> None:
    """Record payment for a pending order (admin)."""
    view = unwrap(
        build_storefront(settings).mark_paid(order_id, owner, payment_method, payment_reference, note)
    )
    click.echo(f"Order {view.order_number} marked as {view.status}.")


@click.command("ship")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--tracking", "tracking_number", default=None, help="Carrier tracking number.")
@click.option("--method", "shipping_method", default=None, help="Shipping method used.")
@click.option("--note", default=None, help="Admin note.")
@owner_options
@click.pass_obj
def order_ship(
    settings: Settings,
    order_id: str,
    tracking_number: str | None,
    shipping_method: str | None,
    note: str | None,
    owner: OwnerKey,
) -> None:
    """Mark a paid order as shipped (admin)."""
    view = unwrap(
        build_storefront(settings).mark_shipped(order_id, owner, tracking_number, shipping_method, note)
    )
    click.echo(f"Order {view.order_number} marked as {view.status}.")


@click.command("deliver")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--note", default=None, help="Admin note.")
@owner_options
@click.pass_obj
def order_deliver(settings: Settings, order_id: str, note: str | None, owner: OwnerKey) -> None:
    """Mark a shipped order as delivered (admin)."""
    view = unwrap(build_storefront(settings).mark_delivered(order_id, owner, note))
    click.echo(f"Order {view.order_number} marked as {view.status}.")
