"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from storefront.application.dto import CartView
from storefront.domain.model.value_objects import OwnerKey
from storefront.infrastructure.bootstrap import build_storefront
from storefront.infrastructure.cli.options import owner_options, unwrap
from storefront.infrastructure.config import Settings


def display_cart(view: CartView) -> None:
    """Shared formatting for displaying a cart."""
    if not view.items:
        click.echo("Cart is empty.")
        return

    click.echo(f"  {'Item':<34} {'Product':<20} {'Variant':<10} {'Qty':>4} {'Price':>9} {'Total':>10}")
    click.echo(f"  {'-'*92}")
    for item in view.items:
        flag = "" if item.is_available else "  (unavailable)"
        click.echo(
            f"  {item.id:<34} {item.product_name:<20} {item.variant_name or '-':<10} "
            f"{item.quantity:>4} {item.unit_price:>9} {item.line_total:>10}{flag}"
        )
    click.echo(f"  {'-'*92}")
    click.echo(f"  {'Subtotal':<70} {view.subtotal:>10} {view.currency}")
    click.echo(f"  {'Estimated tax':<70} {view.tax:>10} {view.currency}")
    click.echo(f"  {'Total':<70} {view.total:>10} {view.currency}")


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--variant", "variant_id", default=None, help="Variant ID (default: first active).")
@click.option("--quantity", type=int, default=1, show_default=True, help="Units to add.")
@owner_options
@click.pass_obj
def cart_add(
    settings: Settings, product_id: str, variant_id: str | None, quantity: int, owner: OwnerKey
) -> None:
    """Add a product to the cart."""
    view = unwrap(build_storefront(settings).add_to_cart(product_id, quantity, owner, variant_id))
    click.echo(f"Added to cart ({view.item_count} items).")
    display_cart(view)


@click.command("update")
@click.option("--item", "item_id", required=True, help="Cart item ID.")
@click.option("--quantity", type=int, required=True, help="New quantity (0 removes).")
@owner_options
@click.pass_obj
def cart_update(settings: Settings, item_id: str, quantity: int, owner: OwnerKey) -> None:
    """Set a cart line to a new quantity."""
    view = unwrap(build_storefront(settings).update_cart_item(item_id, quantity, owner))
    display_cart(view)


@click.command("remove")
@click.option("--item", "item_id", required=True, help="Cart item ID.")
@owner_options
@click.pass_obj
def cart_remove(settings: Settings, item_id: str, owner: OwnerKey) -> None:
    """Remove a line from the cart."""
    unwrap(build_storefront(settings).remove_from_cart(item_id, owner))
    click.echo("Item removed from cart.")


@click.command("clear")
@owner_options
@click.pass_obj
def cart_clear(settings: Settings, owner: OwnerKey) -> None:
    """Remove every line from the cart."""
    unwrap(build_storefront(settings).clear_cart(owner))
    click.echo("Cart cleared.")


@click.command("show")
@owner_options
@click.pass_obj
def cart_show(settings: Settings, owner: OwnerKey) -> None:
    """Show the current cart."""
    display_cart(unwrap(build_storefront(settings).get_cart(owner)))


@click.command("merge")
@click.option("--guest-session", "guest_session_id", required=True, help="Guest session token to merge.")
@click.option("--user", "user_id", required=True, help="User who just signed in.")
@click.pass_obj
def cart_merge(settings: Settings, guest_session_id: str, user_id: str) -> None:
    """Merge a guest cart into a user's cart after login."""
    view = unwrap(
        build_storefront(settings).merge_guest_cart(guest_session_id, OwnerKey.user(user_id))
    )
    click.echo("Guest cart merged.")
    display_cart(view)
