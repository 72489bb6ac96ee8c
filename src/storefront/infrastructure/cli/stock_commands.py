"""CLI commands for the stock ledger (admin)."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import catalog_reader, stock_ledger
from storefront.infrastructure.config import Settings


@click.command("set")
@click.option("--variant", "variant_id", required=True, help="Variant ID.")
@click.option("--quantity", type=int, required=True, help="Units on hand.")
@click.pass_obj
def stock_set(settings: Settings, variant_id: str, quantity: int) -> None:
    """Set the on-hand stock of a variant."""
    try:
        stock_ledger(settings).set_stock(variant_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for variant {variant_id} set to {quantity}.")


@click.command("show")
@click.option("--variant", "variant_id", default=None, help="Only this variant.")
@click.pass_obj
def stock_show(settings: Settings, variant_id: str | None) -> None:
    """Show stock levels."""
    ledger = stock_ledger(settings)
    if variant_id is not None:
        click.echo(f"{variant_id}: {ledger.current_stock(variant_id)}")
        return

    levels = ledger.list_stock()
    if not levels:
        click.echo("No stock recorded.")
        return

    skus = {
        variant.id: variant.sku
        for product in catalog_reader(settings).list_all()
        for variant in product.variants
    }
    click.echo(f"{'Variant':<34} {'SKU':<14} {'On hand':>8}")
    click.echo("-" * 58)
    for vid, quantity in levels.items():
        click.echo(f"{vid:<34} {skus.get(vid, '-'):<14} {quantity:>8}")
