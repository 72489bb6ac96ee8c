"""CLI commands for seeding and inspecting the product catalog."""

from __future__ import annotations

import dataclasses
import uuid
from decimal import Decimal, InvalidOperation

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.catalog import Product, Variant
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.bootstrap import catalog_reader
from storefront.infrastructure.config import Settings


def _decimal(raw: str, option: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise click.BadParameter(f"Invalid amount '{raw}'.", param_hint=option)


@click.command("add")
@click.option("--id", "product_id", default=None, help="Product ID (generated if omitted).")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Base price (e.g. 15.00).")
@click.pass_obj
def product_add(settings: Settings, product_id: str | None, name: str, price: str) -> None:
    """Add a new product to the catalog."""
    try:
        product = Product(
            id=product_id or uuid.uuid4().hex,
            name=name,
            base_price=Money(_decimal(price, "--price"), settings.currency),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    catalog_reader(settings).save(product)
    click.echo(f"Product {product.id} '{product.name}' added at {product.base_price}")


@click.command("add-variant")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--id", "variant_id", default=None, help="Variant ID (generated if omitted).")
@click.option("--sku", required=True)
@click.option("--name", required=True, help="Variant name (e.g. 'Red / L').")
@click.option("--price-adjustment", default="0.00", show_default=True)
@click.option("--sort-order", type=int, default=0, show_default=True)
@click.pass_obj
def product_add_variant(
    settings: Settings,
    product_id: str,
    variant_id: str | None,
    sku: str,
    name: str,
    price_adjustment: str,
    sort_order: int,
) -> None:
    """Add a variant to an existing product."""
    catalog = catalog_reader(settings)
    product = catalog.get_product_with_variants(product_id)
    if product is None:
        raise click.ClickException(f"Product '{product_id}' not found")

    variant = Variant(
        id=variant_id or uuid.uuid4().hex,
        product_id=product.id,
        sku=sku,
        name=name,
        price_adjustment=_decimal(price_adjustment, "--price-adjustment"),
        sort_order=sort_order,
    )
    catalog.save(dataclasses.replace(product, variants=product.variants + (variant,)))
    click.echo(f"Variant {variant.id} ({variant.sku}) added to '{product.name}'")


@click.command("set-active")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--variant", "variant_id", default=None, help="Variant ID (else the product).")
@click.option("--active/--inactive", default=True)
@click.pass_obj
def product_set_active(
    settings: Settings, product_id: str, variant_id: str | None, active: bool
) -> None:
    """Activate or deactivate a product or one of its variants."""
    catalog = catalog_reader(settings)
    product = catalog.get_product_with_variants(product_id)
    if product is None:
        raise click.ClickException(f"Product '{product_id}' not found")

    if variant_id is None:
        catalog.save(dataclasses.replace(product, is_active=active))
    else:
        if product.find_variant(variant_id) is None:
            raise click.ClickException(f"Variant '{variant_id}' not found")
        variants = tuple(
            dataclasses.replace(v, is_active=active) if v.id == variant_id else v
            for v in product.variants
        )
        catalog.save(dataclasses.replace(product, variants=variants))

    state = "active" if active else "inactive"
    click.echo(f"{variant_id or product_id} is now {state}.")


@click.command("list")
@click.pass_obj
def product_list(settings: Settings) -> None:
    """List all products and their variants."""
    products = catalog_reader(settings).list_all()

    if not products:
        click.echo("No products found.")
        return

    for p in products:
        state = "" if p.is_active else "  (inactive)"
        click.echo(f"{p.id}  {p.name}  {p.base_price}{state}")
        for v in sorted(p.variants, key=lambda v: v.sort_order):
            vstate = "" if v.is_active else "  (inactive)"
            click.echo(f"    {v.id}  {v.sku:<14} {v.name:<16} {str(p.price_for(v)):>14}{vstate}")
