import click

from storefront.infrastructure.bootstrap import load_settings
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_merge,
    cart_remove,
    cart_show,
    cart_update,
)
from storefront.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_deliver,
    order_list,
    order_pay,
    order_reorder,
    order_ship,
    order_show,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_add_variant,
    product_list,
    product_set_active,
)
from storefront.infrastructure.cli.stock_commands import stock_set, stock_show
from storefront.infrastructure.logging import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Storefront: carts, checkout and order fulfilment."""
    settings = load_settings()
    configure_logging(settings.log_level, settings.log_json)
    ctx.obj = settings


@cli.group()
def cart() -> None:
    """Manage shopping carts."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def stock() -> None:
    """Manage stock levels."""


@cli.group()
def product() -> None:
    """Manage the product catalog."""


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_merge)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_deliver)
order.add_command(order_list)
order.add_command(order_pay)
order.add_command(order_reorder)
order.add_command(order_ship)
order.add_command(order_show)
stock.add_command(stock_set)
stock.add_command(stock_show)
product.add_command(product_add)
product.add_command(product_add_variant)
product.add_command(product_list)
product.add_command(product_set_active)
