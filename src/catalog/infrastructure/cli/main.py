import logging

import click

from catalog.infrastructure.cli.inventory_commands import (
    inventory_low_stock,
    inventory_stats,
    inventory_value,
)
from catalog.infrastructure.cli.product_commands import (
    product_add,
    product_bulk_update,
    product_delete,
    product_list,
    product_show,
    product_stock,
    product_update,
)
from catalog.infrastructure.config import get_settings


@click.group()
def cli() -> None:
    """Wholesale product catalog"""
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def inventory() -> None:
    """Inventory reports."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_bulk_update)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_stock)
product.add_command(product_update)
inventory.add_command(inventory_low_stock)
inventory.add_command(inventory_stats)
inventory.add_command(inventory_value)
