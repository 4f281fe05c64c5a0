"""CLI commands for inventory reports."""

from __future__ import annotations

import click

from catalog.application.inventory_stats import InventoryStatsHandler
from catalog.application.product_queries import ProductQueries
from catalog.domain.exceptions import DomainException
from catalog.infrastructure.bootstrap import product_store
from catalog.infrastructure.config import get_settings


@click.command("stats")
def inventory_stats() -> None:
    """Show inventory statistics."""
    try:
        handler = InventoryStatsHandler(
            store=product_store(),
            max_workers=get_settings().stats_workers,
        )
        stats = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{'Total products':<20} {stats.total_products:>10}")
    click.echo(f"{'Available':<20} {stats.available_products:>10}")
    click.echo(f"{'Out of stock':<20} {stats.out_of_stock_count:>10}")
    click.echo(f"{'Low stock':<20} {stats.low_stock_count:>10}")
    click.echo(f"{'Inventory value':<20} {'$' + format(stats.total_value, '.2f'):>10}")


@click.command("low-stock")
@click.option("--threshold", default=None, type=int, help="Upper stock bound (default from settings).")
def inventory_low_stock(threshold: int | None) -> None:
    """List available products that are running low."""
    if threshold is None:
        threshold = get_settings().low_stock_threshold

    try:
        queries = ProductQueries(store=product_store())
        products = queries.find_low_stock(threshold)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No low-stock products.")
        return

    click.echo(f"{'ID':<6} {'Product':<32} {'Stock':>6} {'Minimum':>8}")
    click.echo("-" * 55)
    for p in products:
        click.echo(f"{p.id:<6} {p.display_name:<32} {p.stock:>6} {p.minimum_stock:>8}")


@click.command("value")
def inventory_value() -> None:
    """Show the total value of available stock."""
    try:
        queries = ProductQueries(store=product_store())
        total = queries.get_total_inventory_value()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory value: ${total:.2f}")
