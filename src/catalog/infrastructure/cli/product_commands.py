"""CLI commands for the Product aggregate."""

from __future__ import annotations

import json

import click

from catalog.application.bulk_update import BulkUpdateHandler
from catalog.application.create_product import CreateProductHandler
from catalog.application.delete_product import DeleteProductHandler
from catalog.application.dto import product_to_dict
from catalog.application.product_queries import ProductQueries
from catalog.application.show_product import ShowProductHandler
from catalog.application.update_product import UpdateProductHandler
from catalog.application.update_stock import UpdateStockHandler
from catalog.domain.exceptions import DomainException
from catalog.domain.model.product import Grade, Product, ProductStatus
from catalog.infrastructure.bootstrap import product_store

_GRADES = click.Choice([g.value for g in Grade])
_STATUSES = click.Choice([s.value for s in ProductStatus])


def _parse_assignments(raw: tuple[str, ...]) -> dict[str, str]:
    """Parse ('price=90', 'status=SOLD OUT') into a field dict."""
    changes: dict[str, str] = {}
    for pair in raw:
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid assignment '{pair}'. Expected 'field=value'."
            )
        name, value = pair.split("=", 1)
        changes[name.strip().replace("-", "_")] = value
    return changes


def _display_products(products: list[Product]) -> None:
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Product':<32} {'Status':<12} {'Stock':>6} {'Price':>12}")
    click.echo("-" * 72)
    for p in products:
        price = f"{p.price}{p.unit_label}"
        click.echo(
            f"{p.id:<6} {p.display_name:<32} {p.status.value:<12} {p.stock:>6} {price:>12}"
        )


@click.command("add")
@click.option("--grade", required=True, type=_GRADES, help="Product grade.")
@click.option("--strain", required=True, help="Strain name.")
@click.option("--price", required=True, help="Price (e.g. 1200.00).")
@click.option("--cost-basis", default=None, help="Cost basis (e.g. 950.00).")
@click.option("--stock", default=0, type=int, show_default=True, help="Units in stock.")
@click.option("--status", default=None, type=_STATUSES, help="Initial status.")
@click.option("--type", "strain_type", default=None, help="Indica, Sativa, Hybrid or Concentrate.")
@click.option("--thca", default=None, help="THCA potency percentage.")
@click.option("--photo", default=None, help="Photo URL.")
@click.option("--tags", default=None, help="Comma-separated tags.")
@click.option("--featured", is_flag=True, default=False, help="Feature this product.")
@click.option("--modified-by", default=None, help="Editor email address.")
def product_add(
    grade: str,
    strain: str,
    price: str,
    cost_basis: str | None,
    stock: int,
    status: str | None,
    strain_type: str | None,
    thca: str | None,
    photo: str | None,
    tags: str | None,
    featured: bool,
    modified_by: str | None,
) -> None:
    """Add a new product to the catalog."""
    fields = {
        "grade": grade,
        "strain": strain,
        "price": price,
        "cost_basis": cost_basis,
        "stock": stock,
        "status": status,
        "type": strain_type,
        "thca": thca,
        "photo": photo,
        "tags": tags,
        "featured": featured,
        "modified_by": modified_by,
    }
    # Leave unset options to the product defaults.
    fields = {name: value for name, value in fields.items() if value is not None}

    try:
        handler = CreateProductHandler(store=product_store())
        product = handler.handle(fields)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.display_name}' added at {product.price} (slug={product.slug})")


@click.command("show")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--public", is_flag=True, default=False, help="Hide cost basis and editor.")
def product_show(product_id: int, public: bool) -> None:
    """Show a product as JSON, including derived fields."""
    try:
        handler = ShowProductHandler(store=product_store())
        product = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(json.dumps(product_to_dict(product, hide_internal=public), indent=2))


@click.command("list")
@click.option("--grade", default=None, type=_GRADES, help="Only this grade.")
@click.option("--status", default=None, type=_STATUSES, help="Only this status.")
@click.option("--search", default=None, help="Strain name contains (case-insensitive).")
@click.option("--available", is_flag=True, default=False, help="Only orderable products.")
def product_list(grade: str | None, status: str | None, search: str | None, available: bool) -> None:
    """List products in the catalog."""
    if sum(bool(opt) for opt in (grade, status, search, available)) > 1:
        raise click.UsageError("Use at most one of --grade, --status, --search, --available.")

    try:
        queries = ProductQueries(store=product_store())
        if grade:
            products = queries.find_by_grade(Grade(grade))
        elif status:
            products = queries.find_by_status(ProductStatus(status))
        elif search:
            products = queries.search_by_strain(search)
        elif available:
            products = queries.find_available()
        else:
            products = queries.list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_products(products)


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--set", "assignments", multiple=True, required=True, help="Field assignment, e.g. price=90.")
def product_update(product_id: int, assignments: tuple[str, ...]) -> None:
    """Update product fields."""
    changes = _parse_assignments(assignments)

    try:
        handler = UpdateProductHandler(store=product_store())
        product = handler.handle(product_id, changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} updated ({', '.join(sorted(changes))})")


@click.command("stock")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New stock level.")
def product_stock(product_id: int, quantity: int) -> None:
    """Set the stock level (status follows automatically)."""
    try:
        handler = UpdateStockHandler(store=product_store())
        product = handler.handle(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} stock={product.stock} status={product.status.value}")


@click.command("delete")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_delete(product_id: int) -> None:
    """Delete a product (soft delete)."""
    try:
        handler = DeleteProductHandler(store=product_store())
        handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} deleted.")


@click.command("bulk-update")
@click.option(
    "--file", "updates_file", required=True, type=click.File("r", encoding="utf-8"),
    help="JSON list of objects, each with an 'id' and the fields to change.",
)
def product_bulk_update(updates_file) -> None:
    """Update many products from a JSON file."""
    try:
        updates = json.load(updates_file)
    except ValueError as exc:
        raise click.BadParameter(f"Invalid JSON: {exc}", param_hint="--file")
    if not isinstance(updates, list):
        raise click.BadParameter("Expected a JSON list of updates.", param_hint="--file")

    try:
        handler = BulkUpdateHandler(store=product_store())
        products = handler.handle(updates)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{len(products)} products updated.")
