import asyncio
import datetime
import logging
from decimal import Decimal

import typer
from tortoise import Tortoise
from tortoise.transactions import in_transaction

from ..core.config import DATABASE_URL, tortoise_config
from ..core.exceptions import SalesAdminError
from ..core.logging_config import configure_logging
from ..features.inventory.models import Category, Inventory, InventoryHistory, Product
from ..features.sales.models import Sale
from ..features.sales import service as sales_service
from ..features.sales.store import TortoiseSalesStore

logger = logging.getLogger(__name__)


app = typer.Typer(name="sales-admin", help="CLI for managing Sales Admin data and running revenue reports.")


# Shared async context manager for database connection
class DBConnection:
    def __init__(self, db_url: str = DATABASE_URL):
        self.db_url = db_url

    async def __aenter__(self):
        await Tortoise.init(config=tortoise_config(self.db_url))
        await Tortoise.generate_schemas(safe=True) # Generate schema if it doesn't exist
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await Tortoise.close_connections()


def _utc(value: str) -> datetime.datetime:
    return datetime.datetime.fromisoformat(value).replace(tzinfo=datetime.timezone.utc)


# name, description, price, category, (quantity, low stock threshold)
DEMO_PRODUCTS = [
    ("Laptop Pro X", "Powerful laptop for professionals.", "1200.00", "Electronics", (50, 10)),
    ("Smartphone Z", "Latest smartphone with advanced features.", "800.00", "Electronics", (5, 10)),
    ("The Great Novel", "A captivating story.", "25.00", "Books", (100, 20)),
    ("Smart Coffee Maker", "Brew coffee with your voice.", "150.00", "Home Goods", (20, 5)),
]

# product name, total price, quantity, sale date (UTC)
DEMO_SALES = [
    ("Laptop Pro X", "1200.00", 1, "2024-01-05T10:00:00"),
    ("Laptop Pro X", "2400.00", 2, "2024-01-06T11:30:00"),
    ("Laptop Pro X", "1200.00", 1, "2024-02-10T14:00:00"),
    ("Laptop Pro X", "3600.00", 3, "2024-03-15T09:00:00"),
    ("Laptop Pro X", "1200.00", 1, "2024-04-20T16:00:00"),
    ("Laptop Pro X", "2400.00", 2, "2024-05-25T17:00:00"),
    ("Laptop Pro X", "1200.00", 1, "2024-05-29T10:00:00"),
    ("Smartphone Z", "800.00", 1, "2024-01-10T12:00:00"),
    ("Smartphone Z", "1600.00", 2, "2024-02-12T13:00:00"),
    ("Smartphone Z", "800.00", 1, "2024-03-18T10:00:00"),
    ("Smartphone Z", "800.00", 1, "2024-05-28T09:00:00"),
    ("The Great Novel", "25.00", 1, "2024-01-20T15:00:00"),
    ("The Great Novel", "50.00", 2, "2024-02-25T16:00:00"),
    ("The Great Novel", "25.00", 1, "2024-04-01T11:00:00"),
    ("Smart Coffee Maker", "150.00", 1, "2024-03-01T10:00:00"),
    ("Smart Coffee Maker", "300.00", 2, "2024-05-05T14:00:00"),
]


async def seed_demo_data() -> dict:
    """Clears every table and loads the demo catalogue, stock and sales. Returns row counts."""
    async with in_transaction() as conn:
        for model in (InventoryHistory, Sale, Inventory, Product, Category):
            await model.all().using_db(conn).delete()

        categories = {}
        products = {}
        for name, description, price, category_name, (quantity, threshold) in DEMO_PRODUCTS:
            if category_name not in categories:
                categories[category_name] = await Category.create(name=category_name, using_db=conn)
            product = await Product.create(
                name=name,
                description=description,
                price=Decimal(price),
                category=categories[category_name],
                using_db=conn,
            )
            await Inventory.create(
                product=product, quantity=quantity, low_stock_threshold=threshold, using_db=conn
            )
            await InventoryHistory.create(
                product=product, change_quantity=quantity, new_quantity=quantity, using_db=conn
            )
            products[name] = product

        for product_name, total_price, quantity, sale_date in DEMO_SALES:
            await Sale.create(
                product=products[product_name],
                total_price=Decimal(total_price),
                quantity=quantity,
                sale_date=_utc(sale_date),
                using_db=conn,
            )

    return {"categories": len(categories), "products": len(products), "sales": len(DEMO_SALES)}


@app.command("seed")
def seed_command(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask before clearing existing data."),
):
    """Clears the database and loads demo categories, products, stock and sales."""
    if not yes:
        typer.confirm("This deletes all categories, products, stock and sales. Continue?", abort=True)
    asyncio.run(_seed())


async def _seed():
    async with DBConnection():
        counts = await seed_demo_data()
        typer.secho(
            f"Seeded {counts['categories']} categories, {counts['products']} products and {counts['sales']} sales.",
            fg=typer.colors.GREEN,
        )


@app.command("revenue")
def revenue_command(
    period: str = typer.Option("month", help="Bucket size: day, week, month or year."),
    start_date: datetime.datetime = typer.Option(..., formats=["%Y-%m-%d"], help="First day (inclusive)."),
    end_date: datetime.datetime = typer.Option(..., formats=["%Y-%m-%d"], help="Last day (inclusive)."),
    category_name: str = typer.Option(None, help="Only categories whose name contains this text."),
):
    """Prints revenue and quantity sold per period."""
    asyncio.run(_revenue(period, start_date.date(), end_date.date(), category_name))


async def _revenue(period: str, start_date: datetime.date, end_date: datetime.date, category_name):
    async with DBConnection():
        try:
            summaries = await sales_service.analyze_revenue(
                TortoiseSalesStore(), period, start_date, end_date, category_name=category_name
            )
        except SalesAdminError as e:
            typer.secho(f"Error: {e.message}", fg=typer.colors.RED)
            raise typer.Exit(code=1)

        if not summaries:
            typer.secho("No sales in this range.", fg=typer.colors.YELLOW)
            return
        for summary in summaries:
            typer.echo(f"{summary.period_key:<12} {summary.total_revenue:>14} {summary.total_quantity_sold:>8}")


@app.command("compare-periods")
def compare_periods_command(
    period1_start: datetime.datetime = typer.Argument(..., formats=["%Y-%m-%d"]),
    period1_end: datetime.datetime = typer.Argument(..., formats=["%Y-%m-%d"]),
    period2_start: datetime.datetime = typer.Argument(..., formats=["%Y-%m-%d"]),
    period2_end: datetime.datetime = typer.Argument(..., formats=["%Y-%m-%d"]),
):
    """Compares revenue of two date ranges."""
    asyncio.run(
        _compare_periods(
            period1_start.date(), period1_end.date(), period2_start.date(), period2_end.date()
        )
    )


async def _compare_periods(period1_start, period1_end, period2_start, period2_end):
    async with DBConnection():
        result = await sales_service.compare_revenue(
            TortoiseSalesStore(),
            "period",
            period1_start=period1_start,
            period1_end=period1_end,
            period2_start=period2_start,
            period2_end=period2_end,
        )
        typer.echo(f"Period 1 revenue: {result.subject1.revenue}")
        typer.echo(f"Period 2 revenue: {result.subject2.revenue}")
        typer.echo(f"Difference:       {result.difference}")
        change = result.percentage_change
        if change.kind == "percent":
            typer.echo(f"Change:           {change.value:.2f}%")
        else:
            typer.secho(f"Change:           undefined ({change.reason})", fg=typer.colors.YELLOW)


@app.command("test-db-connection")
def test_db_connection_command_sync():
    """Tests the database connection and prints row counts."""
    asyncio.run(test_db_connection_command())


async def test_db_connection_command():
    async with DBConnection():
        typer.echo("Successfully connected to the database.")
        for model in (Category, Product, Inventory, Sale):
            typer.echo(f"{model.__name__}: {await model.all().count()} row(s)")


def main():
    configure_logging()
    app()


if __name__ == "__main__":
    main()
