import pytest_asyncio

from sales_admin.cli.main import seed_demo_data
from sales_admin.features.inventory.models import Category, Product


@pytest_asyncio.fixture
async def demo_data() -> dict:
    """
    The demo catalogue: Electronics (Laptop Pro X, Smartphone Z), Books
    (The Great Novel) and Home Goods (Smart Coffee Maker), with 16 sales
    between 2024-01-05 and 2024-05-29.

    Monthly revenue: Jan 4425, Feb 2850, Mar 4550, Apr 1225, May 4700.
    Category revenue: Electronics 17200, Books 100, Home Goods 450.
    """
    await seed_demo_data()
    return {
        "categories": {c.name: c for c in await Category.all()},
        "products": {p.name: p for p in await Product.all()},
    }
