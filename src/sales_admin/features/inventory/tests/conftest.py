from decimal import Decimal

import pytest_asyncio
from sales_admin.features.inventory.models import Category, Inventory, Product


@pytest_asyncio.fixture
async def default_category() -> Category:
    """A default category that can be used in tests."""
    return await Category.create(name="Default Category")


@pytest_asyncio.fixture
async def another_category() -> Category:
    """Another category that can be used in tests."""
    return await Category.create(name="Another Category")


@pytest_asyncio.fixture
async def product_factory(default_category: Category):
    """A factory to create products, with an inventory record unless quantity is None."""

    async def _factory(
        name: str,
        price: str = "100.00",
        quantity: int | None = 10,
        low_stock_threshold: int = 5,
        category: Category = default_category,
    ):
        product = await Product.create(name=name, price=Decimal(price), category=category)
        if quantity is not None:
            await Inventory.create(product=product, quantity=quantity, low_stock_threshold=low_stock_threshold)
        return product

    return _factory


@pytest_asyncio.fixture
async def sample_products(product_factory):
    """Three products: one plentiful, one at its threshold, one without stock tracking."""
    return [
        await product_factory(name="Sample Product A", quantity=50),
        await product_factory(name="Sample Product B", quantity=5),
        await product_factory(name="Sample Product C", quantity=None),
    ]
