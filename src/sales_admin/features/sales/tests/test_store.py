import datetime
from decimal import Decimal

import pytest
from tortoise.exceptions import OperationalError

from sales_admin.core.exceptions import UpstreamFailureError
from sales_admin.features.sales.models import Sale
from sales_admin.features.sales.schemas import DateRange, RevenueFilter, SalesFilter
from sales_admin.features.sales.store import TortoiseSalesStore, date_bounds

from .factories import utc


def test_date_bounds_end_is_inclusive():
    bounds = date_bounds(datetime.date(2024, 1, 1), datetime.date(2024, 1, 31))
    assert bounds == {
        "sale_date__gte": utc(2024, 1, 1),
        "sale_date__lt": utc(2024, 2, 1),
    }


def test_date_bounds_open_ended():
    assert date_bounds(None, None) == {}
    assert date_bounds(datetime.date(2024, 3, 1), None) == {"sale_date__gte": utc(2024, 3, 1)}


@pytest.mark.asyncio
async def test_fetch_sales_in_range_oldest_first(demo_data):
    store = TortoiseSalesStore()

    records = await store.fetch_sales(
        SalesFilter(start_date=datetime.date(2024, 1, 1), end_date=datetime.date(2024, 1, 31))
    )

    assert [r.sale_date.date() for r in records] == [
        datetime.date(2024, 1, 5),
        datetime.date(2024, 1, 6),
        datetime.date(2024, 1, 10),
        datetime.date(2024, 1, 20),
    ]
    assert sum(r.total_price for r in records) == Decimal("4425")
    assert sum(r.quantity for r in records) == 5


@pytest.mark.asyncio
async def test_fetch_sales_includes_whole_end_day(demo_data):
    records = await TortoiseSalesStore().fetch_sales(
        SalesFilter(start_date=datetime.date(2024, 5, 28), end_date=datetime.date(2024, 5, 28))
    )
    assert len(records) == 1
    assert records[0].sale_date == utc(2024, 5, 28, 9)


@pytest.mark.asyncio
async def test_fetch_sales_by_product_and_category(demo_data):
    store = TortoiseSalesStore()
    laptop = demo_data["products"]["Laptop Pro X"]

    laptop_sales = await store.fetch_sales(SalesFilter(product_id=laptop.public_id))
    electronics_sales = await store.fetch_sales(SalesFilter(category_name="ELEC"))

    assert len(laptop_sales) == 7
    assert len(electronics_sales) == 11
    assert sum(r.total_price for r in electronics_sales) == Decimal("17200")


@pytest.mark.asyncio
async def test_list_sales_newest_first_with_product_details(demo_data):
    details = await TortoiseSalesStore().list_sales(SalesFilter(category_name="books"))

    assert [d.sale_date.date() for d in details] == [
        datetime.date(2024, 4, 1),
        datetime.date(2024, 2, 25),
        datetime.date(2024, 1, 20),
    ]
    first = details[0]
    assert first.product_name == "The Great Novel"
    assert first.product_unit_price == Decimal("25.00")
    assert first.category_name == "Books"
    assert first.category_id == demo_data["categories"]["Books"].public_id


@pytest.mark.asyncio
async def test_sum_revenue_by_date_range(demo_data):
    store = TortoiseSalesStore()
    february = DateRange(start_date=datetime.date(2024, 2, 1), end_date=datetime.date(2024, 2, 29))

    assert await store.sum_revenue(RevenueFilter(date_range=february)) == Decimal("2850")


@pytest.mark.asyncio
async def test_sum_revenue_by_category(demo_data):
    store = TortoiseSalesStore()
    home_goods = demo_data["categories"]["Home Goods"]

    assert await store.sum_revenue(RevenueFilter(category_id=home_goods.public_id)) == Decimal("450")


@pytest.mark.asyncio
async def test_sum_revenue_without_matches_is_none(demo_data):
    store = TortoiseSalesStore()
    empty = DateRange(start_date=datetime.date(2030, 1, 1), end_date=datetime.date(2030, 12, 31))

    assert await store.sum_revenue(RevenueFilter(date_range=empty)) is None
    assert await store.sum_revenue(RevenueFilter(category_id="no-such-category")) is None


@pytest.mark.asyncio
async def test_find_category_name(demo_data):
    store = TortoiseSalesStore()
    books = demo_data["categories"]["Books"]

    assert await store.find_category_name(books.public_id) == "Books"
    assert await store.find_category_name("no-such-category") is None


@pytest.mark.asyncio
async def test_store_wraps_orm_failures(monkeypatch):
    def broken_filter(*args, **kwargs):
        raise OperationalError("database is locked")

    monkeypatch.setattr(Sale, "filter", broken_filter)

    with pytest.raises(UpstreamFailureError) as exc_info:
        await TortoiseSalesStore().sum_revenue(RevenueFilter())

    assert isinstance(exc_info.value.__cause__, OperationalError)


@pytest.mark.asyncio
async def test_fetch_sales_by_category_id(demo_data):
    home_goods = demo_data["categories"]["Home Goods"]

    records = await TortoiseSalesStore().fetch_sales(SalesFilter(category_id=home_goods.public_id))

    assert [r.total_price for r in records] == [Decimal("150.00"), Decimal("300.00")]


@pytest.mark.asyncio
async def test_sum_revenue_by_category_adds_every_sale(demo_data):
    store = TortoiseSalesStore()
    electronics = demo_data["categories"]["Electronics"]

    assert await store.sum_revenue(RevenueFilter(category_id=electronics.public_id)) == Decimal("17200")
