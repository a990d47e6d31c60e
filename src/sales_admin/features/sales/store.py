"""
Sales data store.

The revenue engine reads sales only through the SalesStore protocol.
TortoiseSalesStore is the implementation backed by the application's
Tortoise ORM models; tests can pass any object with the same methods.
"""

import datetime
import logging
from decimal import Decimal
from typing import List, Optional, Protocol

from tortoise.exceptions import BaseORMException
from tortoise.expressions import Subquery
from tortoise.functions import Sum

from ...core.exceptions import UpstreamFailureError
from ..inventory.models import Category, Product
from .aggregation import start_of_day
from .models import Sale
from .schemas import RevenueFilter, SaleDetail, SaleRecord, SalesFilter

logger = logging.getLogger(__name__)


class SalesStore(Protocol):
    async def fetch_sales(self, sales_filter: SalesFilter) -> List[SaleRecord]: ...

    async def list_sales(self, sales_filter: SalesFilter) -> List[SaleDetail]: ...

    async def sum_revenue(self, revenue_filter: RevenueFilter) -> Optional[Decimal]: ...

    async def find_category_name(self, category_id: str) -> Optional[str]: ...


def date_bounds(
    start_date: Optional[datetime.date], end_date: Optional[datetime.date]
) -> dict:
    """
    Tortoise filter kwargs for an inclusive date range on ``sale_date``.

    The end date is inclusive, so the upper bound is midnight of the next day.
    """
    filters = {}
    if start_date:
        filters["sale_date__gte"] = start_of_day(start_date)
    if end_date:
        filters["sale_date__lt"] = start_of_day(end_date + datetime.timedelta(days=1))
    return filters


def _sales_filters(sales_filter: SalesFilter) -> dict:
    filters = date_bounds(sales_filter.start_date, sales_filter.end_date)
    if sales_filter.product_id:
        filters["product__public_id"] = sales_filter.product_id
    if sales_filter.category_id:
        filters["product__category__public_id"] = sales_filter.category_id
    if sales_filter.category_name:
        filters["product__category__name__icontains"] = sales_filter.category_name
    return filters


class TortoiseSalesStore:
    """SalesStore over the Sale, Product and Category tables."""

    async def fetch_sales(self, sales_filter: SalesFilter) -> List[SaleRecord]:
        try:
            rows = (
                await Sale.filter(**_sales_filters(sales_filter))
                .order_by("sale_date")
                .values("sale_date", "total_price", "quantity")
            )
        except BaseORMException as e:
            logger.error(f"Error fetching sales with {sales_filter}: {e}", exc_info=True)
            raise UpstreamFailureError("Failed to fetch sales.") from e
        return [SaleRecord(**row) for row in rows]

    async def list_sales(self, sales_filter: SalesFilter) -> List[SaleDetail]:
        try:
            sales = (
                await Sale.filter(**_sales_filters(sales_filter))
                .prefetch_related("product__category")
                .order_by("-sale_date")
            )
        except BaseORMException as e:
            logger.error(f"Error listing sales with {sales_filter}: {e}", exc_info=True)
            raise UpstreamFailureError("Failed to fetch sales.") from e
        return [
            SaleDetail(
                sale_id=sale.public_id,
                total_price=sale.total_price,
                quantity=sale.quantity,
                sale_date=sale.sale_date,
                product_id=sale.product.public_id,
                product_name=sale.product.name,
                product_unit_price=sale.product.price,
                category_id=sale.product.category.public_id,
                category_name=sale.product.category.name,
            )
            for sale in sales
        ]

    async def sum_revenue(self, revenue_filter: RevenueFilter) -> Optional[Decimal]:
        filters = {}
        if revenue_filter.date_range is not None:
            filters.update(
                date_bounds(revenue_filter.date_range.start_date, revenue_filter.date_range.end_date)
            )
        if revenue_filter.category_id is not None:
            # A joined filter would make Tortoise group the SUM per sale row.
            filters["product_id__in"] = Subquery(
                Product.filter(category__public_id=revenue_filter.category_id).values("id")
            )

        try:
            rows = await Sale.filter(**filters).annotate(total=Sum("total_price")).values("total")
        except BaseORMException as e:
            logger.error(f"Error summing revenue with {revenue_filter}: {e}", exc_info=True)
            raise UpstreamFailureError("Failed to sum revenue.") from e

        total = rows[0]["total"] if rows else None
        if total is None:
            return None
        return total if isinstance(total, Decimal) else Decimal(str(total))

    async def find_category_name(self, category_id: str) -> Optional[str]:
        try:
            category = await Category.get_or_none(public_id=category_id)
        except BaseORMException as e:
            logger.error(f"Error looking up category {category_id}: {e}", exc_info=True)
            raise UpstreamFailureError("Failed to look up category.") from e
        return category.name if category else None
