"""
Sales Service Module

Request-level operations behind the sales endpoints: listing sales,
revenue by period and revenue comparisons. Parameters are validated here,
before any store query is issued; the calculations themselves live in
``aggregation`` and ``comparison``.
"""

import datetime
import logging
from typing import List, Optional

from ...core.exceptions import InvalidArgumentError
from . import aggregation, comparison
from .schemas import (
    ComparisonResult,
    ComparisonType,
    DateRange,
    Granularity,
    PeriodSummary,
    SaleDetail,
    SalesFilter,
)
from .store import SalesStore

logger = logging.getLogger(__name__)


def _parse_choice(enum_cls, value: Optional[str], message: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidArgumentError(message)


async def list_sales(store: SalesStore, sales_filter: SalesFilter) -> List[SaleDetail]:
    """
    Lists sales, newest first.

    Args:
        store: The sales store to read from.
        sales_filter: Optional date range, product and category name filters.
    """
    return await store.list_sales(sales_filter)


async def analyze_revenue(
    store: SalesStore,
    period: Optional[str],
    start_date: Optional[datetime.date],
    end_date: Optional[datetime.date],
    product_id: Optional[str] = None,
    category_id: Optional[str] = None,
    category_name: Optional[str] = None,
) -> List[PeriodSummary]:
    """
    Revenue and quantity per day, week, month or year within a date range.

    Args:
        store: The sales store to read from.
        period: One of day, week, month, year.
        start_date: First day of the range (inclusive). Week numbers count from here.
        end_date: Last day of the range (inclusive).
        product_id: Optional public ID of a product to restrict to.
        category_id: Optional public ID of a category to restrict to.
        category_name: Optional case-insensitive category name substring.

    Returns:
        PeriodSummary list ordered by period key.

    Raises:
        InvalidArgumentError: If ``period`` is missing or unknown, or a date is missing.
    """
    granularity = _parse_choice(
        Granularity,
        period,
        'Invalid or missing "period" parameter. Must be one of: day, week, month, year.',
    )
    if not start_date or not end_date:
        raise InvalidArgumentError("start_date and end_date are required for revenue analysis.")

    records = await store.fetch_sales(
        SalesFilter(
            start_date=start_date,
            end_date=end_date,
            product_id=product_id,
            category_id=category_id,
            category_name=category_name,
        )
    )
    logger.info(f"Analyzing {len(records)} sale(s) by {granularity.value} from {start_date} to {end_date}")
    return aggregation.aggregate(records, granularity, start_date)


async def compare_revenue(
    store: SalesStore,
    comparison_type: Optional[str],
    period1_start: Optional[datetime.date] = None,
    period1_end: Optional[datetime.date] = None,
    period2_start: Optional[datetime.date] = None,
    period2_end: Optional[datetime.date] = None,
    category1_id: Optional[str] = None,
    category2_id: Optional[str] = None,
) -> ComparisonResult:
    """
    Compares revenue across two periods or two categories.

    Raises:
        InvalidArgumentError: If ``comparison_type`` is unknown or a subject is incomplete.
        NotFoundError: If a category comparison references an unknown category.
    """
    comparison_type = _parse_choice(
        ComparisonType,
        comparison_type,
        'Invalid or missing "type" parameter. Must be "period" or "category".',
    )

    if comparison_type == ComparisonType.PERIOD:
        if not (period1_start and period1_end and period2_start and period2_end):
            raise InvalidArgumentError(
                "For period comparison, period1_start, period1_end, period2_start, and period2_end are required."
            )
        return await comparison.compare_by_period(
            DateRange(start_date=period1_start, end_date=period1_end),
            DateRange(start_date=period2_start, end_date=period2_end),
            store.sum_revenue,
        )

    if not category1_id or not category2_id:
        raise InvalidArgumentError("For category comparison, category1_id and category2_id are required.")
    return await comparison.compare_by_category(
        category1_id, category2_id, store.sum_revenue, store.find_category_name
    )
