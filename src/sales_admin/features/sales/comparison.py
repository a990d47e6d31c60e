"""
Revenue Comparison

Compares the total revenue of two subjects, either two date ranges or two
categories. Revenue sums and category lookups are supplied by the caller
(normally the sales store), so this module does no I/O of its own.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Awaitable, Callable, Optional

from ...core.exceptions import NotFoundError
from .schemas import (
    CategorySubject,
    ComparisonResult,
    ComparisonType,
    DateRange,
    Percent,
    PercentageChange,
    PeriodSubject,
    RevenueFilter,
    UndefinedBaseline,
)

logger = logging.getLogger(__name__)

RevenueSumFn = Callable[[RevenueFilter], Awaitable[Optional[Decimal]]]
CategoryNameFn = Callable[[str], Awaitable[Optional[str]]]

ZERO = Decimal("0")


def percentage_change(baseline: Decimal, other: Decimal, baseline_label: str) -> PercentageChange:
    """
    Relative change from ``baseline`` to ``other``, in percent.

    Both zero is no change. A zero baseline with a non-zero other side has
    no defined percentage and yields UndefinedBaseline instead of a number.
    """
    if baseline == ZERO:
        if other == ZERO:
            return Percent(value=ZERO)
        return UndefinedBaseline(reason=f"{baseline_label} revenue is zero")
    return Percent(value=(other - baseline) / baseline * 100)


async def _sum_both(sum_revenue: RevenueSumFn, first: RevenueFilter, second: RevenueFilter):
    # Independent queries; a failure in either fails the comparison.
    revenue1, revenue2 = await asyncio.gather(sum_revenue(first), sum_revenue(second))
    return revenue1 if revenue1 is not None else ZERO, revenue2 if revenue2 is not None else ZERO


async def compare_by_period(
    period1: DateRange,
    period2: DateRange,
    sum_revenue: RevenueSumFn,
) -> ComparisonResult:
    """
    Compares total revenue between two date ranges.

    Args:
        period1: The baseline range.
        period2: The range compared against the baseline.
        sum_revenue: Returns the revenue for a filter, or None when nothing matched.

    Returns:
        ComparisonResult with ``difference = revenue(period2) - revenue(period1)``.
    """
    revenue1, revenue2 = await _sum_both(
        sum_revenue, RevenueFilter(date_range=period1), RevenueFilter(date_range=period2)
    )
    logger.info(
        "Compared periods %s..%s (%s) and %s..%s (%s)",
        period1.start_date, period1.end_date, revenue1,
        period2.start_date, period2.end_date, revenue2,
    )
    return ComparisonResult(
        type=ComparisonType.PERIOD,
        subject1=PeriodSubject(start_date=period1.start_date, end_date=period1.end_date, revenue=revenue1),
        subject2=PeriodSubject(start_date=period2.start_date, end_date=period2.end_date, revenue=revenue2),
        difference=revenue2 - revenue1,
        percentage_change=percentage_change(revenue1, revenue2, "period1"),
    )


async def compare_by_category(
    category1_id: str,
    category2_id: str,
    sum_revenue: RevenueSumFn,
    lookup_name: CategoryNameFn,
) -> ComparisonResult:
    """
    Compares total revenue between two categories.

    Both categories are resolved before any revenue is summed.

    Raises:
        NotFoundError: If either category does not exist.
    """
    name1, name2 = await asyncio.gather(lookup_name(category1_id), lookup_name(category2_id))
    if name1 is None or name2 is None:
        logger.info("Category comparison rejected: %s -> %s, %s -> %s", category1_id, name1, category2_id, name2)
        raise NotFoundError("One or both categories not found.")

    revenue1, revenue2 = await _sum_both(
        sum_revenue, RevenueFilter(category_id=category1_id), RevenueFilter(category_id=category2_id)
    )
    logger.info("Compared categories %s (%s) and %s (%s)", name1, revenue1, name2, revenue2)
    return ComparisonResult(
        type=ComparisonType.CATEGORY,
        subject1=CategorySubject(id=category1_id, name=name1, revenue=revenue1),
        subject2=CategorySubject(id=category2_id, name=name2, revenue=revenue2),
        difference=revenue2 - revenue1,
        percentage_change=percentage_change(revenue1, revenue2, "category1"),
    )
