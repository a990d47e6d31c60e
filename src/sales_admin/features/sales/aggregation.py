"""
Revenue Aggregation

Buckets sale records into calendar periods and sums revenue and quantity
per bucket. All calendar arithmetic is done in UTC.
"""

import datetime
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from .schemas import Granularity, PeriodSummary, SaleRecord

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ONE_DAY = datetime.timedelta(days=1)


def to_utc(moment: datetime.datetime) -> datetime.datetime:
    """Returns ``moment`` in UTC. Naive datetimes are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=datetime.timezone.utc)
    return moment.astimezone(datetime.timezone.utc)


def start_of_day(day: datetime.date) -> datetime.datetime:
    return datetime.datetime.combine(day, datetime.time.min, tzinfo=datetime.timezone.utc)


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def week_number(sale_date: datetime.datetime, range_start: datetime.date) -> int:
    """
    1-indexed week of ``sale_date`` counted from midnight UTC of ``range_start``.

    The day count is the absolute distance rounded up to whole days, so a
    sale before the range start still lands in a positive week, and any
    part of a day counts as a full day (day 6 at noon is already week 2).
    """
    diff = abs(to_utc(sale_date) - start_of_day(range_start))
    diff_days = diff.days + (1 if diff.seconds or diff.microseconds else 0)
    return diff_days // 7 + 1


def period_key(
    sale_date: datetime.datetime,
    granularity: Granularity,
    range_start: datetime.date,
) -> str:
    """
    Computes the bucket label for a sale.

    Args:
        sale_date: When the sale happened.
        granularity: The bucketing unit.
        range_start: Start of the queried range; only used for weeks.

    Returns:
        ``YYYY-MM-DD``, ``Week N``, ``YYYY-MM`` or ``YYYY``.

    Raises:
        ValueError: If ``granularity`` is not a Granularity value.
    """
    moment = to_utc(sale_date)
    if granularity == Granularity.DAY:
        return moment.strftime("%Y-%m-%d")
    if granularity == Granularity.WEEK:
        return f"Week {week_number(moment, range_start)}"
    if granularity == Granularity.MONTH:
        return f"{moment.year:04d}-{moment.month:02d}"
    if granularity == Granularity.YEAR:
        return f"{moment.year:04d}"
    raise ValueError(f"Unsupported granularity: {granularity!r}")


class _Bucket:
    __slots__ = ("revenue", "quantity")

    def __init__(self):
        self.revenue = Decimal("0")
        self.quantity = 0


def aggregate(
    records: Iterable[SaleRecord],
    granularity: Granularity,
    range_start: datetime.date,
) -> List[PeriodSummary]:
    """
    Groups sale records into period buckets and sums each bucket.

    Revenue is accumulated exactly and rounded half-up to cents only once
    per bucket, on output. Buckets are returned in ascending string order of
    their keys. That order is chronological for day, month and year keys,
    but not for weeks past the ninth ("Week 10" sorts before "Week 2").

    Args:
        records: The sales to bucket; may be empty.
        granularity: day, week, month or year.
        range_start: Start date of the query, the origin for week numbers.

    Returns:
        One PeriodSummary per bucket that received at least one sale.
    """
    granularity = Granularity(granularity)
    buckets: Dict[str, _Bucket] = {}
    record_count = 0

    for record in records:
        key = period_key(record.sale_date, granularity, range_start)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = _Bucket()
        bucket.revenue += Decimal(record.total_price)
        bucket.quantity += record.quantity
        record_count += 1

    logger.debug(
        "Aggregated %d sale(s) into %d %s bucket(s)", record_count, len(buckets), granularity.value
    )

    return [
        PeriodSummary(
            period_key=key,
            total_revenue=round_money(buckets[key].revenue),
            total_quantity_sold=buckets[key].quantity,
        )
        for key in sorted(buckets)
    ]
