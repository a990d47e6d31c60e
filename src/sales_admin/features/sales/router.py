"""API routes for sales listing and revenue reports."""
import datetime
import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query

from .schemas import ComparisonResult, PeriodSummary, SaleDetail, SalesFilter
from .store import SalesStore, TortoiseSalesStore
from . import service as sales_service

logger = logging.getLogger(__name__)


def get_sales_store() -> SalesStore:
    """Store dependency; tests override it with app.dependency_overrides."""
    return TortoiseSalesStore()


StoreDep = Annotated[SalesStore, Depends(get_sales_store)]

router = APIRouter(
    prefix="/sales",
    tags=["Sales"],
    responses={
        400: {"description": "Missing or invalid parameters"},
        404: {"description": "Not found"},
    },
)


@router.get(
    "/",
    response_model=List[SaleDetail],
    summary="List sales, optionally filtered by date range, product or category",
)
async def list_sales(
    store: StoreDep,
    sales_filter: SalesFilter = Depends(),  # Injects query params from SalesFilter
):
    return await sales_service.list_sales(store, sales_filter)


@router.get(
    "/revenue",
    response_model=List[PeriodSummary],
    summary="Revenue per day, week, month or year within a date range",
)
async def analyze_revenue(
    store: StoreDep,
    period: Optional[str] = Query(None, description="day, week, month or year"),
    start_date: Optional[datetime.date] = Query(None, description="Start date (YYYY-MM-DD)"),
    end_date: Optional[datetime.date] = Query(None, description="End date, inclusive (YYYY-MM-DD)"),
    product_id: Optional[str] = Query(None, description="Public ID of the product to filter by"),
    category_id: Optional[str] = Query(None, description="Public ID of the category to filter by"),
    category_name: Optional[str] = Query(None, description="Case-insensitive category name filter"),
):
    return await sales_service.analyze_revenue(
        store,
        period,
        start_date,
        end_date,
        product_id=product_id,
        category_id=category_id,
        category_name=category_name,
    )


@router.get(
    "/revenue/compare",
    response_model=ComparisonResult,
    summary="Compare revenue across two periods or two categories",
)
async def compare_revenue(
    store: StoreDep,
    type: Optional[str] = Query(None, description='"period" or "category"'),
    period1_start: Optional[datetime.date] = Query(None),
    period1_end: Optional[datetime.date] = Query(None),
    period2_start: Optional[datetime.date] = Query(None),
    period2_end: Optional[datetime.date] = Query(None),
    category1_id: Optional[str] = Query(None, description="Public ID of the baseline category"),
    category2_id: Optional[str] = Query(None, description="Public ID of the compared category"),
):
    return await sales_service.compare_revenue(
        store,
        type,
        period1_start=period1_start,
        period1_end=period1_end,
        period2_start=period2_start,
        period2_end=period2_end,
        category1_id=category1_id,
        category2_id=category2_id,
    )
