"""Sales and Revenue Reporting Schemas

This module defines the Pydantic models used by the sales reporting
endpoints and by the revenue engine behind them:

1. Sale records and sale listings
2. Period-bucketed revenue summaries
3. Revenue comparisons between two periods or two categories

Monetary values are held as Decimal so sums are exact, and serialize as
JSON numbers."""
import datetime
import enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ...common.schemas import Money


class Granularity(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class ComparisonType(str, enum.Enum):
    PERIOD = "period"
    CATEGORY = "category"


# --- Store inputs ---
class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_date: datetime.date
    end_date: datetime.date = Field(..., description="Inclusive end of the range")


class SalesFilter(BaseModel):
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    product_id: Optional[str] = Field(None, description="Public ID of the product")
    category_id: Optional[str] = Field(None, description="Public ID of the category")
    category_name: Optional[str] = Field(None, description="Case-insensitive substring of the category name")


class RevenueFilter(BaseModel):
    date_range: Optional[DateRange] = None
    category_id: Optional[str] = Field(None, description="Public ID of the category")


# --- Sale records ---
class SaleRecord(BaseModel):
    """A single sale as seen by the revenue engine. Never mutated once read."""

    model_config = ConfigDict(frozen=True)

    sale_date: datetime.datetime
    total_price: Money
    quantity: int = Field(..., gt=0)


class SaleDetail(BaseModel):
    sale_id: str
    total_price: Money
    quantity: int
    sale_date: datetime.datetime
    product_id: str
    product_name: str
    product_unit_price: Money
    category_id: str
    category_name: str


# --- Revenue by period ---
class PeriodSummary(BaseModel):
    period_key: str
    total_revenue: Money
    total_quantity_sold: int = Field(..., ge=0)


# --- Revenue comparison ---
class PeriodSubject(BaseModel):
    start_date: datetime.date
    end_date: datetime.date
    revenue: Money


class CategorySubject(BaseModel):
    id: str
    name: str
    revenue: Money


class Percent(BaseModel):
    kind: Literal["percent"] = "percent"
    value: Money


class UndefinedBaseline(BaseModel):
    """The baseline revenue is zero, so no percentage can be computed."""

    kind: Literal["undefined_baseline"] = "undefined_baseline"
    reason: str


PercentageChange = Annotated[Union[Percent, UndefinedBaseline], Field(discriminator="kind")]


class ComparisonResult(BaseModel):
    type: ComparisonType
    subject1: Union[PeriodSubject, CategorySubject]
    subject2: Union[PeriodSubject, CategorySubject]
    difference: Money
    percentage_change: PercentageChange
