from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from decimal import Decimal
import datetime

from ...common.schemas import Money

# --- Category Schemas ---
class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Name of the category")

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100, description="New name of the category")

class CategoryResponse(CategoryBase):
    public_id: str = Field(..., description="Public unique identifier for the category (KSUID)")
    created_at: datetime.datetime = Field(..., description="Timestamp of when the category was created")
    updated_at: datetime.datetime = Field(..., description="Timestamp of when the category was last updated")

    model_config = ConfigDict(from_attributes=True)

# --- Product Schemas ---
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Name of the product")
    description: Optional[str] = Field(None, description="Optional description of the product")
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Unit price")
    category_name: str = Field(..., min_length=1, max_length=100, description="Category name; created if it does not exist")
    initial_quantity: Optional[int] = Field(None, ge=0, description="Opening stock; creates the inventory record when given")
    low_stock_threshold: Optional[int] = Field(None, ge=0, description="Low stock threshold for the inventory record")

class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255, description="New name of the product")
    description: Optional[str] = Field(None, description="New description of the product")
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2, description="New unit price")
    category_name: Optional[str] = Field(None, min_length=1, max_length=100, description="New category name; created if it does not exist")

class ProductResponse(BaseModel):
    public_id: str = Field(..., description="Public unique identifier for the product (KSUID)")
    name: str
    description: Optional[str] = None
    price: Money
    category_id: str
    category_name: str
    inventory_quantity: Optional[int] = None
    low_stock_threshold: Optional[int] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

# --- Stock Schemas ---
class InventoryStatus(BaseModel):
    product_id: str
    product_name: str
    product_description: Optional[str] = None
    product_price: Money
    category_name: str
    quantity: int
    low_stock_threshold: int
    is_low_stock: bool

class StockChange(BaseModel):
    change_quantity: int = Field(..., description="Quantity to add (positive) or remove (negative)")

class StockChangeResponse(BaseModel):
    product_id: str
    quantity: int
    low_stock_threshold: int
    is_low_stock: bool

class InventoryHistoryEntry(BaseModel):
    id: int
    product_id: str
    product_name: str
    change_quantity: int
    new_quantity: int
    changed_at: datetime.datetime
