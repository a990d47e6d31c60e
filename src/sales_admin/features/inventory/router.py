"""API routes for managing categories, products and stock levels."""
from fastapi import APIRouter, status, Query
from typing import List

from .schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    InventoryHistoryEntry,
    InventoryStatus,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    StockChange,
    StockChangeResponse,
)
from . import service

router = APIRouter(
    prefix="/inventory",
    tags=["Inventory", "Products", "Categories"],
    responses={404: {"description": "Not found"}},
)


# --- Category Endpoints ---
@router.post(
    "/categories/",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new category",
    tags=["Categories"],
)
async def create_category(category_in: CategoryCreate):
    return await service.create_category(category_in)


@router.get(
    "/categories/",
    response_model=List[CategoryResponse],
    summary="List all categories",
    tags=["Categories"],
)
async def list_categories():
    return await service.list_categories()


@router.get(
    "/categories/{category_public_id}",
    response_model=CategoryResponse,
    summary="Get a specific category",
    tags=["Categories"],
)
async def get_category(category_public_id: str):
    return await service.get_category(category_public_id)


@router.put(
    "/categories/{category_public_id}",
    response_model=CategoryResponse,
    summary="Update a category",
    tags=["Categories"],
)
async def update_category(category_public_id: str, category_in: CategoryUpdate):
    return await service.update_category(category_public_id, category_in)


@router.delete(
    "/categories/{category_public_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    tags=["Categories"],
)
async def delete_category(category_public_id: str):
    await service.delete_category(category_public_id)
    return None


# --- Product Endpoints ---
@router.post(
    "/products/",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new product, creating its category and opening stock if needed",
    tags=["Products"],
)
async def register_product(product_in: ProductCreate):
    return await service.register_product(product_in)


@router.get(
    "/products/",
    response_model=List[ProductResponse],
    summary="List all products with category and stock",
    tags=["Products"],
)
async def list_products():
    return await service.list_products()


@router.get(
    "/products/{product_public_id}",
    response_model=ProductResponse,
    summary="Get a specific product",
    tags=["Products"],
)
async def get_product(product_public_id: str):
    return await service.get_product(product_public_id)


@router.put(
    "/products/{product_public_id}",
    response_model=ProductResponse,
    summary="Update a product",
    tags=["Products"],
)
async def update_product(product_public_id: str, product_in: ProductUpdate):
    return await service.update_product(product_public_id, product_in)


@router.delete(
    "/products/{product_public_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    tags=["Products"],
)
async def delete_product(product_public_id: str):
    await service.delete_product(product_public_id)
    return None


# --- Stock Endpoints ---
@router.get(
    "/stock/",
    response_model=List[InventoryStatus],
    summary="Current stock levels",
    tags=["Inventory"],
)
async def get_inventory_status(
    low_stock_only: bool = Query(False, description="Only items at or below their low stock threshold"),
):
    return await service.get_inventory_status(low_stock_only=low_stock_only)


@router.put(
    "/stock/{product_public_id}",
    response_model=StockChangeResponse,
    summary="Add or remove stock for a product",
    tags=["Inventory"],
)
async def update_stock(product_public_id: str, change: StockChange):
    return await service.update_stock(product_public_id, change)


@router.get(
    "/stock/{product_public_id}/history",
    response_model=List[InventoryHistoryEntry],
    summary="Stock change history for a product",
    tags=["Inventory"],
)
async def get_stock_history(product_public_id: str):
    return await service.get_stock_history(product_public_id)
