import logging
from typing import List

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from ...core.config import DEFAULT_LOW_STOCK_THRESHOLD
from ...core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from .models import Category, Inventory, InventoryHistory, Product
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

logger = logging.getLogger(__name__)


def _to_category_response(category: Category) -> CategoryResponse:
    """Converts a Category model instance to a CategoryResponse schema."""
    return CategoryResponse.model_validate(category)


async def create_category(category_in: CategoryCreate) -> CategoryResponse:
    """
    Creates a new category.

    Args:
        category_in: The data for the new category.

    Returns:
        The created category.
    """
    try:
        category = await Category.create(**category_in.model_dump())
    except IntegrityError as e:
        logger.error(f"Error creating category: {e}", exc_info=True)
        raise ConflictError(f"A category named '{category_in.name}' already exists.")
    return _to_category_response(category)


async def list_categories() -> List[CategoryResponse]:
    categories = await Category.all().order_by("name")
    return [_to_category_response(cat) for cat in categories]


async def _get_category_or_404(category_public_id: str) -> Category:
    category = await Category.get_or_none(public_id=category_public_id)
    if not category:
        raise NotFoundError("Category not found")
    return category


async def get_category(category_public_id: str) -> CategoryResponse:
    return _to_category_response(await _get_category_or_404(category_public_id))


async def update_category(
    category_public_id: str, category_in: CategoryUpdate
) -> CategoryResponse:
    """
    Updates a category.

    Args:
        category_public_id: The public ID of the category to update.
        category_in: The new data for the category.

    Returns:
        The updated category.
    """
    category = await _get_category_or_404(category_public_id)
    update_data = category_in.model_dump(exclude_unset=True)
    if not update_data:
        raise InvalidArgumentError("No fields provided for update.")
    for key, value in update_data.items():
        setattr(category, key, value)
    try:
        await category.save()
    except IntegrityError as e:
        logger.error(f"Error updating category: {e}", exc_info=True)
        raise ConflictError(f"A category named '{category_in.name}' already exists.")
    return _to_category_response(category)


async def delete_category(category_public_id: str):
    """
    Deletes a category. Categories that still have products cannot be deleted.
    """
    category = await _get_category_or_404(category_public_id)
    if await Product.filter(category_id=category.id).exists():
        raise ConflictError("Category still has products and cannot be deleted.")
    await category.delete()
    return None


def _to_product_response(product: Product) -> ProductResponse:
    """Converts a Product with its category and inventory fetched to a ProductResponse."""
    inventory = product.inventory
    return ProductResponse(
        public_id=product.public_id,
        name=product.name,
        description=product.description,
        price=product.price,
        category_id=product.category.public_id,
        category_name=product.category.name,
        inventory_quantity=inventory.quantity if inventory else None,
        low_stock_threshold=inventory.low_stock_threshold if inventory else None,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


async def _get_product_or_404(product_public_id: str) -> Product:
    product = await Product.get_or_none(public_id=product_public_id)
    if not product:
        raise NotFoundError("Product not found")
    await product.fetch_related("category", "inventory")
    return product


async def list_products() -> List[ProductResponse]:
    products = await Product.all().prefetch_related("category", "inventory").order_by("name")
    return [_to_product_response(p) for p in products]


async def get_product(product_public_id: str) -> ProductResponse:
    return _to_product_response(await _get_product_or_404(product_public_id))


async def register_product(product_in: ProductCreate) -> ProductResponse:
    """
    Registers a new product.

    The category is looked up by name and created when missing. When an
    initial quantity is given, the inventory record and its first history
    entry are created in the same transaction.

    Args:
        product_in: The data for the new product.

    Returns:
        The created product.
    """
    try:
        async with in_transaction() as conn:
            category, _ = await Category.get_or_create(name=product_in.category_name, using_db=conn)
            product = await Product.create(
                name=product_in.name,
                description=product_in.description,
                price=product_in.price,
                category=category,
                using_db=conn,
            )
            if product_in.initial_quantity is not None:
                threshold = product_in.low_stock_threshold
                if threshold is None:
                    threshold = DEFAULT_LOW_STOCK_THRESHOLD
                await Inventory.create(
                    product=product,
                    quantity=product_in.initial_quantity,
                    low_stock_threshold=threshold,
                    using_db=conn,
                )
                await InventoryHistory.create(
                    product=product,
                    change_quantity=product_in.initial_quantity,
                    new_quantity=product_in.initial_quantity,
                    using_db=conn,
                )
    except IntegrityError as e:
        logger.error(f"Error registering product: {e}", exc_info=True)
        raise ConflictError(f"A product named '{product_in.name}' already exists.")

    logger.info(f"Registered product {product.public_id} ({product.name}) in {category.name}")
    return await get_product(product.public_id)


async def update_product(product_public_id: str, product_in: ProductUpdate) -> ProductResponse:
    """
    Updates a product. A new category name is created when it does not exist yet.
    """
    product = await _get_product_or_404(product_public_id)
    update_data = product_in.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise InvalidArgumentError("No fields provided for update.")

    try:
        async with in_transaction() as conn:
            category_name = update_data.pop("category_name", None)
            if category_name:
                product.category, _ = await Category.get_or_create(name=category_name, using_db=conn)
            for key, value in update_data.items():
                setattr(product, key, value)
            await product.save(using_db=conn)
    except IntegrityError as e:
        logger.error(f"Error updating product: {e}", exc_info=True)
        raise ConflictError("A product with this name already exists.")
    return await get_product(product_public_id)


async def delete_product(product_public_id: str):
    product = await _get_product_or_404(product_public_id)
    if await product.sales.all().exists():
        raise ConflictError("Product has recorded sales and cannot be deleted.")
    await product.delete()
    return None


async def get_inventory_status(low_stock_only: bool = False) -> List[InventoryStatus]:
    """
    Current stock for every product that has an inventory record.

    Args:
        low_stock_only: Only return rows where quantity <= low_stock_threshold.
    """
    inventories = await Inventory.all().prefetch_related("product__category").order_by("product__name")
    rows = [
        InventoryStatus(
            product_id=inv.product.public_id,
            product_name=inv.product.name,
            product_description=inv.product.description,
            product_price=inv.product.price,
            category_name=inv.product.category.name,
            quantity=inv.quantity,
            low_stock_threshold=inv.low_stock_threshold,
            is_low_stock=inv.is_low_stock,
        )
        for inv in inventories
    ]
    if low_stock_only:
        rows = [row for row in rows if row.is_low_stock]
    return rows


async def update_stock(product_public_id: str, change: StockChange) -> StockChangeResponse:
    """
    Applies a signed quantity change to a product's stock.

    The new quantity and the history entry are written in one transaction.

    Raises:
        NotFoundError: If the product has no inventory record.
        InvalidArgumentError: If the change would take the quantity below zero.
    """
    async with in_transaction() as conn:
        inventory = await (
            Inventory.filter(product__public_id=product_public_id)
            .using_db(conn)
            .select_for_update()
            .first()
        )
        if not inventory:
            raise NotFoundError("Inventory for product not found.")

        new_quantity = inventory.quantity + change.change_quantity
        if new_quantity < 0:
            raise InvalidArgumentError("Cannot set inventory quantity below zero.")

        inventory.quantity = new_quantity
        await inventory.save(using_db=conn, update_fields=["quantity", "updated_at"])
        await InventoryHistory.create(
            product_id=inventory.product_id,
            change_quantity=change.change_quantity,
            new_quantity=new_quantity,
            using_db=conn,
        )

    logger.info(f"Stock for {product_public_id} changed by {change.change_quantity:+d} to {new_quantity}")
    return StockChangeResponse(
        product_id=product_public_id,
        quantity=inventory.quantity,
        low_stock_threshold=inventory.low_stock_threshold,
        is_low_stock=inventory.is_low_stock,
    )


async def get_stock_history(product_public_id: str) -> List[InventoryHistoryEntry]:
    """
    Stock changes for a product, newest first.

    Raises:
        NotFoundError: If the product has no recorded changes.
    """
    history = (
        await InventoryHistory.filter(product__public_id=product_public_id)
        .prefetch_related("product")
        .order_by("-changed_at", "-id")
    )
    if not history:
        raise NotFoundError("No inventory history found for this product.")
    return [
        InventoryHistoryEntry(
            id=h.id,
            product_id=h.product.public_id,
            product_name=h.product.name,
            change_quantity=h.change_quantity,
            new_quantity=h.new_quantity,
            changed_at=h.changed_at,
        )
        for h in history
    ]
