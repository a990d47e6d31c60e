"""Catalogue and stock models: Category, Product, Inventory and InventoryHistory."""

from tortoise import fields, models
from ...common.models import PublicModel


class Category(PublicModel):
    name = fields.CharField(max_length=100, unique=True)

    products: fields.ReverseRelation["Product"]

    def __str__(self):
        return self.name

    class Meta:
        table = "categories"


class Product(PublicModel):
    name = fields.CharField(max_length=255, unique=True)
    description = fields.TextField(null=True)
    price = fields.DecimalField(max_digits=10, decimal_places=2)

    category: fields.ForeignKeyRelation[Category] = fields.ForeignKeyField(
        "models.Category",
        related_name="products",
        on_delete=fields.RESTRICT,
    )

    inventory: fields.BackwardOneToOneRelation["Inventory"]
    history: fields.ReverseRelation["InventoryHistory"]
    # String forward reference for inter-feature relation
    sales: fields.ReverseRelation["Sale"]

    def __str__(self):
        return f"{self.name} (${self.price})"

    class Meta:
        table = "products"


class Inventory(models.Model):
    id = fields.IntField(primary_key=True)
    product: fields.OneToOneRelation[Product] = fields.OneToOneField(
        "models.Product", related_name="inventory", on_delete=fields.CASCADE
    )
    quantity = fields.IntField(default=0)
    low_stock_threshold = fields.IntField(default=10)
    updated_at = fields.DatetimeField(auto_now=True)

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.low_stock_threshold

    def __str__(self):
        return f"Stock {self.quantity} (threshold {self.low_stock_threshold})"

    class Meta:
        table = "inventories"


class InventoryHistory(models.Model):  # No TimestampMixin
    id = fields.IntField(primary_key=True)
    product: fields.ForeignKeyRelation[Product] = fields.ForeignKeyField(
        "models.Product", related_name="history", on_delete=fields.CASCADE
    )
    change_quantity = fields.IntField()
    new_quantity = fields.IntField()
    changed_at = fields.DatetimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.change_quantity:+d} -> {self.new_quantity} at {self.changed_at}"

    class Meta:
        table = "inventory_history"
        ordering = ["-changed_at"]
