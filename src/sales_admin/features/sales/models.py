from tortoise import fields
from ...common.models import PublicModel


class Sale(PublicModel):
    product: fields.ForeignKeyRelation["Product"] = fields.ForeignKeyField(
        "models.Product",
        related_name="sales",
        on_delete=fields.RESTRICT,
    )

    quantity = fields.IntField()
    total_price = fields.DecimalField(max_digits=12, decimal_places=2)
    sale_date = fields.DatetimeField(db_index=True)

    def __str__(self):
        return f"Sale {self.public_id}: {self.quantity} for {self.total_price} on {self.sale_date}"

    class Meta:
        table = "sales"
