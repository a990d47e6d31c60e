"""Base models shared by the catalogue and sales tables.

Rows are exposed through their KSUID ``public_id``; integer primary keys
never leave the database layer."""

from tortoise import fields, models
from ksuid import ksuid


def generate_ksuid() -> str:
    """Generate a K-Sortable Unique IDentifier (KSUID).

    KSUIDs are timestamp prefixed, so rows created later sort after earlier
    ones, and they are URL-safe.

    Returns:
        str: The 27 character string form of a new KSUID.
    """
    return str(ksuid.Ksuid())


class TimestampMixin(models.Model):
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        abstract = True


class PublicModel(TimestampMixin):
    """Integer primary key plus the KSUID used in URLs and JSON."""

    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )

    class Meta:
        abstract = True
