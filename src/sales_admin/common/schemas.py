"""Pydantic types shared across features."""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Exact in Python, a plain number in JSON responses.
Money = Annotated[
    Decimal, PlainSerializer(lambda value: float(value), return_type=float, when_used="json")
]
