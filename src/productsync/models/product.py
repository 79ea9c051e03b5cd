"""Product — the record shape carried through one batch.

Business rules live here as plain predicates; the model itself accepts
negative numbers and empty strings so that the Validator, not the parser,
decides what is rejected.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Product(BaseModel):
    """Single product row."""

    id: str = ""
    name: str = ""
    image: str = ""  # opaque reference/URL
    price: float = Field(default=0.0, allow_inf_nan=False)
    quantity: int = 0

    model_config = {"str_strip_whitespace": True}

    def cache_key(self, prefix: str = "product") -> str:
        return f"{prefix}:{self.id}"


def has_id(product: Product) -> bool:
    return product.id != ""


def has_name(product: Product) -> bool:
    return product.name != ""


def has_non_negative_price(product: Product) -> bool:
    return product.price >= 0


def has_non_negative_quantity(product: Product) -> bool:
    return product.quantity >= 0


def is_valid(product: Product) -> bool:
    """True only when every business rule holds."""
    return (
        has_id(product)
        and has_name(product)
        and has_non_negative_price(product)
        and has_non_negative_quantity(product)
    )
