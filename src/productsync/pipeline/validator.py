"""Validator — per-product business rules, checked before any sink is touched."""

from __future__ import annotations

from typing import Callable, NamedTuple, Optional

from productsync.core.exceptions import ProductValidationError
from productsync.models.product import (
    Product,
    has_id,
    has_name,
    has_non_negative_price,
    has_non_negative_quantity,
)


class RuleViolation(NamedTuple):
    rule: str
    message: str


class _Rule(NamedTuple):
    name: str
    check: Callable[[Product], bool]
    message: str


# Evaluated in order; the first failing rule is reported
RULES: tuple[_Rule, ...] = (
    _Rule("id_required", has_id, "product ID is required"),
    _Rule("name_required", has_name, "product name is required"),
    _Rule("price_non_negative", has_non_negative_price, "price cannot be negative"),
    _Rule("quantity_non_negative", has_non_negative_quantity, "stock cannot be negative"),
)


def first_violation(product: Product) -> Optional[RuleViolation]:
    for rule in RULES:
        if not rule.check(product):
            return RuleViolation(rule.name, rule.message)
    return None


def validate(product: Product) -> None:
    """Raise ProductValidationError for the first rule the product breaks."""
    violation = first_violation(product)
    if violation is not None:
        raise ProductValidationError(product.id, violation.rule, violation.message)
