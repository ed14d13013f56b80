# app/services/promotions/eligibility.py
"""
Cart eligibility for promo code assignments.

A code with no assignments is global and applies to any cart. Otherwise the
cart is eligible when at least one item matches at least one assignment.
The check is inclusive: a code scoped to product A is honored for a cart
holding A next to unrelated items.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, FrozenSet, Iterable, List, Optional

from app.models.promo_code_assignment import TARGET_CATEGORY, TARGET_PRODUCT
from app.services.pricing.variation_pricing import to_money
from app.services.promotions.cart_items import CartItemView


def normalize_variation_names(names: Optional[Iterable[Any]]) -> FrozenSet[str]:
    if not names:
        return frozenset()
    if isinstance(names, str):
        names = [names]
    return frozenset(
        str(name).strip().lower() for name in names if name is not None and str(name).strip()
    )


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class AssignmentRule:
    """An assignment with its matching keys normalized once."""

    target_type: str
    product_id: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None  # lower-cased
    variation_names: FrozenSet[str] = frozenset()
    max_discount_amount: Optional[Decimal] = None
    assignment_id: Optional[str] = None

    @classmethod
    def from_model(cls, assignment: Any) -> "AssignmentRule":
        category_name = _clean(getattr(assignment, "category_name", None))
        return cls(
            target_type=getattr(assignment, "target_type", None) or TARGET_PRODUCT,
            product_id=_clean(getattr(assignment, "product_id", None)),
            category_id=_clean(getattr(assignment, "category_id", None)),
            category_name=category_name.lower() if category_name else None,
            variation_names=normalize_variation_names(
                getattr(assignment, "variation_names", None)
            ),
            max_discount_amount=to_money(getattr(assignment, "max_discount_amount", None)),
            assignment_id=getattr(assignment, "id", None),
        )

    @property
    def restricts_variations(self) -> bool:
        return bool(self.variation_names)


def build_rules(assignments: Optional[Iterable[Any]]) -> List[AssignmentRule]:
    return [AssignmentRule.from_model(a) for a in (assignments or [])]


def _matches_product(item: CartItemView, rule: AssignmentRule) -> bool:
    if rule.product_id is None or item.product_id != rule.product_id:
        return False
    if not rule.restricts_variations:
        return True
    return item.selected_variation in rule.variation_names


def _matches_category(item: CartItemView, rule: AssignmentRule) -> bool:
    if item.category_id and rule.category_id:
        return item.category_id == rule.category_id
    # Name is only a fallback for when ids are not available on both sides
    if item.category_name and rule.category_name:
        return item.category_name == rule.category_name
    return False


def item_matches(item: CartItemView, rule: AssignmentRule) -> bool:
    # Items without a product id cannot be priced or tracked, never match
    if not item.product_id:
        return False
    if rule.target_type == TARGET_CATEGORY:
        return _matches_category(item, rule)
    return _matches_product(item, rule)


def first_matching_rule(
    item: CartItemView, rules: Iterable[AssignmentRule]
) -> Optional[AssignmentRule]:
    for rule in rules:
        if item_matches(item, rule):
            return rule
    return None


def find_matching_rules(
    items: Iterable[CartItemView], rules: Iterable[AssignmentRule]
) -> List[AssignmentRule]:
    """Every rule matched by at least one item, in rule order."""
    items = list(items)
    return [rule for rule in rules if any(item_matches(item, rule) for item in items)]


def is_cart_eligible(
    items: Iterable[CartItemView], rules: Iterable[AssignmentRule]
) -> bool:
    rules = list(rules)
    if not rules:
        return True
    return any(item_matches(item, rule) for item in items for rule in rules)
