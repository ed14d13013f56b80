"""
Promo discount calculation.

Discount model:
- discount = subtotal * discount_percent / 100
- Capped by the assignment's max discount amount when one applies
- Never more than the subtotal, so the total is never negative
- Decimal arithmetic, rounded half-up to two places
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from app.services.promotions.cart_items import CartItemView
from app.services.promotions.eligibility import AssignmentRule, first_matching_rule

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def quantize_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _check_percent(discount_percent: int) -> None:
    if isinstance(discount_percent, bool) or not isinstance(discount_percent, int):
        raise ValueError("discount_percent must be an integer")
    if not 1 <= discount_percent <= 100:
        raise ValueError("discount_percent must be between 1 and 100")


@dataclass
class DiscountBreakdown:
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal
    capped: bool = False


@dataclass
class LineDiscount:
    product_id: str
    line_subtotal: Decimal
    discount_amount: Decimal


@dataclass
class ItemDiscountBreakdown:
    subtotal: Decimal                       # every priced line in the cart
    discount_amount: Decimal                # sum of per-line discounts
    lines: List[LineDiscount] = field(default_factory=list)

    @property
    def eligible_product_ids(self) -> List[str]:
        return [line.product_id for line in self.lines]

    @property
    def total(self) -> Decimal:
        return max(self.subtotal - self.discount_amount, ZERO)


def calculate_discount(
    subtotal: Decimal,
    discount_percent: int,
    max_discount_amount: Optional[Decimal] = None,
) -> DiscountBreakdown:
    """Whole-cart percentage discount, optionally capped."""
    _check_percent(discount_percent)
    subtotal = quantize_money(subtotal)
    if subtotal < 0:
        raise ValueError("subtotal cannot be negative")

    discount = quantize_money(subtotal * discount_percent / Decimal(100))
    capped = False

    if max_discount_amount is not None and max_discount_amount >= 0:
        cap = quantize_money(max_discount_amount)
        if discount > cap:
            discount = cap
            capped = True

    # Don't discount more than the subtotal
    discount = min(discount, subtotal)

    return DiscountBreakdown(
        subtotal=subtotal,
        discount_amount=discount,
        total=max(subtotal - discount, ZERO),
        capped=capped,
    )


def resolve_discount_cap(matched_rules: Iterable[AssignmentRule]) -> Optional[Decimal]:
    """
    Cap for a whole-cart discount unlocked through assignments.

    The cart qualifies through any matched assignment, so the most generous
    one wins: no cap if any matched assignment is uncapped, else the largest
    cap. A global code (nothing matched) is uncapped.
    """
    caps = []
    for rule in matched_rules:
        if rule.max_discount_amount is None:
            return None
        caps.append(rule.max_discount_amount)
    return max(caps) if caps else None


def calculate_item_discounts(
    items: Iterable[CartItemView],
    discount_percent: int,
    rules: Iterable[AssignmentRule],
) -> ItemDiscountBreakdown:
    """
    Per-line discount: only the lines matching an assignment are discounted,
    each capped by the cap of the assignment it matched. With no assignments
    every priced line is discounted.
    """
    _check_percent(discount_percent)
    rules = list(rules)
    restrict = bool(rules)

    subtotal = ZERO
    total_discount = ZERO
    lines = []

    for item in items:
        line_subtotal = item.line_subtotal
        if line_subtotal is None or line_subtotal <= 0:
            continue
        subtotal += line_subtotal

        if not item.product_id:
            continue

        rule = first_matching_rule(item, rules) if restrict else None
        if restrict and rule is None:
            continue

        line_discount = quantize_money(line_subtotal * discount_percent / Decimal(100))
        if rule is not None and rule.max_discount_amount is not None:
            line_discount = min(line_discount, quantize_money(rule.max_discount_amount))
        line_discount = min(line_discount, line_subtotal)

        if line_discount > 0:
            total_discount += line_discount
            lines.append(
                LineDiscount(
                    product_id=item.product_id,
                    line_subtotal=quantize_money(line_subtotal),
                    discount_amount=line_discount,
                )
            )

    return ItemDiscountBreakdown(
        subtotal=quantize_money(subtotal),
        discount_amount=quantize_money(total_discount),
        lines=lines,
    )
