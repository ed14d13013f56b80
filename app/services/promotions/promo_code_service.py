# app/services/promotions/promo_code_service.py
"""
Promo Code Service

Handles business logic for:
- Promo code validation (validity gate, cart eligibility, discount)
- Promo code administration
- Redemption at order confirmation
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    DuplicateCodeError,
    ExpiredError,
    IneligibleCartError,
    InactiveCodeError,
    NotFoundError,
    UsageExhaustedError,
    ValidationError,
)
from app.crud.category_crud import category_crud
from app.crud.product_crud import product_crud
from app.crud.promo_code_crud import promo_code_crud
from app.models.promo_code import PromoCode
from app.schemas.promo_code import PromoCodeCreate
from app.services.pricing.variation_pricing import ensure_utc
from app.services.promotions.cart_items import cart_subtotal, normalize_cart_items
from app.services.promotions.discount_calculator import (
    DiscountBreakdown,
    calculate_discount,
    calculate_item_discounts,
    resolve_discount_cap,
)
from app.services.promotions.eligibility import (
    build_rules,
    find_matching_rules,
    is_cart_eligible,
    item_matches,
)

logger = logging.getLogger(__name__)

DISCOUNT_SCOPE_CART = "cart"
DISCOUNT_SCOPE_ITEMS = "items"


@dataclass
class PromoValidationResult:
    promo_code: PromoCode
    discount: DiscountBreakdown
    eligible_product_ids: List[str] = field(default_factory=list)


def check_validity(promo_code: Optional[PromoCode], now: Optional[datetime] = None) -> PromoCode:
    """
    The validity gate: raises the first failing check, returns the code
    otherwise. Read-only.
    """
    if promo_code is None:
        raise NotFoundError("Invalid promo code")

    if not promo_code.is_active:
        raise InactiveCodeError()

    now = ensure_utc(now) if now else datetime.now(timezone.utc)
    if promo_code.expires_at is not None and ensure_utc(promo_code.expires_at) < now:
        raise ExpiredError()

    usage_count = promo_code.usage_count or 0
    if promo_code.usage_limit is not None and usage_count >= promo_code.usage_limit:
        raise UsageExhaustedError()

    return promo_code


class PromoCodeService:
    """Service for validating, administering and redeeming promo codes."""

    def __init__(self, discount_scope: str = DISCOUNT_SCOPE_CART):
        if discount_scope not in (DISCOUNT_SCOPE_CART, DISCOUNT_SCOPE_ITEMS):
            raise ValueError(f"Unknown discount scope: {discount_scope}")
        self.discount_scope = discount_scope

    # ========================================
    # Validation
    # ========================================

    def validate(
        self,
        db: Session,
        code: Optional[str],
        raw_items: Optional[Iterable[Any]] = None,
        subtotal: Optional[Decimal] = None,
        now: Optional[datetime] = None,
    ) -> PromoValidationResult:
        """Validate a promo code against a cart and price the discount."""
        if not code or not code.strip():
            raise ValidationError("Please enter a promo code")

        # 1. Find the code and run the validity gate
        promo_code = check_validity(promo_code_crud.get_by_code(db, code), now)

        # 2. Check the cart against the assignments
        items = normalize_cart_items(raw_items)
        rules = build_rules(promo_code.assignments)

        if not is_cart_eligible(items, rules):
            logger.info(f"Promo code {promo_code.code} rejected: no eligible cart item")
            raise IneligibleCartError()

        # 3. Calculate discount
        if self.discount_scope == DISCOUNT_SCOPE_ITEMS:
            item_breakdown = calculate_item_discounts(
                items, promo_code.discount_percent, rules
            )
            discount = DiscountBreakdown(
                subtotal=item_breakdown.subtotal,
                discount_amount=item_breakdown.discount_amount,
                total=item_breakdown.total,
            )
            eligible = item_breakdown.eligible_product_ids
        else:
            matched = find_matching_rules(items, rules)
            base = subtotal if subtotal is not None else cart_subtotal(items)
            discount = calculate_discount(
                base, promo_code.discount_percent, resolve_discount_cap(matched)
            )
            eligible = [
                item.product_id
                for item in items
                if item.product_id
                and (not rules or any(item_matches(item, rule) for rule in rules))
            ]

        return PromoValidationResult(
            promo_code=promo_code,
            discount=discount,
            eligible_product_ids=list(dict.fromkeys(eligible)),
        )

    # ========================================
    # Administration
    # ========================================

    def list_promo_codes(self, db: Session) -> List[PromoCode]:
        return promo_code_crud.get_all(db)

    def create_promo_code(self, db: Session, input_data: PromoCodeCreate) -> PromoCode:
        """Create a promo code, rejecting duplicates and unknown targets."""
        if promo_code_crud.get_by_code(db, input_data.code):
            raise DuplicateCodeError()

        self._check_assignment_targets(db, input_data)

        try:
            promo_code = promo_code_crud.create(db, input_data)
        except IntegrityError:
            # Lost a race against a concurrent insert of the same code
            db.rollback()
            raise DuplicateCodeError()

        logger.info(
            f"Created promo code {promo_code.code} ({promo_code.discount_percent}%, "
            f"{len(input_data.assignments)} assignments)"
        )
        return promo_code

    def _check_assignment_targets(self, db: Session, input_data: PromoCodeCreate) -> None:
        product_ids = [a.product_id for a in input_data.assignments if a.product_id]
        missing = set(product_ids) - product_crud.get_existing_ids(db, product_ids)
        if missing:
            raise ValidationError(f"Unknown product: {', '.join(sorted(missing))}")

        for assignment in input_data.assignments:
            if assignment.category_id is None:
                continue
            category = category_crud.get(db, assignment.category_id)
            if category is None:
                raise ValidationError(f"Unknown category: {assignment.category_id}")
            if assignment.category_name is None:
                # Keep the name so carts that only carry names still match
                assignment.category_name = category.name

    def set_active(self, db: Session, promo_code_id: str, is_active: bool) -> PromoCode:
        promo_code = promo_code_crud.set_active(db, promo_code_id, is_active)
        if not promo_code:
            raise NotFoundError("Promo code not found")
        return promo_code

    def delete_promo_code(self, db: Session, promo_code_id: str) -> None:
        if not promo_code_crud.delete(db, promo_code_id):
            raise NotFoundError("Promo code not found")
        logger.info(f"Deleted promo code {promo_code_id}")

    # ========================================
    # Redemption
    # ========================================

    def redeem(
        self, db: Session, promo_code_id: str, now: Optional[datetime] = None
    ) -> PromoCode:
        """
        Count one use of a code when an order is confirmed.

        The increment is a guarded UPDATE; when it affects no row the gate is
        re-run on the current row to report why.
        """
        now = ensure_utc(now) if now else datetime.now(timezone.utc)

        if promo_code_crud.increment_usage_if_available(db, promo_code_id, now):
            promo_code = promo_code_crud.get(db, promo_code_id)
            db.refresh(promo_code)
            logger.info(
                f"Redeemed promo code {promo_code.code} "
                f"({promo_code.usage_count}/{promo_code.usage_limit or 'unlimited'})"
            )
            return promo_code

        promo_code = promo_code_crud.get(db, promo_code_id)
        if promo_code is None:
            raise NotFoundError("Promo code not found")
        db.refresh(promo_code)
        check_validity(promo_code, now)
        # The gate passed on the fresh row, so a concurrent redemption took the last use
        logger.info(f"Redemption of promo code {promo_code.code} lost a race for the last use")
        raise UsageExhaustedError()


promo_code_service = PromoCodeService(discount_scope=settings.PROMO_DISCOUNT_SCOPE)
