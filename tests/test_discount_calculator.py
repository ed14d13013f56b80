"""
Tests for the promo discount calculator.

Verifies that:
- Discounts are percentage of the subtotal, rounded half-up to cents
- Caps limit the discount, and the discount never exceeds the subtotal
- The cap of a whole-cart discount is the most generous matched cap
- Per-line discounts only touch lines matching an assignment
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services.promotions.cart_items import normalize_cart_items
from app.services.promotions.discount_calculator import (
    calculate_discount,
    calculate_item_discounts,
    resolve_discount_cap,
)
from app.services.promotions.eligibility import AssignmentRule, build_rules


class TestCalculateDiscount:

    def test_simple_percentage(self):
        result = calculate_discount(Decimal("200.00"), 15)

        assert result.subtotal == Decimal("200.00")
        assert result.discount_amount == Decimal("30.00")
        assert result.total == Decimal("170.00")
        assert result.capped is False

    def test_rounding_half_up(self):
        # 10% of 0.05 = 0.005 -> 0.01
        result = calculate_discount(Decimal("0.05"), 10)
        assert result.discount_amount == Decimal("0.01")

    def test_cap_applies(self):
        result = calculate_discount(Decimal("1000.00"), 50, Decimal("100.00"))

        assert result.discount_amount == Decimal("100.00")
        assert result.total == Decimal("900.00")
        assert result.capped is True

    def test_cap_above_discount_is_ignored(self):
        result = calculate_discount(Decimal("100.00"), 10, Decimal("50.00"))

        assert result.discount_amount == Decimal("10.00")
        assert result.capped is False

    def test_full_discount_never_goes_negative(self):
        result = calculate_discount(Decimal("49.99"), 100)

        assert result.discount_amount == Decimal("49.99")
        assert result.total == Decimal("0.00")

    def test_zero_subtotal(self):
        result = calculate_discount(Decimal("0"), 25)

        assert result.discount_amount == Decimal("0.00")
        assert result.total == Decimal("0.00")

    @pytest.mark.parametrize("percent", [0, 101, -5, 12.5, True])
    def test_invalid_percent_is_rejected(self, percent):
        with pytest.raises(ValueError):
            calculate_discount(Decimal("100"), percent)

    def test_negative_subtotal_is_rejected(self):
        with pytest.raises(ValueError):
            calculate_discount(Decimal("-1"), 10)


class TestResolveDiscountCap:

    def rule(self, cap):
        return AssignmentRule(
            target_type="product",
            product_id="p",
            max_discount_amount=Decimal(cap) if cap is not None else None,
        )

    def test_global_code_is_uncapped(self):
        assert resolve_discount_cap([]) is None

    def test_single_cap(self):
        assert resolve_discount_cap([self.rule("20")]) == Decimal("20")

    def test_largest_cap_wins(self):
        assert resolve_discount_cap([self.rule("20"), self.rule("35")]) == Decimal("35")

    def test_any_uncapped_match_removes_cap(self):
        assert resolve_discount_cap([self.rule("20"), self.rule(None)]) is None


class TestCalculateItemDiscounts:

    def setup_method(self):
        self.items = normalize_cart_items(
            [
                {"productId": "prod_a", "price": "100.00", "quantity": 2},
                {"productId": "prod_b", "price": "50.00"},
                {"productId": "prod_c"},
            ]
        )

    def test_global_code_discounts_every_priced_line(self):
        result = calculate_item_discounts(self.items, 10, [])

        assert result.subtotal == Decimal("250.00")
        assert result.discount_amount == Decimal("25.00")
        assert result.total == Decimal("225.00")
        assert result.eligible_product_ids == ["prod_a", "prod_b"]

    def test_only_matching_lines_are_discounted(self):
        rules = build_rules(
            [
                SimpleNamespace(
                    id="pca_1",
                    target_type="product",
                    product_id="prod_b",
                    category_id=None,
                    category_name=None,
                    variation_names=None,
                    max_discount_amount=None,
                )
            ]
        )
        result = calculate_item_discounts(self.items, 20, rules)

        assert result.subtotal == Decimal("250.00")
        assert result.discount_amount == Decimal("10.00")
        assert result.eligible_product_ids == ["prod_b"]

    def test_line_cap_from_matching_assignment(self):
        rules = build_rules(
            [
                SimpleNamespace(
                    id="pca_1",
                    target_type="product",
                    product_id="prod_a",
                    category_id=None,
                    category_name=None,
                    variation_names=None,
                    max_discount_amount=Decimal("15.00"),
                )
            ]
        )
        result = calculate_item_discounts(self.items, 50, rules)

        assert result.discount_amount == Decimal("15.00")
        assert result.lines[0].line_subtotal == Decimal("200.00")
