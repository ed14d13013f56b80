# app/graphql/mutations.py
import logging
import strawberry
from decimal import Decimal
from typing import List, Optional
from strawberry.types import Info

from ..core.exceptions import StorefrontError
from ..schemas.promo_code import PromoCodeRead
from ..services.promotions.promo_code_service import promo_code_service
from .types import PromoValidationPayload, PromoValidationType, assignment_from_read

logger = logging.getLogger(__name__)


@strawberry.input
class CartItemInput:
    productId: str
    categoryId: Optional[str] = None
    categoryName: Optional[str] = None
    selectedVariation: Optional[str] = None
    price: Optional[Decimal] = None
    quantity: Optional[int] = 1


def _cart_item_dict(item: CartItemInput) -> dict:
    return {
        "productId": item.productId,
        "categoryId": item.categoryId,
        "categoryName": item.categoryName,
        "selectedVariation": item.selectedVariation,
        "price": item.price,
        "quantity": item.quantity,
    }


@strawberry.type
class Mutation:
    @strawberry.mutation
    def validatePromoCode(
        self,
        code: str,
        items: List[CartItemInput],
        info: Info,
        subtotal: Optional[Decimal] = None,
    ) -> PromoValidationPayload:
        """
        Same checks as `POST /promo-codes/validate`. Business rejections are
        returned in the payload rather than as GraphQL errors.
        """
        db = info.context.db
        try:
            result = promo_code_service.validate(
                db,
                code=code,
                raw_items=[_cart_item_dict(item) for item in items],
                subtotal=subtotal,
            )
        except StorefrontError as e:
            return PromoValidationPayload(success=False, message=e.message)

        promo = PromoCodeRead.model_validate(result.promo_code)
        return PromoValidationPayload(
            success=True,
            message=f"{promo.discount_percent}% discount applied",
            data=PromoValidationType(
                code=promo.code,
                discountPercent=promo.discount_percent,
                assignments=[assignment_from_read(a) for a in promo.assignments],
                subtotal=result.discount.subtotal,
                discountAmount=result.discount.discount_amount,
                total=result.discount.total,
                eligibleItems=result.eligible_product_ids,
            ),
        )
