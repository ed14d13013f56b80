# app/graphql/types.py
import strawberry
import typing
from decimal import Decimal
from typing import Optional

from ..schemas.product import ProductSummary
from ..schemas.promo_code import PromoCodeAssignmentRead


@strawberry.type
class PriceRangeType:
    minPrice: Decimal
    maxPrice: Decimal
    isRange: bool
    saleActive: bool


@strawberry.type
class VariationType:
    name: str
    price: Optional[Decimal]
    originalPrice: Optional[Decimal]
    salePrice: Optional[Decimal]
    salePriceExpiresAt: Optional[str]


@strawberry.type
class ProductType:
    id: strawberry.ID
    name: str
    slug: str
    images: typing.List[str]
    price: Decimal
    listPrice: Optional[Decimal]
    category: Optional[str]
    categoryId: Optional[str]
    brand: Optional[str]
    countInStock: int
    avgRating: float
    numReviews: int
    variations: typing.List[VariationType]
    pricing: PriceRangeType


@strawberry.type
class PromoCodeAssignmentType:
    id: strawberry.ID
    targetType: str
    productId: Optional[str]
    productName: Optional[str]
    categoryId: Optional[str]
    categoryName: Optional[str]
    maxDiscountAmount: Optional[Decimal]
    variationNames: Optional[typing.List[str]]


@strawberry.type
class PromoValidationType:
    code: str
    discountPercent: int
    assignments: typing.List[PromoCodeAssignmentType]
    subtotal: Decimal
    discountAmount: Decimal
    total: Decimal
    eligibleItems: typing.List[str]


@strawberry.type
class PromoValidationPayload:
    success: bool
    message: str
    data: Optional[PromoValidationType] = None


def _money(value) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except ArithmeticError:
        return None


def _text(value) -> Optional[str]:
    return None if value is None else str(value)


def variation_from_dict(raw: dict) -> VariationType:
    return VariationType(
        name=str(raw.get("name", "")),
        price=_money(raw.get("price")),
        originalPrice=_money(raw.get("originalPrice", raw.get("original_price"))),
        salePrice=_money(raw.get("salePrice", raw.get("sale_price"))),
        salePriceExpiresAt=_text(
            raw.get("salePriceExpiresAt", raw.get("sale_price_expires_at"))
        ),
    )


def product_from_summary(summary: ProductSummary) -> ProductType:
    return ProductType(
        id=strawberry.ID(summary.id),
        name=summary.name,
        slug=summary.slug,
        images=summary.images or [],
        price=summary.price,
        listPrice=summary.list_price,
        category=summary.category,
        categoryId=summary.category_id,
        brand=summary.brand,
        countInStock=summary.count_in_stock,
        avgRating=summary.avg_rating,
        numReviews=summary.num_reviews,
        variations=[variation_from_dict(v) for v in summary.variations or []],
        pricing=PriceRangeType(
            minPrice=summary.pricing.min_price,
            maxPrice=summary.pricing.max_price,
            isRange=summary.pricing.is_range,
            saleActive=summary.pricing.sale_active,
        ),
    )


def assignment_from_read(assignment: PromoCodeAssignmentRead) -> PromoCodeAssignmentType:
    return PromoCodeAssignmentType(
        id=strawberry.ID(assignment.id),
        targetType=assignment.target_type,
        productId=assignment.product_id,
        productName=assignment.product_name,
        categoryId=assignment.category_id,
        categoryName=assignment.category_name,
        maxDiscountAmount=assignment.max_discount_amount,
        variationNames=assignment.variation_names,
    )
