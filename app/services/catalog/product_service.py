# app/services/catalog/product_service.py
"""
Catalog reads: batch product fetch for favorites and cart display, and
pricing of a product (optionally for one selected variation).
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.crud.category_crud import category_crud
from app.crud.product_crud import product_crud
from app.models.category import Category
from app.models.product import Product
from app.schemas.product import (
    PriceRangeRead,
    ProductPricingRead,
    ProductSummary,
    VariationPricingRead,
)
from app.services.pricing.variation_pricing import (
    PriceRange,
    VariationPricing,
    find_variation,
    parse_variations,
    resolve_product_pricing,
)

logger = logging.getLogger(__name__)


def _range_read(price_range: PriceRange) -> PriceRangeRead:
    return PriceRangeRead(
        min_price=price_range.min_price,
        max_price=price_range.max_price,
        is_range=price_range.is_range,
        sale_active=price_range.sale_active,
    )


def _pricing_read(pricing: VariationPricing) -> VariationPricingRead:
    return VariationPricingRead(
        current_price=pricing.current_price,
        original_price=pricing.original_price,
        sale_active=pricing.sale_active,
        discount_percent=pricing.discount_percent,
    )


def parse_id_list(raw: Optional[str]) -> List[str]:
    """Split a comma-separated `ids` query value, dropping blanks."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


class ProductCatalogService:
    """Read-side catalog operations."""

    def summarize(self, product: Product, now: Optional[datetime] = None) -> ProductSummary:
        _, price_range = resolve_product_pricing(product, now=now)
        return ProductSummary(
            id=product.id,
            name=product.name,
            slug=product.slug,
            images=product.images or [],
            price=product.price,
            list_price=product.list_price,
            avg_rating=product.avg_rating or 0,
            num_reviews=product.num_reviews or 0,
            category=product.category_name,
            category_id=product.category_id,
            brand=product.brand,
            product_type=product.product_type,
            count_in_stock=product.count_in_stock or 0,
            variations=parse_variations(product.variations),
            pricing=_range_read(price_range),
        )

    def get_products_in_order(
        self, db: Session, ids: Sequence[str], now: Optional[datetime] = None
    ) -> List[ProductSummary]:
        """Published products for `ids`, in the order requested."""
        products = product_crud.get_published_in_order(db, ids)
        return [self.summarize(product, now) for product in products]

    def get_product_pricing(
        self,
        db: Session,
        product_id: str,
        variation: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ProductPricingRead:
        product = product_crud.get_published(db, product_id)
        if not product:
            raise NotFoundError("Product not found")

        if variation and variation.strip():
            variations = parse_variations(product.variations) or []
            if find_variation(variations, variation) is None:
                raise NotFoundError(f"Variation '{variation.strip()}' not found")

        pricing, price_range = resolve_product_pricing(product, variation, now)
        return ProductPricingRead(
            product_id=product.id,
            variation=variation.strip() if variation and variation.strip() else None,
            pricing=_pricing_read(pricing) if pricing else None,
            range=_range_read(price_range),
        )

    def get_categories(self, db: Session) -> List[Category]:
        return category_crud.get_all(db)


product_catalog_service = ProductCatalogService()
