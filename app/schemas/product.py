# app/schemas/product.py
from decimal import Decimal
from typing import Any, Dict, List, Optional

from app.schemas.base import CamelModel


class PriceRangeRead(CamelModel):
    min_price: Decimal
    max_price: Decimal
    is_range: bool
    sale_active: bool


class VariationPricingRead(CamelModel):
    current_price: Decimal
    original_price: Decimal
    sale_active: bool
    discount_percent: int


class ProductSummary(CamelModel):
    """What listing pages, favorites and the cart need to display a product."""
    id: str
    name: str
    slug: str
    images: Optional[List[str]] = None
    price: Decimal
    list_price: Optional[Decimal] = None
    avg_rating: float = 0
    num_reviews: int = 0
    category: Optional[str] = None
    category_id: Optional[str] = None
    brand: Optional[str] = None
    product_type: Optional[str] = None
    count_in_stock: int = 0
    variations: Optional[List[Dict[str, Any]]] = None
    pricing: PriceRangeRead


class ProductPricingRead(CamelModel):
    product_id: str
    variation: Optional[str] = None
    pricing: Optional[VariationPricingRead] = None
    range: PriceRangeRead


class CategoryRead(CamelModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    sort_order: int = 0
