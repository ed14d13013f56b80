# app/api/v1/endpoints/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.db.session import get_db
from app.schemas.product import ProductPricingRead, ProductSummary
from app.services.catalog.product_service import parse_id_list, product_catalog_service

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=List[ProductSummary])
def get_products_by_ids(
    ids: Optional[str] = Query(None, description="Comma-separated product ids"),
    db: Session = Depends(get_db),
):
    """
    Batch fetch of published products, returned in the order of `ids`.
    Used by favorites and the cart to refresh product data.
    """
    product_ids = parse_id_list(ids)
    if not product_ids:
        raise ValidationError("Product ids are required")
    return product_catalog_service.get_products_in_order(db, product_ids)


@router.get("/{productId}/pricing", response_model=ProductPricingRead)
def get_product_pricing(
    productId: str,
    variation: Optional[str] = Query(None, description="Selected variation name"),
    db: Session = Depends(get_db),
):
    """Current price of a product or one of its variations, sales applied."""
    return product_catalog_service.get_product_pricing(db, productId, variation)
