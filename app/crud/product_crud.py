# app/crud/product_crud.py
from sqlalchemy.orm import Session, selectinload
from typing import List, Optional, Sequence

from app.models.product import Product


class CRUDProduct:
    """Read operations for the product catalog."""

    def get_published(self, db: Session, product_id: str) -> Optional[Product]:
        return (
            db.query(Product)
            .filter(Product.id == product_id, Product.is_published == True)
            .first()
        )

    def get_existing_ids(self, db: Session, ids: Sequence[str]) -> set:
        """Which of the given ids exist at all (published or not)."""
        if not ids:
            return set()
        rows = db.query(Product.id).filter(Product.id.in_(list(ids))).all()
        return {row[0] for row in rows}

    def get_published_in_order(self, db: Session, ids: Sequence[str]) -> List[Product]:
        """
        Batch fetch of published products, returned in the order of `ids`.

        Unknown or unpublished ids are skipped, repeated ids appear once.
        """
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return []

        products = (
            db.query(Product)
            .options(selectinload(Product.category_ref))
            .filter(Product.id.in_(unique_ids), Product.is_published == True)
            .all()
        )
        by_id = {product.id: product for product in products}
        return [by_id[product_id] for product_id in unique_ids if product_id in by_id]


product_crud = CRUDProduct()
