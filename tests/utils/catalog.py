import json
import uuid
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.category import Category
from app.models.product import Product


def create_random_category(
    db: Session, name: str = "Fragrance", sort_order: int = 0, is_active: bool = True
) -> Category:
    """
    Creates a dummy category for testing purposes.
    """
    category = Category(
        name=name,
        slug=f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}",
        sort_order=sort_order,
        is_active=is_active,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def create_random_product(
    db: Session,
    name: str = "Test Product",
    price: str = "100.00",
    category: Optional[Category] = None,
    variations: Optional[List[dict]] = None,
    raw_variations: Optional[str] = None,
    is_published: bool = True,
) -> Product:
    """
    Creates a dummy product. `raw_variations` is stored verbatim, which lets
    tests plant malformed JSON.
    """
    if raw_variations is None and variations is not None:
        raw_variations = json.dumps(variations)

    product = Product(
        name=name,
        slug=f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}",
        price=Decimal(price),
        category_id=category.id if category else None,
        images=["https://example.com/image.png"],
        count_in_stock=10,
        variations=raw_variations,
        is_published=is_published,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product
