# app/crud/category_crud.py
from sqlalchemy.orm import Session
from typing import List, Optional

from app.models.category import Category


class CRUDCategory:
    """CRUD operations for product categories."""

    def get(self, db: Session, category_id: str) -> Optional[Category]:
        return db.query(Category).filter(Category.id == category_id).first()

    def get_all(self, db: Session, include_inactive: bool = False) -> List[Category]:
        """Get categories in display order."""
        query = db.query(Category)

        if not include_inactive:
            query = query.filter(Category.is_active == True)

        return query.order_by(Category.sort_order.asc(), Category.name.asc()).all()


category_crud = CRUDCategory()
