# app/crud/favorite_crud.py
from sqlalchemy.orm import Session, selectinload
from typing import List, Optional

from app.models.favorite import Favorite
from app.models.product import Product


class CRUDFavorite:
    """CRUD operations for a user's favorite products."""

    def get(self, db: Session, user_id: str, product_id: str) -> Optional[Favorite]:
        return (
            db.query(Favorite)
            .filter(Favorite.user_id == user_id, Favorite.product_id == product_id)
            .first()
        )

    def get_products(self, db: Session, user_id: str) -> List[Product]:
        """Favorite products of a user, most recently added first."""
        favorites = (
            db.query(Favorite)
            .options(selectinload(Favorite.product).selectinload(Product.category_ref))
            .filter(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc())
            .all()
        )
        return [fav.product for fav in favorites if fav.product is not None]

    def get_product_ids(self, db: Session, user_id: str) -> List[str]:
        rows = (
            db.query(Favorite.product_id)
            .filter(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc())
            .all()
        )
        return [row[0] for row in rows]

    def create(self, db: Session, user_id: str, product_id: str) -> Favorite:
        db_obj = Favorite(user_id=user_id, product_id=product_id)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, user_id: str, product_id: str) -> bool:
        """Remove a favorite, returns whether anything was deleted."""
        deleted = (
            db.query(Favorite)
            .filter(Favorite.user_id == user_id, Favorite.product_id == product_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted > 0


favorite_crud = CRUDFavorite()
