# app/crud/promo_code_crud.py
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import and_, or_, func, update
from typing import List, Optional
from datetime import datetime, timezone

from app.models.promo_code import PromoCode
from app.models.promo_code_assignment import (
    PromoCodeAssignment,
    TARGET_CATEGORY,
    TARGET_PRODUCT,
)
from app.schemas.promo_code import PromoCodeCreate


class CRUDPromoCode:
    """CRUD operations for promo codes."""

    def get(self, db: Session, promo_code_id: str) -> Optional[PromoCode]:
        """Get a promo code by ID."""
        return db.query(PromoCode).filter(PromoCode.id == promo_code_id).first()

    def get_by_code(self, db: Session, code: str) -> Optional[PromoCode]:
        """Get a promo code (with its assignments) by its code, case-insensitively."""
        code_upper = code.strip().upper()
        return (
            db.query(PromoCode)
            .options(selectinload(PromoCode.assignments))
            .filter(func.upper(PromoCode.code) == code_upper)
            .first()
        )

    def get_all(self, db: Session) -> List[PromoCode]:
        """Get every promo code, newest first, with assignments and their products."""
        return (
            db.query(PromoCode)
            .options(
                selectinload(PromoCode.assignments).selectinload(
                    PromoCodeAssignment.product
                )
            )
            .order_by(PromoCode.created_at.desc())
            .all()
        )

    def create(self, db: Session, obj_in: PromoCodeCreate) -> PromoCode:
        """Create a new promo code together with its assignments."""
        db_obj = PromoCode(
            code=obj_in.code.upper(),
            discount_percent=obj_in.discount_percent,
            expires_at=obj_in.expires_at,
            usage_limit=obj_in.usage_limit,
            is_active=obj_in.is_active,
        )
        for assignment_in in obj_in.assignments:
            is_product = assignment_in.target_type == TARGET_PRODUCT
            db_obj.assignments.append(
                PromoCodeAssignment(
                    target_type=TARGET_PRODUCT if is_product else TARGET_CATEGORY,
                    product_id=assignment_in.product_id if is_product else None,
                    category_id=None if is_product else assignment_in.category_id,
                    category_name=None if is_product else assignment_in.category_name,
                    max_discount_amount=assignment_in.max_discount_amount,
                    variation_names=assignment_in.variation_names or None,
                )
            )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def set_active(
        self, db: Session, promo_code_id: str, is_active: bool
    ) -> Optional[PromoCode]:
        """Toggle the active flag."""
        db_obj = self.get(db, promo_code_id)
        if not db_obj:
            return None

        db_obj.is_active = is_active
        db_obj.updated_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, promo_code_id: str) -> bool:
        """Hard delete a promo code, its assignments go with it."""
        db_obj = self.get(db, promo_code_id)
        if not db_obj:
            return False

        db.delete(db_obj)
        db.commit()
        return True

    def increment_usage_if_available(
        self, db: Session, promo_code_id: str, now: Optional[datetime] = None
    ) -> bool:
        """
        Atomically count one use of a promo code.

        A single conditional UPDATE, so two checkouts racing for the last use
        cannot both succeed. Returns False when no row qualified (unknown,
        inactive, expired or exhausted code).
        """
        now = now or datetime.now(timezone.utc)
        stmt = (
            update(PromoCode)
            .where(
                and_(
                    PromoCode.id == promo_code_id,
                    PromoCode.is_active.is_(True),
                    or_(PromoCode.expires_at.is_(None), PromoCode.expires_at >= now),
                    or_(
                        PromoCode.usage_limit.is_(None),
                        PromoCode.usage_count < PromoCode.usage_limit,
                    ),
                )
            )
            .values(usage_count=PromoCode.usage_count + 1, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        db.commit()
        return result.rowcount == 1


promo_code_crud = CRUDPromoCode()
