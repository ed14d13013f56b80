# app/models/promo_code_assignment.py
from sqlalchemy import (
    Column,
    String,
    Numeric,
    JSON,
    ForeignKey,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from app.db.base_class import Base
import uuid

TARGET_PRODUCT = "product"
TARGET_CATEGORY = "category"


class PromoCodeAssignment(Base):
    """Scopes a promo code to one product or one category."""
    __tablename__ = "promo_code_assignments"
    __table_args__ = (
        CheckConstraint(
            "(target_type = 'product' AND product_id IS NOT NULL"
            " AND category_id IS NULL AND category_name IS NULL)"
            " OR (target_type = 'category' AND product_id IS NULL"
            " AND (category_id IS NOT NULL OR category_name IS NOT NULL))",
            name="ck_promo_code_assignments_single_scope",
        ),
    )

    id = Column(
        String, primary_key=True, default=lambda: f"pca_{uuid.uuid4().hex[:12]}"
    )
    promo_code_id = Column(
        String,
        ForeignKey("promo_codes.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    target_type = Column(String(20), nullable=False)  # 'product' or 'category'

    product_id = Column(
        String, ForeignKey("products.id", ondelete="CASCADE"), nullable=True, index=True
    )
    category_id = Column(
        String, ForeignKey("categories.id", ondelete="CASCADE"), nullable=True, index=True
    )
    category_name = Column(String(100), nullable=True)

    # Upper bound for the discount unlocked through this assignment (NULL = no cap)
    max_discount_amount = Column(Numeric(10, 2), nullable=True)
    # Product options this assignment is limited to (NULL/empty = every option)
    variation_names = Column(JSON, nullable=True)

    # Relationships
    promo_code = relationship("PromoCode", back_populates="assignments")
    product = relationship("Product")
    category = relationship("Category")

    @property
    def product_name(self):
        return self.product.name if self.product is not None else None
