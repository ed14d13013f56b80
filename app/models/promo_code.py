# app/models/promo_code.py
from sqlalchemy import (
    Column,
    String,
    Boolean,
    DateTime,
    Integer,
    CheckConstraint,
    func,
    true,
)
from sqlalchemy.orm import relationship
from app.db.base_class import Base
import uuid
from datetime import datetime, timezone


class PromoCode(Base):
    __tablename__ = "promo_codes"
    __table_args__ = (
        CheckConstraint(
            "discount_percent >= 1 AND discount_percent <= 100",
            name="ck_promo_codes_discount_percent_range",
        ),
        CheckConstraint(
            "usage_limit IS NULL OR usage_count <= usage_limit",
            name="ck_promo_codes_usage_within_limit",
        ),
    )

    id = Column(
        String, primary_key=True, default=lambda: f"promo_{uuid.uuid4().hex[:12]}"
    )
    # Always stored upper-cased, lookups compare upper-cased input
    code = Column(String(50), nullable=False, unique=True, index=True)
    discount_percent = Column(Integer, nullable=False)

    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    # Usage limits
    usage_limit = Column(Integer, nullable=True)  # NULL = unlimited
    usage_count = Column(Integer, default=0, server_default="0", nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    assignments = relationship(
        "PromoCodeAssignment",
        back_populates="promo_code",
        cascade="all, delete-orphan",
        order_by="PromoCodeAssignment.id",
    )

    @property
    def is_global(self) -> bool:
        """A code without assignments applies to any cart."""
        return not self.assignments

    @property
    def remaining_uses(self):
        """Calculate remaining uses, or None if unlimited."""
        if self.usage_limit is None:
            return None
        return max(0, self.usage_limit - (self.usage_count or 0))
