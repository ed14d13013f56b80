# app/models/product.py
from sqlalchemy import (
    Column,
    String,
    Boolean,
    DateTime,
    Integer,
    Float,
    Numeric,
    Text,
    JSON,
    ForeignKey,
    func,
    true,
)
from sqlalchemy.orm import relationship
from app.db.base_class import Base
import uuid


class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True, default=lambda: f"prod_{uuid.uuid4().hex[:12]}")
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    category_id = Column(
        String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    # Legacy free-text category name, kept for products created before categories existed
    category = Column(String(100), nullable=True)
    brand = Column(String(100), nullable=True)
    product_type = Column(String(50), nullable=True)
    images = Column(JSON, nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    list_price = Column(Numeric(10, 2), nullable=True)
    count_in_stock = Column(Integer, default=0, server_default="0", nullable=False)
    avg_rating = Column(Float, default=0, server_default="0", nullable=False)
    num_reviews = Column(Integer, default=0, server_default="0", nullable=False)

    # JSON-encoded list of {name, price, salePrice, salePriceExpiresAt}, or
    # {name, price, originalPrice, salePriceExpiresAt} with the sale in price.
    # Stored as text, so it must be parsed defensively on read.
    variations = Column(Text, nullable=True)

    is_published = Column(Boolean, default=True, server_default=true(), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    category_ref = relationship("Category", back_populates="products")

    @property
    def category_name(self):
        """Name of the linked category, falling back to the legacy column."""
        if self.category_ref is not None:
            return self.category_ref.name
        return self.category
