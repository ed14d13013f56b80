# app/models/category.py
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, func, true
from sqlalchemy.orm import relationship
from app.db.base_class import Base
import uuid


class Category(Base):
    __tablename__ = "categories"

    id = Column(String, primary_key=True, default=lambda: f"cat_{uuid.uuid4().hex[:12]}")
    name = Column(String(100), nullable=False)
    slug = Column(String(120), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    image = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    sort_order = Column(Integer, default=0, server_default="0", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    products = relationship("Product", back_populates="category_ref")
