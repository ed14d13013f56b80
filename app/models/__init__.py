# app/models/__init__.py
# Import all models to ensure SQLAlchemy can resolve relationships
# Order matters for dependencies - import base models first

from app.db.base_class import Base
from app.models.category import Category
from app.models.product import Product
from app.models.favorite import Favorite

# Promotion models
from app.models.promo_code import PromoCode
from app.models.promo_code_assignment import PromoCodeAssignment
