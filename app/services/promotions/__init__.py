# app/services/promotions/__init__.py
from .promo_code_service import PromoCodeService, check_validity, promo_code_service

__all__ = [
    "PromoCodeService",
    "check_validity",
    "promo_code_service",
]
