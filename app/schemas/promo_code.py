# app/schemas/promo_code.py
import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from app.models.promo_code_assignment import TARGET_CATEGORY, TARGET_PRODUCT
from app.schemas.base import CamelModel
from app.services.pricing.variation_pricing import ensure_utc


# ============================================
# Assignment Schemas
# ============================================

class PromoCodeAssignmentCreate(CamelModel):
    """Scope of a promo code: one product or one category."""
    product_id: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = Field(default=None, max_length=100)
    max_discount_amount: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    variation_names: Optional[List[str]] = None

    @field_validator("product_id", "category_id", "category_name")
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("variation_names")
    @classmethod
    def clean_variation_names(cls, v):
        if v is None:
            return None
        names = [name.strip() for name in v if name and name.strip()]
        return names or None

    @model_validator(mode="after")
    def exactly_one_scope(self):
        has_product = self.product_id is not None
        has_category = self.category_id is not None or self.category_name is not None
        if has_product == has_category:
            raise ValueError(
                "An assignment targets either a product or a category, not both or neither"
            )
        if has_category and self.variation_names:
            raise ValueError("Variation restrictions only apply to product assignments")
        return self

    @property
    def target_type(self) -> str:
        return TARGET_PRODUCT if self.product_id is not None else TARGET_CATEGORY


class PromoCodeAssignmentRead(CamelModel):
    id: str
    target_type: str
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    max_discount_amount: Optional[Decimal] = None
    variation_names: Optional[List[str]] = None


# ============================================
# Promo Code Schemas
# ============================================

class PromoCodeCreate(CamelModel):
    """Schema for creating a promo code."""
    code: str = Field(..., min_length=3, max_length=50)
    discount_percent: int = Field(..., ge=1, le=100)
    expires_at: Optional[datetime] = None
    usage_limit: Optional[int] = Field(default=None, ge=1)
    is_active: bool = True
    assignments: List[PromoCodeAssignmentCreate] = Field(default_factory=list)

    @field_validator("code")
    @classmethod
    def validate_code_format(cls, v):
        v = v.strip()
        # Allow alphanumeric and dashes only
        if not re.match(r"^[A-Za-z0-9\-]+$", v):
            raise ValueError("Code must contain only letters, numbers, and dashes")
        return v.upper()  # Normalize to uppercase

    @field_validator("expires_at")
    @classmethod
    def expiry_in_utc(cls, v):
        return ensure_utc(v) if v else v


class PromoCodeStatusUpdate(CamelModel):
    """Body of the activate/deactivate toggle."""
    is_active: bool


class PromoCodeRead(CamelModel):
    id: str
    code: str
    discount_percent: int
    is_active: bool
    expires_at: Optional[datetime] = None
    usage_limit: Optional[int] = None
    usage_count: int
    remaining_uses: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    assignments: List[PromoCodeAssignmentRead] = Field(default_factory=list)


class PromoCodeResponse(CamelModel):
    success: bool = True
    message: str
    data: PromoCodeRead


class PromoCodeListResponse(CamelModel):
    success: bool = True
    data: List[PromoCodeRead]


# ============================================
# Validation Schemas
# ============================================

class PromoCodeValidateRequest(CamelModel):
    code: Optional[str] = None
    # Cart entries come in several shapes, they are normalized server-side
    items: List[Dict[str, Any]] = Field(default_factory=list)
    subtotal: Optional[Decimal] = Field(default=None, ge=0)


class PromoCodeValidationData(CamelModel):
    code: str
    discount_percent: int
    assignments: List[PromoCodeAssignmentRead]
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal
    eligible_items: List[str]


class PromoCodeValidationResponse(CamelModel):
    success: bool
    message: str
    data: Optional[PromoCodeValidationData] = None
