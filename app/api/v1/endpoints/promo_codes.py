# app/api/v1/endpoints/promo_codes.py
"""
Promo code endpoints: storefront validation, admin management and the
internal redemption hook called when an order is confirmed.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.api import deps
from app.core.config import settings
from app.core.limiter import limiter
from app.db.session import get_db
from app.models.promo_code import PromoCode
from app.schemas.base import MessageResponse
from app.schemas.promo_code import (
    PromoCodeCreate,
    PromoCodeListResponse,
    PromoCodeRead,
    PromoCodeResponse,
    PromoCodeStatusUpdate,
    PromoCodeValidateRequest,
    PromoCodeValidationData,
    PromoCodeValidationResponse,
)
from app.schemas.token import TokenPayload
from app.services.promotions.promo_code_service import promo_code_service

router = APIRouter(tags=["Promo Codes"])


def _to_read(promo_code: PromoCode) -> PromoCodeRead:
    return PromoCodeRead.model_validate(promo_code)


@router.post("/promo-codes/validate", response_model=PromoCodeValidationResponse)
@limiter.limit(settings.PROMO_VALIDATE_RATE_LIMIT)
def validate_promo_code(
    request: Request,
    payload: PromoCodeValidateRequest,
    db: Session = Depends(get_db),
):
    """
    Check a promo code against the current cart.

    Public endpoint. Rejections come back as `{success: false, message}` with
    a 400 or 404 status.
    """
    result = promo_code_service.validate(
        db,
        code=payload.code,
        raw_items=payload.items,
        subtotal=payload.subtotal,
    )
    promo = _to_read(result.promo_code)
    return PromoCodeValidationResponse(
        success=True,
        message=f"{promo.discount_percent}% discount applied",
        data=PromoCodeValidationData(
            code=promo.code,
            discount_percent=promo.discount_percent,
            assignments=promo.assignments,
            subtotal=result.discount.subtotal,
            discount_amount=result.discount.discount_amount,
            total=result.discount.total,
            eligible_items=result.eligible_product_ids,
        ),
    )


@router.get("/promo-codes", response_model=PromoCodeListResponse)
def list_promo_codes(
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_admin),
):
    """List every promo code, newest first (admin only)."""
    promo_codes = promo_code_service.list_promo_codes(db)
    return PromoCodeListResponse(data=[_to_read(p) for p in promo_codes])


@router.post(
    "/promo-codes",
    response_model=PromoCodeResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_promo_code(
    promo_in: PromoCodeCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_admin),
):
    """Create a promo code with optional product/category assignments (admin only)."""
    promo_code = promo_code_service.create_promo_code(db, promo_in)
    return PromoCodeResponse(message="Promo code created", data=_to_read(promo_code))


@router.patch("/promo-codes/{promoCodeId}", response_model=PromoCodeResponse)
def update_promo_code_status(
    promoCodeId: str,
    status_in: PromoCodeStatusUpdate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_admin),
):
    """Activate or deactivate a promo code (admin only)."""
    promo_code = promo_code_service.set_active(db, promoCodeId, status_in.is_active)
    state = "activated" if promo_code.is_active else "deactivated"
    return PromoCodeResponse(message=f"Promo code {state}", data=_to_read(promo_code))


@router.delete("/promo-codes/{promoCodeId}", response_model=MessageResponse)
def delete_promo_code(
    promoCodeId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_admin),
):
    """Permanently delete a promo code and its assignments (admin only)."""
    promo_code_service.delete_promo_code(db, promoCodeId)
    return MessageResponse(message="Promo code deleted")


@router.post(
    "/internal/promo-codes/{promoCodeId}/redeem",
    response_model=PromoCodeResponse,
    tags=["Internal"],
)
def redeem_promo_code(
    promoCodeId: str,
    db: Session = Depends(get_db),
    api_key: str = Depends(deps.get_internal_api_key),
):
    """
    Internal endpoint for the order flow: counts one use of the code.
    Fails without counting when the code is inactive, expired or used up.
    """
    promo_code = promo_code_service.redeem(db, promoCodeId)
    return PromoCodeResponse(message="Promo code redeemed", data=_to_read(promo_code))
