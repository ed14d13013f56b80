# app/api/v1/endpoints/favorites.py
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api import deps
from app.core.exceptions import NotFoundError, ValidationError
from app.crud.favorite_crud import favorite_crud
from app.crud.product_crud import product_crud
from app.db.session import get_db
from app.schemas.favorite import FavoriteIds, FavoriteStatus
from app.schemas.product import ProductSummary
from app.schemas.token import TokenPayload
from app.services.catalog.product_service import product_catalog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/favorites", tags=["Favorites"])


def _require_product(db: Session, product_id: str) -> None:
    if not product_crud.get_published(db, product_id):
        raise NotFoundError("Product not found")


def _add_favorite(db: Session, user_id: str, product_id: str) -> None:
    try:
        favorite_crud.create(db, user_id, product_id)
    except IntegrityError:
        # Unique (user_id, product_id) caught a concurrent add
        db.rollback()
        raise ValidationError("Product is already in your favorites")


@router.get("", response_model=List[ProductSummary])
def list_favorites(
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """The user's favorite products, most recently added first."""
    products = favorite_crud.get_products(db, current_user.sub)
    return [product_catalog_service.summarize(product) for product in products]


@router.get("/ids", response_model=FavoriteIds)
def list_favorite_ids(
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Just the ids, for marking hearts on listing pages."""
    return FavoriteIds(product_ids=favorite_crud.get_product_ids(db, current_user.sub))


@router.get("/{productId}", response_model=FavoriteStatus)
def check_favorite(
    productId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    is_favorited = favorite_crud.get(db, current_user.sub, productId) is not None
    return FavoriteStatus(product_id=productId, is_favorited=is_favorited)


@router.post(
    "/{productId}",
    response_model=FavoriteStatus,
    status_code=status.HTTP_201_CREATED,
)
def add_favorite(
    productId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    _require_product(db, productId)
    if favorite_crud.get(db, current_user.sub, productId):
        raise ValidationError("Product is already in your favorites")

    _add_favorite(db, current_user.sub, productId)
    return FavoriteStatus(product_id=productId, is_favorited=True)


@router.delete("/{productId}", response_model=FavoriteStatus)
def remove_favorite(
    productId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    if not favorite_crud.remove(db, current_user.sub, productId):
        raise NotFoundError("Product is not in your favorites")
    return FavoriteStatus(product_id=productId, is_favorited=False)


@router.post("/{productId}/toggle", response_model=FavoriteStatus)
def toggle_favorite(
    productId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Add the product when it is not a favorite yet, remove it otherwise."""
    if favorite_crud.remove(db, current_user.sub, productId):
        return FavoriteStatus(product_id=productId, is_favorited=False)

    _require_product(db, productId)
    _add_favorite(db, current_user.sub, productId)
    logger.debug(f"User {current_user.sub} favorited {productId}")
    return FavoriteStatus(product_id=productId, is_favorited=True)
