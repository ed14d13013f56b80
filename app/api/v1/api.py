# app/api/v1/api.py

from fastapi import APIRouter
from app.api.v1.endpoints import (
    categories,
    favorites,
    health,
    products,
    promo_codes,
)

# This is the main router for the v1 API.
# It will include all the specific endpoint routers.
api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(promo_codes.router)
api_router.include_router(products.router)
api_router.include_router(categories.router)
api_router.include_router(favorites.router)
