# app/schemas/favorite.py
from typing import List

from app.schemas.base import CamelModel


class FavoriteStatus(CamelModel):
    success: bool = True
    product_id: str
    is_favorited: bool


class FavoriteIds(CamelModel):
    product_ids: List[str]
