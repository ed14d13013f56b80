# app/api/v1/endpoints/categories.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.product import CategoryRead
from app.services.catalog.product_service import product_catalog_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    """Active categories in display order."""
    return product_catalog_service.get_categories(db)
