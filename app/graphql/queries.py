# app/graphql/queries.py
import strawberry
from typing import List
from fastapi import HTTPException
from strawberry.types import Info

from ..crud.favorite_crud import favorite_crud
from ..services.catalog.product_service import product_catalog_service
from .types import ProductType, product_from_summary


@strawberry.type
class Query:
    @strawberry.field
    def products(self, ids: List[strawberry.ID], info: Info) -> List[ProductType]:
        """
        Publicly fetches published products by id, in the order given.
        Unknown ids are skipped.
        """
        db = info.context.db
        summaries = product_catalog_service.get_products_in_order(
            db, [str(product_id) for product_id in ids]
        )
        return [product_from_summary(summary) for summary in summaries]

    @strawberry.field
    def favorites(self, info: Info) -> List[ProductType]:
        """The signed-in user's favorite products, most recently added first."""
        user = info.context.user
        if not user:
            raise HTTPException(status_code=401, detail="Not authenticated")

        db = info.context.db
        products = favorite_crud.get_products(db, user.sub)
        return [
            product_from_summary(product_catalog_service.summarize(product))
            for product in products
        ]
