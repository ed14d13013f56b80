# app/graphql/schema.py

import strawberry
from .queries import Query
from .mutations import Mutation

# Served standalone at /graphql and composable behind a federation gateway
schema = strawberry.federation.Schema(
    query=Query,
    mutation=Mutation,
)
