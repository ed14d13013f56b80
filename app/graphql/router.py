# app/graphql/router.py
from strawberry.fastapi import GraphQLRouter, BaseContext
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .schema import schema
from ..api.deps import decode_token
from ..db.session import get_db
from ..schemas.token import TokenPayload


class CustomContext(BaseContext):
    def __init__(self, db: Session, user: TokenPayload | None = None):
        super().__init__()
        self.db = db
        self.user = user


# Reads the optional 'Authorization: Bearer <token>' header. An invalid token
# leaves the user unset, so only the public operations succeed.
def get_context(
    request: Request,
    db: Session = Depends(get_db),
) -> CustomContext:
    auth_header = request.headers.get("Authorization")
    user = None

    if auth_header:
        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() == "bearer" and token:
            user = decode_token(token.strip())

    return CustomContext(db=db, user=user)


graphql_router = GraphQLRouter(
    schema,
    context_getter=get_context,
)
