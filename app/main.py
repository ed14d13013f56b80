# app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.error_handlers import register_exception_handlers
from app.core.limiter import limiter
from app.db.base_class import Base
from app.db.session import build_engine, build_session_factory
from app.graphql.router import graphql_router

# Importing the models registers every table on Base.metadata
from app import models  # noqa: F401

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
    )


# The lifespan owns the database engine: built on startup, disposed on shutdown.
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info(f"Storefront API starting up (env={settings.ENV})")

    engine = build_engine(settings.DATABASE_URL)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    if settings.CREATE_TABLES_ON_STARTUP:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables checked and created if necessary.")

    yield

    logger.info("Storefront API shutting down...")
    engine.dispose()


app = FastAPI(
    title="Storefront API",
    version="1.0.0",
    description="""
        **Storefront Service**

        Catalog, pricing and promotions backend for the online store.

        ## Features

        * **Promo Codes**: Validate codes against a cart, manage codes and their product/category scope
        * **Variation Pricing**: Sale prices with expiry, per-variation price ranges
        * **Catalog**: Batch product fetch, categories
        * **Favorites**: Per-user favorite products

        ## Authentication

        Admin and favorites endpoints require JWT authentication via the `Authorization: Bearer <token>` header.
        Internal endpoints require the `X-Internal-Api-Key` header.
        """,
    lifespan=lifespan,
)

app.state.limiter = limiter
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,  # Allow specific origins
    allow_credentials=True,  # Allow cookies and authorization headers
    allow_methods=["*"],  # Allow all methods (GET, POST, etc.)
    allow_headers=["*"],  # Allow all headers
)

app.include_router(api_router, prefix="/api/v1")
app.include_router(graphql_router, prefix="/graphql")


@app.get("/")
def read_root():
    return {"status": "Storefront API is running", "currency": settings.CURRENCY}
