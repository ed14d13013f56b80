from fastapi.testclient import TestClient
from datetime import datetime, timedelta, timezone

from app.crud.favorite_crud import favorite_crud
from tests.utils.auth import get_user_authentication_headers
from tests.utils.catalog import create_random_product
from tests.utils.promo_code import create_random_promo_code


PRODUCTS_QUERY = """
    query Products($ids: [ID!]!) {
        products(ids: $ids) {
            id
            name
            variations { name price salePrice }
            pricing { minPrice maxPrice isRange saleActive }
        }
    }
"""

VALIDATE_MUTATION = """
    mutation Validate($code: String!, $items: [CartItemInput!]!) {
        validatePromoCode(code: $code, items: $items) {
            success
            message
            data { code discountAmount total eligibleItems }
        }
    }
"""


def test_products_query_graphql(test_client_e2e: TestClient, db_session):
    a = create_random_product(db_session, name="Alpha", variations=[{"name": "S", "price": 10}])
    b = create_random_product(db_session, name="Bravo")

    response = test_client_e2e.post(
        "/graphql",
        json={"query": PRODUCTS_QUERY, "variables": {"ids": [b.id, "missing", a.id]}},
    )

    assert response.status_code == 200
    body = response.json()
    assert "errors" not in body
    products = body["data"]["products"]
    assert [p["name"] for p in products] == ["Bravo", "Alpha"]
    assert products[1]["variations"] == [{"name": "S", "price": "10", "salePrice": None}]


def test_validate_promo_code_mutation_graphql(test_client_e2e: TestClient, db_session):
    create_random_promo_code(db_session, code="GQL15", discount_percent=15)

    response = test_client_e2e.post(
        "/graphql",
        json={
            "query": VALIDATE_MUTATION,
            "variables": {
                "code": "gql15",
                "items": [{"productId": "prod_1", "price": "200.00", "quantity": 1}],
            },
        },
    )

    payload = response.json()["data"]["validatePromoCode"]
    assert payload["success"] is True
    assert payload["message"] == "15% discount applied"
    assert payload["data"]["discountAmount"] == "30.00"
    assert payload["data"]["total"] == "170.00"
    assert payload["data"]["eligibleItems"] == ["prod_1"]


def test_validate_promo_code_mutation_rejection_graphql(test_client_e2e: TestClient):
    response = test_client_e2e.post(
        "/graphql",
        json={
            "query": VALIDATE_MUTATION,
            "variables": {"code": "UNKNOWN", "items": []},
        },
    )

    payload = response.json()["data"]["validatePromoCode"]
    assert payload == {"success": False, "message": "Invalid promo code", "data": None}


FAVORITES_QUERY = """
    query {
        favorites {
            id
            name
            variations { name price originalPrice }
            pricing { minPrice saleActive }
        }
    }
"""


def test_favorites_query_graphql(test_client_e2e: TestClient, db_session):
    expiry = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()
    older = create_random_product(db_session, name="Older")
    newer = create_random_product(
        db_session,
        name="Newer",
        variations=[
            {"name": "50ml", "price": 80, "originalPrice": 100, "salePriceExpiresAt": expiry}
        ],
    )
    create_random_product(db_session, name="Not a favorite")
    favorite_crud.create(db_session, "user_gql", older.id)
    favorite_crud.create(db_session, "user_gql", newer.id)

    response = test_client_e2e.post(
        "/graphql",
        json={"query": FAVORITES_QUERY},
        headers=get_user_authentication_headers(user_id="user_gql"),
    )

    body = response.json()
    assert "errors" not in body
    favorites = body["data"]["favorites"]
    assert {p["name"] for p in favorites} == {"Older", "Newer"}
    newer_favorite = next(p for p in favorites if p["name"] == "Newer")
    assert newer_favorite["variations"][0]["originalPrice"] == "100"
    assert newer_favorite["pricing"] == {"minPrice": "80.00", "saleActive": True}


def test_favorites_query_graphql_is_per_user(test_client_e2e: TestClient, db_session):
    product = create_random_product(db_session, name="Someone else's")
    favorite_crud.create(db_session, "user_other", product.id)

    response = test_client_e2e.post(
        "/graphql",
        json={"query": FAVORITES_QUERY},
        headers=get_user_authentication_headers(user_id="user_gql"),
    )

    assert response.json()["data"]["favorites"] == []


def test_favorites_query_graphql_requires_user(test_client_e2e: TestClient):
    response = test_client_e2e.post("/graphql", json={"query": FAVORITES_QUERY})

    body = response.json()
    assert body["data"] is None
    assert body["errors"]


def test_favorites_query_graphql_ignores_invalid_token(test_client_e2e: TestClient):
    response = test_client_e2e.post(
        "/graphql",
        json={"query": FAVORITES_QUERY},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.json()["data"] is None
