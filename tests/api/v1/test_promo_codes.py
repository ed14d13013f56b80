# tests/api/v1/test_promo_codes.py

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.core.exceptions import UsageExhaustedError
from app.services.promotions.discount_calculator import DiscountBreakdown
from app.services.promotions.promo_code_service import (
    PromoValidationResult,
    promo_code_service,
)
from tests.utils.auth import get_admin_authentication_headers, get_internal_headers


def make_promo_code(**overrides):
    now = datetime.now(timezone.utc)
    fields = dict(
        id="promo_1",
        code="SAVE10",
        discount_percent=10,
        is_active=True,
        expires_at=None,
        usage_limit=None,
        usage_count=0,
        remaining_uses=None,
        created_at=now,
        updated_at=now,
        assignments=[],
    )
    fields.update(overrides)
    return MagicMock(**fields)


# --- VALIDATE ---
def test_validate_success(monkeypatch, test_client: TestClient):
    validate_mock = MagicMock(
        return_value=PromoValidationResult(
            promo_code=make_promo_code(),
            discount=DiscountBreakdown(
                subtotal=Decimal("50.00"),
                discount_amount=Decimal("5.00"),
                total=Decimal("45.00"),
            ),
            eligible_product_ids=["prod_1"],
        )
    )
    monkeypatch.setattr(promo_code_service, "validate", validate_mock)

    response = test_client.post(
        "/api/v1/promo-codes/validate",
        json={"code": "save10", "items": [{"productId": "prod_1", "price": 50}]},
    )

    assert response.status_code == 200
    assert response.json()["data"]["total"] == "45.00"
    _, kwargs = validate_mock.call_args
    assert kwargs["code"] == "save10"
    assert kwargs["raw_items"] == [{"productId": "prod_1", "price": 50}]
    assert kwargs["subtotal"] is None


def test_validate_database_error_is_hidden(monkeypatch, test_client: TestClient):
    monkeypatch.setattr(
        promo_code_service,
        "validate",
        MagicMock(side_effect=OperationalError("SELECT 1", {}, Exception("db down"))),
    )

    response = test_client.post("/api/v1/promo-codes/validate", json={"code": "X"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "An unexpected error occurred"}


# --- ADMIN ---
def test_list_promo_codes_as_admin(monkeypatch, test_client: TestClient):
    monkeypatch.setattr(
        promo_code_service,
        "list_promo_codes",
        MagicMock(return_value=[make_promo_code(), make_promo_code(id="promo_2", code="B")]),
    )

    response = test_client.get(
        "/api/v1/promo-codes", headers=get_admin_authentication_headers()
    )

    assert response.status_code == 200
    assert [p["id"] for p in response.json()["data"]] == ["promo_1", "promo_2"]


def test_expired_token_is_rejected(test_client: TestClient):
    response = test_client.get(
        "/api/v1/promo-codes", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Could not validate credentials"
    assert response.headers["WWW-Authenticate"] == "Bearer"


# --- INTERNAL ---
def test_redeem_exhausted(monkeypatch, test_client: TestClient):
    monkeypatch.setattr(
        promo_code_service, "redeem", MagicMock(side_effect=UsageExhaustedError())
    )

    response = test_client.post(
        "/api/v1/internal/promo-codes/promo_1/redeem", headers=get_internal_headers()
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Usage limit reached"


def test_redeem_wrong_key(test_client: TestClient):
    response = test_client.post(
        "/api/v1/internal/promo-codes/promo_1/redeem",
        headers={"X-Internal-Api-Key": "wrong"},
    )

    assert response.status_code == 401
    assert response.json()["success"] is False
