from datetime import datetime, timedelta, timezone
from decimal import Decimal

from app.crud.promo_code_crud import promo_code_crud
from tests.utils.catalog import create_random_product
from tests.utils.promo_code import create_random_promo_code


def test_create_promo_code_with_assignments(db_session):
    """
    Tests that a code and its assignments are stored together.
    """
    # ARRANGE
    product = create_random_product(db_session, name="Vetiver")

    # ACT
    promo = create_random_promo_code(
        db_session,
        code="vetiver-15",
        discount_percent=15,
        assignments=[
            {
                "product_id": product.id,
                "max_discount_amount": "20.00",
                "variation_names": ["50ml"],
            },
            {"category_name": "Fragrance"},
        ],
    )

    # ASSERT
    assert promo.id.startswith("promo_")
    assert promo.code == "VETIVER-15"
    assert promo.usage_count == 0
    assert promo.remaining_uses is None
    assert len(promo.assignments) == 2

    product_assignment = next(a for a in promo.assignments if a.target_type == "product")
    assert product_assignment.product_name == "Vetiver"
    assert product_assignment.max_discount_amount == Decimal("20.00")
    assert product_assignment.variation_names == ["50ml"]


def test_get_by_code_is_case_insensitive(db_session):
    create_random_promo_code(db_session, code="SPRING")

    assert promo_code_crud.get_by_code(db_session, "  spring ") is not None
    assert promo_code_crud.get_by_code(db_session, "AUTUMN") is None


def test_get_all_newest_first(db_session):
    first = create_random_promo_code(db_session, code="FIRST")
    second = create_random_promo_code(db_session, code="SECOND")
    first.created_at = datetime.now(timezone.utc) - timedelta(days=1)
    db_session.commit()

    codes = [promo.code for promo in promo_code_crud.get_all(db_session)]

    assert codes == [second.code, "FIRST"]


def test_delete_cascades_assignments(db_session):
    promo = create_random_promo_code(db_session, code="GONE", assignments=[{"category_name": "Hair"}])

    assert promo_code_crud.delete(db_session, promo.id) is True
    assert promo_code_crud.get(db_session, promo.id) is None
    assert promo_code_crud.delete(db_session, promo.id) is False


def test_increment_usage_stops_at_limit(db_session):
    promo = create_random_promo_code(db_session, code="LIMITED", usage_limit=2)

    results = [promo_code_crud.increment_usage_if_available(db_session, promo.id) for _ in range(3)]

    assert results == [True, True, False]
    db_session.refresh(promo)
    assert promo.usage_count == 2
    assert promo.remaining_uses == 0


def test_increment_usage_skips_inactive_and_expired(db_session):
    inactive = create_random_promo_code(db_session, code="INACTIVE", is_active=False)
    expired = create_random_promo_code(
        db_session, code="EXPIRED", expires_at=datetime.now(timezone.utc) - timedelta(hours=1)
    )

    assert promo_code_crud.increment_usage_if_available(db_session, inactive.id) is False
    assert promo_code_crud.increment_usage_if_available(db_session, expired.id) is False
