from app.crud.category_crud import category_crud
from app.crud.favorite_crud import favorite_crud
from app.crud.product_crud import product_crud
from tests.utils.catalog import create_random_category, create_random_product


def test_get_published_in_order_keeps_request_order(db_session):
    """
    Tests that the batch fetch follows the order of the requested ids.
    """
    # ARRANGE
    a = create_random_product(db_session, name="Alpha")
    b = create_random_product(db_session, name="Bravo")
    c = create_random_product(db_session, name="Charlie")
    hidden = create_random_product(db_session, name="Hidden", is_published=False)

    # ACT
    products = product_crud.get_published_in_order(
        db_session, [c.id, "prod_unknown", a.id, hidden.id, c.id, b.id]
    )

    # ASSERT
    assert [p.id for p in products] == [c.id, a.id, b.id]


def test_get_existing_ids(db_session):
    product = create_random_product(db_session)

    assert product_crud.get_existing_ids(db_session, [product.id, "nope"]) == {product.id}
    assert product_crud.get_existing_ids(db_session, []) == set()


def test_categories_in_display_order(db_session):
    create_random_category(db_session, name="Zeta", sort_order=1)
    create_random_category(db_session, name="Beta", sort_order=2)
    create_random_category(db_session, name="Alpha", sort_order=1)
    create_random_category(db_session, name="Retired", is_active=False)

    names = [c.name for c in category_crud.get_all(db_session)]

    assert names == ["Alpha", "Zeta", "Beta"]
    assert len(category_crud.get_all(db_session, include_inactive=True)) == 4


def test_favorites_round_trip(db_session):
    a = create_random_product(db_session, name="Alpha")
    b = create_random_product(db_session, name="Bravo")

    favorite_crud.create(db_session, "user_1", a.id)
    favorite_crud.create(db_session, "user_1", b.id)
    favorite_crud.create(db_session, "user_2", a.id)

    assert set(favorite_crud.get_product_ids(db_session, "user_1")) == {a.id, b.id}
    assert [p.id for p in favorite_crud.get_products(db_session, "user_2")] == [a.id]

    assert favorite_crud.remove(db_session, "user_1", a.id) is True
    assert favorite_crud.remove(db_session, "user_1", a.id) is False
    assert favorite_crud.get_product_ids(db_session, "user_1") == [b.id]
