from datetime import timedelta

import pytest

from database import MemoryStore, NotFoundError


@pytest.fixture
def db():
    """Empty store, independent of the seeded global one."""
    return MemoryStore()


def make_meal(db, name="Curd Rice Bowl", point_cost=120, category="Dinner", **extra):
    data = {
        "name": name,
        "description": "Yogurt rice",
        "image_url": "https://example.com/curd.jpg",
        "point_cost": point_cost,
        "category": category,
        "restaurant_name": "Southern Spoon",
        "prep_time": "10 min",
    }
    data.update(extra)
    return db.create_meal(data)


def test_ids_auto_increment_per_collection(db):
    first = make_meal(db)
    second = make_meal(db, name="Upma")
    user = db.create_user("a", "hash", "A", "B")
    assert (first.id, second.id) == (1, 2)
    assert user.id == 1


def test_create_user_defaults_and_creates_cart(db):
    user = db.create_user("a", "hash", "A", "B")
    assert user.points == 500
    assert user.is_admin is False
    assert db.count("carts") == 1
    assert db.get_or_create_cart(user.id).user_id == user.id


def test_get_user_by_username(db):
    db.create_user("alice", "hash", "Alice", "Liddell")
    assert db.get_user_by_username("alice").first_name == "Alice"
    assert db.get_user_by_username("bob") is None


def test_reads_return_copies(db):
    user = db.create_user("a", "hash", "A", "B")
    user.points = 0
    assert db.get_user(user.id).points == 500


def test_update_user_points_rejects_negative(db):
    user = db.create_user("a", "hash", "A", "B")
    with pytest.raises(ValueError):
        db.update_user_points(user.id, -1)
    assert db.update_user_points(user.id, 42).points == 42


def test_update_missing_records_raise_not_found(db):
    with pytest.raises(NotFoundError):
        db.update_user_points(99, 10)
    with pytest.raises(NotFoundError):
        db.update_meal(99, {"name": "x"})
    with pytest.raises(NotFoundError):
        db.update_cart_item(99, 2)
    with pytest.raises(NotFoundError):
        db.update_order_status(99, "ready")


def test_update_meal_is_partial(db):
    meal = make_meal(db, tags=["Vegetarian"])
    updated = db.update_meal(meal.id, {"point_cost": 90, "id": 1234})
    assert updated.id == meal.id
    assert updated.point_cost == 90
    assert updated.tags == ["Vegetarian"]
    assert updated.name == meal.name


def test_meals_by_category(db):
    make_meal(db, category="Dinner")
    make_meal(db, name="Upma", category="Breakfast")
    assert [m.name for m in db.list_meals_by_category("Breakfast")] == ["Upma"]
    assert db.list_meals_by_category("Brunch") == []


def test_meal_is_referenced_by_cart_or_order_items(db):
    meal = make_meal(db)
    other = make_meal(db, name="Upma")
    user = db.create_user("a", "hash", "A", "B")
    cart = db.get_or_create_cart(user.id)
    db.create_cart_item(cart.id, meal.id, 1)
    order = db.insert_order(user.id, 100, "12:30")
    db.insert_order_item(order.id, other.id, 1, 100)
    assert db.meal_is_referenced(meal.id)
    assert db.meal_is_referenced(other.id)
    assert not db.meal_is_referenced(make_meal(db, name="Pizza").id)


def test_cart_item_requires_existing_meal(db):
    user = db.create_user("a", "hash", "A", "B")
    cart = db.get_or_create_cart(user.id)
    with pytest.raises(NotFoundError):
        db.create_cart_item(cart.id, 77, 1)


def test_clear_cart_only_touches_own_cart(db):
    meal = make_meal(db)
    alice = db.create_user("alice", "hash", "A", "B")
    bob = db.create_user("bob", "hash", "B", "C")
    db.create_cart_item(db.get_or_create_cart(alice.id).id, meal.id, 2)
    db.create_cart_item(db.get_or_create_cart(bob.id).id, meal.id, 1)
    assert db.clear_cart(alice.id) == 1
    assert db.list_cart_items(db.get_or_create_cart(alice.id).id) == []
    assert len(db.list_cart_items(db.get_or_create_cart(bob.id).id)) == 1


def test_orders_listed_newest_first(db):
    user = db.create_user("a", "hash", "A", "B")
    other = db.create_user("b", "hash", "B", "C")
    first = db.insert_order(user.id, 10, "12:00")
    second = db.insert_order(user.id, 20, "13:00")
    third = db.insert_order(other.id, 30, "14:00")
    assert [o.id for o in db.list_user_orders(user.id)] == [second.id, first.id]
    assert [o.id for o in db.list_orders()] == [third.id, second.id, first.id]


def test_delete_user_removes_cart_and_sessions_but_keeps_orders(db):
    meal = make_meal(db)
    user = db.create_user("a", "hash", "A", "B")
    db.create_cart_item(db.get_or_create_cart(user.id).id, meal.id, 1)
    session = db.create_session(user.id, 60)
    db.insert_order(user.id, 120, "12:00")

    assert db.delete_user(user.id) is True
    assert db.get_user(user.id) is None
    assert db.count("carts") == 0
    assert db.count("cart_items") == 0
    assert db.get_session(session.token) is None
    assert db.count("orders") == 1
    assert db.delete_user(user.id) is False


def test_session_lifecycle(db):
    user = db.create_user("a", "hash", "A", "B")
    session = db.create_session(user.id, 60)
    assert db.get_session(session.token).user_id == user.id
    assert db.delete_session(session.token) is True
    assert db.get_session(session.token) is None


def test_expired_session_is_dropped(db):
    user = db.create_user("a", "hash", "A", "B")
    session = db.create_session(user.id, 60)
    db._sessions[session.token].expires_at -= timedelta(seconds=61)
    assert db.get_session(session.token) is None
    assert session.token not in db._sessions


def test_reset_wipes_everything(db):
    make_meal(db)
    user = db.create_user("a", "hash", "A", "B")
    db.create_session(user.id, 60)
    db.reset()
    assert db.list_meals() == []
    assert db.list_users() == []
    assert db._sessions == {}
    assert make_meal(db).id == 1


def test_new_session_purges_expired_ones(db):
    user = db.create_user("a", "hash", "A", "B")
    stale = db.create_session(user.id, 60)
    db._sessions[stale.token].expires_at -= timedelta(seconds=61)
    fresh = db.create_session(user.id, 60)
    assert set(db._sessions) == {fresh.token}
    assert db.purge_expired_sessions() == 0
