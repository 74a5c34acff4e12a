"""
In-Memory Entity Store

Volatile storage for users, meals, carts, cart items, orders, order items
and login sessions. Every collection is a dict keyed by an auto-incrementing
integer id (sessions are keyed by their token). Restarting the process wipes
everything.

Reads hand out copies; all writes go through the store methods.
"""

import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from config import DEFAULT_USER_POINTS
from schemas import Cart, CartItem, Meal, Order, OrderItem, Session, User


class StoreError(Exception):
    """Base class for entity store errors."""


class NotFoundError(StoreError, LookupError):
    """A record addressed by id does not exist."""


class DanglingReferenceError(StoreError):
    """A stored record points at a user or meal that no longer exists."""


COLLECTIONS = ("users", "meals", "carts", "cart_items", "orders", "order_items")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore:
    def __init__(self) -> None:
        # held by the order transaction for its check-then-debit sequence
        self.lock = threading.RLock()
        self.reset()

    def reset(self) -> None:
        self._tables: Dict[str, Dict[int, Any]] = {name: {} for name in COLLECTIONS}
        self._counters: Dict[str, int] = {name: 1 for name in COLLECTIONS}
        self._sessions: Dict[str, Session] = {}

    def _next_id(self, collection: str) -> int:
        next_id = self._counters[collection]
        self._counters[collection] = next_id + 1
        return next_id

    def _require(self, collection: str, _id: int, label: str):
        record = self._tables[collection].get(_id)
        if record is None:
            raise NotFoundError(f"{label} not found")
        return record

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        user = self._tables["users"].get(user_id)
        return _copy(user)

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._tables["users"].values():
            if user.username == username:
                return _copy(user)
        return None

    def list_users(self) -> List[User]:
        return [_copy(u) for u in self._tables["users"].values()]

    def create_user(self, username: str, password_hash: str, first_name: str, last_name: str,
                    is_admin: bool = False, points: Optional[int] = None) -> User:
        user = User(
            id=self._next_id("users"),
            username=username,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            is_admin=is_admin,
            points=DEFAULT_USER_POINTS if points is None else points,
        )
        self._tables["users"][user.id] = user
        self.get_or_create_cart(user.id)
        return _copy(user)

    def update_user_points(self, user_id: int, points: int) -> User:
        if points < 0:
            raise ValueError("points balance cannot be negative")
        user = self._require("users", user_id, "User")
        user.points = points
        return _copy(user)

    def set_user_admin(self, user_id: int, is_admin: bool) -> User:
        user = self._require("users", user_id, "User")
        user.is_admin = is_admin
        return _copy(user)

    def delete_user(self, user_id: int) -> bool:
        if self._tables["users"].pop(user_id, None) is None:
            return False
        for cart in [c for c in self._tables["carts"].values() if c.user_id == user_id]:
            self._delete_items_of_cart(cart.id)
            del self._tables["carts"][cart.id]
        for token in [t for t, s in self._sessions.items() if s.user_id == user_id]:
            del self._sessions[token]
        return True

    # Meals

    def list_meals(self) -> List[Meal]:
        return [_copy(m) for m in self._tables["meals"].values()]

    def get_meal(self, meal_id: int) -> Optional[Meal]:
        return _copy(self._tables["meals"].get(meal_id))

    def list_meals_by_category(self, category: str) -> List[Meal]:
        return [_copy(m) for m in self._tables["meals"].values() if m.category == category]

    def create_meal(self, data: Dict[str, Any]) -> Meal:
        meal = Meal(id=self._next_id("meals"), **data)
        self._tables["meals"][meal.id] = meal
        return _copy(meal)

    def update_meal(self, meal_id: int, changes: Dict[str, Any]) -> Meal:
        meal = self._require("meals", meal_id, "Meal")
        payload = meal.model_dump()
        payload.update({k: v for k, v in changes.items() if k != "id"})
        updated = Meal.model_validate(payload)
        self._tables["meals"][meal_id] = updated
        return _copy(updated)

    def delete_meal(self, meal_id: int) -> bool:
        return self._tables["meals"].pop(meal_id, None) is not None

    def meal_is_referenced(self, meal_id: int) -> bool:
        for collection in ("cart_items", "order_items"):
            if any(item.meal_id == meal_id for item in self._tables[collection].values()):
                return True
        return False

    # Carts

    def get_or_create_cart(self, user_id: int) -> Cart:
        for cart in self._tables["carts"].values():
            if cart.user_id == user_id:
                return _copy(cart)
        cart = Cart(id=self._next_id("carts"), user_id=user_id)
        self._tables["carts"][cart.id] = cart
        return _copy(cart)

    def list_cart_items(self, cart_id: int) -> List[CartItem]:
        return [_copy(i) for i in self._tables["cart_items"].values() if i.cart_id == cart_id]

    def get_cart_item(self, item_id: int) -> Optional[CartItem]:
        return _copy(self._tables["cart_items"].get(item_id))

    def find_cart_item(self, cart_id: int, meal_id: int) -> Optional[CartItem]:
        for item in self._tables["cart_items"].values():
            if item.cart_id == cart_id and item.meal_id == meal_id:
                return _copy(item)
        return None

    def create_cart_item(self, cart_id: int, meal_id: int, quantity: int) -> CartItem:
        if meal_id not in self._tables["meals"]:
            raise NotFoundError("Meal not found")
        item = CartItem(id=self._next_id("cart_items"), cart_id=cart_id, meal_id=meal_id, quantity=quantity)
        self._tables["cart_items"][item.id] = item
        return _copy(item)

    def update_cart_item(self, item_id: int, quantity: int) -> CartItem:
        item = self._require("cart_items", item_id, "Cart item")
        item.quantity = quantity
        return _copy(item)

    def delete_cart_item(self, item_id: int) -> bool:
        return self._tables["cart_items"].pop(item_id, None) is not None

    def clear_cart(self, user_id: int) -> int:
        cart = self.get_or_create_cart(user_id)
        return self._delete_items_of_cart(cart.id)

    def _delete_items_of_cart(self, cart_id: int) -> int:
        doomed = [i.id for i in self._tables["cart_items"].values() if i.cart_id == cart_id]
        for item_id in doomed:
            del self._tables["cart_items"][item_id]
        return len(doomed)

    # Orders

    def insert_order(self, user_id: int, total_points: int, pickup_time: str,
                     special_instructions: Optional[str] = None, status: str = "pending") -> Order:
        order = Order(
            id=self._next_id("orders"),
            user_id=user_id,
            order_date=_now(),
            status=status,
            total_points=total_points,
            pickup_time=pickup_time,
            special_instructions=special_instructions,
        )
        self._tables["orders"][order.id] = order
        return _copy(order)

    def insert_order_item(self, order_id: int, meal_id: int, quantity: int, point_cost: int) -> OrderItem:
        item = OrderItem(
            id=self._next_id("order_items"),
            order_id=order_id,
            meal_id=meal_id,
            quantity=quantity,
            point_cost=point_cost,
        )
        self._tables["order_items"][item.id] = item
        return _copy(item)

    def get_order(self, order_id: int) -> Optional[Order]:
        return _copy(self._tables["orders"].get(order_id))

    def list_orders(self) -> List[Order]:
        return _newest_first(self._tables["orders"].values())

    def list_user_orders(self, user_id: int) -> List[Order]:
        return _newest_first(o for o in self._tables["orders"].values() if o.user_id == user_id)

    def update_order_status(self, order_id: int, status: str) -> Order:
        order = self._require("orders", order_id, "Order")
        order.status = status
        return _copy(order)

    def list_order_items(self, order_id: int) -> List[OrderItem]:
        return [_copy(i) for i in self._tables["order_items"].values() if i.order_id == order_id]

    # Sessions

    def create_session(self, user_id: int, ttl_seconds: int) -> Session:
        self.purge_expired_sessions()
        session = Session(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            expires_at=_now() + timedelta(seconds=ttl_seconds),
        )
        self._sessions[session.token] = session
        return session.model_copy()

    def get_session(self, token: str) -> Optional[Session]:
        session = self._sessions.get(token)
        if session is None:
            return None
        if session.expires_at <= _now():
            del self._sessions[token]
            return None
        return session.model_copy()

    def delete_session(self, token: str) -> bool:
        return self._sessions.pop(token, None) is not None

    def purge_expired_sessions(self) -> int:
        now = _now()
        expired = [t for t, s in self._sessions.items() if s.expires_at <= now]
        for token in expired:
            del self._sessions[token]
        return len(expired)

    def count(self, collection: str) -> int:
        return len(self._tables[collection])


# Utility

def _copy(record):
    if record is None:
        return None
    return record.model_copy(deep=True)


def _newest_first(orders) -> List[Order]:
    ordered = sorted(orders, key=lambda o: (o.order_date, o.id), reverse=True)
    return [_copy(o) for o in ordered]


store = MemoryStore()
