"""
Cart and order services

Business rules that sit between the HTTP routes and the entity store:
cart line merging, cart/meal joins and the points-based order placement.
"""

import logging
from typing import List, Optional

from config import MAX_ITEM_QUANTITY
from database import DanglingReferenceError, MemoryStore, NotFoundError
from schemas import CartItem, CartItemWithMeal, CartView, Meal, Order, OrderItemWithMeal

logger = logging.getLogger(__name__)


class RequestRejected(Exception):
    """The request is well formed but cannot be honoured (reported as 400)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _meal_for(store: MemoryStore, meal_id: int, owner: str) -> Meal:
    meal = store.get_meal(meal_id)
    if meal is None:
        raise DanglingReferenceError(f"Meal {meal_id} not found for {owner}")
    return meal


# ===================== Cart =====================
def get_cart(store: MemoryStore, user_id: int) -> CartView:
    cart = store.get_or_create_cart(user_id)
    items = []
    for item in store.list_cart_items(cart.id):
        meal = _meal_for(store, item.meal_id, f"cart item {item.id}")
        items.append(CartItemWithMeal(**item.model_dump(), meal=meal))
    total = sum(i.meal.point_cost * i.quantity for i in items)
    return CartView(cart=cart, items=items, total_points=total)


def add_to_cart(store: MemoryStore, user_id: int, meal_id: int, quantity: int) -> CartItem:
    meal = store.get_meal(meal_id)
    if meal is None:
        raise NotFoundError("Meal not found")
    if not meal.is_available:
        raise RequestRejected("Meal is not available")

    cart = store.get_or_create_cart(user_id)
    existing = store.find_cart_item(cart.id, meal_id)
    if existing:
        merged = min(existing.quantity + quantity, MAX_ITEM_QUANTITY)
        return store.update_cart_item(existing.id, merged)
    return store.create_cart_item(cart.id, meal_id, quantity)


def cart_item_of_user(store: MemoryStore, user_id: int, item_id: int) -> Optional[CartItem]:
    """Return the cart item only if it sits in this user's cart."""
    item = store.get_cart_item(item_id)
    if item is None:
        return None
    cart = store.get_or_create_cart(user_id)
    return item if item.cart_id == cart.id else None


def update_cart_item(store: MemoryStore, item_id: int, quantity: int) -> CartItem:
    return store.update_cart_item(item_id, quantity)


def remove_cart_item(store: MemoryStore, item_id: int) -> bool:
    return store.delete_cart_item(item_id)


def clear_cart(store: MemoryStore, user_id: int) -> int:
    return store.clear_cart(user_id)


# ===================== Orders =====================
def place_order(store: MemoryStore, user_id: int, pickup_time: str,
                special_instructions: Optional[str] = None) -> Order:
    """
    Turn the user's cart into an order paid for with points.

    Every lookup and check happens before the first write, so a rejected
    or failed placement leaves the cart and the balance untouched.
    """
    with store.lock:
        user = store.get_user(user_id)
        if user is None:
            raise DanglingReferenceError(f"User {user_id} not found")

        cart = store.get_or_create_cart(user_id)
        items = store.list_cart_items(cart.id)
        if not items:
            raise RequestRejected("Cart is empty")

        lines = [(item, _meal_for(store, item.meal_id, f"cart item {item.id}")) for item in items]
        total = sum(meal.point_cost * item.quantity for item, meal in lines)

        if user.points < total:
            logger.info("Order rejected for user %s: needs %s points, has %s", user_id, total, user.points)
            raise RequestRejected("Not enough points")

        order = store.insert_order(
            user_id=user_id,
            total_points=total,
            pickup_time=pickup_time,
            special_instructions=special_instructions,
        )
        for item, meal in lines:
            store.insert_order_item(order.id, meal.id, item.quantity, meal.point_cost)
        store.update_user_points(user_id, user.points - total)
        # only the lines that were ordered; anything added meanwhile stays
        for item, _ in lines:
            store.delete_cart_item(item.id)

    logger.info("Order %s placed by user %s for %s points", order.id, user_id, total)
    return order


def get_order_items(store: MemoryStore, order_id: int) -> List[OrderItemWithMeal]:
    return [
        OrderItemWithMeal(**item.model_dump(), meal=_meal_for(store, item.meal_id, f"order item {item.id}"))
        for item in store.list_order_items(order_id)
    ]


def update_order_status(store: MemoryStore, order_id: int, status: str) -> Order:
    order = store.update_order_status(order_id, status)
    logger.info("Order %s moved to %s", order_id, status)
    return order
