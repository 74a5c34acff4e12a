"""
Schemas for the Campus Meal Ordering System

Each stored model below corresponds to one in-memory collection of the
entity store (User -> "users", Meal -> "meals", ...). Request and response
bodies live at the bottom of the file.

JSON on the wire uses camelCase keys; snake_case names are accepted too.
"""
from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from config import MAX_ITEM_QUANTITY, MAX_PASSWORD_BYTES


OrderStatus = Literal["pending", "preparing", "ready", "completed", "cancelled"]
ORDER_STATUSES = ("pending", "preparing", "ready", "completed", "cancelled")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ===================== Stored entities =====================
class User(CamelModel):
    id: int
    username: str = Field(..., description="Unique login name")
    password_hash: str = Field(..., description="BCrypt password hash")
    first_name: str
    last_name: str
    is_admin: bool = Field(False, description="Admin privileges")
    points: int = Field(..., ge=0, description="Spendable points balance")


class NutritionInfo(CamelModel):
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0, description="grams")
    carbs: Optional[float] = Field(None, ge=0, description="grams")
    fat: Optional[float] = Field(None, ge=0, description="grams")


class Meal(CamelModel):
    id: int
    name: str
    description: str
    image_url: str
    point_cost: int = Field(..., gt=0)
    category: str = Field(..., description="Breakfast, Lunch, Dinner, ...")
    tags: List[str] = []
    restaurant_name: str
    prep_time: str = Field(..., description="Human readable, e.g. '10-15 min'")
    nutrition_info: Optional[NutritionInfo] = None
    allergens: List[str] = []
    is_available: bool = True


class Cart(CamelModel):
    id: int
    user_id: int


class CartItem(CamelModel):
    id: int
    cart_id: int
    meal_id: int
    quantity: int = Field(..., ge=1)


class Order(CamelModel):
    id: int
    user_id: int
    order_date: datetime
    status: OrderStatus = "pending"
    total_points: int = Field(..., ge=0)
    pickup_time: str
    special_instructions: Optional[str] = None


class OrderItem(CamelModel):
    id: int
    order_id: int
    meal_id: int
    quantity: int = Field(..., ge=1)
    point_cost: int = Field(..., description="Meal price at the time of ordering")


class Session(BaseModel):
    token: str
    user_id: int
    expires_at: datetime


# ===================== Responses =====================
class UserPublic(CamelModel):
    id: int
    username: str
    first_name: str
    last_name: str
    is_admin: bool
    points: int


class CartItemWithMeal(CartItem):
    meal: Meal


class CartView(CamelModel):
    cart: Cart
    items: List[CartItemWithMeal]
    total_points: int


class OrderItemWithMeal(OrderItem):
    meal: Meal


class MessageResponse(BaseModel):
    message: str


# ===================== Requests =====================
class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v):
        # bcrypt ignores everything past this many bytes
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"at most {MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(CamelModel):
    username: str
    password: str


class MealCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: str
    image_url: str
    point_cost: int = Field(..., gt=0)
    category: str = Field(..., min_length=1)
    tags: List[str] = []
    restaurant_name: str
    prep_time: str
    nutrition_info: Optional[NutritionInfo] = None
    allergens: List[str] = []
    is_available: bool = True


class MealUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    point_cost: Optional[int] = Field(None, gt=0)
    category: Optional[str] = Field(None, min_length=1)
    tags: Optional[List[str]] = None
    restaurant_name: Optional[str] = None
    prep_time: Optional[str] = None
    nutrition_info: Optional[NutritionInfo] = None
    allergens: Optional[List[str]] = None
    is_available: Optional[bool] = None

    @field_validator(
        "name", "description", "image_url", "point_cost", "category", "tags",
        "restaurant_name", "prep_time", "allergens", "is_available",
    )
    @classmethod
    def not_null(cls, v):
        # only nutrition_info may be cleared with an explicit null
        if v is None:
            raise ValueError("may not be null")
        return v


class CartItemCreate(CamelModel):
    meal_id: int = Field(..., strict=True)
    quantity: int = Field(..., strict=True, ge=1, le=MAX_ITEM_QUANTITY)


class CartItemUpdate(CamelModel):
    quantity: int = Field(..., strict=True, ge=1, le=MAX_ITEM_QUANTITY)


class CreateOrderRequest(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    pickup_time: str = Field(..., min_length=1)
    special_instructions: Optional[str] = None


class UpdateOrderStatusRequest(CamelModel):
    status: OrderStatus


class UpdateRoleRequest(CamelModel):
    is_admin: bool
