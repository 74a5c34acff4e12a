import logging
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import auth
import services
from config import CORS_ORIGINS, LOG_LEVEL, PORT, SEED_SAMPLE_DATA
from database import DanglingReferenceError, NotFoundError, store
from schemas import (
    CartItem, CartItemCreate, CartItemUpdate, CartView, CreateOrderRequest, LoginRequest, Meal,
    MealCreate, MealUpdate, MessageResponse, Order, OrderItemWithMeal, RegisterRequest,
    UpdateOrderStatusRequest, UpdateRoleRequest, User, UserPublic,
)
from seed import seed_sample_data
from services import RequestRejected

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Campus Meal Ordering API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if SEED_SAMPLE_DATA:
    seed_sample_data(store)


# ===================== Error handlers =====================
# Every error body is {"message": ...}
@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail},
                        headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    logger.debug("Rejected invalid input on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"message": "Invalid input"})


@app.exception_handler(RequestRejected)
async def request_rejected(request: Request, exc: RequestRejected):
    return JSONResponse(status_code=400, content={"message": exc.message})


@app.exception_handler(NotFoundError)
async def not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"message": str(exc)})


@app.exception_handler(DanglingReferenceError)
async def dangling_reference(request: Request, exc: DanglingReferenceError):
    logger.error("Broken reference while handling %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    logger.exception("Unexpected error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# ===================== Public Endpoints =====================
@app.get("/")
def root():
    return {"message": "Campus Meal Ordering API running"}


# ===================== Auth =====================
@app.post("/api/register", response_model=UserPublic, status_code=201)
def register(payload: RegisterRequest, response: Response):
    if store.get_user_by_username(payload.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    user = store.create_user(
        username=payload.username,
        password_hash=auth.hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    auth.login(response, store, user)
    logger.info("Registered user %s (%s)", user.id, user.username)
    return user


@app.post("/api/login", response_model=UserPublic)
def login(payload: LoginRequest, response: Response):
    user = auth.authenticate(store, payload.username, payload.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    auth.login(response, store, user)
    return user


@app.post("/api/logout", response_model=MessageResponse)
def logout(request: Request, response: Response):
    auth.logout(request, response, store)
    return MessageResponse(message="Logged out")


@app.get("/api/user", response_model=UserPublic)
def current_user(user: User = Depends(auth.get_current_user)):
    return user


# ===================== Meals =====================
@app.get("/api/meals", response_model=List[Meal])
def list_meals():
    return store.list_meals()


@app.get("/api/meals/category/{category}", response_model=List[Meal])
def list_meals_by_category(category: str):
    return store.list_meals_by_category(category)


@app.get("/api/meals/{meal_id}", response_model=Meal)
def get_meal(meal_id: int):
    meal = store.get_meal(meal_id)
    if not meal:
        raise HTTPException(404, "Meal not found")
    return meal


@app.post("/api/meals", response_model=Meal, status_code=201)
def create_meal(payload: MealCreate, admin: User = Depends(auth.require_admin)):
    meal = store.create_meal(payload.model_dump())
    logger.info("Admin %s created meal %s (%s)", admin.id, meal.id, meal.name)
    return meal


@app.put("/api/meals/{meal_id}", response_model=Meal)
def update_meal(meal_id: int, payload: MealUpdate, admin: User = Depends(auth.require_admin)):
    meal = store.update_meal(meal_id, payload.model_dump(exclude_unset=True))
    logger.info("Admin %s updated meal %s", admin.id, meal_id)
    return meal


@app.delete("/api/meals/{meal_id}", status_code=204)
def delete_meal(meal_id: int, admin: User = Depends(auth.require_admin)):
    if not store.get_meal(meal_id):
        raise HTTPException(404, "Meal not found")
    if store.meal_is_referenced(meal_id):
        raise HTTPException(409, "Meal is referenced by existing carts or orders")
    store.delete_meal(meal_id)
    logger.info("Admin %s deleted meal %s", admin.id, meal_id)
    return Response(status_code=204)


# ===================== Cart =====================
@app.get("/api/cart", response_model=CartView)
def get_cart(user: User = Depends(auth.get_current_user)):
    return services.get_cart(store, user.id)


@app.post("/api/cart/items", response_model=CartItem, status_code=201)
def add_cart_item(payload: CartItemCreate, user: User = Depends(auth.get_current_user)):
    return services.add_to_cart(store, user.id, payload.meal_id, payload.quantity)


@app.put("/api/cart/items/{item_id}", response_model=CartItem)
def update_cart_item(item_id: int, payload: CartItemUpdate, user: User = Depends(auth.get_current_user)):
    if not services.cart_item_of_user(store, user.id, item_id):
        raise HTTPException(404, "Cart item not found")
    return services.update_cart_item(store, item_id, payload.quantity)


@app.delete("/api/cart/items/{item_id}", status_code=204)
def remove_cart_item(item_id: int, user: User = Depends(auth.get_current_user)):
    if not services.cart_item_of_user(store, user.id, item_id):
        raise HTTPException(404, "Cart item not found")
    services.remove_cart_item(store, item_id)
    return Response(status_code=204)


@app.delete("/api/cart", status_code=204)
def clear_cart(user: User = Depends(auth.get_current_user)):
    services.clear_cart(store, user.id)
    return Response(status_code=204)


# ===================== Orders =====================
def _visible_order(order_id: int, user: User) -> Order:
    order = store.get_order(order_id)
    if not order:
        raise HTTPException(404, "Order not found")
    if order.user_id != user.id and not user.is_admin:
        raise HTTPException(403, "Forbidden")
    return order


@app.post("/api/orders", response_model=Order, status_code=201)
def create_order(payload: CreateOrderRequest, user: User = Depends(auth.get_current_user)):
    return services.place_order(store, user.id, payload.pickup_time, payload.special_instructions)


@app.get("/api/orders", response_model=List[Order])
def list_orders(user: User = Depends(auth.get_current_user)):
    return store.list_user_orders(user.id)


@app.get("/api/orders/{order_id}", response_model=Order)
def get_order(order_id: int, user: User = Depends(auth.get_current_user)):
    return _visible_order(order_id, user)


@app.get("/api/orders/{order_id}/items", response_model=List[OrderItemWithMeal])
def get_order_items(order_id: int, user: User = Depends(auth.get_current_user)):
    _visible_order(order_id, user)
    return services.get_order_items(store, order_id)


@app.put("/api/orders/{order_id}/status", response_model=Order)
def update_order_status(order_id: int, payload: UpdateOrderStatusRequest,
                        admin: User = Depends(auth.require_admin)):
    return services.update_order_status(store, order_id, payload.status)


# ===================== Admin =====================
@app.get("/api/admin/orders", response_model=List[Order])
def list_all_orders(admin: User = Depends(auth.require_admin)):
    return store.list_orders()


@app.get("/api/admin/users", response_model=List[UserPublic])
def list_users(admin: User = Depends(auth.require_admin)):
    return store.list_users()


@app.put("/api/admin/users/{user_id}/role", response_model=UserPublic)
def update_user_role(user_id: int, payload: UpdateRoleRequest, admin: User = Depends(auth.require_admin)):
    user = store.set_user_admin(user_id, payload.is_admin)
    logger.info("Admin %s set is_admin=%s for user %s", admin.id, payload.is_admin, user_id)
    return user


@app.delete("/api/admin/users/{user_id}", status_code=204)
def delete_user(user_id: int, admin: User = Depends(auth.require_admin)):
    if user_id == admin.id:
        raise HTTPException(400, "Cannot delete your own account")
    if not store.delete_user(user_id):
        raise HTTPException(404, "User not found")
    logger.info("Admin %s deleted user %s", admin.id, user_id)
    return Response(status_code=204)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
