"""
Scrap Connect API routes and application factory.

Routes live on a module-level APIRouter and create_app() builds a FastAPI
instance that owns its own Database, so every app (and every test) starts
from the seed data with the order counter at 1. Stores reach the routes
through the get_db dependency. Body models default to empty so a request
without a body gets the same field-level errors as an empty JSON object.
"""
import logging
import os
import time
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import Database, utcnow
from errors import ScrapConnectError
from schemas import (
    LoginBody,
    OrderCreateBody,
    PriceUpsertBody,
    RegisterBody,
    StatusUpdateBody,
)
from stats import compute_stats

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

# ----------------------- Config -----------------------
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 5000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]

router = APIRouter()


# ----------------------- Utils -----------------------
def get_db(request: Request) -> Database:
    return request.app.state.db


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def handle_store_error(request: Request, exc: ScrapConnectError):
    return error_response(exc.status_code, exc.message)


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (404, 405):
        return error_response(404, f"Route {request.method} {request.url.path} not found")
    return error_response(exc.status_code, str(exc.detail))


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = errors[0].get("msg", "malformed") if errors else "malformed"
    return error_response(400, f"Invalid request body: {detail}")


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error")


# ----------------------- Health -----------------------
@router.get("/")
def root():
    return {"message": "Scrap Connect API", "version": API_VERSION, "status": "running"}


@router.get("/api/health")
def health(request: Request):
    return {
        "status": "OK",
        "message": "Scrap Connect API is running!",
        "timestamp": utcnow().isoformat(),
        "uptime": time.monotonic() - request.app.state.started_at,
    }


# ----------------------- Auth -----------------------
@router.post("/api/auth/register", status_code=201)
def register(body: RegisterBody = RegisterBody(), db: Database = Depends(get_db)):
    user = db.users.register(body.username, body.mobile, body.password)
    return {"success": True, "message": "Registration successful", "user": user.public()}


@router.post("/api/auth/login")
def login(body: LoginBody = LoginBody(), db: Database = Depends(get_db)):
    user = db.users.login(body.mobile, body.password)
    return {"success": True, "message": "Login successful", "user": user.public()}


@router.get("/api/auth/profile/{mobile}")
def profile(mobile: str, db: Database = Depends(get_db)):
    user = db.users.get_profile(mobile)
    return {"success": True, "user": user.public()}


# ----------------------- Orders -----------------------
@router.post("/api/orders", status_code=201)
def create_order(body: OrderCreateBody = OrderCreateBody(), db: Database = Depends(get_db)):
    order = db.orders.create(
        body.scrap_type, body.weight, body.mobile, body.description, body.address
    )
    return {
        "success": True,
        "message": "Pickup request created successfully",
        "order": order.to_json(),
    }


@router.get("/api/orders/{mobile}")
def orders_by_mobile(mobile: str, db: Database = Depends(get_db)):
    orders = db.orders.list_by_mobile(mobile)
    return {"success": True, "count": len(orders), "orders": [o.to_json() for o in orders]}


@router.get("/api/orders")
def list_orders(db: Database = Depends(get_db)):
    orders = db.orders.list_all()
    return {"success": True, "count": len(orders), "orders": [o.to_json() for o in orders]}


@router.delete("/api/orders/{order_id}")
def delete_order(order_id: str, db: Database = Depends(get_db)):
    order = db.orders.delete(order_id)
    return {
        "success": True,
        "message": "Order deleted successfully",
        "deletedOrder": order.to_json(),
    }


@router.put("/api/orders/{order_id}/status")
def update_order_status(
    order_id: str, body: StatusUpdateBody = StatusUpdateBody(), db: Database = Depends(get_db)
):
    order = db.orders.update_status(order_id, body.status)
    return {
        "success": True,
        "message": "Order status updated successfully",
        "order": order.to_json(),
    }


# ----------------------- Prices -----------------------
@router.get("/api/prices")
def list_prices(db: Database = Depends(get_db)):
    prices = db.prices.list_all()
    return {
        "success": True,
        "count": len(prices),
        "prices": [p.to_json() for p in prices],
        "lastUpdated": utcnow().isoformat(),
    }


@router.post("/api/prices")
def upsert_price(body: PriceUpsertBody = PriceUpsertBody(), db: Database = Depends(get_db)):
    price, result = db.prices.upsert(body.scrap_type, body.price)
    if result == "updated":
        message = f"Price updated for {body.scrap_type}"
    else:
        message = f"New price added for {body.scrap_type}"
    return {"success": True, "message": message, "updatedPrice": price.to_json()}


# ----------------------- Admin -----------------------
@router.get("/api/admin/users")
def admin_users(db: Database = Depends(get_db)):
    users = db.users.list_all()
    return {"success": True, "count": len(users), "users": [u.public() for u in users]}


@router.get("/api/admin/stats")
def admin_stats(db: Database = Depends(get_db)):
    return {"success": True, "stats": compute_stats(db)}


# ----------------------- App -----------------------
def create_app(db: Optional[Database] = None) -> FastAPI:
    app = FastAPI(title="Scrap Connect API", version=API_VERSION)
    app.state.db = db if db is not None else Database()
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ScrapConnectError, handle_store_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(router)
    return app


app = create_app()


def log_banner() -> None:
    logger.info("Scrap Connect API running on port %s", PORT)
    logger.info("Health check: http://localhost:%s/api/health", PORT)
    logger.info("Available endpoints:")
    for route in router.routes:
        for method in sorted(route.methods):
            logger.info("   %-6s %s", method, route.path)
    logger.info("Demo accounts:")
    logger.info("   Regular User: 9876543210 / password123")
    logger.info("   Admin User: 9999999999 / admin123")


def main() -> None:
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log_banner()
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
