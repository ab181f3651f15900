"""
In-memory stores for users, pickup orders and market prices.

Nothing is persisted: a new Database starts from the seed users and prices,
an empty order list and an order counter of 1. FastAPI runs sync routes on a
thread pool, so every store guards its list with its own lock.
"""
import logging
import math
import re
import threading
from datetime import datetime, timezone
from typing import List, Optional

from errors import AuthError, ConflictError, FormatError, NotFoundError, ValidationError
from schemas import Order, OrderStatus, Price, User, can_transition

logger = logging.getLogger(__name__)

MOBILE_PATTERN = re.compile(r"[6-9][0-9]{9}")

SEED_CREATED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)

DEMO_USERS = [
    {"username": "John Doe", "mobile": "9876543210", "password": "password123"},
    {"username": "Admin User", "mobile": "9999999999", "password": "admin123"},
]

DEMO_PRICES = [
    {"scrap_type": "Copper", "price": 650},
    {"scrap_type": "Iron", "price": 30},
    {"scrap_type": "Aluminum", "price": 140},
    {"scrap_type": "Steel", "price": 35},
    {"scrap_type": "Brass", "price": 350},
    {"scrap_type": "Paper", "price": 8},
    {"scrap_type": "Plastic", "price": 12},
]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_mobile(mobile) -> bool:
    return isinstance(mobile, str) and MOBILE_PATTERN.fullmatch(mobile) is not None


def parse_positive_number(value) -> Optional[float]:
    """Return value as a positive finite float, or None if it is not one."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def newest_first(records, key="created_at"):
    # sorted() is stable with reverse=True, so equal timestamps keep insertion order
    return sorted(records, key=lambda r: getattr(r, key), reverse=True)


class UserStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        now = utcnow()
        self._users: List[User] = [
            User(id=i, created_at=SEED_CREATED_AT, last_login=now, **u)
            for i, u in enumerate(DEMO_USERS, start=1)
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def register(self, username, mobile, password) -> User:
        if not username or not mobile or not password:
            raise ValidationError("Username, mobile number, and password are required")
        if not is_valid_mobile(mobile):
            raise FormatError("Invalid mobile number format")
        with self._lock:
            if any(u.mobile == mobile for u in self._users):
                raise ConflictError("User with this mobile number already exists")
            now = utcnow()
            user = User(
                id=len(self._users) + 1,
                username=username.strip(),
                mobile=mobile.strip(),
                password=password,
                created_at=now,
                last_login=now,
            )
            self._users.append(user)
        logger.info("Registration successful for %s", user.username)
        return user

    def login(self, mobile, password) -> User:
        if not mobile or not password:
            raise ValidationError("Mobile number and password are required")
        if not is_valid_mobile(mobile):
            raise FormatError("Invalid mobile number format")
        with self._lock:
            user = next(
                (u for u in self._users if u.mobile == mobile and u.password == password),
                None,
            )
            if user is None:
                logger.warning("Failed login attempt for %s", mobile)
                raise AuthError("Invalid mobile number or password")
            user.last_login = utcnow()
        logger.info("Login successful for %s", user.username)
        return user

    def find_by_mobile(self, mobile) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users if u.mobile == mobile), None)

    def get_profile(self, mobile) -> User:
        if not is_valid_mobile(mobile):
            raise FormatError("Invalid mobile number format")
        user = self.find_by_mobile(mobile)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def list_all(self) -> List[User]:
        with self._lock:
            users = list(self._users)
        return newest_first(users)


class OrderStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._orders: List[Order] = []
        self._counter = 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)

    def create(self, scrap_type, weight, mobile, description=None, address=None) -> Order:
        if not scrap_type or not weight or not mobile:
            raise ValidationError("Missing required fields: scrapType, weight, mobile")
        if not is_valid_mobile(mobile):
            raise FormatError("Invalid mobile number. Must be 10 digits starting with 6-9")
        parsed_weight = parse_positive_number(weight)
        if parsed_weight is None:
            raise ValidationError("Weight must be a positive number")

        now = utcnow()
        with self._lock:
            order = Order(
                order_id=f"SC{self._counter:06d}",
                scrap_type=scrap_type.strip(),
                weight=parsed_weight,
                mobile=mobile.strip(),
                description=description.strip() if description else "",
                address=address.strip() if address else "",
                status=OrderStatus.OPEN,
                created_at=now,
                updated_at=now,
            )
            self._counter += 1
            self._orders.append(order)
        logger.info("New order created: %s for %s", order.order_id, order.mobile)
        return order

    def get(self, order_id) -> Order:
        with self._lock:
            order = next((o for o in self._orders if o.order_id == order_id), None)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def list_by_mobile(self, mobile) -> List[Order]:
        if not is_valid_mobile(mobile):
            raise FormatError("Invalid mobile number format")
        with self._lock:
            orders = [o for o in self._orders if o.mobile == mobile]
        return newest_first(orders)

    def list_all(self) -> List[Order]:
        with self._lock:
            orders = list(self._orders)
        return newest_first(orders)

    def update_status(self, order_id, status) -> Order:
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError(
                "Invalid status. Must be one of: " + ", ".join(OrderStatus.values())
            ) from None
        with self._lock:
            order = next((o for o in self._orders if o.order_id == order_id), None)
            if order is None:
                raise NotFoundError("Order not found")
            if not can_transition(order.status, target):
                raise ValidationError(
                    f"Cannot change status from {order.status.value} to {target.value}"
                )
            order.status = target
            order.updated_at = utcnow()
        logger.info("Order %s status updated to: %s", order_id, target.value)
        return order

    def delete(self, order_id) -> Order:
        with self._lock:
            index = next(
                (i for i, o in enumerate(self._orders) if o.order_id == order_id), None
            )
            if index is None:
                raise NotFoundError("Order not found")
            order = self._orders.pop(index)
        logger.info("Order %s deleted by admin", order_id)
        return order


class PriceStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        now = utcnow()
        self._prices: List[Price] = [
            Price(id=i, last_updated=now, **p) for i, p in enumerate(DEMO_PRICES, start=1)
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._prices)

    def list_all(self) -> List[Price]:
        with self._lock:
            prices = list(self._prices)
        return sorted(prices, key=lambda p: p.price, reverse=True)

    def upsert(self, scrap_type, price):
        """Update the price for scrap_type, or add it if unknown.

        Returns (price_record, "updated" | "added").
        """
        if not scrap_type or not price:
            raise ValidationError("Missing required fields: scrapType, price")
        parsed_price = parse_positive_number(price)
        if parsed_price is None:
            raise ValidationError("Price must be a positive number")

        name = scrap_type.strip()
        with self._lock:
            existing = next(
                (p for p in self._prices if p.scrap_type.lower() == name.lower()), None
            )
            if existing is not None:
                existing.price = parsed_price
                existing.last_updated = utcnow()
                record, result = existing, "updated"
            else:
                record = Price(
                    id=len(self._prices) + 1,
                    scrap_type=name,
                    price=parsed_price,
                    unit="kg",
                    last_updated=utcnow(),
                )
                self._prices.append(record)
                result = "added"
        logger.info("Price %s for %s: %s/kg", result, record.scrap_type, record.price)
        return record, result


class Database:
    """The three stores backing one application instance."""

    def __init__(self) -> None:
        self.users = UserStore()
        self.orders = OrderStore()
        self.prices = PriceStore()
