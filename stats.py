"""Admin dashboard statistics, recomputed from the stores on every request."""
import math
from datetime import timedelta
from typing import Any, Dict

from database import Database, newest_first, utcnow
from schemas import OrderStatus

RECENT_WINDOW = timedelta(days=7)
RECENT_LIMIT = 5
UNKNOWN_USER = "Unknown User"


def round_half_up(value: float) -> float:
    """Round to 2 decimals with halves going up (0.125 -> 0.13)."""
    return math.floor(value * 100 + 0.5) / 100


def compute_stats(db: Database) -> Dict[str, Any]:
    users = db.users.list_all()
    orders = db.orders.list_all()

    counts = {status: 0 for status in OrderStatus}
    for order in orders:
        counts[order.status] += 1
    total_weight = sum(order.weight for order in orders)

    since = utcnow() - RECENT_WINDOW
    usernames = {}
    for user in users:
        usernames.setdefault(user.mobile, user.username)

    recent_orders = []
    for order in newest_first(o for o in orders if o.created_at >= since)[:RECENT_LIMIT]:
        item = order.to_json()
        item["username"] = usernames.get(order.mobile, UNKNOWN_USER)
        recent_orders.append(item)

    recent_users = [
        user.public()
        for user in newest_first(u for u in users if u.created_at >= since)[:RECENT_LIMIT]
    ]

    return {
        "totalUsers": len(users),
        "totalOrders": len(orders),
        "openOrders": counts[OrderStatus.OPEN],
        "inProgressOrders": counts[OrderStatus.IN_PROGRESS],
        "completedOrders": counts[OrderStatus.COMPLETED],
        "cancelledOrders": counts[OrderStatus.CANCELLED],
        "totalWeight": round_half_up(total_weight),
        "recentOrders": recent_orders,
        "recentUsers": recent_users,
        "priceCount": len(db.prices),
        "ordersByStatus": {
            "open": counts[OrderStatus.OPEN],
            "inProgress": counts[OrderStatus.IN_PROGRESS],
            "completed": counts[OrderStatus.COMPLETED],
            "cancelled": counts[OrderStatus.CANCELLED],
        },
    }
