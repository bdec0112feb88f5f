from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from smartops.models.customer import Customer
from smartops.models.inventory import InventoryItem
from smartops.models.sale import Sale
from smartops.services.notifications import unread_count
from smartops.services.stores import customer_store, inventory_store, sale_store

RECENT_SALES_LIMIT = 5
TOP_PRODUCTS_LIMIT = 5


def _month_start(now: datetime | None = None, *, naive: bool = False) -> datetime:
    """First instant of the current UTC calendar month.

    Aware by default; ``naive=True`` for SQLite, which stores naive UTC.
    """
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    start = datetime(now.year, now.month, 1, tzinfo=timezone.utc)
    return start.replace(tzinfo=None) if naive else start


def _stores_naive_timestamps(db: Session) -> bool:
    return db.get_bind().dialect.name == "sqlite"


def _revenue(query) -> float:
    return float(query.with_entities(func.coalesce(func.sum(Sale.total), 0)).scalar() or 0)


def _low_stock_query(db: Session, business_id: int):
    return inventory_store.query(db, business_id).filter(InventoryItem.quantity <= InventoryItem.reorder_point)


def dashboard_stats(db: Session, business_id: int) -> Dict[str, Any]:
    sales = sale_store.query(db, business_id)
    recent_sales: List[Sale] = sales.order_by(Sale.id.desc()).limit(RECENT_SALES_LIMIT).all()
    top_products: List[InventoryItem] = (
        inventory_store.query(db, business_id)
        .order_by(InventoryItem.sold_count.desc(), InventoryItem.id.asc())
        .limit(TOP_PRODUCTS_LIMIT)
        .all()
    )
    return {
        "total_revenue": _revenue(sales),
        "total_sales": sales.count(),
        "total_products": inventory_store.count(db, business_id),
        "total_customers": customer_store.count(db, business_id),
        "low_stock_items": _low_stock_query(db, business_id).count(),
        "unread_notifications": unread_count(db, business_id),
        "recent_sales": recent_sales,
        "top_products": top_products,
    }


def analytics_summary(db: Session, business_id: int, *, now: datetime | None = None) -> Dict[str, Any]:
    month_start = _month_start(now, naive=_stores_naive_timestamps(db))
    sales = sale_store.query(db, business_id)
    monthly_sales = sales.filter(Sale.created_at >= month_start)
    customers = customer_store.query(db, business_id)
    return {
        "revenue": {
            "total": _revenue(sales),
            "monthly": _revenue(monthly_sales),
        },
        "sales": {
            "total": sales.count(),
            "monthly": monthly_sales.count(),
        },
        "products": {
            "total": inventory_store.count(db, business_id),
            "low_stock": _low_stock_query(db, business_id).count(),
        },
        "customers": {
            "total": customers.count(),
            "vip": customers.filter(Customer.is_vip.is_(True)).count(),
        },
    }
