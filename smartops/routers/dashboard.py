from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smartops.core.database import get_db
from smartops.deps import get_current_user
from smartops.models.user import User
from smartops.schemas.serializers import item_to_dict, sale_to_dict
from smartops.services.analytics import analytics_summary, dashboard_stats

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard/stats")
def get_dashboard_stats(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    stats = dashboard_stats(db, user.business_id)
    return {
        "totalRevenue": stats["total_revenue"],
        "totalSales": stats["total_sales"],
        "totalProducts": stats["total_products"],
        "totalCustomers": stats["total_customers"],
        "lowStockItems": stats["low_stock_items"],
        "unreadNotifications": stats["unread_notifications"],
        "recentSales": [sale_to_dict(sale) for sale in stats["recent_sales"]],
        "topProducts": [item_to_dict(item) for item in stats["top_products"]],
    }


@router.get("/analytics")
def get_analytics(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    summary = analytics_summary(db, user.business_id)
    return {
        "revenue": summary["revenue"],
        "sales": summary["sales"],
        "products": {
            "total": summary["products"]["total"],
            "lowStock": summary["products"]["low_stock"],
        },
        "customers": summary["customers"],
    }
