from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from smartops.models.business import Business
from smartops.models.customer import Customer
from smartops.models.inventory import InventoryItem
from smartops.models.notification import Notification
from smartops.models.report import Report
from smartops.models.sale import Sale
from smartops.models.user import User


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def business_to_dict(business: Business) -> Dict[str, Any]:
    return {
        "id": business.id,
        "name": business.name,
        "subdomain": business.subdomain,
        "description": business.description,
        "email": business.email,
        "phone": business.phone,
        "address": business.address,
        "timezone": business.timezone,
        "currency": business.currency,
        "taxRate": float(business.tax_rate or 0),
        "isActive": business.is_active,
        "settings": business.settings or {},
        "createdAt": _iso(business.created_at),
        "updatedAt": _iso(business.updated_at),
    }


def business_summary(business: Business) -> Dict[str, Any]:
    return {"id": business.id, "name": business.name, "subdomain": business.subdomain}


def user_to_dict(user: User, *, business: Optional[Business] = None) -> Dict[str, Any]:
    # password_hash is never serialized
    data: Dict[str, Any] = {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "role": user.role,
        "businessId": user.business_id,
        "isActive": user.is_active,
        "lastLogin": _iso(user.last_login),
        "createdAt": _iso(user.created_at),
    }
    if business is not None:
        data["business"] = business_to_dict(business)
    return data


def item_to_dict(item: InventoryItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "businessId": item.business_id,
        "name": item.name,
        "sku": item.sku,
        "description": item.description,
        "price": item.price,
        "cost": item.cost,
        "quantity": item.quantity,
        "reorderPoint": item.reorder_point,
        "category": item.category,
        "barcode": item.barcode,
        "soldCount": item.sold_count,
        "createdAt": _iso(item.created_at),
        "updatedAt": _iso(item.updated_at),
    }


def sale_to_dict(sale: Sale) -> Dict[str, Any]:
    return {
        "id": sale.id,
        "businessId": sale.business_id,
        "items": sale.items or [],
        "customerId": sale.customer_id,
        "paymentMethod": sale.payment_method,
        "total": sale.total,
        "tax": sale.tax,
        "discount": sale.discount,
        "createdAt": _iso(sale.created_at),
    }


def customer_to_dict(customer: Customer) -> Dict[str, Any]:
    return {
        "id": customer.id,
        "businessId": customer.business_id,
        "name": customer.name,
        "email": customer.email,
        "phone": customer.phone,
        "address": customer.address,
        "isVip": customer.is_vip,
        "totalSpent": customer.total_spent,
        "visitCount": customer.visit_count,
        "createdAt": _iso(customer.created_at),
    }


def notification_to_dict(notification: Notification) -> Dict[str, Any]:
    return {
        "id": notification.id,
        "businessId": notification.business_id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.type,
        "priority": notification.priority,
        "isRead": notification.is_read,
        "createdAt": _iso(notification.created_at),
    }


def report_to_dict(report: Report) -> Dict[str, Any]:
    return {
        "id": report.id,
        "businessId": report.business_id,
        "name": report.name,
        "type": report.type,
        "dateRange": report.date_range,
        "format": report.format,
        "status": report.status,
        "createdAt": _iso(report.created_at),
    }
