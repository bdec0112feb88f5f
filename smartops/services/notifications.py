from __future__ import annotations

from sqlalchemy.orm import Session

from smartops.models.notification import Notification
from smartops.services.stores import notification_store


def mark_read(db: Session, business_id: int, notification_id: int) -> Notification:
    return notification_store.update(db, business_id, notification_id, {"is_read": True})


def unread_count(db: Session, business_id: int) -> int:
    return (
        notification_store.query(db, business_id)
        .filter(Notification.is_read.is_(False))
        .count()
    )
