from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy.orm import Session

from smartops.core.database import get_db
from smartops.deps import get_current_user
from smartops.models.notification import Notification
from smartops.models.user import User
from smartops.schemas.base import CamelModel
from smartops.schemas.serializers import notification_to_dict
from smartops.services.notifications import mark_read
from smartops.services.stores import notification_store

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


class NotificationCreate(CamelModel):
    title: str = Field(..., min_length=1)
    message: Optional[str] = None
    type: str = Field("info", min_length=1)
    priority: str = Field("medium", pattern="^(low|medium|high)$")


@router.get("")
def list_notifications(
    unread: bool = Query(False),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = notification_store.query(db, user.business_id)
    if unread:
        query = query.filter(Notification.is_read.is_(False))
    return [notification_to_dict(entry) for entry in query.order_by(Notification.id.desc()).all()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notification = notification_store.create(db, user.business_id, {**payload.model_dump(), "is_read": False})
    return notification_to_dict(notification)


@router.put("/{notification_id}/read")
def read_notification(
    notification_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return notification_to_dict(mark_read(db, user.business_id, notification_id))
