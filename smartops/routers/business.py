from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import EmailStr, Field
from sqlalchemy.orm import Session

from smartops.core.database import get_db
from smartops.deps import get_current_user, require_role
from smartops.models.user import ROLE_OWNER, User
from smartops.schemas.base import CamelModel
from smartops.schemas.serializers import business_to_dict
from smartops.services import tenants

router = APIRouter(prefix="/api/business", tags=["business"])
# Older dashboards read and write the same record under /api/settings.
settings_router = APIRouter(prefix="/api/settings", tags=["business"])


class BusinessUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    timezone: Optional[str] = Field(None, min_length=1)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    settings: Optional[Dict[str, Any]] = None


def _get_business(user: User, db: Session):
    return {"business": business_to_dict(tenants.get_business(db, user.business_id))}


def _update_business(payload: BusinessUpdate, user: User, db: Session):
    business = tenants.get_business(db, user.business_id)
    business = tenants.update_business(db, business, payload.changes())
    return {"message": "Business updated successfully", "business": business_to_dict(business)}


@router.get("")
def get_business(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _get_business(user, db)


@router.put("")
def update_business(
    payload: BusinessUpdate,
    user: User = Depends(require_role([ROLE_OWNER])),
    db: Session = Depends(get_db),
):
    return _update_business(payload, user, db)


@settings_router.get("")
def get_settings(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _get_business(user, db)


@settings_router.put("")
def update_settings(
    payload: BusinessUpdate,
    user: User = Depends(require_role([ROLE_OWNER])),
    db: Session = Depends(get_db),
):
    return _update_business(payload, user, db)
