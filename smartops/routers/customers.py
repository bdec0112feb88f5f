from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import EmailStr, Field
from sqlalchemy.orm import Session

from smartops.core.database import get_db
from smartops.deps import get_current_user
from smartops.models.customer import Customer
from smartops.models.user import User
from smartops.schemas.base import CamelModel
from smartops.schemas.serializers import customer_to_dict
from smartops.services.stores import customer_store

router = APIRouter(prefix="/api/customers", tags=["customers"])


class CustomerCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    is_vip: bool = False


class CustomerUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    is_vip: Optional[bool] = None


@router.get("")
def list_customers(
    vip: Optional[bool] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = customer_store.query(db, user.business_id)
    if vip is not None:
        query = query.filter(Customer.is_vip.is_(vip))
    return [customer_to_dict(customer) for customer in query.order_by(Customer.id.desc()).all()]


@router.get("/{customer_id}")
def get_customer(customer_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return customer_to_dict(customer_store.get(db, user.business_id, customer_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    customer = customer_store.create(
        db,
        user.business_id,
        {**payload.model_dump(), "total_spent": 0, "visit_count": 0},
    )
    return customer_to_dict(customer)


@router.put("/{customer_id}")
def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    customer = customer_store.update(db, user.business_id, customer_id, payload.changes())
    return customer_to_dict(customer)
