from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import ConfigDict, Field
from sqlalchemy.orm import Session

from smartops.core.database import get_db
from smartops.deps import get_current_user
from smartops.models.user import User
from smartops.schemas.base import CamelModel
from smartops.schemas.serializers import sale_to_dict
from smartops.services.sales import record_sale
from smartops.services.stores import sale_store

router = APIRouter(prefix="/api/sales", tags=["sales"])


class SaleLineItem(CamelModel):
    model_config = ConfigDict(extra="allow")

    # inventory item id; lines without one do not touch stock
    id: Optional[int] = None
    name: Optional[str] = None
    quantity: int = Field(..., gt=0)
    price: Optional[float] = Field(None, ge=0)


class SaleCreate(CamelModel):
    items: List[SaleLineItem] = Field(..., min_length=1)
    customer_id: Optional[int] = None
    payment_method: Optional[str] = None
    total: float = Field(..., ge=0)
    tax: float = Field(0, ge=0)
    discount: float = Field(0, ge=0)


@router.get("")
def list_sales(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [sale_to_dict(sale) for sale in sale_store.list(db, user.business_id)]


@router.get("/{sale_id}")
def get_sale(sale_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return sale_to_dict(sale_store.get(db, user.business_id, sale_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_sale(
    payload: SaleCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    sale = record_sale(
        db,
        user.business_id,
        items=[line.model_dump(exclude_none=True) for line in payload.items],
        total=payload.total,
        customer_id=payload.customer_id,
        payment_method=payload.payment_method,
        tax=payload.tax,
        discount=payload.discount,
    )
    return sale_to_dict(sale)
