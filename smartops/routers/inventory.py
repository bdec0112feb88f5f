from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy.orm import Session

from smartops.core.database import get_db
from smartops.deps import get_current_user, require_role
from smartops.models.inventory import InventoryItem
from smartops.models.user import ROLE_MANAGER, ROLE_OWNER, User
from smartops.schemas.base import CamelModel
from smartops.schemas.serializers import item_to_dict
from smartops.services.stores import inventory_store

router = APIRouter(prefix="/api/inventory", tags=["inventory"])

MANAGE_ROLES = [ROLE_OWNER, ROLE_MANAGER]


class InventoryItemCreate(CamelModel):
    name: str = Field(..., min_length=1)
    sku: Optional[str] = None
    description: Optional[str] = None
    # "9.99" and "10" arrive as strings from the dashboard forms; pydantic coerces them.
    price: float = Field(0, ge=0)
    cost: float = Field(0, ge=0)
    quantity: int = 0
    reorder_point: int = Field(0, ge=0)
    category: Optional[str] = None
    barcode: Optional[str] = None


class InventoryItemUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    sku: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    quantity: Optional[int] = None
    reorder_point: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    barcode: Optional[str] = None


@router.get("")
def list_inventory_items(
    low_stock: bool = Query(False, alias="lowStock"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    items = inventory_store.list(db, user.business_id)
    if low_stock:
        items = [item for item in items if item.quantity <= item.reorder_point]
    return [item_to_dict(item) for item in items]


@router.get("/{item_id}")
def get_inventory_item(
    item_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return item_to_dict(inventory_store.get(db, user.business_id, item_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    payload: InventoryItemCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item: InventoryItem = inventory_store.create(db, user.business_id, {**payload.model_dump(), "sold_count": 0})
    return item_to_dict(item)


@router.put("/{item_id}")
def update_inventory_item(
    item_id: int,
    payload: InventoryItemUpdate,
    user: User = Depends(require_role(MANAGE_ROLES)),
    db: Session = Depends(get_db),
):
    item = inventory_store.update(db, user.business_id, item_id, payload.changes())
    return item_to_dict(item)


@router.delete("/{item_id}")
def delete_inventory_item(
    item_id: int,
    user: User = Depends(require_role(MANAGE_ROLES)),
    db: Session = Depends(get_db),
):
    inventory_store.delete(db, user.business_id, item_id)
    return {"message": "Item deleted successfully"}
