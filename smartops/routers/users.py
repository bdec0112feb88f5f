from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import EmailStr, Field
from sqlalchemy.orm import Session

from smartops.core.database import get_db
from smartops.deps import get_current_user, require_role
from smartops.models.user import ROLE_MANAGER, ROLE_OWNER, User
from smartops.schemas.base import CamelModel
from smartops.schemas.serializers import user_to_dict
from smartops.services import users

router = APIRouter(prefix="/api/users", tags=["users"])


class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    role: Optional[str] = None


class UserUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None


@router.get("")
def list_users(
    user: User = Depends(require_role([ROLE_OWNER, ROLE_MANAGER])),
    db: Session = Depends(get_db),
):
    return {"users": [user_to_dict(entry) for entry in users.list_users(db, user.business_id)]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    user: User = Depends(require_role([ROLE_OWNER])),
    db: Session = Depends(get_db),
):
    created = users.create_user(
        db,
        business_id=user.business_id,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
    )
    return {"message": "User created successfully", "user": user_to_dict(created)}


@router.get("/{user_id}")
def get_user(
    user_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"user": user_to_dict(users.get_user(db, user.business_id, user_id))}


@router.put("/{user_id}")
def update_user(
    user_id: int,
    payload: UserUpdate,
    user: User = Depends(require_role([ROLE_OWNER])),
    db: Session = Depends(get_db),
):
    target = users.get_user(db, user.business_id, user_id)
    target = users.update_user(db, user, target, payload.changes())
    return {"message": "User updated successfully", "user": user_to_dict(target)}


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    user: User = Depends(require_role([ROLE_OWNER])),
    db: Session = Depends(get_db),
):
    target = users.get_user(db, user.business_id, user_id)
    users.delete_user(db, user, target)
    return {"message": "User deleted successfully"}
