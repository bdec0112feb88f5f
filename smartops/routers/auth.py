# smartops/routers/auth.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import EmailStr, Field
from sqlalchemy.orm import Session

from smartops.core.database import get_db
from smartops.deps import get_current_user
from smartops.models.user import User
from smartops.schemas.base import CamelModel
from smartops.schemas.serializers import business_summary, business_to_dict, user_to_dict
from smartops.services import tenants, users
from smartops.services.auth import create_access_token
from smartops.services.errors import ValidationError
from smartops.utils.slug import is_valid_subdomain, normalize_subdomain, suggest_subdomain

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterPayload(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    business_name: str = Field(..., min_length=1)
    subdomain: str = Field(..., min_length=1, max_length=63)
    business_email: Optional[EmailStr] = None
    business_phone: Optional[str] = None
    business_address: Optional[str] = None


class LoginPayload(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None


class ChangePasswordPayload(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterPayload, db: Session = Depends(get_db)):
    business, user = users.register_business_owner(
        db,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        business_name=payload.business_name,
        subdomain=payload.subdomain,
        business_email=payload.business_email,
        business_phone=payload.business_phone,
        business_address=payload.business_address,
    )
    user_data = user_to_dict(user)
    user_data["business"] = business_summary(business)
    return {
        "message": "User and business created successfully",
        "token": create_access_token(user.id, business.id),
        "user": user_data,
    }


@router.post("/login")
def login(payload: LoginPayload, db: Session = Depends(get_db)):
    user = users.authenticate(db, payload.email, payload.password)
    business = tenants.get_business(db, user.business_id)
    return {
        "message": "Login successful",
        "token": create_access_token(user.id, user.business_id),
        "user": user_to_dict(user, business=business),
        "business": business_to_dict(business),
    }


@router.post("/logout")
def logout(_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client drops its copy.
    return {"message": "Logged out successfully"}


@router.get("/profile")
def get_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    business = tenants.get_business(db, user.business_id)
    return {"user": user_to_dict(user, business=business)}


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = users.update_profile(db, user, payload.changes())
    return {"message": "Profile updated successfully", "user": user_to_dict(user)}


@router.put("/change-password")
def change_password(
    payload: ChangePasswordPayload,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    users.change_password(db, user, payload.current_password, payload.new_password)
    return {"message": "Password changed successfully"}


@router.get("/subdomain-availability")
def subdomain_availability(
    subdomain: Optional[str] = Query(None),
    business_name: Optional[str] = Query(None, alias="businessName"),
    db: Session = Depends(get_db),
):
    """Check a subdomain before registering, or suggest one from a business name."""
    candidate = normalize_subdomain(subdomain) if subdomain else suggest_subdomain(business_name or "")
    if not candidate:
        raise ValidationError("Provide subdomain or businessName")

    valid = is_valid_subdomain(candidate)
    return {
        "subdomain": candidate,
        "valid": valid,
        "available": valid and tenants.subdomain_available(db, candidate),
    }
