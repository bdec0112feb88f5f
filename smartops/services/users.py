from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, List, Mapping, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from smartops.core.request_context import bind_user
from smartops.models.business import Business
from smartops.models.user import ROLE_OWNER, ROLES, User
from smartops.services import tenants
from smartops.services.errors import (
    DuplicateEmail,
    DuplicateSubdomain,
    InvalidCredentials,
    NotFoundError,
    SelfDeletionForbidden,
    ValidationError,
)
from smartops.services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "email")
ADMIN_UPDATABLE_FIELDS = ("first_name", "last_name", "email", "role", "is_active")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def normalize_role(role: str | None) -> str:
    value = (role or "").strip().lower()
    if value not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")
    return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    return hash_password("smartops-unknown-account")


def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def _ensure_email_free(db: Session, email: str, *, message: str | None = None) -> None:
    if find_by_email(db, email) is not None:
        raise DuplicateEmail(message)


def _new_user(
    *,
    business_id: int,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: str,
) -> User:
    return User(
        business_id=business_id,
        email=normalize_email(email),
        password_hash=hash_password(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        role=role,
        is_active=True,
    )


def register_business_owner(
    db: Session,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    business_name: str,
    subdomain: str,
    business_email: Optional[str] = None,
    business_phone: Optional[str] = None,
    business_address: Optional[str] = None,
) -> Tuple[Business, User]:
    """Create a business and its first user, always an owner, in one transaction.

    The subdomain is checked before the email, so repeating a registration
    reports the taken subdomain.
    """
    try:
        business = tenants.create_business(
            db,
            name=business_name,
            subdomain=subdomain,
            email=business_email,
            phone=business_phone,
            address=business_address,
        )
        _ensure_email_free(db, email)
        user = _new_user(
            business_id=business.id,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=ROLE_OWNER,
        )
        user.last_login = _utcnow()
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        # Lost a race against a concurrent registration; report which key collided.
        db.rollback()
        if not tenants.subdomain_available(db, subdomain):
            raise DuplicateSubdomain() from exc
        raise DuplicateEmail() from exc
    except Exception:
        db.rollback()
        raise

    db.refresh(business)
    db.refresh(user)
    bind_user(user)
    logger.info(
        "business registered business_id=%s user_id=%s subdomain=%s",
        business.id,
        user.id,
        business.subdomain,
    )
    return business, user


def create_user(
    db: Session,
    *,
    business_id: int,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: str | None = None,
) -> User:
    role = normalize_role(role) if role is not None else "cashier"
    _ensure_email_free(db, email)

    user = _new_user(
        business_id=business_id,
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateEmail() from exc
    db.refresh(user)
    logger.info("user created business_id=%s user_id=%s role=%s", business_id, user.id, user.role)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the active user for these credentials.

    Unknown email, inactive account and wrong password all raise the same
    ``InvalidCredentials`` so the response never reveals which one it was.
    """
    user = find_by_email(db, email)
    # every attempt runs exactly one bcrypt check, known email or not
    password_hash = user.password_hash if user is not None else _dummy_password_hash()
    password_ok = verify_password(password, password_hash)
    if user is None or not user.is_active or not password_ok:
        logger.info("login failed email=%s", normalize_email(email))
        raise InvalidCredentials()

    user.last_login = _utcnow()
    db.commit()
    db.refresh(user)
    bind_user(user)
    return user


def get_user(db: Session, business_id: int, user_id: int) -> User:
    user = (
        db.query(User)
        .filter(User.id == user_id, User.business_id == business_id)
        .first()
    )
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_users(db: Session, business_id: int) -> List[User]:
    return (
        db.query(User)
        .filter(User.business_id == business_id)
        .order_by(User.id.asc())
        .all()
    )


def _apply_user_changes(db: Session, user: User, changes: Mapping[str, Any], allowed: tuple) -> None:
    for field, value in changes.items():
        if field not in allowed:
            continue
        if field == "email":
            email = normalize_email(value)
            if not email:
                raise ValidationError("Email cannot be empty")
            if email != user.email:
                _ensure_email_free(db, email, message="Email already in use")
            value = email
        elif field in {"first_name", "last_name"}:
            value = (value or "").strip()
            if not value:
                raise ValidationError("Name fields cannot be empty")
        elif field == "role":
            value = normalize_role(value)
        elif field == "is_active" and value is None:
            raise ValidationError("isActive cannot be null")
        setattr(user, field, value)


def update_profile(db: Session, user: User, changes: Mapping[str, Any]) -> User:
    _apply_user_changes(db, user, changes, PROFILE_FIELDS)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, actor: User, target: User, changes: Mapping[str, Any]) -> User:
    if target.id == actor.id:
        if changes.get("is_active", True) is False:
            raise ValidationError("Cannot deactivate your own account")
        if "role" in changes and normalize_role(changes["role"]) != actor.role:
            raise ValidationError("Cannot change your own role")

    _apply_user_changes(db, target, changes, ADMIN_UPDATABLE_FIELDS)
    db.commit()
    db.refresh(target)
    logger.info(
        "user updated business_id=%s user_id=%s by=%s role=%s active=%s",
        target.business_id,
        target.id,
        actor.id,
        target.role,
        target.is_active,
    )
    return target


def delete_user(db: Session, actor: User, target: User) -> None:
    if target.id == actor.id:
        raise SelfDeletionForbidden()

    db.delete(target)
    db.commit()
    logger.info("user deleted business_id=%s user_id=%s by=%s", actor.business_id, target.id, actor.id)


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")

    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("password changed user_id=%s", user.id)
