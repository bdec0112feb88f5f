from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from smartops.models.business import Business
from smartops.services.errors import DuplicateSubdomain, NotFoundError, ValidationError
from smartops.utils.slug import is_valid_subdomain, normalize_subdomain

logger = logging.getLogger(__name__)

# subdomain, id and is_active are never writable through an update.
UPDATABLE_FIELDS = (
    "name",
    "description",
    "address",
    "phone",
    "email",
    "timezone",
    "currency",
    "tax_rate",
    "settings",
)
NON_NULLABLE_FIELDS = {"timezone", "currency", "tax_rate", "settings"}


def clean_subdomain(raw: str) -> str:
    subdomain = normalize_subdomain(raw)
    if not is_valid_subdomain(subdomain):
        raise ValidationError("Subdomain may only contain lowercase letters, numbers and hyphens")
    return subdomain


def find_by_subdomain(db: Session, subdomain: str) -> Optional[Business]:
    return db.query(Business).filter(Business.subdomain == normalize_subdomain(subdomain)).first()


def subdomain_available(db: Session, subdomain: str) -> bool:
    return find_by_subdomain(db, subdomain) is None


def get_business(db: Session, business_id: int) -> Business:
    business = db.query(Business).filter(Business.id == business_id).first()
    if business is None:
        raise NotFoundError("Business not found")
    return business


def create_business(
    db: Session,
    *,
    name: str,
    subdomain: str,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    address: Optional[str] = None,
) -> Business:
    """Add a new tenant to the session and flush it so ``id`` is assigned.

    The caller owns the transaction: registration commits the business and its
    owner together.
    """
    subdomain = clean_subdomain(subdomain)
    if not subdomain_available(db, subdomain):
        raise DuplicateSubdomain()

    business = Business(
        name=name.strip(),
        subdomain=subdomain,
        email=email,
        phone=phone,
        address=address,
        settings={},
    )
    db.add(business)
    db.flush()
    logger.info("business created business_id=%s subdomain=%s", business.id, business.subdomain)
    return business


def update_business(db: Session, business: Business, changes: Mapping[str, Any]) -> Business:
    """Apply only the fields present in ``changes``; explicit zeros and empty values are kept."""
    for field, value in changes.items():
        if field not in UPDATABLE_FIELDS:
            continue
        if field == "name" and not (value or "").strip():
            raise ValidationError("Business name cannot be empty")
        if value is None and field in NON_NULLABLE_FIELDS:
            raise ValidationError(f"{field} cannot be null")
        setattr(business, field, value)

    db.commit()
    db.refresh(business)
    return business
