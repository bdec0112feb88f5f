from __future__ import annotations

import logging
from typing import Any, Generic, List, Mapping, Type, TypeVar

from sqlalchemy.orm import Session

from smartops.core.database import Base
from smartops.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

# Never accepted from request bodies.
PROTECTED_FIELDS = frozenset({"id", "business_id", "created_at", "updated_at"})


class TenantScopedStore(Generic[ModelT]):
    """CRUD over one model where every query is pinned to a ``business_id``.

    Lookups by id always match ``(id, business_id)`` together, so a record of
    another business is indistinguishable from a missing one.
    """

    def __init__(
        self,
        model: Type[ModelT],
        *,
        not_found_message: str = "Not found",
        non_nullable: frozenset[str] = frozenset(),
    ) -> None:
        self.model = model
        self.not_found_message = not_found_message
        self.non_nullable = non_nullable

    def query(self, db: Session, business_id: int):
        return db.query(self.model).filter(self.model.business_id == business_id)

    def list(self, db: Session, business_id: int) -> List[ModelT]:
        return self.query(db, business_id).order_by(self.model.id.desc()).all()

    def count(self, db: Session, business_id: int) -> int:
        return self.query(db, business_id).count()

    def get(self, db: Session, business_id: int, record_id: int, *, for_update: bool = False) -> ModelT:
        query = self.query(db, business_id).filter(self.model.id == record_id)
        if for_update:
            query = query.with_for_update()
        record = query.first()
        if record is None:
            raise NotFoundError(self.not_found_message)
        return record

    def build(self, business_id: int, fields: Mapping[str, Any]) -> ModelT:
        values = {key: value for key, value in fields.items() if key not in PROTECTED_FIELDS}
        return self.model(**values, business_id=business_id)

    def create(self, db: Session, business_id: int, fields: Mapping[str, Any]) -> ModelT:
        record = self.build(business_id, fields)
        db.add(record)
        db.commit()
        db.refresh(record)
        logger.info("%s created business_id=%s id=%s", self.model.__tablename__, business_id, record.id)
        return record

    def apply(self, record: ModelT, changes: Mapping[str, Any]) -> ModelT:
        """Write the fields present in ``changes``; absent fields keep their value."""
        for field, value in changes.items():
            if field in PROTECTED_FIELDS:
                continue
            if value is None and field in self.non_nullable:
                raise ValidationError(f"{field} cannot be null")
            setattr(record, field, value)
        return record

    def update(self, db: Session, business_id: int, record_id: int, changes: Mapping[str, Any]) -> ModelT:
        record = self.apply(self.get(db, business_id, record_id), changes)
        db.commit()
        db.refresh(record)
        return record

    def delete(self, db: Session, business_id: int, record_id: int) -> None:
        record = self.get(db, business_id, record_id)
        db.delete(record)
        db.commit()
        logger.info("%s deleted business_id=%s id=%s", self.model.__tablename__, business_id, record_id)
