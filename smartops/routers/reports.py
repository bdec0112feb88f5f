from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field
from sqlalchemy.orm import Session

from smartops.core.database import get_db
from smartops.deps import get_current_user, require_role
from smartops.models.user import ROLE_MANAGER, ROLE_OWNER, User
from smartops.schemas.base import CamelModel
from smartops.schemas.serializers import report_to_dict
from smartops.services.stores import report_store

router = APIRouter(prefix="/api/reports", tags=["reports"])

REPORT_STATUS_GENERATING = "generating"


class ReportCreate(CamelModel):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    date_range: Optional[Any] = None
    format: Optional[str] = None


@router.get("")
def list_reports(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [report_to_dict(report) for report in report_store.list(db, user.business_id)]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_report(
    payload: ReportCreate,
    user: User = Depends(require_role([ROLE_OWNER, ROLE_MANAGER])),
    db: Session = Depends(get_db),
):
    # Only the request is recorded; export rendering is not part of this service.
    report = report_store.create(
        db,
        user.business_id,
        {**payload.model_dump(), "status": REPORT_STATUS_GENERATING},
    )
    return report_to_dict(report)
