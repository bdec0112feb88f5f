from __future__ import annotations

from fastapi import APIRouter, Depends

from smartops.core.metrics import request_metrics
from smartops.deps import require_role
from smartops.models.user import ROLE_OWNER, User

router = APIRouter(prefix="/internal/metrics", tags=["internal-metrics"])


@router.get("/tenants")
def tenant_metrics(user: User = Depends(require_role([ROLE_OWNER]))):
    # Only the caller's own business is exposed.
    business_id = str(user.business_id)
    return {"businessId": user.business_id, "metrics": request_metrics.snapshot_for_business(business_id)}
