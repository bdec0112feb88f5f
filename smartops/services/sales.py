from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from smartops.models.sale import Sale
from smartops.services.errors import NotFoundError
from smartops.services.stores import customer_store, inventory_store, sale_store

logger = logging.getLogger(__name__)


def record_sale(
    db: Session,
    business_id: int,
    *,
    items: List[Dict[str, Any]],
    total: float,
    customer_id: Optional[int] = None,
    payment_method: Optional[str] = None,
    tax: float = 0,
    discount: float = 0,
) -> Sale:
    """Persist a sale and apply its stock effects in a single transaction.

    Every line item carrying an ``id`` must reference an inventory item of the
    same business; its ``quantity`` is decremented and ``sold_count``
    incremented. Any failure rolls back the sale and every stock change.
    """
    try:
        for line in items:
            item_id = line.get("id")
            if item_id is None:
                continue
            try:
                item = inventory_store.get(db, business_id, int(item_id), for_update=True)
            except NotFoundError as exc:
                raise NotFoundError("Inventory item not found") from exc
            quantity = int(line.get("quantity") or 0)
            item.quantity = (item.quantity or 0) - quantity
            item.sold_count = (item.sold_count or 0) + quantity

        if customer_id is not None:
            customer = customer_store.get(db, business_id, customer_id, for_update=True)
            customer.total_spent = (customer.total_spent or 0) + total
            customer.visit_count = (customer.visit_count or 0) + 1

        sale = sale_store.build(
            business_id,
            {
                "items": items,
                "customer_id": customer_id,
                "payment_method": payment_method,
                "total": total,
                "tax": tax,
                "discount": discount,
            },
        )
        db.add(sale)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(sale)
    logger.info(
        "sale recorded business_id=%s sale_id=%s lines=%s total=%s",
        business_id,
        sale.id,
        len(items),
        sale.total,
    )
    return sale
