from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, func

from smartops.core.database import Base


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), index=True, nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), index=True, nullable=True)
    # Line items as submitted: [{"id": 1, "name": "Widget", "quantity": 3, "price": 9.99}]
    items = Column(JSON, nullable=False, default=list)
    payment_method = Column(String(32), nullable=True)
    total = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    discount = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
