from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, func

from smartops.core.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String(30), nullable=True, index=True)
    address = Column(Text, nullable=True)
    is_vip = Column(Boolean, nullable=False, default=False)
    total_spent = Column(Float, nullable=False, default=0)
    visit_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
