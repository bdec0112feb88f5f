from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, func

from smartops.core.database import Base


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    sku = Column(String(64), nullable=True, index=True)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0)
    cost = Column(Float, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    reorder_point = Column(Integer, nullable=False, default=0)
    category = Column(String, nullable=True)
    barcode = Column(String(64), nullable=True)
    sold_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
