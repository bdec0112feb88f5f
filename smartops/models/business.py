from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, Numeric, String, Text, func

from smartops.core.config import DEFAULT_CURRENCY, DEFAULT_TIMEZONE
from smartops.core.database import Base


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    # Chosen at registration and never changed afterwards.
    subdomain = Column(String(63), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    phone = Column(String(30), nullable=True)
    email = Column(String, nullable=True)
    timezone = Column(String(64), nullable=False, default=DEFAULT_TIMEZONE)
    currency = Column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    settings = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
