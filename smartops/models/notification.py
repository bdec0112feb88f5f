from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func

from smartops.core.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=True)
    type = Column(String(32), nullable=False, default="info")
    priority = Column(String(16), nullable=False, default="medium")
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
