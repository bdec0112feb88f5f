from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, func

from smartops.core.database import Base


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String(32), nullable=False)
    date_range = Column(JSON, nullable=True)
    format = Column(String(16), nullable=True)
    status = Column(String(16), nullable=False, default="generating")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
