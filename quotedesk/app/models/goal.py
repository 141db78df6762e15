"""Revenue and conversion targets."""

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text

from quotedesk.app.core.time import utc_now
from quotedesk.app.db.base_class import Base

GOAL_TYPES = ("revenue", "conversion_rate")
PERIOD_TYPES = ("monthly", "quarterly", "yearly")


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    goal_type = Column(String(30), nullable=False)
    target_value = Column(Numeric(14, 2), nullable=False)
    period_type = Column(String(20), nullable=False, default="monthly")
    period_start = Column(DateTime(timezone=True), nullable=False)
    period_end = Column(DateTime(timezone=True), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
