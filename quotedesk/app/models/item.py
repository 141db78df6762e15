"""Catalog item model."""

from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text

from quotedesk.app.core.time import utc_now
from quotedesk.app.db.base_class import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    unit = Column(String(50), nullable=False, default="nos")
    unit_price = Column(Numeric(12, 2), nullable=False)
    cost_price = Column(Numeric(12, 2), nullable=True)
    category = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
