"""Reusable quotation templates."""

from sqlalchemy import JSON, Column, DateTime, Integer, Numeric, String, Text

from quotedesk.app.core.time import utc_now
from quotedesk.app.db.base_class import Base


class Template(Base):
    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    line_items = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    tax_rate = Column(Numeric(7, 3), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
