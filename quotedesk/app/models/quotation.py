"""Quotation model: the live, current state of a proposal."""

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from quotedesk.app.core.time import utc_now
from quotedesk.app.db.base_class import Base

QUOTATION_STATUSES = ("draft", "sent", "accepted", "rejected")


class Quotation(Base):
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True, index=True)
    quotation_number = Column(String(50), unique=True, nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    project_title = Column(String(255), nullable=False)
    project_description = Column(Text, nullable=True)

    # Embedded line items: [{item_id, name, description, notes, unit, quantity, unit_price, cost_price, total}]
    line_items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    tax_rate = Column(Numeric(7, 3), nullable=False, default=0)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)

    status = Column(String(20), nullable=False, default="draft", index=True)
    valid_until = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    client = relationship("Client", back_populates="quotations")
    versions = relationship(
        "QuotationVersion",
        back_populates="quotation",
        cascade="all, delete-orphan",
        order_by="QuotationVersion.version_number.desc()",
    )
