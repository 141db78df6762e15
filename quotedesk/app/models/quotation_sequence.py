"""Per-year counter backing human-readable quotation numbers."""

from sqlalchemy import Column, Integer

from quotedesk.app.db.base_class import Base


class QuotationSequence(Base):
    __tablename__ = "quotation_sequences"

    year = Column(Integer, primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
