"""Client model for quotation recipients."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from quotedesk.app.core.time import utc_now
from quotedesk.app.db.base_class import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    address = Column(String(512), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    zip_code = Column(String(20), nullable=True)
    tax_id = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    quotations = relationship("Quotation", back_populates="client")
