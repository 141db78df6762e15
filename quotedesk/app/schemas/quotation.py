"""Quotation schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from quotedesk.app.schemas.client import ClientRead
from quotedesk.app.schemas.line_item import LineItemIn, LineItemRead

QuotationStatus = Literal["draft", "sent", "accepted", "rejected"]


class QuotationCreate(BaseModel):
    client_id: Optional[int] = None
    project_title: str = ""
    project_description: Optional[str] = None
    line_items: List[LineItemIn] = Field(default_factory=list)
    tax_rate: Optional[Decimal] = None
    status: QuotationStatus = "draft"
    valid_until: Optional[date] = None
    notes: Optional[str] = None


class QuotationUpdate(BaseModel):
    client_id: Optional[int] = None
    project_title: Optional[str] = None
    project_description: Optional[str] = None
    line_items: Optional[List[LineItemIn]] = None
    tax_rate: Optional[Decimal] = None
    status: Optional[QuotationStatus] = None
    valid_until: Optional[date] = None
    notes: Optional[str] = None
    version_notes: Optional[str] = None


class QuotationFromTemplate(BaseModel):
    template_id: int
    client_id: int
    project_title: str
    project_description: Optional[str] = None
    valid_until: Optional[date] = None


class QuotationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quotation_number: str
    client_id: int
    project_title: str
    project_description: Optional[str] = None
    line_items: List[LineItemRead]
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    status: str
    valid_until: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    client: Optional[ClientRead] = None
