"""Quotation template schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from quotedesk.app.schemas.line_item import LineItemIn, LineItemRead


class TemplateBase(BaseModel):
    name: str
    description: Optional[str] = None
    notes: Optional[str] = None
    tax_rate: Decimal = Decimal("0")


class TemplateCreate(TemplateBase):
    line_items: List[LineItemIn] = Field(default_factory=list)


class TemplateUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    tax_rate: Optional[Decimal] = None
    line_items: Optional[List[LineItemIn]] = None


class TemplateRead(TemplateBase):
    id: int
    line_items: List[LineItemRead]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
