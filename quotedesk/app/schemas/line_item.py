"""Line item schemas shared by quotations and templates."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class LineItemIn(BaseModel):
    """Incoming line; any client-supplied total is ignored and recomputed."""

    item_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    unit: Optional[str] = None
    quantity: Decimal = Decimal("1")
    unit_price: Optional[Decimal] = None
    cost_price: Optional[Decimal] = None


class LineItemRead(BaseModel):
    item_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    unit: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    cost_price: Optional[Decimal] = None
    total: Decimal

    model_config = ConfigDict(from_attributes=True)
