"""Quotation version history and comparison schemas."""

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class QuotationVersionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quotation_id: int
    version_number: int
    quotation_data: dict
    notes: Optional[str] = None
    created_at: datetime
    is_current: bool = False


class FieldChange(BaseModel):
    field: str
    older: Any = None
    newer: Any = None
    changed: bool


class LineItemChange(BaseModel):
    item_id: Any = None
    name: str
    status: Literal["added", "removed", "modified", "unchanged"]
    older: Optional[dict] = None
    newer: Optional[dict] = None


class VersionComparison(BaseModel):
    comparable: bool
    version_count: int
    older_version: Optional[QuotationVersionRead] = None
    newer_version: Optional[QuotationVersionRead] = None
    fields: List[FieldChange] = []
    line_items: List[LineItemChange] = []
    summary: dict = {}


class RestoreRequest(BaseModel):
    notes: Optional[str] = None
