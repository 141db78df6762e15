"""Export request/response schemas."""

from typing import List, Optional

from pydantic import BaseModel


class SheetsExportRequest(BaseModel):
    access_token: str
    quotation_ids: Optional[List[int]] = None
    spreadsheet_title: Optional[str] = None


class SheetsExportResult(BaseModel):
    spreadsheet_id: str
    url: str
    row_count: int


class DriveExportRequest(BaseModel):
    access_token: str
    quotation_ids: List[int]


class DriveExportItem(BaseModel):
    quotation_id: int
    quotation_number: Optional[str] = None
    success: bool
    file_id: Optional[str] = None
    url: Optional[str] = None
    error: Optional[str] = None


class DriveExportResult(BaseModel):
    results: List[DriveExportItem]
    succeeded: int
    failed: int
