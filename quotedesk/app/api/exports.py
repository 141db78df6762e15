"""Google Sheets and Drive export endpoints."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from quotedesk.app.core.errors import NotFoundError
from quotedesk.app.core.security import get_current_user
from quotedesk.app.db.session import get_db
from quotedesk.app.models.quotation import Quotation
from quotedesk.app.models.user import User
from quotedesk.app.schemas.export import (
    DriveExportRequest,
    DriveExportResult,
    SheetsExportRequest,
    SheetsExportResult,
)
from quotedesk.app.services.google_export import export_documents_to_drive, export_quotations_to_sheets

router = APIRouter(prefix="/exports", tags=["exports"])


def _load_quotations(db: Session, quotation_ids: List[int] | None) -> List[Quotation]:
    query = db.query(Quotation).options(joinedload(Quotation.client))
    if quotation_ids is None:
        return query.order_by(Quotation.created_at.desc(), Quotation.id.desc()).all()
    found = {q.id: q for q in query.filter(Quotation.id.in_(quotation_ids)).all()}
    return [found[qid] for qid in quotation_ids if qid in found]


@router.post("/sheets", response_model=SheetsExportResult)
async def export_to_sheets(
    payload: SheetsExportRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quotations = _load_quotations(db, payload.quotation_ids)
    if payload.quotation_ids is not None and len(quotations) != len(set(payload.quotation_ids)):
        raise NotFoundError("Quotation not found")
    return await export_quotations_to_sheets(payload.access_token, quotations, title=payload.spreadsheet_title)


@router.post("/drive", response_model=DriveExportResult)
async def export_to_drive(
    payload: DriveExportRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quotations = _load_quotations(db, payload.quotation_ids)
    results = await export_documents_to_drive(payload.access_token, quotations)
    exported_ids = {q.id for q in quotations}
    for quotation_id in payload.quotation_ids:
        if quotation_id not in exported_ids:
            results.append({"quotation_id": quotation_id, "success": False, "error": "Quotation not found"})
    succeeded = sum(1 for result in results if result["success"])
    return {"results": results, "succeeded": succeeded, "failed": len(results) - succeeded}
