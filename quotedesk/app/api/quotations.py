"""Quotation endpoints: lifecycle, version history and printable document."""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from quotedesk.app.core.security import get_current_user
from quotedesk.app.db.session import get_db
from quotedesk.app.models.user import User
from quotedesk.app.schemas.quotation import (
    QuotationCreate,
    QuotationFromTemplate,
    QuotationRead,
    QuotationStatus,
    QuotationUpdate,
)
from quotedesk.app.schemas.quotation_version import QuotationVersionRead, RestoreRequest, VersionComparison
from quotedesk.app.services import quotations as quotation_service
from quotedesk.app.services.quotation_document import get_quotation_document_bytes
from quotedesk.app.services.versions import compare_versions, version_history

router = APIRouter(prefix="/quotations", tags=["quotations"])


@router.get("/", response_model=list[QuotationRead])
async def list_quotations(
    status: Optional[QuotationStatus] = None,
    client_id: Optional[int] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return quotation_service.list_quotations(db, status=status, client_id=client_id, search=search)


@router.post("/", response_model=QuotationRead, status_code=status.HTTP_201_CREATED)
async def create_quotation(
    payload: QuotationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return quotation_service.create_quotation(db, payload, current_user)


@router.post("/from-template", response_model=QuotationRead, status_code=status.HTTP_201_CREATED)
async def create_quotation_from_template(
    payload: QuotationFromTemplate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return quotation_service.create_quotation_from_template(db, payload, current_user)


@router.get("/{quotation_id}", response_model=QuotationRead)
async def get_quotation(quotation_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return quotation_service.get_quotation(db, quotation_id)


@router.put("/{quotation_id}", response_model=QuotationRead)
@router.patch("/{quotation_id}", response_model=QuotationRead)
async def update_quotation(
    quotation_id: int,
    payload: QuotationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return quotation_service.update_quotation(db, quotation_id, payload, current_user)


@router.delete("/{quotation_id}")
async def delete_quotation(quotation_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    quotation_service.delete_quotation(db, quotation_id)
    return {"status": "deleted", "id": quotation_id}


@router.get("/{quotation_id}/versions", response_model=list[QuotationVersionRead])
async def list_quotation_versions(
    quotation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quotation_service.get_quotation(db, quotation_id)
    return version_history(db, quotation_id)


@router.get("/{quotation_id}/versions/compare", response_model=VersionComparison)
async def compare_quotation_versions(
    quotation_id: int,
    older_version_id: Optional[int] = None,
    newer_version_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quotation_service.get_quotation(db, quotation_id)
    return compare_versions(db, quotation_id, older_version_id=older_version_id, newer_version_id=newer_version_id)


@router.post("/{quotation_id}/versions/{version_id}/restore", response_model=QuotationRead)
async def restore_quotation_version(
    quotation_id: int,
    version_id: int,
    payload: Optional[RestoreRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    notes = payload.notes if payload else None
    return quotation_service.restore_quotation_version(db, quotation_id, version_id, current_user, notes=notes)


@router.get("/{quotation_id}/document")
async def download_quotation_document(
    quotation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quotation = quotation_service.get_quotation(db, quotation_id)
    content = get_quotation_document_bytes(db, quotation_id=quotation_id)
    filename = f"Quotation-{quotation.quotation_number}.txt"
    return Response(
        content=content,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
