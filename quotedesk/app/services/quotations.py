"""Quotation lifecycle: create, update, restore, delete.

Each write recomputes totals from the line items and tax rate, then commits the
quotation row together with its new version snapshot. A version-number or
quotation-number collision rolls back both rows and the write is retried.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from quotedesk.app.core.errors import NotFoundError, PersistenceError, InvalidInputError
from quotedesk.app.core.settings import get_settings
from quotedesk.app.core.time import utc_now
from quotedesk.app.models.client import Client
from quotedesk.app.models.item import Item
from quotedesk.app.models.quotation import QUOTATION_STATUSES, Quotation
from quotedesk.app.models.quotation_sequence import QuotationSequence
from quotedesk.app.models.template import Template
from quotedesk.app.models.user import User
from quotedesk.app.schemas.quotation import QuotationCreate, QuotationFromTemplate, QuotationUpdate
from quotedesk.app.services.pricing import (
    apply_catalog_item,
    calculate_totals,
    line_value,
    normalize_line_item,
    quantize_rate,
    validate_line_items,
)
from quotedesk.app.services.versions import RESTORABLE_FIELDS, append_version, get_version

logger = logging.getLogger(__name__)

MAX_WRITE_ATTEMPTS = 3


def generate_quotation_number(db: Session, now: datetime | None = None) -> str:
    """Reserve the next number for the year, e.g. QTN-2026-0007."""
    year = (now or utc_now()).year
    sequence = db.query(QuotationSequence).filter(QuotationSequence.year == year).with_for_update().first()
    if sequence is None:
        sequence = QuotationSequence(year=year, last_value=0)
        db.add(sequence)
    sequence.last_value += 1
    db.flush()
    return f"{get_settings().quotation_prefix}-{year}-{sequence.last_value:04d}"


def _get_client(db: Session, client_id: Optional[int]) -> Client:
    if client_id is None:
        raise InvalidInputError("Please select a client")
    client = db.query(Client).filter(Client.id == client_id).first()
    if client is None:
        raise NotFoundError("Client not found")
    return client


def _price_line_items(db: Session, line_items) -> List[dict]:
    """Validate lines and snapshot catalog prices for lines that arrive without one."""
    validate_line_items(line_items)
    priced = []
    for index, line in enumerate(line_items, start=1):
        if line_value(line, "unit_price") is None:
            item = db.query(Item).filter(Item.id == line_value(line, "item_id")).first()
            if item is None:
                raise InvalidInputError(f"Line item {index} references an unknown catalog item")
            priced.append(apply_catalog_item(line, item))
        else:
            priced.append(normalize_line_item(line))
    return priced


def _apply_totals(quotation: Quotation) -> None:
    totals = calculate_totals(quotation.line_items, quotation.tax_rate)
    quotation.subtotal = totals["subtotal"]
    quotation.tax_amount = totals["tax_amount"]
    quotation.total = totals["total"]


def _save_with_version(
    db: Session,
    write: Callable[[], Quotation],
    version_notes: Optional[str],
    user: Optional[User],
) -> Quotation:
    for attempt in range(1, MAX_WRITE_ATTEMPTS + 1):
        try:
            quotation = write()
            db.flush()
            append_version(db, quotation, notes=version_notes, created_by=user.id if user else None)
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if attempt == MAX_WRITE_ATTEMPTS:
                logger.error(f"Giving up on quotation write after {attempt} attempts: {exc}")
                raise PersistenceError("Could not save quotation, please retry") from exc
            logger.warning(f"Quotation write collided (attempt {attempt}), retrying")
            continue
        except Exception:
            db.rollback()
            raise
        db.refresh(quotation)
        return quotation
    raise PersistenceError("Could not save quotation, please retry")


def get_quotation(db: Session, quotation_id: int) -> Quotation:
    quotation = (
        db.query(Quotation)
        .options(joinedload(Quotation.client))
        .filter(Quotation.id == quotation_id)
        .first()
    )
    if quotation is None:
        raise NotFoundError("Quotation not found")
    return quotation


def list_quotations(
    db: Session,
    status: str | None = None,
    client_id: int | None = None,
    search: str | None = None,
) -> List[Quotation]:
    query = db.query(Quotation).options(joinedload(Quotation.client))
    if status:
        query = query.filter(Quotation.status == status)
    if client_id:
        query = query.filter(Quotation.client_id == client_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.outerjoin(Client, Quotation.client_id == Client.id).filter(
            or_(
                Quotation.quotation_number.ilike(pattern),
                Quotation.project_title.ilike(pattern),
                Client.name.ilike(pattern),
            )
        )
    return query.order_by(Quotation.created_at.desc(), Quotation.id.desc()).all()


def create_quotation(db: Session, payload: QuotationCreate, user: Optional[User] = None) -> Quotation:
    _get_client(db, payload.client_id)
    if not payload.project_title or not payload.project_title.strip():
        raise InvalidInputError("Project title is required")
    line_items = _price_line_items(db, payload.line_items)
    tax_rate = payload.tax_rate if payload.tax_rate is not None else get_settings().default_tax_rate

    def write() -> Quotation:
        quotation = Quotation(
            quotation_number=generate_quotation_number(db),
            client_id=payload.client_id,
            created_by=user.id if user else None,
            project_title=payload.project_title.strip(),
            project_description=payload.project_description,
            line_items=line_items,
            tax_rate=quantize_rate(tax_rate),
            status=payload.status,
            valid_until=payload.valid_until,
            notes=payload.notes,
        )
        _apply_totals(quotation)
        db.add(quotation)
        return quotation

    quotation = _save_with_version(db, write, "Initial version", user)
    logger.info(f"Created quotation {quotation.quotation_number} (total {quotation.total})")
    return quotation


def _apply_update(db: Session, quotation: Quotation, changes: dict) -> None:
    if "client_id" in changes:
        _get_client(db, changes["client_id"])
    if "project_title" in changes and not (changes["project_title"] or "").strip():
        raise InvalidInputError("Project title is required")
    if "status" in changes and changes["status"] not in QUOTATION_STATUSES:
        raise InvalidInputError(f"Unknown status: {changes['status']}")
    for field, value in changes.items():
        if field in ("subtotal", "tax_amount", "total"):
            continue
        if field == "tax_rate":
            value = quantize_rate(value)
        setattr(quotation, field, value)
    _apply_totals(quotation)


def update_quotation(
    db: Session,
    quotation_id: int,
    payload: QuotationUpdate,
    user: Optional[User] = None,
) -> Quotation:
    changes = payload.model_dump(exclude_unset=True, exclude={"version_notes"})
    for field in ("client_id", "tax_rate", "status"):
        if field in changes and changes[field] is None:
            raise InvalidInputError(f"{field} cannot be empty")
    if changes.get("line_items") is not None:
        changes["line_items"] = _price_line_items(db, payload.line_items)
    elif "line_items" in changes:
        changes["line_items"] = []

    def write() -> Quotation:
        quotation = get_quotation(db, quotation_id)
        _apply_update(db, quotation, changes)
        return quotation

    quotation = _save_with_version(db, write, payload.version_notes or "Updated", user)
    logger.info(f"Updated quotation {quotation.quotation_number} (total {quotation.total})")
    return quotation


def restore_quotation_version(
    db: Session,
    quotation_id: int,
    version_id: int,
    user: Optional[User] = None,
    notes: Optional[str] = None,
) -> Quotation:
    """Make an old snapshot the live state; recorded as a brand-new version."""
    get_quotation(db, quotation_id)
    version = get_version(db, quotation_id, version_id)
    data = version.quotation_data
    changes = {field: data.get(field) for field in RESTORABLE_FIELDS}
    if changes["valid_until"]:
        changes["valid_until"] = datetime.fromisoformat(changes["valid_until"]).date()
    changes["line_items"] = [normalize_line_item(line) for line in changes["line_items"] or []]
    version_number = version.version_number

    def write() -> Quotation:
        quotation = get_quotation(db, quotation_id)
        # The target may vanish between the read above and this write.
        get_version(db, quotation_id, version_id)
        _apply_update(db, quotation, dict(changes))
        return quotation

    quotation = _save_with_version(db, write, notes or f"Restored from version {version_number}", user)
    logger.info(f"Restored quotation {quotation.quotation_number} to version {version_number}")
    return quotation


def delete_quotation(db: Session, quotation_id: int) -> Quotation:
    quotation = get_quotation(db, quotation_id)
    number = quotation.quotation_number
    try:
        db.delete(quotation)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise PersistenceError("Could not delete quotation") from exc
    logger.info(f"Deleted quotation {number} and its version history")
    return quotation


def create_quotation_from_template(
    db: Session,
    payload: QuotationFromTemplate,
    user: Optional[User] = None,
) -> Quotation:
    """Seed a new draft quotation from a template's lines, tax rate and notes."""
    template = db.query(Template).filter(Template.id == payload.template_id).first()
    if template is None:
        raise NotFoundError("Template not found")
    create = QuotationCreate(
        client_id=payload.client_id,
        project_title=payload.project_title,
        project_description=payload.project_description or template.description,
        line_items=[normalize_line_item(line) for line in template.line_items or []],
        tax_rate=template.tax_rate,
        status="draft",
        valid_until=payload.valid_until,
        notes=template.notes,
    )
    return create_quotation(db, create, user)
