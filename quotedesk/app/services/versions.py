"""Append-only quotation version history: snapshot, list, compare.

Every successful create or update of a quotation appends exactly one version in
the same transaction as the quotation write. Restoring is an ordinary update and
lives with the rest of the write path in services/quotations.py.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from quotedesk.app.core.errors import NotFoundError
from quotedesk.app.models.quotation import Quotation
from quotedesk.app.models.quotation_version import QuotationVersion
from quotedesk.app.services.pricing import normalize_line_items, quantize_money, quantize_rate

logger = logging.getLogger(__name__)

# Fields copied back onto the live row by a restore.
RESTORABLE_FIELDS = (
    "client_id",
    "project_title",
    "project_description",
    "line_items",
    "subtotal",
    "tax_rate",
    "tax_amount",
    "total",
    "status",
    "valid_until",
    "notes",
)

COMPARED_FIELDS = (
    "client_id",
    "project_title",
    "project_description",
    "status",
    "subtotal",
    "tax_rate",
    "tax_amount",
    "total",
    "valid_until",
    "notes",
)


def snapshot_quotation(quotation: Quotation) -> dict:
    """Full, JSON-safe copy of the quotation's current field set."""
    return {
        "quotation_number": quotation.quotation_number,
        "client_id": quotation.client_id,
        "project_title": quotation.project_title,
        "project_description": quotation.project_description,
        "line_items": normalize_line_items(quotation.line_items),
        "subtotal": str(quantize_money(quotation.subtotal)),
        "tax_rate": str(quantize_rate(quotation.tax_rate)),
        "tax_amount": str(quantize_money(quotation.tax_amount)),
        "total": str(quantize_money(quotation.total)),
        "status": quotation.status,
        "valid_until": quotation.valid_until.isoformat() if quotation.valid_until else None,
        "notes": quotation.notes,
    }


def next_version_number(db: Session, quotation_id: int) -> int:
    current = (
        db.query(func.max(QuotationVersion.version_number))
        .filter(QuotationVersion.quotation_id == quotation_id)
        .scalar()
    )
    return (current or 0) + 1


def append_version(
    db: Session,
    quotation: Quotation,
    notes: Optional[str] = None,
    created_by: Optional[int] = None,
) -> QuotationVersion:
    """Stage the next version for a flushed quotation; the caller commits both rows together."""
    version = QuotationVersion(
        quotation_id=quotation.id,
        version_number=next_version_number(db, quotation.id),
        quotation_data=snapshot_quotation(quotation),
        notes=notes,
        created_by=created_by,
    )
    db.add(version)
    db.flush()
    logger.info(f"Staged version {version.version_number} for quotation {quotation.quotation_number}")
    return version


def list_versions(db: Session, quotation_id: int) -> List[QuotationVersion]:
    """All versions, newest first. The first element is the current state."""
    return (
        db.query(QuotationVersion)
        .filter(QuotationVersion.quotation_id == quotation_id)
        .order_by(QuotationVersion.version_number.desc())
        .all()
    )


def get_version(db: Session, quotation_id: int, version_id: int) -> QuotationVersion:
    version = (
        db.query(QuotationVersion)
        .filter(QuotationVersion.id == version_id, QuotationVersion.quotation_id == quotation_id)
        .first()
    )
    if version is None:
        raise NotFoundError("Quotation version not found")
    return version


def _as_decimal(value: Any) -> Any:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return value


def _line_differs(older: dict, newer: dict) -> bool:
    return _as_decimal(older.get("quantity")) != _as_decimal(newer.get("quantity")) or _as_decimal(
        older.get("unit_price")
    ) != _as_decimal(newer.get("unit_price"))


def _first_by_item_id(line_items: List[dict]) -> dict:
    lines: dict = {}
    for line in line_items:
        lines.setdefault(line.get("item_id"), line)
    return lines


def compare_snapshots(older: dict, newer: dict) -> dict:
    """Field-by-field diff of two snapshots. The caller decides which side is older."""
    fields = []
    for field in COMPARED_FIELDS:
        old_value = older.get(field)
        new_value = newer.get(field)
        fields.append({"field": field, "older": old_value, "newer": new_value, "changed": old_value != new_value})

    older_lines = _first_by_item_id(older.get("line_items") or [])
    newer_lines = _first_by_item_id(newer.get("line_items") or [])

    line_items = []
    summary = {"added": 0, "removed": 0, "modified": 0, "unchanged": 0}
    for item_id in list(older_lines) + [key for key in newer_lines if key not in older_lines]:
        old_line = older_lines.get(item_id)
        new_line = newer_lines.get(item_id)
        if old_line is None:
            status = "added"
        elif new_line is None:
            status = "removed"
        elif _line_differs(old_line, new_line):
            status = "modified"
        else:
            status = "unchanged"
        summary[status] += 1
        named = new_line or old_line
        line_items.append(
            {
                "item_id": item_id,
                "name": named.get("name") or named.get("description") or "Unknown Item",
                "status": status,
                "older": old_line,
                "newer": new_line,
            }
        )

    summary["fields_changed"] = sum(1 for entry in fields if entry["changed"])
    return {"fields": fields, "line_items": line_items, "summary": summary}


def _version_payload(version: QuotationVersion, current_id: Optional[int]) -> dict:
    return {
        "id": version.id,
        "quotation_id": version.quotation_id,
        "version_number": version.version_number,
        "quotation_data": version.quotation_data,
        "notes": version.notes,
        "created_at": version.created_at,
        "is_current": version.id == current_id,
    }


def compare_versions(
    db: Session,
    quotation_id: int,
    older_version_id: Optional[int] = None,
    newer_version_id: Optional[int] = None,
) -> dict:
    """Compare two versions of a quotation, defaulting to the two most recent."""
    versions = list_versions(db, quotation_id)
    current_id = versions[0].id if versions else None
    if len(versions) < 2:
        return {"comparable": False, "version_count": len(versions)}

    older = get_version(db, quotation_id, older_version_id) if older_version_id is not None else versions[1]
    newer = get_version(db, quotation_id, newer_version_id) if newer_version_id is not None else versions[0]

    comparison = compare_snapshots(older.quotation_data, newer.quotation_data)
    comparison.update(
        {
            "comparable": True,
            "version_count": len(versions),
            "older_version": _version_payload(older, current_id),
            "newer_version": _version_payload(newer, current_id),
        }
    )
    return comparison


def version_history(db: Session, quotation_id: int) -> List[dict]:
    versions = list_versions(db, quotation_id)
    current_id = versions[0].id if versions else None
    return [_version_payload(version, current_id) for version in versions]
