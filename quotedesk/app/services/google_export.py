"""
Google Sheets / Drive export for quotations.

Uses the caller's OAuth bearer token; nothing here reads or writes quotation or
version rows. Each Drive upload is independent, so one failed document does not
stop the rest of a batch.
"""

import base64
import json
import logging
import uuid
from typing import Iterable, List, Optional

import httpx

from quotedesk.app.core.errors import ExportError
from quotedesk.app.core.time import ensure_utc
from quotedesk.app.models.quotation import Quotation
from quotedesk.app.services.quotation_document import render_quotation_document

logger = logging.getLogger(__name__)

SHEETS_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"
DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files?uploadType=multipart"
SHEET_NAME = "Quotations"
DEFAULT_TIMEOUT = 30.0

EXPORT_HEADERS = [
    "Quotation Number",
    "Client Name",
    "Project Title",
    "Status",
    "Subtotal",
    "Tax Rate (%)",
    "Tax Amount",
    "Total",
    "Valid Until",
    "Created At",
]


def build_export_rows(quotations: Iterable[Quotation]) -> List[list]:
    """Header row plus one row per quotation."""
    rows = [list(EXPORT_HEADERS)]
    for q in quotations:
        rows.append(
            [
                q.quotation_number,
                q.client.name if q.client is not None else "",
                q.project_title,
                q.status,
                str(q.subtotal),
                str(q.tax_rate),
                str(q.tax_amount),
                str(q.total),
                q.valid_until.isoformat() if q.valid_until else "",
                ensure_utc(q.created_at).date().isoformat(),
            ]
        )
    return rows


def _auth_headers(access_token: str) -> dict:
    return {"Authorization": f"Bearer {access_token}"}


def _client(client: Optional[httpx.AsyncClient]) -> httpx.AsyncClient:
    return client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)


async def export_quotations_to_sheets(
    access_token: str,
    quotations: List[Quotation],
    title: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """
    Create a spreadsheet and fill it with one row per quotation.

    Returns:
        dict with spreadsheet_id, url and row_count.
    """
    rows = build_export_rows(quotations)
    logger.info(f"Exporting {len(quotations)} quotation(s) to Google Sheets")
    http = _client(client)
    try:
        created = await http.post(
            SHEETS_BASE_URL,
            headers=_auth_headers(access_token),
            json={
                "properties": {"title": title or "Quotations Export"},
                "sheets": [{"properties": {"title": SHEET_NAME}}],
            },
        )
        if created.status_code not in (200, 201):
            logger.error(f"Sheets create failed {created.status_code}: {created.text[:200]}")
            raise ExportError("Failed to create spreadsheet")
        spreadsheet_id = created.json().get("spreadsheetId")
        if not spreadsheet_id:
            raise ExportError("Spreadsheet response did not include an id")

        updated = await http.put(
            f"{SHEETS_BASE_URL}/{spreadsheet_id}/values/{SHEET_NAME}!A1:J{len(rows)}",
            params={"valueInputOption": "RAW"},
            headers=_auth_headers(access_token),
            json={"values": rows},
        )
        if updated.status_code != 200:
            logger.error(f"Sheets update failed {updated.status_code}: {updated.text[:200]}")
            raise ExportError("Failed to update sheet data")
    except httpx.HTTPError as e:
        logger.error(f"Sheets export request failed: {e}")
        raise ExportError("Google Sheets export failed") from e
    finally:
        if client is None:
            await http.aclose()

    logger.info(f"Exported to spreadsheet {spreadsheet_id}")
    return {
        "spreadsheet_id": spreadsheet_id,
        "url": f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}",
        "row_count": len(rows) - 1,
    }


def _multipart_body(metadata: dict, content: bytes, content_type: str) -> tuple[str, bytes]:
    boundary = f"quotedesk-{uuid.uuid4().hex}"
    body = (
        f"--{boundary}\r\n"
        "Content-Type: application/json; charset=UTF-8\r\n\r\n"
        f"{json.dumps(metadata)}\r\n"
        f"--{boundary}\r\n"
        f"Content-Type: {content_type}\r\n"
        "Content-Transfer-Encoding: base64\r\n\r\n"
        f"{base64.b64encode(content).decode('ascii')}\r\n"
        f"--{boundary}--"
    )
    return boundary, body.encode("utf-8")


async def export_quotation_document_to_drive(
    access_token: str,
    quotation: Quotation,
    client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """Upload one rendered quotation document; returns file_id and url."""
    metadata = {"name": f"Quotation-{quotation.quotation_number}.txt", "mimeType": "text/plain"}
    boundary, body = _multipart_body(metadata, render_quotation_document(quotation), "text/plain")
    http = _client(client)
    try:
        response = await http.post(
            DRIVE_UPLOAD_URL,
            headers={
                **_auth_headers(access_token),
                "Content-Type": f"multipart/related; boundary={boundary}",
            },
            content=body,
        )
    except httpx.HTTPError as e:
        logger.error(f"Drive upload request failed for {quotation.quotation_number}: {e}")
        raise ExportError("Google Drive upload failed") from e
    finally:
        if client is None:
            await http.aclose()

    if response.status_code not in (200, 201):
        logger.error(f"Drive upload failed {response.status_code}: {response.text[:200]}")
        raise ExportError("Failed to upload to Google Drive")
    file_id = response.json().get("id")
    logger.info(f"Uploaded {quotation.quotation_number} to Drive as {file_id}")
    return {"file_id": file_id, "url": f"https://drive.google.com/file/d/{file_id}/view"}


async def export_documents_to_drive(
    access_token: str,
    quotations: List[Quotation],
    client: Optional[httpx.AsyncClient] = None,
) -> List[dict]:
    results = []
    for quotation in quotations:
        try:
            uploaded = await export_quotation_document_to_drive(access_token, quotation, client=client)
        except ExportError as e:
            results.append(
                {
                    "quotation_id": quotation.id,
                    "quotation_number": quotation.quotation_number,
                    "success": False,
                    "error": e.detail,
                }
            )
            continue
        results.append(
            {
                "quotation_id": quotation.id,
                "quotation_number": quotation.quotation_number,
                "success": True,
                **uploaded,
            }
        )
    return results
