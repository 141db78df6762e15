"""Export a quotation as a text-based printable document."""

from decimal import Decimal

from sqlalchemy.orm import Session

from quotedesk.app.core.policy import ACCEPTANCE_NOTE, COMPANY, TERMS
from quotedesk.app.core.settings import get_settings
from quotedesk.app.core.time import ensure_utc
from quotedesk.app.models.quotation import Quotation
from quotedesk.app.services.pricing import line_value, to_decimal
from quotedesk.app.services.quotations import get_quotation


def format_amount(value) -> str:
    return f"{get_settings().currency} {to_decimal(value).quantize(Decimal('0.01')):,}"


def _client_lines(client) -> list[str]:
    if client is None:
        return ["Client: N/A"]
    lines = [f"Client: {client.name}"]
    address = ", ".join(part for part in (client.address, client.city, client.state, client.zip_code) if part)
    if address:
        lines.append(f"Address: {address}")
    if client.phone:
        lines.append(f"Phone: {client.phone}")
    lines.append(f"Email: {client.email}")
    if client.tax_id:
        lines.append(f"GSTIN: {client.tax_id}")
    return lines


def build_quotation_document_text(quotation: Quotation) -> str:
    lines = []
    lines.append(COMPANY["name"])
    lines.append(COMPANY["tagline"])
    lines.append(COMPANY["address"])
    lines.append(f"Phone: {COMPANY['phone']} | Email: {COMPANY['email']} | GSTIN: {COMPANY['gstin']}")
    lines.append("")
    lines.append("== QUOTATION ==")
    lines.append(f"Quotation No: {quotation.quotation_number}")
    lines.append(f"Date: {ensure_utc(quotation.created_at).date().isoformat()}")
    lines.append(f"Valid Until: {quotation.valid_until.isoformat() if quotation.valid_until else 'N/A'}")
    lines.append(f"Status: {quotation.status.capitalize()}")
    lines.append("")
    lines.extend(_client_lines(quotation.client))
    lines.append("")
    lines.append(f"Project: {quotation.project_title}")
    if quotation.project_description:
        lines.append(quotation.project_description)
    lines.append("")
    lines.append("== Items ==")
    for index, line in enumerate(quotation.line_items or [], start=1):
        name = line_value(line, "name") or line_value(line, "description") or "Item"
        unit = line_value(line, "unit") or ""
        lines.append(
            f"{index}. {name} - {to_decimal(line_value(line, 'quantity')).normalize():f} {unit} "
            f"x {format_amount(line_value(line, 'unit_price'))} = {format_amount(line_value(line, 'total'))}"
        )
        if line_value(line, "notes"):
            lines.append(f"   Note: {line_value(line, 'notes')}")
    lines.append("")
    lines.append(f"Subtotal: {format_amount(quotation.subtotal)}")
    lines.append(f"Tax ({to_decimal(quotation.tax_rate).normalize():f}%): {format_amount(quotation.tax_amount)}")
    lines.append(f"Total: {format_amount(quotation.total)}")
    if quotation.notes:
        lines.append("")
        lines.append("== Notes ==")
        lines.append(quotation.notes)
    lines.append("")
    lines.append("== Terms & Conditions ==")
    for index, (title, text) in enumerate(TERMS, start=1):
        lines.append(f"{index}. {title}: {text}")
    lines.append("")
    lines.append(ACCEPTANCE_NOTE)
    lines.append("")
    return "\n".join(lines)


def render_quotation_document(quotation: Quotation) -> bytes:
    return build_quotation_document_text(quotation).encode("utf-8")


def get_quotation_document_bytes(db: Session, *, quotation_id: int) -> bytes:
    return render_quotation_document(get_quotation(db, quotation_id))
