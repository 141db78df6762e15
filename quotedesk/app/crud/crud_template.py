"""CRUD operations for quotation templates."""

from quotedesk.app.crud.base import CRUDBase
from quotedesk.app.models.template import Template
from quotedesk.app.services.pricing import normalize_line_items, quantize_rate, validate_line_items


class CRUDTemplate(CRUDBase[Template]):
    def prepare(self, data: dict) -> dict:
        if data.get("line_items") is not None:
            validate_line_items(data["line_items"])
            data["line_items"] = normalize_line_items(data["line_items"])
        if data.get("tax_rate") is not None:
            data["tax_rate"] = quantize_rate(data["tax_rate"])
        return data


template_crud = CRUDTemplate(Template)
