"""Line-item pricing and quotation totals.

All money math is done in Decimal. Line totals and tax are rounded to two places
with ROUND_HALF_UP; the subtotal is the sum of rounded line totals and the grand
total is subtotal plus rounded tax, so the stored figures always add up.
"""

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional

from quotedesk.app.core.errors import InvalidInputError

TWO_PLACES = Decimal("0.01")
QUANTITY_PLACES = Decimal("0.001")
RATE_PLACES = Decimal("0.001")
ZERO = Decimal("0.00")

LINE_ITEM_TEXT_FIELDS = ("name", "description", "notes", "unit")


def line_value(line: Any, field: str, default: Any = None) -> Any:
    """Read a field from a stored (dict) or incoming (schema) line item."""
    if isinstance(line, Mapping):
        return line.get(field, default)
    return getattr(line, field, default)


def to_decimal(value: Any, default: str = "0") -> Decimal:
    if value is None or value == "":
        return Decimal(default)
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise InvalidInputError(f"Invalid numeric value: {value!r}") from exc


def quantize_money(value: Any) -> Decimal:
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def quantize_quantity(value: Any) -> Decimal:
    return to_decimal(value, default="1").quantize(QUANTITY_PLACES, rounding=ROUND_HALF_UP)


def quantize_rate(value: Any) -> Decimal:
    """Tax rates keep three places, matching the stored column."""
    return to_decimal(value).quantize(RATE_PLACES, rounding=ROUND_HALF_UP)


def calculate_line_total(quantity: Any, unit_price: Any) -> Decimal:
    """quantity × unit_price, rounded to the cent."""
    return quantize_money(to_decimal(quantity) * to_decimal(unit_price))


def calculate_totals(line_items: Iterable[Any], tax_rate: Any) -> dict:
    """Derive subtotal, tax and grand total from line items and a percentage tax rate."""
    subtotal = sum(
        (calculate_line_total(line_value(line, "quantity"), line_value(line, "unit_price")) for line in line_items or []),
        ZERO,
    )
    tax_amount = quantize_money(subtotal * to_decimal(tax_rate) / Decimal("100"))
    return {
        "subtotal": subtotal,
        "tax_amount": tax_amount,
        "total": subtotal + tax_amount,
    }


def normalize_line_item(line: Any) -> dict:
    """Return the JSON-safe stored shape of a line item with a freshly derived total."""
    quantity = quantize_quantity(line_value(line, "quantity"))
    unit_price = quantize_money(line_value(line, "unit_price"))
    cost_price = line_value(line, "cost_price")
    stored = {
        "item_id": line_value(line, "item_id"),
        "quantity": str(quantity),
        "unit_price": str(unit_price),
        "cost_price": str(quantize_money(cost_price)) if cost_price is not None else None,
        "total": str(calculate_line_total(quantity, unit_price)),
    }
    for field in LINE_ITEM_TEXT_FIELDS:
        stored[field] = line_value(line, field)
    return stored


def normalize_line_items(line_items: Iterable[Any]) -> List[dict]:
    return [normalize_line_item(line) for line in line_items or []]


def apply_catalog_item(line: Any, item: Any) -> dict:
    """Point a line at a catalog item, snapshotting the item's current selling price."""
    stored = normalize_line_item(line)
    stored["item_id"] = item.id
    stored["unit_price"] = str(quantize_money(item.unit_price))
    stored["total"] = str(calculate_line_total(stored["quantity"], stored["unit_price"]))
    if not stored.get("name"):
        stored["name"] = item.name
    if not stored.get("unit"):
        stored["unit"] = item.unit
    if not stored.get("description"):
        stored["description"] = item.description
    return stored


def validate_line_items(line_items: Iterable[Any]) -> None:
    """Reject line items that may not be persisted."""
    for index, line in enumerate(line_items or [], start=1):
        if line_value(line, "item_id") in (None, ""):
            raise InvalidInputError(f"Line item {index} has no catalog item selected")
        if quantize_quantity(line_value(line, "quantity")) <= 0:
            raise InvalidInputError(f"Line item {index} must have a positive quantity")
        unit_price: Optional[Any] = line_value(line, "unit_price")
        if unit_price is not None and to_decimal(unit_price) < 0:
            raise InvalidInputError(f"Line item {index} has a negative unit price")
        cost_price = line_value(line, "cost_price")
        if cost_price is not None and to_decimal(cost_price) < 0:
            raise InvalidInputError(f"Line item {index} has a negative cost price")
