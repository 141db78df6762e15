from decimal import Decimal

import pytest

from quotedesk.app.core.errors import InvalidInputError
from quotedesk.app.models.item import Item
from quotedesk.app.schemas.line_item import LineItemIn
from quotedesk.app.services.pricing import (
    apply_catalog_item,
    calculate_line_total,
    calculate_totals,
    normalize_line_item,
    quantize_rate,
    validate_line_items,
)


def test_totals_with_tax():
    lines = [
        {"item_id": 1, "quantity": 2, "unit_price": 100},
        {"item_id": 2, "quantity": 1, "unit_price": 50},
    ]
    totals = calculate_totals(lines, 18)
    assert totals["subtotal"] == Decimal("250.00")
    assert totals["tax_amount"] == Decimal("45.00")
    assert totals["total"] == Decimal("295.00")


def test_empty_line_items_total_zero():
    totals = calculate_totals([], Decimal("18"))
    assert totals == {"subtotal": Decimal("0.00"), "tax_amount": Decimal("0.00"), "total": Decimal("0.00")}


def test_total_is_subtotal_plus_tax_after_rounding():
    lines = [
        {"item_id": 1, "quantity": "3", "unit_price": "33.33"},
        {"item_id": 2, "quantity": "0.5", "unit_price": "19.99"},
    ]
    totals = calculate_totals(lines, "12.5")
    assert totals["subtotal"] == Decimal("109.99")
    assert totals["tax_amount"] == Decimal("13.75")
    assert totals["total"] == totals["subtotal"] + totals["tax_amount"]


def test_line_total_rounds_half_up():
    assert calculate_line_total("1", "0.125") == Decimal("0.13")
    assert calculate_line_total("3", "0.335") == Decimal("1.01")


def test_normalize_recomputes_total_and_is_idempotent():
    stored = normalize_line_item({"item_id": 4, "name": "Cable", "quantity": 2, "unit_price": "10.5", "total": "999"})
    assert stored["total"] == "21.00"
    assert stored["quantity"] == "2.000"
    assert stored["unit_price"] == "10.50"
    assert normalize_line_item(stored) == stored


def test_normalize_accepts_schema_lines():
    line = LineItemIn(item_id=3, quantity=Decimal("4"), unit_price=Decimal("2.5"), cost_price=Decimal("1"))
    stored = normalize_line_item(line)
    assert stored["item_id"] == 3
    assert stored["total"] == "10.00"
    assert stored["cost_price"] == "1.00"


def test_apply_catalog_item_snapshots_price():
    item = Item(id=9, name="Router", unit="pcs", unit_price=Decimal("1499.00"), description="Dual band")
    stored = apply_catalog_item({"item_id": 9, "quantity": 2}, item)
    assert stored["unit_price"] == "1499.00"
    assert stored["total"] == "2998.00"
    assert stored["name"] == "Router"
    assert stored["unit"] == "pcs"

    item.unit_price = Decimal("1799.00")
    assert stored["unit_price"] == "1499.00"


def test_validate_requires_catalog_reference():
    with pytest.raises(InvalidInputError):
        validate_line_items([{"quantity": 1, "unit_price": 10}])


def test_validate_rejects_non_positive_quantity_and_negative_price():
    with pytest.raises(InvalidInputError):
        validate_line_items([{"item_id": 1, "quantity": 0, "unit_price": 10}])
    with pytest.raises(InvalidInputError):
        validate_line_items([{"item_id": 1, "quantity": 1, "unit_price": -1}])


def test_invalid_number_is_a_validation_error():
    with pytest.raises(InvalidInputError):
        calculate_totals([{"item_id": 1, "quantity": "two", "unit_price": 10}], 18)


def test_fractional_tax_rate_keeps_three_places():
    assert quantize_rate("18.125") == Decimal("18.125")
    assert quantize_rate("7.0005") == Decimal("7.001")
    totals = calculate_totals([{"item_id": 1, "quantity": 1, "unit_price": 1000}], quantize_rate("18.125"))
    assert totals["tax_amount"] == Decimal("181.25")
    assert totals["total"] == Decimal("1181.25")


def test_quantity_rounding_to_zero_is_rejected():
    with pytest.raises(InvalidInputError):
        validate_line_items([{"item_id": 1, "quantity": "0.0004", "unit_price": 10}])
    validate_line_items([{"item_id": 1, "quantity": "0.0005", "unit_price": 10}])
