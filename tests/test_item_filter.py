import pytest

from invoice_parser.extraction.extraction_result import ExtractionTrace, LineItem
from invoice_parser.postprocessor import ItemFilter, ItemValidator, PostProcessor, sum_item_totals


def _item(name="FILTRO ACEITE", quantity=1.0, unit=1500.0, total=1500.0, code=None):
    return LineItem(name, quantity, unit, total, code)


@pytest.mark.parametrize(
    "item",
    [
        _item(name="AB"),
        _item(name="X12"),
        _item(name="TOTAL GENERAL"),
        _item(name="Vendedor Juan Perez"),
        _item(name="Fecha de entrega"),
        _item(name="Tel", quantity=223.0, unit=155.0, total=456.0),
        _item(name="Sucursal Centro"),
        _item(name="WhatsApp ventas"),
        _item(name="www.repuestos.com.ar"),
        _item(name="ventas@repuestos.com.ar"),
        _item(unit=30.0, total=30.0),
        _item(unit=20.0, total=60.0, quantity=3.0),
        _item(unit=20000000.0, total=20000000.0),
        _item(quantity=0.0),
        _item(quantity=1500.0),
    ],
)
def test_invalid_items_are_dropped(item: LineItem) -> None:
    assert ItemFilter().apply([item]) == []


def test_cheap_unit_price_kept_for_large_totals() -> None:
    item = _item(name="TORNILLO M6", quantity=100.0, unit=20.0, total=2000.0)
    assert ItemFilter().apply([item]) == [item]


def test_duplicates_are_removed_case_insensitively() -> None:
    first = _item(name="Filtro Aceite")
    second = _item(name="FILTRO ACEITE")
    assert ItemFilter().apply([first, second]) == [first]


def test_items_with_different_codes_are_not_duplicates() -> None:
    first = _item(code="PH5949")
    second = _item(code="PH3614")
    assert ItemFilter().apply([first, second]) == [first, second]


def test_order_is_preserved() -> None:
    items = [_item(name="BUJIA NGK"), _item(name="CORREA DAYCO"), _item(name="FILTRO AIRE")]
    assert ItemFilter().apply(items) == items


def test_rejections_are_traced() -> None:
    trace = ExtractionTrace()
    kept = ItemFilter().apply([_item(), _item(name="Cajero 3"), _item()], trace)
    assert len(kept) == 1
    assert trace.accepted_items == 1
    assert trace.rejected_items == [
        ("Cajero 3", "Name contains excluded keyword"),
        ("FILTRO ACEITE", "Duplicate item"),
    ]


def test_item_validator_reports_first_failure() -> None:
    validator = ItemValidator()
    assert validator.validate(_item()) == (True, "Valid item")
    assert validator.validate(_item(name="123 456")) == (False, "Name has no word")
    assert validator.validate(_item(quantity=-1.0))[0] is False


def test_warnings_for_missing_fields() -> None:
    warnings = PostProcessor().collect_warnings({}, [])
    assert warnings == [
        "Missing field: invoice_number",
        "Missing field: invoice_date",
        "Missing field: total_amount",
    ]


def test_warning_for_due_date_before_issue_date() -> None:
    fields = {
        "invoice_number": "0001-00000001",
        "invoice_date": "2024-03-10",
        "due_date": "2024-03-01",
        "total_amount": 60000.0,
    }
    assert PostProcessor().collect_warnings(fields, []) == ["Due date is before invoice date"]


def test_warning_when_items_exceed_total() -> None:
    fields = {
        "invoice_number": "0001-00000001",
        "invoice_date": "2024-03-10",
        "total_amount": 1000.0,
    }
    items = [_item(total=1500.0)]
    assert PostProcessor().collect_warnings(fields, items) == [
        "Sum of item totals (1500.00) exceeds invoice total (1000.00)"
    ]


def test_no_warnings_for_consistent_invoice() -> None:
    fields = {
        "invoice_number": "0001-00000001",
        "invoice_date": "2024-03-01",
        "due_date": "2024-03-31",
        "total_amount": 1815.0,
    }
    assert PostProcessor().collect_warnings(fields, [_item()]) == []


def test_contact_details_are_traced() -> None:
    trace = ExtractionTrace()
    ItemFilter().apply([_item(name="ventas@repuestos.com.ar")], trace)
    assert trace.rejected_items == [("ventas@repuestos.com.ar", "Name contains contact details")]


def test_sum_item_totals_rounds_to_cents() -> None:
    items = [_item(total=0.1), _item(total=0.2), _item(total=1500.004)]
    assert sum_item_totals(items) == 1500.3
    assert sum_item_totals([]) == 0.0
