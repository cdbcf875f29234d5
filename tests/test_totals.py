import pytest

from invoice_parser.extraction.extraction_result import ExtractionTrace
from invoice_parser.extraction.totals import TotalAmountExtractor


def _total(make_document, text: str):
    trace = ExtractionTrace()
    match = TotalAmountExtractor().extract(make_document(text), trace)
    return (match.value if match else None), trace.strategy_for("total_amount")


def test_total_line_amount(make_document) -> None:
    assert _total(make_document, "Subtotal: 43.393,11\nTOTAL: 52.505,66") == (
        pytest.approx(52505.66), "total_line"
    )


def test_total_line_prefers_amounts_after_the_label(make_document) -> None:
    value, _ = _total(make_document, "90.000,00\nTOTAL\n$ 55.000,00")
    assert value == pytest.approx(55000.0)


def test_total_line_uses_amounts_before_label_when_none_after(make_document) -> None:
    value, strategy = _total(make_document, "70.000,00\nTOTAL A PAGAR")
    assert value == pytest.approx(70000.0)
    assert strategy == "total_line"


def test_last_total_line_is_used(make_document) -> None:
    text = "Total parcial 60.000,00\n" + "\n".join(["-"] * 20) + "\nTOTAL 80.000,00"
    value, _ = _total(make_document, text)
    assert value == pytest.approx(80000.0)


def test_subtotal_and_tax_lines_are_not_total_lines() -> None:
    extractor = TotalAmountExtractor()
    assert not extractor.is_total_line("Subtotal: 10.000,00")
    assert not extractor.is_total_line("Sub Total 10.000,00")
    assert not extractor.is_total_line("Total IVA 21%: 2.100,00")
    assert not extractor.is_total_line("Total Descuento 500,00")
    assert extractor.is_total_line("Importe Total: 12.100,00")


def test_small_totals_use_inline_label(make_document) -> None:
    text = "Subtotal: 10.000,00\nIVA 21%: 2.100,00\nTOTAL: 12.100,00"
    assert _total(make_document, text) == (pytest.approx(12100.0), "inline_label")


def test_inline_label_requires_value_above_floor(make_document) -> None:
    assert _total(make_document, "TOTAL: 900,00") == (None, None)


def test_largest_amount_last_resort(make_document) -> None:
    text = "Importe 25.000,00\nOtro 3.000,00"
    assert _total(make_document, text) == (pytest.approx(25000.0), "largest_amount")


def test_amounts_outside_upper_bound_are_ignored(make_document) -> None:
    assert _total(make_document, "TOTAL: 100.000.000,00") == (None, None)
