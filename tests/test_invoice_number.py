from invoice_parser.extraction.extraction_result import ExtractionTrace
from invoice_parser.extraction.invoice_number import InvoiceNumberExtractor


def test_number_on_label_line(make_document) -> None:
    doc = make_document("ACME S.A.\nInvoice No: 0001-00001234")
    trace = ExtractionTrace()
    match = InvoiceNumberExtractor().extract(doc, trace)
    assert match.value == "0001-00001234"
    assert trace.strategy_for("invoice_number") == "labelled"
    assert trace.fields["invoice_number"].line_index == 1


def test_number_in_lines_after_label(make_document) -> None:
    doc = make_document("FACTURA B\nOriginal\nPunto de venta\n0003-00045678")
    assert InvoiceNumberExtractor().extract(doc).value == "0003-00045678"


def test_spaces_around_separator_are_dropped(make_document) -> None:
    doc = make_document("Factura N° 0001 - 00001234")
    assert InvoiceNumberExtractor().extract(doc).value == "0001-00001234"


def test_tax_id_is_not_an_invoice_number(make_document) -> None:
    doc = make_document("Factura N° 30-71234567-9\n0001-00000999")
    assert InvoiceNumberExtractor().extract(doc).value == "0001-00000999"


def test_authorization_lines_are_rejected(make_document) -> None:
    doc = make_document("Factura\nCAE N° 7412-3456789012\n0001-00000888")
    assert InvoiceNumberExtractor().extract(doc).value == "0001-00000888"


def test_long_digit_runs_reject_the_line(make_document) -> None:
    doc = make_document("Nro 0001-00000777 74123456789012\nNro 0002-00000555")
    assert InvoiceNumberExtractor().extract(doc).value == "0002-00000555"


def test_phone_numbers_are_rejected(make_document) -> None:
    doc = make_document("Factura\nTel: 0223-4567890")
    assert InvoiceNumberExtractor().extract(doc) is None


def test_digit_count_bounds(make_document) -> None:
    extractor = InvoiceNumberExtractor()
    assert extractor.find_number("Nro 1-2345") is None
    assert extractor.find_number("Nro 1234-12345678") == "1234-12345678"
    assert extractor.find_number("Nro 12345-1234567890") == "12345-1234567890"


def test_positional_fallback_without_label(make_document) -> None:
    doc = make_document("ACME S.A.\nComprobante 0004-00001111")
    trace = ExtractionTrace()
    match = InvoiceNumberExtractor().extract(doc, trace)
    assert match.value == "0004-00001111"
    assert trace.strategy_for("invoice_number") == "positional"


def test_fallback_skips_order_and_delivery_lines(make_document) -> None:
    doc = make_document(
        "Remito 0001-00009999\n"
        "Pedido 0002-00001111\n"
        "CUIT 20-12345678-3\n"
        "Comprobante 0003-00002222"
    )
    assert InvoiceNumberExtractor().extract(doc).value == "0003-00002222"


def test_no_number_found(make_document) -> None:
    trace = ExtractionTrace()
    assert InvoiceNumberExtractor().extract(make_document("sin datos"), trace) is None
    assert trace.strategy_for("invoice_number") is None
