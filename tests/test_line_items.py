import pytest

from invoice_parser.extraction.extraction_result import ExtractionTrace, LineItem
from invoice_parser.extraction.line_items import LineItemExtractor, LineKind


def _items(make_document, text: str):
    return LineItemExtractor().extract(make_document(text))


def test_description_quantity_unit_total_row(make_document) -> None:
    items = _items(make_document, "FILTRO ACEITE 2 1.500,00 3.000,00")
    assert items == [LineItem("FILTRO ACEITE", 2.0, 1500.0, 3000.0)]


def test_brand_code_row_with_discount(make_document) -> None:
    items = _items(make_document, "BOSCH 0986AF0123 BOMBA NAFTA 1 45.000,00 10% 40.500,00")
    assert items == [LineItem("BOMBA NAFTA", 1.0, 45000.0, 40500.0, "0986AF0123", "BOSCH")]


def test_brand_code_row(make_document) -> None:
    items = _items(make_document, "FRAM PH5949 FILTRO ACEITE 2 9.225,31 18.450,62")
    assert items == [
        LineItem("FILTRO ACEITE", 2.0, 9225.31, 18450.62, "PH5949", "FRAM")
    ]


def test_quantity_code_row(make_document) -> None:
    items = _items(make_document, "2 AB1234 PASTILLA FRENO 12.500,00 25.000,00")
    assert items == [LineItem("PASTILLA FRENO", 2.0, 12500.0, 25000.0, "AB1234")]


def test_description_price_row_implies_quantity_one(make_document) -> None:
    items = _items(make_document, "MANO DE OBRA SERVICE $8.500,00")
    assert items == [LineItem("MANO DE OBRA SERVICE", 1.0, 8500.0, 8500.0)]


def test_description_price_row_needs_minimum_price(make_document) -> None:
    assert _items(make_document, "ARANDELA PLANA 80,00") == []


def test_quantity_out_of_range_is_rejected(make_document) -> None:
    assert _items(make_document, "ARANDELA 2000 100,00 200.000,00") == []


def test_excluded_lines_are_not_items(make_document) -> None:
    text = "FLETE A DOMICILIO 5.000,00\nIVA 21% 1.050,00\nTOTAL 6.050,00"
    assert _items(make_document, text) == []


@pytest.mark.parametrize(
    "line",
    [
        "Tel: 0223 155 456",
        "Cel. 223 555 123",
        "WhatsApp 223 456 789",
        "Sucursal Centro 2 1.500,00 3.000,00",
        "ventas@repuestos.com.ar 2 1.500,00 3.000,00",
        "www.repuestos.com.ar 2 1.500,00 3.000,00",
    ],
)
def test_contact_lines_are_not_items(make_document, line: str) -> None:
    assert _items(make_document, line) == []


def test_numeric_fragments_after_a_row_are_skipped(make_document) -> None:
    text = (
        "FILTRO AIRE 1 4.000,00 4.000,00\n"
        "1\n"
        "4.000,00\n"
        "CORREA DISTRIBUCION 2 3.000,00 6.000,00"
    )
    items = _items(make_document, text)
    assert [item.name for item in items] == ["FILTRO AIRE", "CORREA DISTRIBUCION"]


def test_multi_line_reconstruction(make_document, multi_line_text) -> None:
    trace = ExtractionTrace()
    items = LineItemExtractor().extract(make_document(multi_line_text), trace)
    assert items == [
        LineItem("BULBO CHEV. CORSA", 2.0, 17083.9, 34167.8, "24703"),
        LineItem("FILTRO ACEITE", 1.0, 9225.31, 9225.31, "PH5949", "FRAM"),
    ]
    assert trace.item_strategy == "multi_line"
    assert trace.candidate_items == 2


def test_multi_line_derives_quantity_from_prices(make_document) -> None:
    text = (
        "Descripción Cantidad Importe\n"
        "AMORTIGUADOR DELANTERO\n"
        "30.000,00\n"
        "90.000,00\n"
        "Subtotal 90.000,00"
    )
    items = _items(make_document, text)
    assert items == [LineItem("AMORTIGUADOR DELANTERO", 3.0, 30000.0, 90000.0)]


def test_multi_line_derives_unit_price_from_quantity(make_document) -> None:
    text = "Detalle Cant. Importe\nPASTILLAS DE FRENO\n4\n20.000,00\nObservaciones"
    items = _items(make_document, text)
    assert items == [LineItem("PASTILLAS DE FRENO", 4.0, 5000.0, 20000.0)]


@pytest.mark.parametrize("quantity_line", ["0", "00", "0,000"])
def test_multi_line_zero_quantity_falls_back_to_prices(make_document, quantity_line: str) -> None:
    text = (
        "ACME REPUESTOS S.R.L.\n"
        "Código Descripción Cantidad Importe\n"
        "FILTRO DE AIRE\n"
        f"{quantity_line}\n"
        "1.500,00"
    )
    items = _items(make_document, text)
    assert items == [LineItem("FILTRO DE AIRE", 1.0, 1500.0, 1500.0)]


def test_multi_line_anchor_without_description_is_skipped(make_document) -> None:
    assert _items(make_document, "Código Descripción Importe\nAB1234\n12.000,00") == []


def test_multi_line_not_used_without_header(make_document) -> None:
    assert _items(make_document, "BULBO CHEV. CORSA\n2\n17.083,90\n34.167,80") == []


def test_header_and_section_end() -> None:
    extractor = LineItemExtractor()
    lines = ["ACME S.A.", "Cant. Descripción P.Unit Total", "X", "Son pesos cien mil"]
    assert extractor.find_header(lines) == 1
    assert extractor.find_section_end(lines, 2) == 3
    assert not extractor.is_header("Importe Total")


@pytest.mark.parametrize(
    "line, kind",
    [
        ("2", LineKind.QUANTITY),
        ("17.083,90", LineKind.AMOUNT),
        ("$ 9.225,31", LineKind.AMOUNT),
        ("10%", LineKind.PERCENT),
        ("PH5949", LineKind.CODE),
        ("24703", LineKind.CODE),
        ("FRAM", LineKind.BRAND),
        ("BULBO CHEV. CORSA", LineKind.TEXT),
        ("Flete", LineKind.OTHER),
    ],
)
def test_line_classification(line: str, kind: LineKind) -> None:
    assert LineItemExtractor().classify(line) is kind


def test_clean_description_strips_code_brand_and_header_words() -> None:
    extractor = LineItemExtractor()
    assert extractor.clean_description("PH5949 FRAM FILTRO") == ("FILTRO", "PH5949", "FRAM")
    assert extractor.clean_description("Código 123ABC Bujía NGK") == ("Bujía NGK", "123ABC", "NGK")
    assert extractor.clean_description("X99 FILTRO", code="K1") == ("FILTRO", "K1", None)
