from invoice_parser.extraction import TextNormalizer
from invoice_parser.utils.helpers import contains_keyword


def test_lines_are_trimmed_and_empty_lines_dropped() -> None:
    doc = TextNormalizer().normalize("  ACME S.A.  \r\n\r\n\t Total 10 \n   \n")
    assert doc.lines == ("ACME S.A.", "Total 10")


def test_normalized_text_collapses_whitespace() -> None:
    doc = TextNormalizer().normalize("Invoice\n\n No:   0001-00000001\t")
    assert doc.normalized_text == "Invoice No: 0001-00000001"


def test_empty_and_whitespace_input_yield_empty_views() -> None:
    for text in ("", "   ", "\n\n", None):
        doc = TextNormalizer().normalize(text)
        assert doc.lines == ()
        assert doc.normalized_text == ""
        assert doc.is_empty


def test_window_is_clamped_to_document() -> None:
    doc = TextNormalizer().normalize("a\nb\nc")
    assert doc.window(-2, 2) == ("a", "b")
    assert doc.window(1, 50) == ("b", "c")


def test_keywords_match_whole_words_only() -> None:
    assert contains_keyword("IVA 21%: 2.100,00", ["iva"])
    assert not contains_keyword("Archivada", ["iva"])
    assert contains_keyword("Tel.: 223 555", ["tel."])
    assert contains_keyword("Responsable Inscripto", ["responsable inscripto"])
    assert not contains_keyword("Nombre", ["no"])
