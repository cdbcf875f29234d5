import pytest

from invoice_parser.postprocessor import AmountNormalizer, DateNormalizer, DateValidator


@pytest.mark.parametrize(
    "token, expected",
    [
        ("1.234,56", 1234.56),
        ("93.356,09", 93356.09),
        ("$ 93.356,09", 93356.09),
        ("500", 500.0),
        ("1.000.000,00", 1000000.0),
    ],
)
def test_regional_amounts_parse(token: str, expected: float) -> None:
    assert AmountNormalizer().to_float(token) == pytest.approx(expected)


def test_unparseable_amount_returns_none() -> None:
    normalizer = AmountNormalizer()
    assert normalizer.to_float("abc") is None
    assert normalizer.to_float("") is None
    assert normalizer.normalize(None) is None


def test_normalize_returns_two_decimal_string() -> None:
    assert AmountNormalizer().normalize("1.234,5") == "1234.50"


def test_find_amounts_reports_tokens_in_order() -> None:
    amounts = AmountNormalizer().find_amounts("Total 1.234,56 y $78,90")
    assert [(token, value) for token, value, _ in amounts] == [
        ("1.234,56", 1234.56),
        ("78,90", 78.9),
    ]


def test_find_amounts_ignores_long_digit_runs() -> None:
    normalizer = AmountNormalizer()
    assert normalizer.find_amounts("CAE 74123456789012") == []
    assert normalizer.find_amounts("Nro 0001-00001234") == []


@pytest.mark.parametrize("token", ["22/01/2026", "22-01-2026", "2026-01-22"])
def test_dates_normalize_to_iso(token: str) -> None:
    assert DateNormalizer().normalize(token) == "2026-01-22"


def test_single_digit_day_and_month_accepted() -> None:
    assert DateNormalizer().normalize("5/3/2024") == "2024-03-05"


@pytest.mark.parametrize("token", ["31/02/2024", "05/03/24", "13/13/2024", "hoy"])
def test_invalid_dates_rejected(token: str) -> None:
    assert DateNormalizer().normalize(token) is None


def test_find_dates_skips_impossible_dates() -> None:
    dates = DateNormalizer().find_dates("del 31/02/2024 al 05/03/2024 y 2024-04-01")
    assert [date for date, _ in dates] == ["2024-03-05", "2024-04-01"]


def test_mixed_separators_are_not_a_date() -> None:
    assert DateNormalizer().find_dates("05/03-2024") == []


def test_due_after_invoice_comparison() -> None:
    validator = DateValidator()
    assert validator.is_after("2024-03-06", "2024-03-05")
    assert not validator.is_after("2024-03-05", "2024-03-05")
    valid, message = validator.is_due_after_invoice("2024-03-05", "2024-03-01")
    assert not valid
    assert message == "Due date is before invoice date"
    assert validator.is_due_after_invoice("2024-03-05", "2024-03-05")[0]
