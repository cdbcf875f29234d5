from pathlib import Path

import pytest

from config import ConfigurationManager, load_config
from invoice_parser.extraction import InvoiceExtractor, TextNormalizer


SINGLE_LINE_INVOICE = """REPUESTOS DEL SUR S.R.L.
Av. Independencia 1234 - Mar del Plata
Invoice No: 0001-00001234
Fecha: 05/03/2024
FILTRO ACEITE 2 1.500,00 3.000,00
TOTAL 3.000,00
"""

MULTI_LINE_INVOICE = """DISTRIBUIDORA NORTE S.A.
CUIT: 30-71234567-9
FACTURA B
Nro: 0003-00045678
Fecha: 12/02/2024
Fecha de Vto.: 12/03/2024
Código Descripción Cantidad P. Unitario Importe
24703
BULBO CHEV. CORSA
2
17.083,90
34.167,80
PH5949
FRAM FILTRO ACEITE
1
9.225,31
Subtotal: 43.393,11
IVA 21%: 9.112,55
TOTAL: 52.505,66
CAE: 74123456789012
Fecha Vto. CAE: 22/02/2024
"""


@pytest.fixture
def make_document():
    normalizer = TextNormalizer()
    return normalizer.normalize


@pytest.fixture
def extractor() -> InvoiceExtractor:
    return InvoiceExtractor()


@pytest.fixture
def single_line_text() -> str:
    return SINGLE_LINE_INVOICE


@pytest.fixture
def multi_line_text() -> str:
    return MULTI_LINE_INVOICE


@pytest.fixture
def custom_config(tmp_path: Path):
    """Point the configuration singleton at a temporary settings file."""

    def _load(content: str) -> ConfigurationManager:
        path = tmp_path / "settings.yaml"
        path.write_text(content, encoding="utf-8")
        return load_config(path)

    yield _load
    ConfigurationManager.reset()
