"""
Vendor Name Extractor.

The supplier name is printed near the top of the invoice. Two
strategies are tried, strongest first:

    1. legal_suffix: a line carrying a legal-entity suffix
       (S.R.L., S.A., LTDA, INC, ...)
    2. capitalized_heading: the first capitalized line that survives
       the same exclusion filter

Author: ML Engineering Team
"""

import re
from typing import List, Optional, Tuple

from config import get_config
from invoice_parser.utils.logger import get_logger
from .base import FieldExtractor, FieldMatch, Strategy
from .document import RawDocument
from .patterns import DATE_LIKE, contains_keyword

# Initialize module logger
logger = get_logger(__name__)


class VendorExtractor(FieldExtractor):
    """
    Extracts the supplier name from the first lines of the invoice.

    Example:
        >>> doc = TextNormalizer().normalize("REPUESTOS DEL SUR S.R.L.\\nCUIT 30-1")
        >>> VendorExtractor().extract(doc).value
        'REPUESTOS DEL SUR S.R.L.'
    """

    field_name = "vendor_name"

    # No letter may touch the suffix on either side
    LEGAL_SUFFIX = re.compile(
        r'(?<![^\W\d_])(?:S\.R\.L|SRL|S\.A|SA|LTDA|INC|LLC|LTD|CORP)\.?(?![^\W\d_])',
        re.IGNORECASE
    )

    CAPITALIZED_START = re.compile(r'^[A-ZÁÉÍÓÚÑÜ]')

    TRAILING_PHONE = re.compile(r'\s*[-|,;]?\s*\bTel\.?\s*:.*$', re.IGNORECASE)

    EXCLUDED_KEYWORDS = [
        # document labels
        'invoice', 'factura', 'fecha', 'date',
        # tax identifiers and tax condition
        'cuit', 'tax id', 'tax-id', 'iva', 'responsable inscripto',
        'ing. brutos', 'ingresos brutos',
        # due date
        'due', 'vencimiento', 'vto', 'vto.',
        # address block
        'address', 'domicilio', 'dirección', 'direccion', 'sucursal', 'localidad',
        # phone
        'phone', 'tel', 'tel.', 'teléfono', 'telefono',
        # recipient
        'cliente', 'customer', 'señor', 'señores', 'sr.', 'sres.',
        'email', 'e-mail',
    ]

    # Matched as substrings
    EXCLUDED_MARKERS = ['@', 'www.', 'http']

    def __init__(self) -> None:
        """Initialize the extractor from configuration."""
        self.scan_lines = get_config("extraction.vendor.scan_lines", 15)
        self.min_length = get_config("extraction.vendor.min_length", 9)
        self.max_length = get_config("extraction.vendor.max_length", 99)
        self.min_words = get_config("extraction.vendor.min_words", 2)

    def strategies(self) -> List[Tuple[str, Strategy]]:
        return [
            ("legal_suffix", self._from_legal_suffix),
            ("capitalized_heading", self._from_capitalized_heading),
        ]

    def _from_legal_suffix(self, document: RawDocument) -> Optional[FieldMatch]:
        for index, line in enumerate(document.window(0, self.scan_lines)):
            candidate = self._before_pipe(line)
            if not self.LEGAL_SUFFIX.search(candidate):
                continue
            if self._is_plausible(candidate):
                return FieldMatch(candidate, index)
        return None

    def _from_capitalized_heading(self, document: RawDocument) -> Optional[FieldMatch]:
        for index, line in enumerate(document.window(0, self.scan_lines)):
            candidate = self._before_pipe(line)
            if not self.CAPITALIZED_START.match(candidate):
                continue
            candidate = self.TRAILING_PHONE.sub('', candidate).strip()
            if self._is_plausible(candidate):
                return FieldMatch(candidate, index)
        return None

    @staticmethod
    def _before_pipe(line: str) -> str:
        """Keep the segment before the first pipe (address blocks follow it)."""
        return line.split('|', 1)[0].strip()

    def _is_plausible(self, candidate: str) -> bool:
        """Apply the exclusion filter and the length/word checks."""
        if self._is_excluded(candidate):
            return False
        if not self.min_length <= len(candidate) <= self.max_length:
            return False
        return len(candidate.split()) >= self.min_words

    def _is_excluded(self, line: str) -> bool:
        if not line or line[0].isdigit():
            return True
        if DATE_LIKE.search(line):
            return True
        lowered = line.lower()
        if any(marker in lowered for marker in self.EXCLUDED_MARKERS):
            return True
        return contains_keyword(line, self.EXCLUDED_KEYWORDS)
