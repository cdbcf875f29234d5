"""
Invoice Number Extractor.

Invoice numbers are printed as a point-of-sale prefix and a sequence
number, e.g. "0001-00001234". The same shape is shared by tax IDs and
partially by authorization codes, so every candidate is screened.

Author: ML Engineering Team
"""

import re
from typing import List, Optional, Tuple

from config import get_config
from invoice_parser.utils.logger import get_logger
from .base import FieldExtractor, FieldMatch, Strategy
from .document import RawDocument
from .patterns import (
    LONG_DIGIT_RUN,
    PHONE_KEYWORDS,
    TAX_ID,
    TAX_ID_KEYWORDS,
    contains_keyword,
    mentions_authorization,
)

# Initialize module logger
logger = get_logger(__name__)


class InvoiceNumberExtractor(FieldExtractor):
    """
    Extracts the invoice identifier.

    Strategies:
        labelled: label line ("Invoice", "Factura", "No.", "Nro", "N°")
            and the lines right after it
        positional: first plausible token in the top of the document,
            skipping order, delivery, tax-ID and authorization lines

    Example:
        >>> doc = TextNormalizer().normalize("Invoice No: 0001-00001234")
        >>> InvoiceNumberExtractor().extract(doc).value
        '0001-00001234'
    """

    field_name = "invoice_number"

    LABEL = re.compile(
        r'invoice|factura|(?<!\w)no\.|(?<!\w)nro(?!\w)|(?<!\w)n[°º]',
        re.IGNORECASE
    )

    NUMBER = re.compile(r'(?<![\d-])(\d{1,5})\s*-\s*(\d{4,10})(?!\d)')

    FALLBACK_SKIP_KEYWORDS = [
        'order', 'orden', 'pedido', 'delivery', 'remito',
    ]

    def __init__(self) -> None:
        """Initialize the extractor from configuration."""
        self.lookahead_lines = get_config("extraction.invoice_number.lookahead_lines", 3)
        self.fallback_scan_lines = get_config(
            "extraction.invoice_number.fallback_scan_lines", 30
        )
        self.min_digits = get_config("extraction.invoice_number.min_digits", 8)
        self.max_digits = get_config("extraction.invoice_number.max_digits", 15)

    def strategies(self) -> List[Tuple[str, Strategy]]:
        return [
            ("labelled", self._near_label),
            ("positional", self._positional),
        ]

    def _near_label(self, document: RawDocument) -> Optional[FieldMatch]:
        lines = document.lines
        for label_index, line in enumerate(lines):
            if not self.LABEL.search(line):
                continue
            stop = min(len(lines), label_index + self.lookahead_lines + 1)
            for index in range(label_index, stop):
                number = self.find_number(lines[index])
                if number:
                    return FieldMatch(number, index)
        return None

    def _positional(self, document: RawDocument) -> Optional[FieldMatch]:
        for index, line in enumerate(document.window(0, self.fallback_scan_lines)):
            if contains_keyword(line, TAX_ID_KEYWORDS + self.FALLBACK_SKIP_KEYWORDS):
                continue
            number = self.find_number(line)
            if number:
                return FieldMatch(number, index)
        return None

    def find_number(self, line: str) -> Optional[str]:
        """
        Find the first acceptable invoice number token on a line.

        Args:
            line: One document line.

        Returns:
            The number as "prefix-sequence", or None.
        """
        if LONG_DIGIT_RUN.search(line) or mentions_authorization(line):
            return None
        if contains_keyword(line, PHONE_KEYWORDS):
            return None

        for match in self.NUMBER.finditer(line):
            if TAX_ID.match(line, match.start()):
                continue
            prefix, sequence = match.group(1), match.group(2)
            digits = len(prefix) + len(sequence)
            if self.min_digits <= digits <= self.max_digits:
                return f"{prefix}-{sequence}"
        return None
