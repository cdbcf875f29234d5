"""
Total Amount Extractor.

Three tiers, most reliable first:

    1. total_line: amounts around the last "total" line, restricted to
       large values so per-item prices are ignored
    2. inline_label: "total: $ <amount>" in the normalized text
    3. largest_amount: the largest amount anywhere (weak last resort;
       may pick a line item on documents without a total label)

Author: ML Engineering Team
"""

import re
from typing import List, Optional, Tuple

from config import get_config
from invoice_parser.utils.logger import get_logger
from invoice_parser.postprocessor.normalizers import AmountNormalizer
from invoice_parser.postprocessor.validators import AmountValidator
from .base import FieldExtractor, FieldMatch, Strategy
from .document import RawDocument
from .patterns import AMOUNT, contains_keyword

# Initialize module logger
logger = get_logger(__name__)


class TotalAmountExtractor(FieldExtractor):
    """
    Extracts the final payable amount.

    Example:
        >>> doc = TextNormalizer().normalize("Subtotal: 10.000,00\\nTOTAL: 12.100,00")
        >>> TotalAmountExtractor().extract(doc).value
        12100.0
    """

    field_name = "total_amount"

    TOTAL = re.compile(r'total', re.IGNORECASE)
    SUBTOTAL = re.compile(r'sub\s*-?\s*total', re.IGNORECASE)

    TAX_KEYWORDS = [
        'iva', 'impuesto', 'impuestos', 'tax', 'percepción', 'percepcion',
        'iibb', 'ingresos brutos', 'pibbb',
    ]

    DISCOUNT_KEYWORDS = [
        'descuento', 'bonificación', 'bonificacion', 'discount', 'dto', 'dto.',
    ]

    INLINE_TOTAL = re.compile(
        r'(?:^|(?<!sub)\s)total[:\s]*\$?\s*(' + AMOUNT + r')(?![\d,]|\.\d)',
        re.IGNORECASE
    )

    def __init__(self) -> None:
        """Initialize the extractor from configuration."""
        self.window_before = get_config("extraction.total.window_before", 3)
        self.window_after = get_config("extraction.total.window_after", 15)
        self.line_min = get_config("extraction.total.line_min", 50000)
        self.inline_min = get_config("extraction.total.inline_min", 1000)
        self.fallback_min = get_config("extraction.total.fallback_min", 10000)
        self.maximum = get_config("extraction.total.max", 100000000)
        self.normalizer = AmountNormalizer()
        self.validator = AmountValidator()

    def strategies(self) -> List[Tuple[str, Strategy]]:
        return [
            ("total_line", self._near_total_line),
            ("inline_label", self._inline_label),
            ("largest_amount", self._largest_amount),
        ]

    def is_total_line(self, line: str) -> bool:
        """Check for a grand-total label that is not a subtotal, tax or discount."""
        if not self.TOTAL.search(line) or self.SUBTOTAL.search(line):
            return False
        return not contains_keyword(line, self.TAX_KEYWORDS + self.DISCOUNT_KEYWORDS)

    def _near_total_line(self, document: RawDocument) -> Optional[FieldMatch]:
        lines = document.lines
        candidates = [i for i, line in enumerate(lines) if self.is_total_line(line)]
        if not candidates:
            return None

        total_index = candidates[-1]
        start = max(0, total_index - self.window_before)
        stop = min(len(lines), total_index + self.window_after + 1)

        after, before = [], []
        for index in range(start, stop):
            for _, value, _ in self.normalizer.find_amounts(lines[index]):
                if not self.validator.in_range(value, self.line_min, self.maximum):
                    continue
                (after if index >= total_index else before).append((value, index))

        pool = after or before
        if not pool:
            return None
        value, index = max(pool, key=lambda pair: pair[0])
        return FieldMatch(value, index)

    def _inline_label(self, document: RawDocument) -> Optional[FieldMatch]:
        for match in self.INLINE_TOTAL.finditer(document.normalized_text):
            value = self.normalizer.to_float(match.group(1))
            if value is not None and self.validator.in_range(
                value, self.inline_min, self.maximum
            ):
                return FieldMatch(value, None)
        return None

    def _largest_amount(self, document: RawDocument) -> Optional[FieldMatch]:
        best = None
        for index, line in enumerate(document.lines):
            for _, value, _ in self.normalizer.find_amounts(line):
                if not self.validator.in_range(value, self.fallback_min, self.maximum):
                    continue
                if best is None or value > best.value:
                    best = FieldMatch(value, index)
        return best
