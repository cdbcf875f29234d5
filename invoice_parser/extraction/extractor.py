"""
Invoice Extractor Module.

This module provides the main InvoiceExtractor class, which turns OCR
text into an ExtractionResult.

Approach:
    The text is normalized once; the vendor, invoice number, date,
    total and line item extractors then run independently over the
    same lines. The due-date fallback is the only step that reads
    another field (the issue date). Candidate items are filtered and
    deduplicated last.

The extractor is a pure function of its input: no I/O, no shared
mutable state, and no exception for any string input.

Author: ML Engineering Team
"""

from typing import Iterable, List

from invoice_parser.utils.logger import get_logger
from invoice_parser.postprocessor.processor import PostProcessor
from .dates import DateExtractor
from .document import TextNormalizer
from .extraction_result import ExtractionResult, ExtractionTrace
from .invoice_number import InvoiceNumberExtractor
from .line_items import LineItemExtractor
from .totals import TotalAmountExtractor
from .vendor import VendorExtractor

# Initialize module logger
logger = get_logger(__name__)


class InvoiceExtractor:
    """
    Heuristic invoice field extractor.

    Attributes:
        normalizer: TextNormalizer instance
        vendor_extractor: VendorExtractor instance
        number_extractor: InvoiceNumberExtractor instance
        date_extractor: DateExtractor instance
        total_extractor: TotalAmountExtractor instance
        item_extractor: LineItemExtractor instance
        postprocessor: PostProcessor instance

    Example:
        >>> extractor = InvoiceExtractor()
        >>> result = extractor.extract(ocr_text)
        >>> print(result.invoice_number)
        >>> print(result.trace.strategy_for("total_amount"))
    """

    def __init__(self) -> None:
        """Initialize the extractor and all field extractors."""
        self.normalizer = TextNormalizer()
        self.vendor_extractor = VendorExtractor()
        self.number_extractor = InvoiceNumberExtractor()
        self.date_extractor = DateExtractor()
        self.total_extractor = TotalAmountExtractor()
        self.item_extractor = LineItemExtractor()
        self.postprocessor = PostProcessor()

        logger.debug("InvoiceExtractor initialized")

    def extract(self, text: str) -> ExtractionResult:
        """
        Extract invoice fields from OCR text.

        Args:
            text: Raw text of one invoice. Empty or whitespace-only
                text yields an all-default result.

        Returns:
            ExtractionResult with header fields, items, warnings and
            the strategy trace.

        Example:
            >>> result = extractor.extract(text)
            >>> print(f"Invoice: {result.invoice_number}")
            >>> print(f"Total: {result.total_amount}")
        """
        document = self.normalizer.normalize(text)
        trace = ExtractionTrace()

        if document.is_empty:
            logger.info("Extraction skipped: empty text")
            return ExtractionResult(trace=trace)

        vendor = self.vendor_extractor.extract(document, trace)
        number = self.number_extractor.extract(document, trace)
        dates = self.date_extractor.extract(document, trace)
        total = self.total_extractor.extract(document, trace)

        candidates = self.item_extractor.extract(document, trace)
        items = self.postprocessor.filter_items(candidates, trace)

        fields = {
            'vendor_name': vendor.value if vendor else None,
            'invoice_number': number.value if number else None,
            'invoice_date': dates.invoice_date,
            'due_date': dates.due_date,
            'total_amount': total.value if total else 0.0,
        }
        warnings = self.postprocessor.collect_warnings(fields, items)

        result = ExtractionResult(
            items=tuple(items),
            warnings=tuple(warnings),
            trace=trace,
            **fields
        )

        logger.info(
            f"Extraction complete: {5 - len(result.missing_fields)}/5 fields, "
            f"{len(result.items)}/{len(candidates)} items kept, "
            f"{len(document.lines)} lines"
        )
        return result

    def extract_batch(self, texts: Iterable[str]) -> List[ExtractionResult]:
        """
        Extract several invoices, one at a time.

        Args:
            texts: Raw invoice texts.

        Returns:
            One ExtractionResult per input, in order.
        """
        return [self.extract(text) for text in texts]


def parse_invoice_text(text: str) -> ExtractionResult:
    """
    Convenience function to parse one invoice text.

    Args:
        text: Raw OCR text.

    Returns:
        ExtractionResult.

    Example:
        >>> parse_invoice_text("ACME S.A.\\nTOTAL: 60.000,00").total_amount
        60000.0
    """
    return InvoiceExtractor().extract(text)
