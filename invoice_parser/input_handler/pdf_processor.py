"""
PDF Processor Module.

This module reads the native text layer of digital PDFs with
pdfplumber. Scanned (image-only) PDFs have no text layer; they are
reported as such so the caller can route them to an OCR service.

Author: ML Engineering Team
"""

from pathlib import Path
from typing import Union, Tuple, Dict, Any

import pdfplumber

from config import get_config
from invoice_parser.utils.logger import get_logger
from invoice_parser.utils.exceptions import CorruptedFileError

# Initialize module logger
logger = get_logger(__name__)


class PDFProcessor:
    """
    Text extractor for digital PDF files.

    Attributes:
        max_pages: Maximum number of pages to read
        scanned_threshold: Minimum first-page characters for a PDF to
            count as digital

    Example:
        >>> processor = PDFProcessor()
        >>> text, metadata = processor.extract_text("invoice.pdf")
        >>> print(metadata["page_count"])
    """

    def __init__(self) -> None:
        """Initialize the PDF processor with configuration."""
        self.max_pages = get_config("input.pdf.max_pages", 10)
        self.scanned_threshold = get_config("input.pdf.scanned_threshold", 50)

        logger.debug(f"PDFProcessor initialized (max_pages={self.max_pages})")

    def extract_text(self, filepath: Union[str, Path]) -> Tuple[str, Dict[str, Any]]:
        """
        Extract the text layer of a PDF, pages joined by newlines.

        Args:
            filepath: Path to PDF file.

        Returns:
            Tuple of (text, metadata).

        Raises:
            CorruptedFileError: If pdfplumber cannot open the file.
        """
        filepath = Path(filepath)
        try:
            with pdfplumber.open(filepath) as pdf:
                pages = pdf.pages[:self.max_pages]
                texts = [page.extract_text() or "" for page in pages]
                metadata = {
                    'original_filename': filepath.name,
                    'file_size_bytes': filepath.stat().st_size,
                    'file_type': 'pdf',
                    'page_count': len(pdf.pages),
                    'pages_read': len(pages),
                    'scanned': self.is_scanned_text(texts[0] if texts else ""),
                }
        except Exception as e:
            logger.error(f"PDF text extraction failed: {e}")
            raise CorruptedFileError(str(filepath), str(e))

        text = "\n".join(texts)
        logger.debug(f"Read {len(text)} characters from {len(texts)} PDF page(s)")
        return text, metadata

    def is_scanned_text(self, first_page_text: str) -> bool:
        """
        Detect a scanned (image-only) PDF from its first page text.

        Args:
            first_page_text: Text layer of the first page.

        Returns:
            True if the first page has almost no text layer.
        """
        scanned = len(first_page_text.strip()) < self.scanned_threshold
        if scanned:
            logger.warning("PDF has no usable text layer; it needs OCR first")
        return scanned
