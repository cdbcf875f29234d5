"""
Extraction Module for the Invoice Text Parser.

This module turns unstructured OCR text into a structured invoice
using ordered chains of heuristics per field.

Features:
    - Vendor name, invoice number, issue/due date and total extraction
    - Line item reconstruction from single-line and fragmented tables
    - Strategy trace recording which heuristic resolved each field
    - Immutable, JSON-serializable results
"""

from .extractor import InvoiceExtractor, parse_invoice_text
from .extraction_result import ExtractionResult, ExtractionTrace, LineItem
from .document import RawDocument, TextNormalizer

__all__ = [
    'InvoiceExtractor',
    'parse_invoice_text',
    'ExtractionResult',
    'ExtractionTrace',
    'LineItem',
    'RawDocument',
    'TextNormalizer'
]
