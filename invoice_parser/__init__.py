"""
Invoice Text Parser - Source Package.

This package turns OCR text of a paper invoice into a structured
record (vendor, invoice number, dates, total and line items) that a
person then confirms.

Modules:
    - input_handler: Loading .txt/.pdf text and rejecting unusable text
    - extraction: Heuristic field and line item extraction
    - postprocessor: Normalization, validation and item filtering
    - utils: Logging, exceptions and helpers

Architecture:
    Input -> Normalize -> Field extractors -> Item filter -> Result
"""

__version__ = "1.0.0"
__author__ = "ML Engineering Team"

__all__ = [
    'input_handler',
    'extraction',
    'postprocessor',
    'utils'
]
