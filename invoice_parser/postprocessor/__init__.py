"""
Post-Processing Module for the Invoice Text Parser.

This module provides functionality for:
    - Regional amount normalization ("1.234,56" -> 1234.56)
    - Day-first date normalization to ISO
    - Date, amount and line item validation
    - Line item filtering and deduplication
    - Result warnings

Author: ML Engineering Team
"""

from .processor import ItemFilter, PostProcessor, sum_item_totals
from .validators import DateValidator, AmountValidator, ItemValidator
from .normalizers import DateNormalizer, AmountNormalizer

__all__ = [
    'ItemFilter',
    'PostProcessor',
    'sum_item_totals',
    'DateValidator',
    'AmountValidator',
    'ItemValidator',
    'DateNormalizer',
    'AmountNormalizer'
]
