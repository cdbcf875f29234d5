"""
Input Handler Module for the Invoice Text Parser.

This module provides functionality for:
    - Loading OCR text dumps (.txt)
    - Reading the text layer of digital PDFs (.pdf)
    - Rejecting empty or too-short text before extraction

Author: ML Engineering Team
"""

from .handler import InputHandler, InputResult
from .pdf_processor import PDFProcessor

__all__ = ['InputHandler', 'InputResult', 'PDFProcessor']
