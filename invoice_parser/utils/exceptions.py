"""
Custom Exceptions Module.

This module defines the custom exceptions used by the invoice text
parser. The extraction pipeline itself never raises for malformed text;
these exceptions belong to the boundary that loads text and decides
whether it is worth parsing.

Exception Hierarchy:
    InvoiceParserError (base)
    ├── InputError
    │   ├── UnsupportedFileTypeError
    │   ├── InputFileNotFoundError
    │   └── CorruptedFileError
    └── TextExtractionError
        ├── NoTextDetectedError
        └── InsufficientTextError
"""


class InvoiceParserError(Exception):
    """
    Base exception for all invoice parser errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(InvoiceParserError):
    """Base exception for input handling errors."""
    pass


class UnsupportedFileTypeError(InputError):
    """
    Raised when an unsupported file type is provided.

    Example:
        >>> raise UnsupportedFileTypeError(".doc", [".txt", ".pdf"])
    """

    def __init__(self, file_type: str, supported_types: list):
        message = f"Unsupported file type: '{file_type}'"
        details = {"file_type": file_type, "supported_types": supported_types}
        super().__init__(message, details)


class InputFileNotFoundError(InputError):
    """Raised when an input file cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class CorruptedFileError(InputError):
    """Raised when a file appears to be corrupted or unreadable."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Corrupted or unreadable file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# TEXT EXTRACTION ERRORS
# =============================================================================

class TextExtractionError(InvoiceParserError):
    """
    Base exception for text that cannot be handed to the pipeline.

    This is the caller-side failure category: OCR produced nothing
    usable, so the document is rejected before any field extraction.
    """
    pass


class NoTextDetectedError(TextExtractionError):
    """Raised when no text at all was recovered from a document."""

    def __init__(self, source: str):
        message = f"No text detected in: {source}"
        details = {"source": source}
        super().__init__(message, details)


class InsufficientTextError(TextExtractionError):
    """Raised when the recovered text is too short to be an invoice."""

    def __init__(self, source: str, length: int, minimum: int):
        message = f"Extracted text too short ({length} < {minimum} characters): {source}"
        details = {"source": source, "length": length, "minimum": minimum}
        super().__init__(message, details)


__all__ = [
    'InvoiceParserError',
    'InputError',
    'UnsupportedFileTypeError',
    'InputFileNotFoundError',
    'CorruptedFileError',
    'TextExtractionError',
    'NoTextDetectedError',
    'InsufficientTextError',
]
