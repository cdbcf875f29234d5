"""
Main Input Handler Module.

This module provides the InputHandler class, the caller-side boundary
in front of the extraction pipeline. It loads raw invoice text from
plain-text OCR dumps or digital PDFs and rejects text that is missing
or too short to be an invoice before any field extraction runs.

Usage:
    from invoice_parser.input_handler import InputHandler

    handler = InputHandler()
    result = handler.load("invoice.txt")

    # Process batch
    results = handler.load_batch("./invoices/")

Classes:
    InputHandler: Main class for file input handling
"""

from pathlib import Path
from typing import Union, List, Optional, Dict, Any
from dataclasses import dataclass, field

from config import get_config
from invoice_parser.utils.logger import get_logger
from invoice_parser.utils.helpers import get_file_extension
from invoice_parser.utils.exceptions import (
    InvoiceParserError,
    InputError,
    UnsupportedFileTypeError,
    InputFileNotFoundError,
    CorruptedFileError,
    NoTextDetectedError,
    InsufficientTextError
)

from .pdf_processor import PDFProcessor


# Initialize module logger
logger = get_logger(__name__)


@dataclass
class InputResult:
    """
    Data class representing the result of input processing.

    Attributes:
        filepath: Original file path
        filename: Original filename
        file_type: Detected file type ('text' or 'pdf')
        text: Raw text handed to the pipeline
        metadata: Additional file metadata
        success: Whether the text is usable
        error: Error message if loading failed
    """
    filepath: str
    filename: str
    file_type: str
    text: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)
    success: bool = True
    error: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"InputResult(filename='{self.filename}', "
            f"type='{self.file_type}', "
            f"chars={len(self.text)}, "
            f"success={self.success})"
        )


class InputHandler:
    """
    Loads and screens invoice text.

    Attributes:
        supported_extensions: Set of supported file extensions
        min_text_length: Shortest text accepted as an invoice
        encoding: Encoding of plain-text inputs
        pdf_processor: PDFProcessor instance for PDF files

    Example:
        >>> handler = InputHandler()
        >>> text = handler.read_text("invoice.txt")   # raises on bad input
        >>> result = handler.load("invoice.pdf")      # never raises
        >>> if result.success:
        ...     extractor.extract(result.text)
    """

    TEXT_EXTENSIONS = {'.txt'}
    PDF_EXTENSIONS = {'.pdf'}

    def __init__(self) -> None:
        """Initialize the InputHandler from configuration."""
        self.supported_extensions = {
            ext.lower() for ext in get_config(
                "input.supported_extensions",
                list(self.TEXT_EXTENSIONS | self.PDF_EXTENSIONS)
            )
        }
        self.min_text_length = get_config("input.min_text_length", 50)
        self.encoding = get_config("input.encoding", "utf-8")

        self.pdf_processor = PDFProcessor()

        logger.debug(f"InputHandler initialized with extensions: {self.supported_extensions}")

    def detect_file_type(self, filepath: Union[str, Path]) -> str:
        """
        Detect the type of input file.

        Args:
            filepath: Path to the file to analyze.

        Returns:
            File type string: 'text' or 'pdf'.

        Raises:
            UnsupportedFileTypeError: If file type is not supported.
        """
        extension = get_file_extension(filepath)

        if extension in self.supported_extensions:
            if extension in self.PDF_EXTENSIONS:
                return 'pdf'
            if extension in self.TEXT_EXTENSIONS:
                return 'text'

        raise UnsupportedFileTypeError(extension, sorted(self.supported_extensions))

    def validate_file(self, filepath: Union[str, Path]) -> Path:
        """
        Validate that a file exists and is accessible.

        Args:
            filepath: Path to the file to validate.

        Returns:
            Path object pointing to the validated file.

        Raises:
            InputFileNotFoundError: If file doesn't exist.
            UnsupportedFileTypeError: If file type is not supported.
            CorruptedFileError: If the file is empty.
        """
        path = Path(filepath)

        if not path.exists():
            raise InputFileNotFoundError(str(filepath))

        if not path.is_file():
            raise InputError(f"Path is not a file: {filepath}")

        self.detect_file_type(path)

        if path.stat().st_size == 0:
            raise CorruptedFileError(str(filepath), "File is empty")

        logger.debug(f"File validated: {filepath}")
        return path

    def check_text(self, text: str, source: str = "<text>") -> str:
        """
        Reject text that is not worth handing to the pipeline.

        Args:
            text: Recovered text.
            source: Name used in error messages.

        Returns:
            The text, unchanged.

        Raises:
            NoTextDetectedError: If the text is empty or whitespace only.
            InsufficientTextError: If the text is shorter than the minimum.
        """
        stripped = (text or "").strip()
        if not stripped:
            raise NoTextDetectedError(source)
        if len(stripped) < self.min_text_length:
            raise InsufficientTextError(source, len(stripped), self.min_text_length)
        return text

    def read_text(self, filepath: Union[str, Path]) -> str:
        """
        Read and screen the text of one file.

        Args:
            filepath: Path to a .txt or .pdf file.

        Returns:
            Raw text ready for extraction.

        Raises:
            InputError: For missing, unsupported or unreadable files.
            TextExtractionError: For empty or too-short text.
        """
        text, _ = self._read(filepath)
        return text

    def _read(self, filepath: Union[str, Path]):
        path = self.validate_file(filepath)
        file_type = self.detect_file_type(path)

        if file_type == 'pdf':
            text, metadata = self.pdf_processor.extract_text(path)
        else:
            try:
                text = path.read_text(encoding=self.encoding)
            except UnicodeDecodeError as e:
                raise CorruptedFileError(str(path), str(e))
            metadata = {
                'original_filename': path.name,
                'file_size_bytes': path.stat().st_size,
                'file_type': 'text',
            }

        return self.check_text(text, str(path)), metadata

    def load(self, filepath: Union[str, Path]) -> InputResult:
        """
        Load one file, reporting failures on the result instead of raising.

        Args:
            filepath: Path to the invoice file.

        Returns:
            InputResult with the text, or with success=False and the error.

        Example:
            >>> result = handler.load("invoice.txt")
            >>> if not result.success:
            ...     print(result.error)
        """
        filepath = str(filepath)
        path = Path(filepath)
        logger.info(f"Loading file: {filepath}")

        try:
            text, metadata = self._read(path)
        except InvoiceParserError as e:
            logger.error(f"Input error for {filepath}: {e}")
            return InputResult(
                filepath=filepath,
                filename=path.name,
                file_type='unknown',
                success=False,
                error=str(e)
            )

        logger.info(f"Successfully loaded: {path.name} ({len(text)} characters)")
        return InputResult(
            filepath=filepath,
            filename=path.name,
            file_type=metadata['file_type'],
            text=text,
            metadata=metadata
        )

    def load_batch(
        self,
        directory: Union[str, Path],
        recursive: bool = False
    ) -> List[InputResult]:
        """
        Load all supported files in a directory.

        Args:
            directory: Path to directory containing invoice files.
            recursive: Whether to search subdirectories.

        Returns:
            List of InputResult objects, sorted by path.

        Raises:
            InputFileNotFoundError: If the directory doesn't exist.
            InputError: If the path is not a directory.
        """
        directory = Path(directory)

        if not directory.exists():
            raise InputFileNotFoundError(str(directory))

        if not directory.is_dir():
            raise InputError(f"Path is not a directory: {directory}")

        pattern = "**/*" if recursive else "*"
        files = sorted(
            path for path in directory.glob(pattern)
            if path.is_file() and get_file_extension(path) in self.supported_extensions
        )

        logger.info(f"Found {len(files)} files to process in {directory}")

        results = [self.load(filepath) for filepath in files]

        successful = sum(1 for r in results if r.success)
        logger.info(
            f"Batch loading complete: {successful} successful, "
            f"{len(results) - successful} failed"
        )
        return results
