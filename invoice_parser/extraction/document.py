"""
Raw Document Module.

Turns the raw OCR text into the two views every field extractor works
from: an ordered list of trimmed, non-empty lines and a single-line
projection with whitespace collapsed.

Author: ML Engineering Team
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class RawDocument:
    """
    Immutable view of one invoice's text.

    Attributes:
        full_text: Text exactly as received.
        lines: Trimmed, non-empty lines in reading order.
        normalized_text: Whole text on one line, whitespace collapsed.

    Example:
        >>> doc = TextNormalizer().normalize("  ACME S.A.\\n\\n Total  10 ")
        >>> doc.lines
        ('ACME S.A.', 'Total  10')
        >>> doc.normalized_text
        'ACME S.A. Total 10'
    """
    full_text: str
    lines: Tuple[str, ...]
    normalized_text: str

    @property
    def is_empty(self) -> bool:
        """Check if the document has no text at all."""
        return not self.lines

    def window(self, start: int, stop: int) -> Tuple[str, ...]:
        """Lines in [start, stop), clamped to the document."""
        return self.lines[max(0, start):max(0, stop)]


class TextNormalizer:
    """Builds RawDocument instances from raw text."""

    def normalize(self, text: str) -> RawDocument:
        """
        Normalize raw text.

        Args:
            text: Raw OCR text. None is treated as empty.

        Returns:
            RawDocument with derived lines and normalized text.
        """
        text = text or ""
        lines = tuple(
            stripped for stripped in (line.strip() for line in text.splitlines())
            if stripped
        )
        return RawDocument(
            full_text=text,
            lines=lines,
            normalized_text=" ".join(text.split())
        )
