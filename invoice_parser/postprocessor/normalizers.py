"""
Data Normalizers Module.

This module provides normalization functions for:
    - Regional amount tokens ("." thousands separator, "," decimal separator)
    - Day-first date tokens and ISO dates

Author: ML Engineering Team
"""

import re
from datetime import datetime
from typing import Optional, List, Tuple

from config import get_config
from invoice_parser.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class DateNormalizer:
    """
    Normalizes date tokens to ISO format (YYYY-MM-DD).

    Only unambiguous day-first tokens are accepted: DD/MM/YYYY,
    DD-MM-YYYY and YYYY-MM-DD. Two-digit years are rejected.

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.normalize("22/01/2026")
        "2026-01-22"
        >>> normalizer.normalize("22-01-2026")
        "2026-01-22"
    """

    # Separator must be the same on both sides of the month
    DATE_PATTERN = re.compile(
        r'(?<!\d)(?:'
        r'(?P<day>\d{1,2})(?P<sep>[/-])(?P<month>\d{1,2})(?P=sep)(?P<year>\d{4})'
        r'|'
        r'(?P<iso>\d{4}-\d{1,2}-\d{1,2})'
        r')(?!\d)'
    )

    INPUT_FORMATS = ["%d/%m/%Y", "%d-%m-%Y", "%Y-%m-%d"]

    def __init__(self) -> None:
        """Initialize the date normalizer with configuration."""
        self.output_format = get_config(
            "postprocessing.date.output_format",
            "%Y-%m-%d"
        )

    def normalize(self, date_str: str) -> Optional[str]:
        """
        Normalize a date token to the configured output format.

        Args:
            date_str: Date token such as "05/03/2024".

        Returns:
            Normalized date string, or None if the token is not a real date.
        """
        if not date_str:
            return None

        date_str = date_str.strip()

        for fmt in self.INPUT_FORMATS:
            try:
                return datetime.strptime(date_str, fmt).strftime(self.output_format)
            except ValueError:
                continue

        logger.debug(f"Could not parse date: {date_str}")
        return None

    def find_dates(self, text: str) -> List[Tuple[str, int]]:
        """
        Find every valid date token in a piece of text.

        Args:
            text: Text that may contain dates.

        Returns:
            List of (iso_date, offset) tuples in order of appearance.
            Tokens that are not calendar dates (e.g. 31/02/2024) are skipped.
        """
        found = []
        for match in self.DATE_PATTERN.finditer(text or ""):
            normalized = self.normalize(match.group(0))
            if normalized:
                found.append((normalized, match.start()))
        return found

    def extract_date(self, text: str) -> Optional[str]:
        """
        Extract the first valid date from text.

        Args:
            text: Text that may contain a date.

        Returns:
            Normalized date string or None.
        """
        dates = self.find_dates(text)
        return dates[0][0] if dates else None


class AmountNormalizer:
    """
    Normalizes regional amount strings to numeric values.

    The regional convention uses "." as thousands separator and ","
    as decimal separator: "93.356,09" is 93356.09.

    Example:
        >>> normalizer = AmountNormalizer()
        >>> normalizer.to_float("1.234,56")
        1234.56
        >>> normalizer.normalize("$ 93.356,09")
        "93356.09"
    """

    # Bounded so it never matches inside longer digit runs such as
    # authorization codes or invoice numbers
    AMOUNT_BODY = r'\d{1,3}(?:\.\d{3})*(?:,\d{2})?'
    AMOUNT_PATTERN = re.compile(r'(?<![\d.,])' + AMOUNT_BODY + r'(?![\d,]|\.\d)')

    CURRENCY_SYMBOLS = ['$', 'ARS', 'AR$']

    def __init__(self) -> None:
        """Initialize the amount normalizer with configuration."""
        self.thousands_separator = get_config(
            "postprocessing.amount.thousands_separator",
            "."
        )
        self.decimal_separator = get_config(
            "postprocessing.amount.decimal_separator",
            ","
        )

    def normalize(self, amount_str: str) -> Optional[str]:
        """
        Normalize an amount string to a two-decimal string.

        Args:
            amount_str: Input amount string (e.g., "$1.234,56").

        Returns:
            Normalized amount string (e.g., "1234.56") or None.
        """
        value = self.to_float(amount_str)
        if value is None:
            return None
        return f"{value:.2f}"

    def to_float(self, amount_str: str) -> Optional[float]:
        """
        Convert a regional amount string to float.

        Args:
            amount_str: Amount string to convert.

        Returns:
            Float value or None.
        """
        if not amount_str:
            return None

        cleaned = self._clean_amount_string(amount_str)
        if not cleaned:
            return None

        cleaned = cleaned.replace(self.thousands_separator, '')
        cleaned = cleaned.replace(self.decimal_separator, '.')

        try:
            return float(cleaned)
        except ValueError:
            logger.debug(f"Could not parse amount: {amount_str}")
            return None

    def _clean_amount_string(self, amount_str: str) -> str:
        """
        Strip whitespace and currency markers from an amount string.

        Args:
            amount_str: Raw amount string.

        Returns:
            Cleaned amount string.
        """
        amount_str = ''.join(amount_str.split())

        for symbol in sorted(self.CURRENCY_SYMBOLS, key=len, reverse=True):
            amount_str = amount_str.replace(symbol, '')

        return amount_str.strip()

    def find_amounts(self, text: str) -> List[Tuple[str, float, int]]:
        """
        Find every regional amount token in a piece of text.

        Args:
            text: Text to scan.

        Returns:
            List of (token, value, offset) tuples in order of appearance.
        """
        amounts = []
        for match in self.AMOUNT_PATTERN.finditer(text or ""):
            value = self.to_float(match.group(0))
            if value is not None:
                amounts.append((match.group(0), value, match.start()))
        return amounts
