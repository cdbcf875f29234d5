"""
Data Validators Module.

This module provides validation functions for:
    - Date fields
    - Amount ranges
    - Line item plausibility

Author: ML Engineering Team
"""

import re
from typing import Tuple

from dateutil.parser import isoparse

from config import get_config
from invoice_parser.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class DateValidator:
    """
    Validates ISO date fields.

    Checks the ordering of two ISO dates; anything isoparse rejects
    counts as "cannot tell".

    Example:
        >>> validator = DateValidator()
        >>> validator.is_after("2026-01-20", "2026-01-15")
        True
    """

    def is_after(self, candidate: str, reference: str) -> bool:
        """
        Check if one ISO date is strictly after another.

        Args:
            candidate: ISO date to test.
            reference: ISO date it must follow.

        Returns:
            True if candidate is chronologically after reference.
        """
        try:
            return isoparse(candidate) > isoparse(reference)
        except ValueError:
            return False

    def is_due_after_invoice(
        self,
        invoice_date: str,
        due_date: str
    ) -> Tuple[bool, str]:
        """
        Check if due date is after or equal to invoice date.

        Args:
            invoice_date: Invoice date string.
            due_date: Payment due date string.

        Returns:
            Tuple of (is_valid, message).
        """
        try:
            if isoparse(due_date) < isoparse(invoice_date):
                return False, "Due date is before invoice date"
            return True, "Valid date relationship"
        except ValueError:
            return True, "Could not validate date relationship"


class AmountValidator:
    """
    Validates amounts against open ranges.

    Example:
        >>> validator = AmountValidator()
        >>> validator.in_range(60000.0, 50000, 100000000)
        True
        >>> validator.in_range(50000.0, 50000, 100000000)
        False
    """

    @staticmethod
    def in_range(value: float, lower: float, upper: float) -> bool:
        """Check lower < value < upper."""
        return lower < value < upper


class ItemValidator:
    """
    Validates candidate line items before they reach the final result.

    Checks for:
        - Name length and presence of a real word
        - Unit price and total price plausibility
        - Quantity range

    Example:
        >>> validator = ItemValidator()
        >>> validator.validate(item)
        (True, "Valid item")
    """

    # A name needs at least one run of three letters to be a product
    WORD_PATTERN = re.compile(r'[^\W\d_]{3,}')

    def __init__(self) -> None:
        """Initialize the item validator from configuration."""
        self.min_name_length = get_config("postprocessing.items.min_name_length", 3)
        self.min_unit_price = get_config("postprocessing.items.min_unit_price", 50)
        self.min_unit_price_high_total = get_config(
            "postprocessing.items.min_unit_price_high_total", 10
        )
        self.high_total_threshold = get_config(
            "postprocessing.items.high_total_threshold", 1000
        )
        self.min_total_price = get_config("postprocessing.items.min_total_price", 100)
        self.max_total_price = get_config("postprocessing.items.max_total_price", 10000000)
        self.max_quantity = get_config("postprocessing.items.max_quantity", 1000)

    def validate_name(self, name: str) -> Tuple[bool, str]:
        """
        Validate an item name.

        Args:
            name: Cleaned item name.

        Returns:
            Tuple of (is_valid, message).
        """
        if not name or len(name.strip()) < self.min_name_length:
            return False, "Name too short"

        if not self.WORD_PATTERN.search(name):
            return False, "Name has no word"

        return True, "Valid name"

    def validate_prices(self, unit_price: float, total_price: float) -> Tuple[bool, str]:
        """
        Validate unit and total price plausibility.

        A unit price below the normal floor is tolerated when the total
        is large, which happens with bulk quantities of cheap parts.
        """
        floor = self.min_unit_price
        if total_price >= self.high_total_threshold:
            floor = self.min_unit_price_high_total

        if unit_price < floor:
            return False, f"Unit price {unit_price} below {floor}"

        if not self.min_total_price <= total_price <= self.max_total_price:
            return False, f"Total price {total_price} out of range"

        return True, "Valid prices"

    def validate_quantity(self, quantity: float) -> Tuple[bool, str]:
        """Validate 0 < quantity <= max_quantity."""
        if 0 < quantity <= self.max_quantity:
            return True, "Valid quantity"
        return False, f"Quantity {quantity} out of range"

    def validate(self, item) -> Tuple[bool, str]:
        """
        Validate a line item.

        Args:
            item: LineItem to validate.

        Returns:
            Tuple of (is_valid, message) with the first failing reason.
        """
        for is_valid, message in (
            self.validate_name(item.name),
            self.validate_prices(item.unit_price, item.total_price),
            self.validate_quantity(item.quantity),
        ):
            if not is_valid:
                return False, message

        return True, "Valid item"
