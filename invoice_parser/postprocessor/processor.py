"""
Main Post-Processor Module.

This module provides the classes applied after raw extraction:

    - ItemFilter: drops invalid or non-product candidate items and
      removes duplicates
    - PostProcessor: runs the filter and derives non-fatal warnings
      from the extracted values

Author: ML Engineering Team
"""

from typing import Dict, Any, List, Optional

from config import get_config
from invoice_parser.utils.logger import get_logger
from invoice_parser.utils.helpers import contains_keyword
from .validators import DateValidator, ItemValidator

# Initialize module logger
logger = get_logger(__name__)


def sum_item_totals(items) -> float:
    """Sum of item total prices, rounded to cents."""
    return round(sum(item.total_price for item in items), 2)


class ItemFilter:
    """
    Filters and deduplicates candidate line items.

    Rules, in order:
        1. name shorter than 3 characters or without a word
        2. name containing header, metadata, personnel or contact keywords,
           or an e-mail address or URL
        3. implausible unit or total price
        4. quantity outside (0, 1000]
        5. duplicate of an earlier item (same name, code, unit price
           and quantity)

    Example:
        >>> items = ItemFilter().apply([item, item])
        >>> len(items)
        1
    """

    EXCLUDED_KEYWORDS = [
        # table header and totals
        'total', 'subtotal', 'importe', 'cantidad', 'precio', 'descripción',
        'descripcion', 'código', 'codigo',
        # document metadata
        'factura', 'invoice', 'fecha', 'date', 'cuit', 'iva', 'cae',
        'vencimiento', 'domicilio', 'dirección', 'direccion', 'teléfono',
        'telefono', 'remito', 'página', 'pagina', 'cliente', 'customer',
        'observaciones', 'son pesos',
        # personnel
        'vendedor', 'cajero', 'operador', 'seller', 'cashier',
        # contact
        'tel', 'tel.', 'phone', 'cel', 'whatsapp', 'email', 'e-mail', 'www',
        'sucursal',
    ]

    # Substrings marking e-mail addresses and URLs
    EXCLUDED_MARKERS = ['@', 'http://', 'https://']

    def __init__(self) -> None:
        """Initialize the filter from configuration."""
        self.validator = ItemValidator()
        self.excluded_keywords = get_config(
            "postprocessing.items.excluded_keywords",
            self.EXCLUDED_KEYWORDS
        )

    def rejection_reason(self, item) -> Optional[str]:
        """
        Get the reason an item would be dropped.

        Args:
            item: Candidate item.

        Returns:
            Reason string, or None if the item is kept.
        """
        valid, message = self.validator.validate_name(item.name)
        if not valid:
            return message

        if contains_keyword(item.name, self.excluded_keywords):
            return "Name contains excluded keyword"

        lowered = item.name.lower()
        if any(marker in lowered for marker in self.EXCLUDED_MARKERS):
            return "Name contains contact details"

        valid, message = self.validator.validate_prices(item.unit_price, item.total_price)
        if not valid:
            return message

        valid, message = self.validator.validate_quantity(item.quantity)
        if not valid:
            return message

        return None

    def apply(
        self,
        items: List,
        trace=None
    ) -> List:
        """
        Filter and deduplicate items, keeping document order.

        Args:
            items: Candidate items.
            trace: Trace to record rejections in.

        Returns:
            Items that passed every rule.
        """
        kept = []
        seen = set()

        for item in items:
            reason = self.rejection_reason(item)
            if reason is None:
                key = (item.name.casefold(), item.code, item.unit_price, item.quantity)
                if key in seen:
                    reason = "Duplicate item"
                else:
                    seen.add(key)
                    kept.append(item)
                    continue

            logger.debug(f"Item dropped ({reason}): {item.name}")
            if trace is not None:
                trace.reject_item(item.name, reason)

        if trace is not None:
            trace.accepted_items = len(kept)
        return kept


class PostProcessor:
    """
    Post-processing applied to raw extraction output.

    Attributes:
        item_filter: ItemFilter instance
        date_validator: DateValidator instance
        required_fields: Fields reported when missing

    Example:
        >>> processor = PostProcessor()
        >>> items = processor.filter_items(candidates)
        >>> warnings = processor.collect_warnings(fields, items)
    """

    def __init__(self) -> None:
        """Initialize the post-processor with all sub-components."""
        self.item_filter = ItemFilter()
        self.date_validator = DateValidator()
        self.required_fields = get_config(
            "postprocessing.validation.required_fields",
            ["invoice_number", "invoice_date", "total_amount"]
        )

    def filter_items(
        self,
        items: List,
        trace=None
    ) -> List:
        """Run the item filter."""
        return self.item_filter.apply(items, trace)

    def collect_warnings(self, fields: Dict[str, Any], items: List) -> List[str]:
        """
        Derive warnings from the extracted values.

        Warnings never change a value; they tell the person confirming
        the invoice where to look.

        Args:
            fields: Header fields (vendor_name, invoice_number, ...).
            items: Final line items.

        Returns:
            List of warning messages.
        """
        warnings = []

        for name in self.required_fields:
            if not fields.get(name):
                warnings.append(f"Missing field: {name}")

        invoice_date, due_date = fields.get('invoice_date'), fields.get('due_date')
        if invoice_date and due_date:
            valid, message = self.date_validator.is_due_after_invoice(invoice_date, due_date)
            if not valid:
                warnings.append(message)

        total = fields.get('total_amount') or 0.0
        items_total = sum_item_totals(items)
        if total and items_total > total + 0.01:
            warnings.append(
                f"Sum of item totals ({items_total:.2f}) exceeds invoice total ({total:.2f})"
            )

        for warning in warnings:
            logger.debug(f"Warning: {warning}")
        return warnings
