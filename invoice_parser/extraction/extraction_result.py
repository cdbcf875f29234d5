"""
Extraction Result Data Classes.

This module defines the data structures returned by the pipeline:
line items, the immutable extraction result, and the trace that
records which strategy produced each field.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List, Tuple
import json

from invoice_parser.postprocessor.processor import sum_item_totals


@dataclass(frozen=True)
class LineItem:
    """
    One purchased product on an invoice.

    Attributes:
        name: Product description without leading code/brand tokens
        quantity: Units purchased (>= 1 for real items)
        unit_price: Price per unit, derived as total/quantity when absent
        total_price: Line total
        code: Product code, if one was printed
        brand: Brand name, if recognised

    Example:
        >>> item = LineItem("FILTRO ACEITE", 2, 1500.0, 3000.0)
        >>> item.to_dict()["unit_price"]
        1500.0
    """
    name: str
    quantity: float
    unit_price: float
    total_price: float
    code: Optional[str] = None
    brand: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            'name': self.name,
            'quantity': self.quantity,
            'unit_price': self.unit_price,
            'total_price': self.total_price,
            'code': self.code,
            'brand': self.brand
        }


@dataclass
class FieldTrace:
    """Which strategy resolved a field, and on which line."""
    strategy: Optional[str] = None
    line_index: Optional[int] = None


@dataclass
class ExtractionTrace:
    """
    Diagnostic record of the decisions taken during one extraction.

    The trace replaces ad-hoc log reading when a field is
    misclassified: it names the winning strategy per field, the line
    it matched on, and why candidate items were dropped.

    Example:
        >>> result = extractor.extract(text)
        >>> result.trace.fields["invoice_number"].strategy
        'labelled'
    """
    fields: Dict[str, FieldTrace] = field(default_factory=dict)
    item_strategy: Optional[str] = None
    candidate_items: int = 0
    accepted_items: int = 0
    rejected_items: List[Tuple[str, str]] = field(default_factory=list)

    def record(
        self,
        field_name: str,
        strategy: Optional[str],
        line_index: Optional[int] = None
    ) -> None:
        """
        Record the outcome of a field's strategy chain.

        Args:
            field_name: Result field name (e.g. "vendor_name").
            strategy: Name of the winning strategy, None if nothing matched.
            line_index: Index of the line the value came from.
        """
        self.fields[field_name] = FieldTrace(strategy, line_index)

    def reject_item(self, name: str, reason: str) -> None:
        """Record a candidate item dropped by the filter."""
        self.rejected_items.append((name, reason))

    def strategy_for(self, field_name: str) -> Optional[str]:
        """Get the winning strategy for a field, if any."""
        trace = self.fields.get(field_name)
        return trace.strategy if trace else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            'fields': {
                name: {'strategy': t.strategy, 'line_index': t.line_index}
                for name, t in self.fields.items()
            },
            'item_strategy': self.item_strategy,
            'candidate_items': self.candidate_items,
            'accepted_items': self.accepted_items,
            'rejected_items': [
                {'name': name, 'reason': reason}
                for name, reason in self.rejected_items
            ]
        }


@dataclass(frozen=True)
class ExtractionResult:
    """
    Represents the structured invoice recovered from OCR text.

    All header fields are independently optional. ``total_amount`` and
    ``items`` default to 0.0 and an empty tuple instead of None; callers
    must read those defaults as "not found".

    Attributes:
        vendor_name: Supplier name
        invoice_number: Identifier such as "0001-00001234"
        invoice_date: Issue date, ISO YYYY-MM-DD
        due_date: Payment due date, ISO YYYY-MM-DD
        total_amount: Final payable amount
        items: Filtered, deduplicated line items
        warnings: Non-fatal observations about the extracted values
        trace: Strategy trace (ignored by equality)

    Example:
        >>> result = InvoiceExtractor().extract(text)
        >>> result.invoice_number
        '0001-00001234'
        >>> print(result.to_json())
    """
    vendor_name: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    due_date: Optional[str] = None
    total_amount: float = 0.0
    items: Tuple[LineItem, ...] = ()
    warnings: Tuple[str, ...] = ()
    trace: ExtractionTrace = field(
        default_factory=ExtractionTrace, compare=False, repr=False
    )

    @property
    def fields(self) -> Dict[str, Any]:
        """
        Get all header fields as a dictionary.

        Returns:
            Dictionary of field names to values.
        """
        return {
            'vendor_name': self.vendor_name,
            'invoice_number': self.invoice_number,
            'invoice_date': self.invoice_date,
            'due_date': self.due_date,
            'total_amount': self.total_amount
        }

    @property
    def missing_fields(self) -> List[str]:
        """Header fields that were not found (a zero total counts as missing)."""
        return [k for k, v in self.fields.items() if v is None or v == "" or v == 0.0]

    @property
    def items_total(self) -> float:
        """Sum of the line item totals."""
        return sum_item_totals(self.items)

    def to_dict(self, include_trace: bool = False) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Args:
            include_trace: Add the strategy trace under "trace".

        Returns:
            Dictionary representation of the extraction result.
        """
        data = dict(self.fields)
        data['items'] = [item.to_dict() for item in self.items]
        data['warnings'] = list(self.warnings)
        if include_trace:
            data['trace'] = self.trace.to_dict()
        return data

    def to_json(self, indent: int = 2, include_trace: bool = False) -> str:
        """
        Convert to JSON string.

        Args:
            indent: JSON indentation level.
            include_trace: Add the strategy trace under "trace".

        Returns:
            JSON string representation.
        """
        return json.dumps(
            self.to_dict(include_trace=include_trace),
            indent=indent,
            ensure_ascii=False
        )

    def __repr__(self) -> str:
        return (
            f"ExtractionResult("
            f"invoice={self.invoice_number}, "
            f"vendor={self.vendor_name}, "
            f"total={self.total_amount}, "
            f"items={len(self.items)})"
        )
