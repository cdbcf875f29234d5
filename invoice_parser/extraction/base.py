"""
Field Extractor Base Module.

Each header field is resolved by an ordered chain of strategies. A
strategy is a plain callable taking the RawDocument and returning a
FieldMatch or None; the chain stops at the first match. Keeping the
chain as data makes the priority order visible and lets each strategy
be tested on its own.

Author: ML Engineering Team
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from invoice_parser.utils.logger import get_logger
from .document import RawDocument
from .extraction_result import ExtractionTrace

# Initialize module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class FieldMatch:
    """A value found by a strategy and the line it came from."""
    value: Any
    line_index: Optional[int] = None


Strategy = Callable[[RawDocument], Optional[FieldMatch]]


class FieldExtractor:
    """
    Base class for single-field extractors.

    Subclasses set ``field_name`` and return their strategies, most
    reliable first, from ``strategies()``.

    Example:
        >>> class Upper(FieldExtractor):
        ...     field_name = "shout"
        ...     def strategies(self):
        ...         return [("first_upper", self._first_upper)]
    """

    field_name = ""

    def strategies(self) -> List[Tuple[str, Strategy]]:
        """Ordered (name, strategy) pairs."""
        raise NotImplementedError

    def extract(
        self,
        document: RawDocument,
        trace: Optional[ExtractionTrace] = None
    ) -> Optional[FieldMatch]:
        """
        Run the strategy chain against a document.

        Args:
            document: Normalized document.
            trace: Trace to record the outcome in.

        Returns:
            The first FieldMatch produced, or None.
        """
        return self.run_chain(self.field_name, self.strategies(), document, trace)

    @staticmethod
    def run_chain(
        field_name: str,
        strategies: List[Tuple[str, Strategy]],
        document: RawDocument,
        trace: Optional[ExtractionTrace] = None
    ) -> Optional[FieldMatch]:
        """
        Try strategies in order and stop at the first match.

        Args:
            field_name: Field being resolved, for logging and tracing.
            strategies: Ordered (name, strategy) pairs.
            document: Normalized document.
            trace: Trace to record the outcome in.

        Returns:
            The first FieldMatch produced, or None.
        """
        for name, strategy in strategies:
            match = strategy(document)
            if match is not None:
                logger.debug(
                    f"{field_name}: '{match.value}' via {name} "
                    f"(line {match.line_index})"
                )
                if trace is not None:
                    trace.record(field_name, name, match.line_index)
                return match

        logger.debug(f"{field_name}: no strategy matched")
        if trace is not None:
            trace.record(field_name, None)
        return None
