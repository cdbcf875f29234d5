"""
Date Extractor.

Resolves the issue date and the due date independently. Both use a
label-proximity strategy first and a positional fallback second; the
due-date fallback needs the issue date and only accepts later dates.

Author: ML Engineering Team
"""

from dataclasses import dataclass
from functools import partial
from typing import List, Optional, Tuple

from config import get_config
from invoice_parser.utils.logger import get_logger
from invoice_parser.postprocessor.normalizers import DateNormalizer
from invoice_parser.postprocessor.validators import DateValidator
from .base import FieldExtractor, FieldMatch, Strategy
from .document import RawDocument
from .extraction_result import ExtractionTrace
from .patterns import contains_keyword, mentions_authorization

# Initialize module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class DateMatches:
    """Issue and due date matches, each optional."""
    issue: Optional[FieldMatch] = None
    due: Optional[FieldMatch] = None

    @property
    def invoice_date(self) -> Optional[str]:
        return self.issue.value if self.issue else None

    @property
    def due_date(self) -> Optional[str]:
        return self.due.value if self.due else None


class DateExtractor(FieldExtractor):
    """
    Extracts the invoice issue date and payment due date.

    Example:
        >>> doc = TextNormalizer().normalize("Fecha: 05/03/2024\\nVto: 04/04/2024")
        >>> dates = DateExtractor().extract(doc)
        >>> dates.invoice_date, dates.due_date
        ('2024-03-05', '2024-04-04')
    """

    ISSUE_KEYWORDS = ['fecha', 'date']

    # Lines mentioning these never hold the issue date
    ISSUE_EXCLUDED_KEYWORDS = [
        'inicio de actividades', 'inicio actividades', 'start of activities',
        'due', 'vto', 'vto.', 'vencimiento', 'vence',
    ]

    DUE_KEYWORDS = [
        'due date', 'payment terms', 'fecha de vencimiento',
        'vencimiento', 'vto', 'vto.', 'vence', 'due',
    ]

    def __init__(self) -> None:
        """Initialize the extractor from configuration."""
        self.issue_lookahead = get_config("extraction.dates.issue_lookahead_lines", 1)
        self.due_lookahead = get_config("extraction.dates.due_lookahead_lines", 2)
        self.fallback_scan_lines = get_config("extraction.dates.fallback_scan_lines", 20)
        self.normalizer = DateNormalizer()
        self.validator = DateValidator()

    def strategies(self) -> List[Tuple[str, Strategy]]:
        """Issue date strategies; the due date chain is built per document."""
        return [
            ("labelled", self._issue_near_label),
            ("positional", self._issue_positional),
        ]

    def due_strategies(self, issue: Optional[FieldMatch]) -> List[Tuple[str, Strategy]]:
        """Due date strategies, given the already resolved issue date."""
        strategies = [("labelled", self._due_near_label)]
        if issue is not None:
            strategies.append(
                ("after_issue_date", partial(self._due_after_issue, issue=issue))
            )
        return strategies

    def extract(
        self,
        document: RawDocument,
        trace: Optional[ExtractionTrace] = None
    ) -> DateMatches:
        """
        Extract both dates.

        Args:
            document: Normalized document.
            trace: Trace to record the outcome in.

        Returns:
            DateMatches with ISO date values.
        """
        issue = self.run_chain("invoice_date", self.strategies(), document, trace)
        due = self.run_chain("due_date", self.due_strategies(issue), document, trace)
        return DateMatches(issue=issue, due=due)

    # ------------------------------------------------------------------
    # Issue date
    # ------------------------------------------------------------------

    def _is_issue_label(self, line: str) -> bool:
        return (
            contains_keyword(line, self.ISSUE_KEYWORDS)
            and not self._is_issue_excluded(line)
        )

    def _is_issue_excluded(self, line: str) -> bool:
        return (
            mentions_authorization(line)
            or contains_keyword(line, self.ISSUE_EXCLUDED_KEYWORDS)
        )

    def _issue_near_label(self, document: RawDocument) -> Optional[FieldMatch]:
        lines = document.lines
        for label_index, line in enumerate(lines):
            if not self._is_issue_label(line):
                continue
            stop = min(len(lines), label_index + self.issue_lookahead + 1)
            for index in range(label_index, stop):
                if index > label_index and self._is_issue_excluded(lines[index]):
                    break
                date = self.normalizer.extract_date(lines[index])
                if date:
                    return FieldMatch(date, index)
        return None

    def _issue_positional(self, document: RawDocument) -> Optional[FieldMatch]:
        for index, line in enumerate(document.window(0, self.fallback_scan_lines)):
            if mentions_authorization(line):
                continue
            date = self.normalizer.extract_date(line)
            if date:
                return FieldMatch(date, index)
        return None

    # ------------------------------------------------------------------
    # Due date
    # ------------------------------------------------------------------

    def _due_near_label(self, document: RawDocument) -> Optional[FieldMatch]:
        lines = document.lines
        for label_index, line in enumerate(lines):
            if mentions_authorization(line) or not contains_keyword(line, self.DUE_KEYWORDS):
                continue
            stop = min(len(lines), label_index + self.due_lookahead + 1)
            for index in range(label_index, stop):
                if mentions_authorization(lines[index]):
                    continue
                date = self.normalizer.extract_date(lines[index])
                if date:
                    return FieldMatch(date, index)
        return None

    def _due_after_issue(
        self,
        document: RawDocument,
        issue: FieldMatch
    ) -> Optional[FieldMatch]:
        start = issue.line_index or 0
        for index in range(start, len(document.lines)):
            line = document.lines[index]
            if mentions_authorization(line):
                continue
            for date, _ in self.normalizer.find_dates(line):
                if self.validator.is_after(date, issue.value):
                    return FieldMatch(date, index)
        return None
