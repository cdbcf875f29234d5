"""
Line Item Extractor.

OCR output often shreds the product table: a row printed as one line
on paper can arrive as one cell per line. Two strategies are used:

    single_line: every line is matched against a list of row shapes,
        most specific first
    multi_line: when no single-line row is found and a table header
        exists, each total-price line becomes an anchor and the quantity,
        unit price, description, code and brand are collected from the
        lines just above it

Known limitation: the table ends at the first subtotal/tax/observations
line, so a description containing one of those words cuts the table
short. Brands are only recognised from a fixed vocabulary.

Author: ML Engineering Team
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Pattern, Tuple

from config import get_config
from invoice_parser.utils.logger import get_logger
from invoice_parser.postprocessor.normalizers import AmountNormalizer
from .document import RawDocument
from .extraction_result import ExtractionTrace, LineItem
from .patterns import DATE_LIKE, PHONE_KEYWORDS, contains_keyword

# Initialize module logger
logger = get_logger(__name__)


# Building blocks for row shapes
_AMT = r'\d{1,3}(?:\.\d{3})*(?:,\d{1,2})?'
_QTY = r'\d{1,4}(?:,\d{1,3})?'
_CODE = r'(?=[A-Z0-9\-./]*\d)[A-Z0-9][A-Z0-9\-./]{2,}'
_BRAND = r'[A-ZÁÉÍÓÚÑ]{2,}(?:\s+[A-ZÁÉÍÓÚÑ]{2,})?'
_DISCOUNT = r'(?:\s+\d{1,2}(?:,\d{1,2})?\s*%)?'


@dataclass(frozen=True)
class RowShape:
    """One single-line row layout, tried in declaration order."""
    name: str
    pattern: Pattern
    has_quantity: bool = True


ROW_SHAPES = (
    RowShape(
        "brand_code_desc_qty_unit_total",
        re.compile(
            rf'^(?P<brand>{_BRAND})\s+(?P<code>{_CODE})\s+(?P<desc>.+?)\s+'
            rf'(?P<qty>{_QTY})\s+\$?(?P<unit>{_AMT}){_DISCOUNT}\s+\$?(?P<total>{_AMT})$'
        ),
    ),
    RowShape(
        "qty_code_desc_unit_total",
        re.compile(
            rf'^(?P<qty>{_QTY})\s+(?P<code>{_CODE})\s+(?P<desc>.+?)\s+'
            rf'\$?(?P<unit>{_AMT})\s+\$?(?P<total>{_AMT})$'
        ),
    ),
    RowShape(
        "desc_qty_unit_total",
        re.compile(
            rf'^(?P<desc>.+?)\s+(?P<qty>{_QTY})\s+\$?(?P<unit>{_AMT})\s+\$?(?P<total>{_AMT})$'
        ),
    ),
    RowShape(
        "desc_price",
        re.compile(rf'^(?P<desc>.+?)\s+\$?(?P<total>{_AMT})$'),
        has_quantity=False,
    ),
)


class LineKind(Enum):
    """Classification of a single line inside the item table."""
    AMOUNT = "amount"
    QUANTITY = "quantity"
    PERCENT = "percent"
    CODE = "code"
    BRAND = "brand"
    TEXT = "text"
    OTHER = "other"


class LineItemExtractor:
    """
    Reconstructs line items from fragmented OCR text.

    Returns candidates only; ItemFilter decides which are real products.

    Example:
        >>> doc = TextNormalizer().normalize("FILTRO ACEITE 2 1.500,00 3.000,00")
        >>> LineItemExtractor().extract(doc)
        [LineItem(name='FILTRO ACEITE', quantity=2.0, unit_price=1500.0, ...)]
    """

    HEADER_GROUPS = {
        'item': ['item', 'ítem', 'art', 'art.', 'artículo', 'articulo'],
        'code': ['código', 'codigo', 'cód', 'cod', 'cod.', 'code'],
        'description': ['descripción', 'descripcion', 'description', 'detalle', 'producto'],
        'quantity': ['cantidad', 'cant', 'cant.', 'qty', 'quantity'],
        'unit_price': ['unitario', 'p. unit', 'p.unit', 'precio', 'unit price', 'p/u'],
        'total': ['importe', 'total', 'amount', 'subtotal'],
    }

    # Words stripped from the start of a description
    HEADER_WORDS = {
        'código', 'codigo', 'cod', 'cod.', 'cód', 'descripción', 'descripcion',
        'detalle', 'art', 'art.', 'artículo', 'articulo', 'item', 'ítem',
    }

    SKIP_KEYWORDS = [
        # freight
        'flete', 'freight', 'envío', 'envio', 'shipping',
        # payment method
        'forma de pago', 'medio de pago', 'payment method', 'condición de venta',
        'condicion de venta', 'contado', 'cuenta corriente',
        # observations
        'observaciones', 'observación', 'observacion', 'observations', 'notes',
        # subtotal and tax
        'subtotal', 'sub total', 'iva', 'tax', 'impuesto', 'impuestos',
        'percepción', 'percepcion', 'iibb',
        # totals
        'total', 'importe total', 'saldo',
        # contact and address
        'email', 'e-mail', 'www', 'sucursal', 'domicilio', 'dirección', 'direccion',
    ] + PHONE_KEYWORDS

    # Substrings marking e-mail addresses and URLs
    CONTACT_MARKERS = ['@', 'http://', 'https://']

    SECTION_END_KEYWORDS = [
        'subtotal', 'sub total', 'iva', 'tax',
        'son pesos', 'importe en letras', 'amount in words',
        'observaciones', 'observations',
    ]

    QUANTITY_LINE = re.compile(r'^[1-9]\d?(?:,0{1,3})?$')
    AMOUNT_LINE = re.compile(r'^\$?\s*(' + _AMT + r')$')
    PERCENT_LINE = re.compile(r'^-?\d{1,3}(?:,\d{1,2})?\s*%$')
    CODE_LINE = re.compile(r'^(?=[A-Z0-9\-./]*\d)[A-Z0-9][A-Z0-9\-./]{2,14}$', re.IGNORECASE)
    CODE_TOKEN = re.compile(r'^(?=[A-Z0-9\-./]*\d)[A-Z0-9][A-Z0-9\-./]{2,}$', re.IGNORECASE)
    FRAGMENT_LINE = re.compile(r'^[\d\s.,%$-]+$')
    PURE_NUMERIC = re.compile(r'^[\d\s.,$%/-]+$')
    DECIMAL_AMOUNT = re.compile(r'\d,\d{2}')
    LETTER = re.compile(r'[^\W\d_]')

    def __init__(self) -> None:
        """Initialize the extractor from configuration."""
        self.lookback_lines = get_config("extraction.line_items.lookback_lines", 8)
        self.min_price = get_config("extraction.line_items.min_price", 50)
        self.max_price = get_config("extraction.line_items.max_price", 10000000)
        self.min_price_without_quantity = get_config(
            "extraction.line_items.min_price_without_quantity", 100
        )
        self.max_quantity = get_config("extraction.line_items.max_quantity", 1000)
        self.min_description_length = get_config(
            "extraction.line_items.min_description_length", 5
        )
        self.max_description_length = get_config(
            "extraction.line_items.max_description_length", 120
        )
        self.known_brands = {
            brand.lower() for brand in get_config(
                "extraction.line_items.known_brands",
                ['bosch', 'champion', 'dayco', 'ferodo', 'fram', 'gates', 'hella',
                 'mahle', 'md', 'monroe', 'ngk', 'skf', 'valeo', 'wega']
            )
        }
        self.normalizer = AmountNormalizer()

    def extract(
        self,
        document: RawDocument,
        trace: Optional[ExtractionTrace] = None
    ) -> List[LineItem]:
        """
        Extract candidate line items.

        Args:
            document: Normalized document.
            trace: Trace to record the winning strategy in.

        Returns:
            Candidate items in document order.
        """
        header = self.find_header(document.lines)
        if header is None:
            start, stop = 0, len(document.lines)
        else:
            start, stop = header + 1, self.find_section_end(document.lines, header + 1)

        strategy = None
        items = self.extract_single_line(document.lines, start, stop)
        if items:
            strategy = "single_line"
        elif header is not None:
            items = self.extract_multi_line(document.lines, start, stop)
            if items:
                strategy = "multi_line"

        logger.debug(
            f"line_items: {len(items)} candidates via {strategy} "
            f"(header line {header}, section {start}-{stop})"
        )
        if trace is not None:
            trace.item_strategy = strategy
            trace.candidate_items = len(items)
        return items

    # ------------------------------------------------------------------
    # Table boundaries
    # ------------------------------------------------------------------

    def is_header(self, line: str) -> bool:
        """A header names at least two different column groups."""
        groups = sum(
            1 for keywords in self.HEADER_GROUPS.values()
            if contains_keyword(line, keywords)
        )
        return groups >= 2

    def find_header(self, lines) -> Optional[int]:
        """Index of the first table header line, or None."""
        for index, line in enumerate(lines):
            if self.is_header(line):
                return index
        return None

    def find_section_end(self, lines, start: int) -> int:
        """Index of the first line closing the item table."""
        for index in range(start, len(lines)):
            if contains_keyword(lines[index], self.SECTION_END_KEYWORDS):
                return index
        return len(lines)

    def is_excluded(self, line: str) -> bool:
        """Freight, tax, totals and contact lines never hold a product."""
        if contains_keyword(line, self.SKIP_KEYWORDS):
            return True
        lowered = line.lower()
        return any(marker in lowered for marker in self.CONTACT_MARKERS)

    # ------------------------------------------------------------------
    # Strategy A: single-line rows
    # ------------------------------------------------------------------

    def extract_single_line(self, lines, start: int, stop: int) -> List[LineItem]:
        """
        Match each line in [start, stop) against the row shapes.

        After a match, the numeric fragments that follow it (OCR
        repeating the row's numbers on their own lines) are skipped.
        """
        items = []
        index = start
        while index < stop:
            line = lines[index]
            item = None
            if not self.is_excluded(line):
                item = self.match_row(line)

            index += 1
            if item is None:
                continue

            items.append(item)
            while index < stop and self.FRAGMENT_LINE.match(lines[index]):
                index += 1
        return items

    def match_row(self, line: str) -> Optional[LineItem]:
        """
        Match one line against the row shapes in order.

        Args:
            line: Single document line.

        Returns:
            LineItem for the first shape that matches and validates.
        """
        for shape in ROW_SHAPES:
            match = shape.pattern.match(line)
            if not match:
                continue
            item = self._item_from_row(shape, match)
            if item is not None:
                logger.debug(f"row shape {shape.name}: {line}")
                return item
        return None

    def _item_from_row(self, shape: RowShape, match) -> Optional[LineItem]:
        groups = match.groupdict()
        description = groups['desc'].strip()
        total = self.normalizer.to_float(groups['total'])
        if total is None or not self._valid_description(description):
            return None

        if shape.has_quantity:
            quantity = self.normalizer.to_float(groups['qty'])
            unit = self.normalizer.to_float(groups['unit'])
            if quantity is None or unit is None:
                return None
            if not 1 <= quantity <= self.max_quantity:
                return None
            if not self._valid_price(unit) or not self._valid_price(total):
                return None
        else:
            if self.DECIMAL_AMOUNT.search(description):
                return None
            if not self._valid_price(total) or total < self.min_price_without_quantity:
                return None
            quantity, unit = 1.0, total

        name, code, brand = self.clean_description(
            description, groups.get('code'), groups.get('brand')
        )
        if not name:
            return None
        return LineItem(name, quantity, unit, total, code, brand)

    def _valid_price(self, value: float) -> bool:
        return self.min_price <= value <= self.max_price

    def _valid_description(self, description: str) -> bool:
        if not self.LETTER.search(description):
            return False
        if self.PURE_NUMERIC.match(description):
            return False
        return not DATE_LIKE.fullmatch(description)

    # ------------------------------------------------------------------
    # Strategy B: multi-line grouping
    # ------------------------------------------------------------------

    def classify(self, line: str) -> LineKind:
        """Classify one table line."""
        if self.QUANTITY_LINE.match(line):
            return LineKind.QUANTITY
        amount = self.AMOUNT_LINE.match(line)
        if amount:
            value = self.normalizer.to_float(amount.group(1))
            if value is not None and self.min_price <= value <= self.max_price:
                return LineKind.AMOUNT
            return LineKind.OTHER
        if self.PERCENT_LINE.match(line):
            return LineKind.PERCENT
        if self.CODE_LINE.match(line):
            return LineKind.CODE
        if line.lower() in self.known_brands:
            return LineKind.BRAND
        if (
            self.LETTER.search(line)
            and self.min_description_length <= len(line) <= self.max_description_length
            and not self.is_header(line)
            and not self.is_excluded(line)
        ):
            return LineKind.TEXT
        return LineKind.OTHER

    def extract_multi_line(self, lines, start: int, stop: int) -> List[LineItem]:
        """
        Rebuild items whose cells arrived one per line.

        An anchor is an amount line not followed by another amount line:
        in a run of amounts the last one is the row total.
        """
        kinds = [self.classify(lines[i]) for i in range(start, stop)]

        def kind_at(index: int) -> LineKind:
            if start <= index < stop:
                return kinds[index - start]
            return LineKind.OTHER

        items = []
        previous_anchor = start - 1
        for anchor in range(start, stop):
            if kind_at(anchor) is not LineKind.AMOUNT or kind_at(anchor + 1) is LineKind.AMOUNT:
                continue

            bound = max(previous_anchor + 1, anchor - self.lookback_lines, start)
            item = self._group_backwards(lines, anchor, bound, kind_at)
            previous_anchor = anchor
            if item is not None:
                items.append(item)
        return items

    def _group_backwards(self, lines, anchor: int, bound: int, kind_at) -> Optional[LineItem]:
        total = self.normalizer.to_float(self.AMOUNT_LINE.match(lines[anchor]).group(1))

        unit = quantity = description = code = brand = None
        for index in range(anchor - 1, bound - 1, -1):
            kind = kind_at(index)
            line = lines[index]
            if kind is LineKind.AMOUNT and unit is None:
                value = self.normalizer.to_float(self.AMOUNT_LINE.match(line).group(1))
                if value <= total:
                    unit = value
            elif kind is LineKind.QUANTITY and quantity is None:
                value = self.normalizer.to_float(line)
                if value is not None and 1 <= value <= self.max_quantity:
                    quantity = value
            elif kind is LineKind.TEXT and description is None:
                description = line
            elif kind is LineKind.CODE and code is None:
                code = line
            elif kind is LineKind.BRAND and brand is None:
                brand = line

        if description is None:
            logger.debug(f"anchor line {anchor} skipped: no description")
            return None

        if quantity is None:
            quantity = self._quantity_from_prices(total, unit)
        if unit is None:
            unit = round(total / quantity, 2)

        name, code, brand = self.clean_description(description, code, brand)
        if not name:
            return None
        return LineItem(name, quantity, unit, total, code, brand)

    @staticmethod
    def _quantity_from_prices(total: float, unit: Optional[float]) -> float:
        """Infer quantity when total/unit is within 0.5% of an integer >= 2."""
        if not unit:
            return 1.0
        ratio = total / unit
        nearest = round(ratio)
        if nearest >= 2 and abs(ratio - nearest) <= 0.005 * nearest:
            return float(nearest)
        return 1.0

    # ------------------------------------------------------------------
    # Description cleaning
    # ------------------------------------------------------------------

    def clean_description(
        self,
        description: str,
        code: Optional[str] = None,
        brand: Optional[str] = None
    ) -> Tuple[str, Optional[str], Optional[str]]:
        """
        Strip leading code, brand and header tokens from a description.

        Args:
            description: Raw description text.
            code: Code already known for the row.
            brand: Brand already known for the row.

        Returns:
            Tuple of (name, code, brand). A leading code-like token
            becomes the code when none is known; a leading known brand
            becomes the brand.
        """
        tokens = description.split()
        while tokens:
            token = tokens[0]
            lowered = token.lower()
            if lowered in self.known_brands:
                brand = brand or token
            elif lowered in self.HEADER_WORDS:
                pass
            elif self.CODE_TOKEN.match(token):
                code = code or token
            else:
                break
            tokens.pop(0)

        if brand is None:
            brand = next(
                (token for token in tokens if token.lower() in self.known_brands),
                None
            )

        name = " ".join(tokens).strip(" -:|")
        return name, code, brand
