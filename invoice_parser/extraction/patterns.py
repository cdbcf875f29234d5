"""
Shared Patterns Module.

Token regexes and keyword vocabularies used by more than one field
extractor. Keywords are matched as whole words, case-insensitively,
so "no" never matches inside "nombre" and "iva" never matches inside
"archivada".

Author: ML Engineering Team
"""

import re

from invoice_parser.utils.helpers import contains_keyword


# Regional amount body ("." thousands, "," decimals)
AMOUNT = r'\d{1,3}(?:\.\d{3})*(?:,\d{2})?'

# Tax-ID shape: 2 digits - 8 digits - 1 digit
TAX_ID = re.compile(r'\d{2}-\d{8}-\d')

# Any day-first or ISO date token, used to exclude non-name lines
DATE_LIKE = re.compile(r'\d{1,2}[/-]\d{1,2}[/-]\d{2,4}|\d{4}-\d{1,2}-\d{1,2}')

# Unbroken digit runs this long are authorization codes
LONG_DIGIT_RUN = re.compile(r'\d{13,}')

AUTHORIZATION_KEYWORDS = ['cae', 'caea', 'authorization', 'autorización', 'autorizacion']

TAX_ID_KEYWORDS = ['cuit', 'tax id', 'tax-id']

PHONE_KEYWORDS = ['tel', 'tel.', 'teléfono', 'telefono', 'phone', 'cel', 'whatsapp']


def mentions_authorization(line: str) -> bool:
    """Check for an authorization-code keyword on a line."""
    return contains_keyword(line, AUTHORIZATION_KEYWORDS)


__all__ = [
    'AMOUNT',
    'TAX_ID',
    'DATE_LIKE',
    'LONG_DIGIT_RUN',
    'AUTHORIZATION_KEYWORDS',
    'TAX_ID_KEYWORDS',
    'PHONE_KEYWORDS',
    'contains_keyword',
    'mentions_authorization',
]
