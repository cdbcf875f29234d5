"""
Helper Utilities Module.

This module provides small file-system helpers used by the input
handler and the command-line entry point, and the keyword matcher
shared by the extractors and the item filter.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - contains_keyword: Whole-word, case-insensitive keyword search
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Pattern, Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/reports")
        PosixPath('outputs/reports')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Extract the file extension from a filepath.

    Returns the extension in lowercase, including the dot.
    Returns empty string if no extension exists.

    Example:
        >>> get_file_extension("scan.TXT")
        ".txt"
        >>> get_file_extension("noextension")
        ""
    """
    return Path(filepath).suffix.lower()


@lru_cache(maxsize=512)
def keyword_pattern(keyword: str) -> Pattern:
    """
    Compile a whole-word, case-insensitive pattern for a keyword.

    Keywords may end in punctuation ("tel.", "no."), so the boundary is
    "no word character on either side" rather than \\b.
    """
    return re.compile(r'(?<!\w)' + re.escape(keyword) + r'(?!\w)', re.IGNORECASE)


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    """
    Check whether text contains any keyword as a whole word.

    Example:
        >>> contains_keyword("IVA 21%", ["iva"])
        True
        >>> contains_keyword("Archivada", ["iva"])
        False
    """
    return any(keyword_pattern(keyword).search(text) for keyword in keywords)
