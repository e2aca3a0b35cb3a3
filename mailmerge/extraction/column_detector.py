from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .validator import is_valid_email, normalize_cell

"""Email column detection.

Priority (first match wins):
1. Header exactly "E-mail 1 - Value" (Google Contacts export)
2. First header containing both "e-mail" and "value" (case-insensitive)
3. Header with the most cells that look like an email; ties keep the header
   seen first, a best score of zero selects nothing
"""

__all__ = [
    "EXACT_EMAIL_HEADER",
    "count_email_like_values",
    "detect_email_column",
]

logger = logging.getLogger(__name__)

EXACT_EMAIL_HEADER = "E-mail 1 - Value"


def count_email_like_values(column: str, rows: Sequence[Mapping[str, Any]]) -> int:
    """Count rows whose cell in ``column`` is a syntactically valid email."""
    count = 0
    for row in rows:
        value = normalize_cell(row.get(column))
        if value and is_valid_email(value):
            count += 1
    return count


def _first_email_value_header(headers: Sequence[str]) -> str | None:
    for h in headers:
        hl = h.lower()
        if "e-mail" in hl and "value" in hl:
            return h
    return None


def detect_email_column(headers: Sequence[str], rows: Sequence[Mapping[str, Any]]) -> str | None:
    """Return the header believed to hold email addresses, or None.

    None means "no column found" and makes the pipeline fall back to scanning
    every cell.
    """
    if EXACT_EMAIL_HEADER in headers:
        logger.debug(f"email column (exact header): {EXACT_EMAIL_HEADER}")
        return EXACT_EMAIL_HEADER

    header = _first_email_value_header(headers)
    if header is not None:
        logger.debug(f"email column (header contains e-mail/value): {header}")
        return header

    # 左から順に走査し、同点は先に見つかった列を維持 (ソートしない)
    best_column: str | None = None
    best_score = 0
    for h in headers:
        score = count_email_like_values(h, rows)
        if score > best_score:
            best_score = score
            best_column = h

    if best_column is not None:
        logger.debug(f"email column (content score={best_score}): {best_column}")
    return best_column
