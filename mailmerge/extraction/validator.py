from __future__ import annotations

import re
from typing import Any

"""Syntactic email address check.

local@domain.tld 形式のみを判定する (DNS / MX 確認なし)。
"""

__all__ = [
    "EMAIL_PATTERN",
    "is_valid_email",
    "normalize_cell",
]

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def normalize_cell(value: Any) -> str:
    """Trim a cell value; anything that is not a string counts as empty."""
    return value.strip() if isinstance(value, str) else ""


def is_valid_email(value: Any) -> bool:
    return EMAIL_PATTERN.fullmatch(normalize_cell(value)) is not None
