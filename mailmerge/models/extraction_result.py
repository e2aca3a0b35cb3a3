from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Extraction result models.

ExtractionResult is created fresh for every uploaded file and replaces the
previous one wholesale; nothing here is mutated after construction.
"""

__all__ = [
    "ExtractionOptions",
    "ExtractionStats",
    "ExtractionResult",
]


@dataclass(frozen=True)
class ExtractionOptions:
    """Filtering switches applied while building the final email list."""
    remove_duplicates: bool = True  # 大文字小文字を無視した重複を除去
    remove_invalid: bool = True  # 形式不正の値を除外 (False なら残して手動確認)


@dataclass(frozen=True)
class ExtractionStats:
    """Accounting counters for one extraction.

    ``total`` counts non-empty raw values from the chosen source; ``empty`` is
    tracked separately and never part of ``total``.
    """
    total: int = 0
    valid: int = 0
    invalid: int = 0
    duplicates: int = 0
    empty: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "valid": self.valid,
            "invalid": self.invalid,
            "duplicates": self.duplicates,
            "empty": self.empty,
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Normalized email list plus the column it came from and statistics."""
    emails: list[str] = field(default_factory=list)  # 正規化済 (trim + lower)
    detected_column: str | None = None  # None = 全セル走査 (fallback)
    stats: ExtractionStats = field(default_factory=ExtractionStats)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape printed by ``extract --json``."""
        return {
            "emails": list(self.emails),
            "detectedColumn": self.detected_column,
            "stats": self.stats.to_dict(),
        }
