from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from ..models.extraction_result import ExtractionOptions, ExtractionResult, ExtractionStats
from ..table.reader import CSV_DELIMITER, TSV_DELIMITER, delimiter_for, read_table_file
from .column_detector import detect_email_column
from .validator import is_valid_email, normalize_cell

"""Email extraction pipeline.

Coordinates column detection, raw value gathering and the single filtering
pass that produces the final address list and its statistics.

列が検出できない場合は全セル走査 (fallback)。fallback の raw values は
検証・重複除去済みのメール一覧そのものなので、他セルの invalid / duplicates /
empty は集計されない (列検出時との非対称はそのまま維持)。
"""

__all__ = [
    "EmptyTableError",
    "extract_emails",
    "parse_csv_and_extract_emails",
    "parse_tsv_and_extract_emails",
    "parse_file_and_extract_emails",
]

logger = logging.getLogger(__name__)

_FORMAT_LABELS = {
    CSV_DELIMITER: "CSV",
    TSV_DELIMITER: "TSV",
}


class EmptyTableError(Exception):
    """Raised when the decoded table has no data rows."""


def _gather_column_values(column: str, rows: Sequence[Mapping[str, Any]]) -> tuple[list[str], int]:
    """Collect non-empty trimmed cells of ``column`` in row order.

    Returns:
        (raw_values, empty_count)
    """
    values: list[str] = []
    empty = 0
    for row in rows:
        value = normalize_cell(row.get(column))
        if value:
            values.append(value)
        else:
            empty += 1
    return values, empty


def _scan_all_cells(rows: Sequence[Mapping[str, Any]]) -> list[str]:
    """Fallback: valid emails from every cell, row-then-column order, deduplicated."""
    emails: list[str] = []
    seen: set[str] = set()
    for row in rows:
        for value in row.values():
            trimmed = normalize_cell(value)
            if trimmed and is_valid_email(trimmed):
                lower = trimmed.lower()
                if lower not in seen:
                    seen.add(lower)
                    emails.append(lower)
    return emails


def extract_emails(
    headers: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
    options: ExtractionOptions | None = None,
    *,
    source_label: str = "input",
) -> ExtractionResult:
    """Extract normalized email addresses from header-keyed rows.

    Args:
        headers: Ordered column names
        rows: Rows in source order (column -> cell text or None)
        options: Duplicate / invalid filtering switches (defaults: remove both)
        source_label: Used in the empty-table error message ("CSV", "TSV", ...)

    Returns:
        ExtractionResult with emails, detected column (or None) and stats

    Raises:
        EmptyTableError: If ``rows`` is empty
    """
    if options is None:
        options = ExtractionOptions()

    if not rows:
        raise EmptyTableError(f"{source_label} file is empty")

    detected_column = detect_email_column(headers, rows)
    if detected_column is not None:
        raw_values, empty = _gather_column_values(detected_column, rows)
    else:
        logger.debug("no email column detected -> scanning all cells")
        raw_values = _scan_all_cells(rows)
        empty = 0

    invalid = 0
    duplicates = 0
    seen: set[str] = set()
    emails: list[str] = []

    for raw in raw_values:
        normalized = raw.strip().lower()
        if not normalized:
            empty += 1
            continue

        if not is_valid_email(normalized):
            invalid += 1
            if options.remove_invalid:
                continue
            # 無効値も残す設定: 重複判定だけは有効値と同じ扱い

        if options.remove_duplicates and normalized in seen:
            duplicates += 1
            continue

        seen.add(normalized)
        emails.append(normalized)

    stats = ExtractionStats(
        total=len(raw_values),
        valid=len(emails),
        invalid=invalid,
        duplicates=duplicates,
        empty=empty,
    )
    return ExtractionResult(emails=emails, detected_column=detected_column, stats=stats)


def _parse_and_extract(path: Path, delimiter: str, options: ExtractionOptions | None) -> ExtractionResult:
    table = read_table_file(path, delimiter=delimiter)
    label = _FORMAT_LABELS.get(delimiter, "input")
    logger.debug(f"{table.source_name}: columns={table.columns} rows={len(table.rows)}")
    return extract_emails(table.columns, table.rows, options, source_label=label)


def parse_csv_and_extract_emails(path: Path, options: ExtractionOptions | None = None) -> ExtractionResult:
    """Decode a comma separated file and extract its email addresses."""
    return _parse_and_extract(path, CSV_DELIMITER, options)


def parse_tsv_and_extract_emails(path: Path, options: ExtractionOptions | None = None) -> ExtractionResult:
    """Decode a tab separated file and extract its email addresses."""
    return _parse_and_extract(path, TSV_DELIMITER, options)


def parse_file_and_extract_emails(path: Path, options: ExtractionOptions | None = None) -> ExtractionResult:
    """Dispatch on the file suffix (.csv / .tsv).

    Raises:
        UnsupportedFileTypeError: Any other suffix
        TableDecodeError: File cannot be decoded
        EmptyTableError: No data rows
    """
    return _parse_and_extract(path, delimiter_for(path), options)
