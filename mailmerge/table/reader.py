from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.table_data import TableData

"""Delimited text reader (Row Source).

- 1行目をヘッダ行として扱い、2行目以降をデータ行。
- 空行はスキップ。
- セルは全て文字列として読み込む (数値変換 / NA 変換なし)。

pandas.read_csv を利用し、区切り文字だけで CSV / TSV を切り替える。
"""

__all__ = [
    "CSV_DELIMITER",
    "TSV_DELIMITER",
    "DELIMITERS_BY_SUFFIX",
    "TableDecodeError",
    "UnsupportedFileTypeError",
    "delimiter_for",
    "read_table_file",
    "read_table_text",
]

CSV_DELIMITER = ","
TSV_DELIMITER = "\t"

DELIMITERS_BY_SUFFIX = {
    ".csv": CSV_DELIMITER,
    ".tsv": TSV_DELIMITER,
}


class TableDecodeError(Exception):
    """Raised when a file cannot be decoded as the expected delimited format."""


class UnsupportedFileTypeError(Exception):
    """Raised when the file extension is neither .csv nor .tsv."""


def delimiter_for(path: Path) -> str:
    """Pick the delimiter from the file suffix (case-insensitive)."""
    try:
        return DELIMITERS_BY_SUFFIX[path.suffix.lower()]
    except KeyError:
        raise UnsupportedFileTypeError(
            f"unsupported file type '{path.suffix or path.name}': select a .csv or .tsv file"
        ) from None


def _read_frame(source: Any, delimiter: str, source_name: str) -> TableData:
    try:
        df = pd.read_csv(
            source,
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            na_values=[],
            skip_blank_lines=True,
            index_col=False,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError:
        # 0 バイト / ヘッダすら無い -> 空テーブル (空判定は pipeline 側)
        return TableData(source_name=source_name, columns=[], rows=[])
    except pd.errors.ParserError as e:
        raise TableDecodeError(f"{source_name}: {e}") from e
    except UnicodeDecodeError as e:
        raise TableDecodeError(f"{source_name}: not valid UTF-8 text ({e.reason})") from e
    except OSError as e:
        raise TableDecodeError(f"{source_name}: {e}") from e

    columns = [str(c) for c in df.columns]
    rows: list[dict[str, str | None]] = []
    for record in df.itertuples(index=False, name=None):
        row: dict[str, str | None] = {}
        for col, val in zip(columns, record, strict=False):
            # 列数が足りない行のセルは NaN で埋まる -> None (欠損セル)
            row[col] = None if pd.isna(val) else str(val)
        rows.append(row)
    return TableData(source_name=source_name, columns=columns, rows=rows)


def read_table_file(path: Path, delimiter: str | None = None) -> TableData:
    """Decode a CSV/TSV file into headers + rows.

    Parameters
    ----------
    path: 入力ファイルパス
    delimiter: 区切り文字 (None なら拡張子から決定)
    """
    if delimiter is None:
        delimiter = delimiter_for(path)
    return _read_frame(path, delimiter, path.name)


def read_table_text(text: str, delimiter: str = CSV_DELIMITER, source_name: str = "<text>") -> TableData:
    """Decode already-loaded delimited text (e.g. pasted content)."""
    return _read_frame(io.StringIO(text), delimiter, source_name)
