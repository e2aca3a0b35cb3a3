from __future__ import annotations

from dataclasses import dataclass

"""TableData model: decoded delimited file.

Rows map column name -> cell text. A cell is ``None`` when the source line had
fewer fields than the header row.
"""

__all__ = [
    "TableData",
]


@dataclass(frozen=True)
class TableData:
    source_name: str  # 元ファイル名 (ログ/エラーメッセージ用)
    columns: list[str]  # ヘッダ行の順序を保持
    rows: list[dict[str, str | None]]  # ファイル内の行順を保持
