from __future__ import annotations

from typing import Protocol

"""Clipboard writer.

TkClipboardWriter は tkinter の clipboard を使う (非表示ウィンドウ)。
ディスプレイが無い環境では ClipboardError。
"""

__all__ = [
    "ClipboardError",
    "ClipboardWriter",
    "TkClipboardWriter",
]


class ClipboardError(Exception):
    """Raised when text cannot be placed on the system clipboard."""


class ClipboardWriter(Protocol):
    def write(self, text: str) -> None: ...


class TkClipboardWriter:
    def write(self, text: str) -> None:
        try:
            import tkinter as tk
        except ImportError as e:  # pragma: no cover - tk なしの Python ビルド
            raise ClipboardError(f"tkinter not available: {e}") from e

        try:
            root = tk.Tk()
        except tk.TclError as e:
            raise ClipboardError(f"clipboard unavailable: {e}") from e
        try:
            root.withdraw()
            root.clipboard_clear()
            root.clipboard_append(text)
            # update() しないと destroy 時に内容が消える環境がある
            root.update()
        except tk.TclError as e:
            raise ClipboardError(f"copy failed: {e}") from e
        finally:
            root.destroy()
