from __future__ import annotations

import json
import logging

from ..storage.kv_store import KeyValueStore

"""Persisted set of addresses already handled ("sent").

保存形式: 小文字化したメールアドレスの JSON 配列 (キー: mail_sent_status)。
比較は常に小文字で行う。
"""

__all__ = [
    "SENT_STATUS_STORAGE_KEY",
    "SentStatusTracker",
]

logger = logging.getLogger(__name__)

SENT_STATUS_STORAGE_KEY = "mail_sent_status"


class SentStatusTracker:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def get_sent_emails(self) -> set[str]:
        stored = self._store.get(SENT_STATUS_STORAGE_KEY)
        if not stored:
            return set()
        try:
            emails = json.loads(stored)
        except json.JSONDecodeError as e:
            logger.warning(f"stored sent status ignored (invalid JSON): {e}")
            return set()
        if not isinstance(emails, list):
            logger.warning("stored sent status ignored (not a list)")
            return set()
        return {e.lower() for e in emails if isinstance(e, str)}

    def _save(self, sent: set[str]) -> None:
        # 出力順を安定させる (差分確認しやすいように)
        self._store.set(SENT_STATUS_STORAGE_KEY, json.dumps(sorted(sent), ensure_ascii=False))

    def mark_as_sent(self, email: str) -> None:
        sent = self.get_sent_emails()
        sent.add(email.lower())
        self._save(sent)

    def mark_as_unsent(self, email: str) -> None:
        sent = self.get_sent_emails()
        sent.discard(email.lower())
        self._save(sent)

    def is_sent(self, email: str) -> bool:
        return email.lower() in self.get_sent_emails()

    def toggle(self, email: str) -> bool:
        """Flip the sent mark of ``email``.

        Returns:
            The new state (True = sent)
        """
        if self.is_sent(email):
            self.mark_as_unsent(email)
            return False
        self.mark_as_sent(email)
        return True
