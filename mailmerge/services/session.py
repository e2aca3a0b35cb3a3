from __future__ import annotations

from typing import Literal

from ..models.extraction_result import ExtractionResult
from ..models.template import ComposedMessage, Template
from .sent_status import SentStatusTracker
from .template import apply_template

"""Review session: one-at-a-time paging over an extraction result.

State owned here:
- current index into the email list (wraps around in both directions)
- unsent-only mode (skip addresses already marked as sent)

The sent set itself lives in SentStatusTracker and is re-read on every
navigation so that marks made elsewhere are honoured.
"""

__all__ = [
    "Direction",
    "ReviewSession",
]

Direction = Literal["next", "prev"]


class ReviewSession:
    def __init__(
        self,
        result: ExtractionResult,
        template: Template,
        tracker: SentStatusTracker,
        *,
        show_unsent_only: bool = False,
    ) -> None:
        self.template = template
        self.tracker = tracker
        self.show_unsent_only = show_unsent_only
        self.emails: list[str] = []
        self.current_index = 0
        self.result = result
        self.load_result(result)

    def load_result(self, result: ExtractionResult) -> None:
        """Replace the list wholesale (new upload) and go back to the first page."""
        self.result = result
        self.emails = list(result.emails)
        self.current_index = 0

    @property
    def current_email(self) -> str:
        if 0 <= self.current_index < len(self.emails):
            return self.emails[self.current_index]
        return ""

    def find_next_unsent(self, start_index: int, direction: Direction) -> int | None:
        """Index of the nearest unsent address after/before ``start_index``.

        Wraps around; ``start_index`` itself is checked last. None when every
        address is marked as sent.
        """
        total = len(self.emails)
        if total == 0:
            return None
        sent = self.tracker.get_sent_emails()
        step = 1 if direction == "next" else -1
        index = start_index
        for _ in range(total):
            index = (index + step) % total
            if self.emails[index].lower() not in sent:
                return index
        return None

    def go_to_page(self, direction: Direction) -> bool:
        """Move one page; returns False when nothing moved."""
        total = len(self.emails)
        if total == 0:
            return False

        if self.show_unsent_only:
            next_index = self.find_next_unsent(self.current_index, direction)
            if next_index is None:
                return False
            self.current_index = next_index
            return True

        step = 1 if direction == "next" else -1
        self.current_index = (self.current_index + step) % total
        return True

    def compose(self) -> ComposedMessage:
        email = self.current_email
        if not email:
            return ComposedMessage(to="", subject="", body="")
        applied = apply_template(self.template, email=email)
        return ComposedMessage(to=email, subject=applied.subject, body=applied.body)

    @property
    def current_is_sent(self) -> bool:
        email = self.current_email
        return bool(email) and self.tracker.is_sent(email)

    def toggle_sent(self) -> bool:
        """Flip the sent mark of the current address; returns the new state."""
        email = self.current_email
        if not email:
            return False
        return self.tracker.toggle(email)

    @property
    def sent_count(self) -> int:
        sent = self.tracker.get_sent_emails()
        return sum(1 for e in set(self.emails) if e.lower() in sent)

    @property
    def unsent_count(self) -> int:
        return len(self.emails) - self.sent_count

    def position_label(self) -> str:
        if not self.emails:
            return "0 / 0"
        label = f"{self.current_index + 1} / {len(self.emails)}"
        if self.show_unsent_only:
            label += f" (unsent: {self.unsent_count})"
        return label
