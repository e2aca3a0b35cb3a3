from __future__ import annotations

from dataclasses import dataclass

"""Template and composed message models."""

__all__ = [
    "Template",
    "ComposedMessage",
]


@dataclass(frozen=True)
class Template:
    """Subject/body pair containing ``{{email}}`` / ``{{name}}`` placeholders."""
    subject: str = ""
    body: str = ""


@dataclass(frozen=True)
class ComposedMessage:
    """Template applied to a single recipient."""
    to: str
    subject: str
    body: str

    def as_text(self) -> str:
        """Render the "copy all" payload."""
        return f"To: {self.to}\nSubject: {self.subject}\n\n{self.body}"
