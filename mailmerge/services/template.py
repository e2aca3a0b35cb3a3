from __future__ import annotations

import json
import logging

from ..models.template import Template
from ..storage.kv_store import KeyValueStore

"""Template placeholder substitution and persistence.

Placeholders:
    {{email}}  recipient address (left as-is when no address is given)
    {{name}}   recipient name (empty string when absent)
"""

__all__ = [
    "EMAIL_TOKEN",
    "NAME_TOKEN",
    "TEMPLATE_STORAGE_KEY",
    "apply_template",
    "TemplateRepository",
]

logger = logging.getLogger(__name__)

EMAIL_TOKEN = "{{email}}"
NAME_TOKEN = "{{name}}"

TEMPLATE_STORAGE_KEY = "mail_template"


def apply_template(template: Template, email: str | None = None, name: str | None = None) -> Template:
    subject = template.subject
    body = template.body

    if email:
        subject = subject.replace(EMAIL_TOKEN, email)
        body = body.replace(EMAIL_TOKEN, email)

    # {{name}} は値が無ければ空文字
    name = name or ""
    subject = subject.replace(NAME_TOKEN, name)
    body = body.replace(NAME_TOKEN, name)

    return Template(subject=subject, body=body)


class TemplateRepository:
    """Save / load the working template through a key-value store."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def save(self, template: Template) -> None:
        payload = {"subject": template.subject, "body": template.body}
        self._store.set(TEMPLATE_STORAGE_KEY, json.dumps(payload, ensure_ascii=False))

    def load(self) -> Template | None:
        """Return the stored template, or None when absent or unreadable."""
        stored = self._store.get(TEMPLATE_STORAGE_KEY)
        if not stored:
            return None
        try:
            data = json.loads(stored)
        except json.JSONDecodeError as e:
            logger.warning(f"stored template ignored (invalid JSON): {e}")
            return None
        if not isinstance(data, dict):
            logger.warning("stored template ignored (not an object)")
            return None
        subject = data.get("subject", "")
        body = data.get("body", "")
        if not isinstance(subject, str) or not isinstance(body, str):
            logger.warning("stored template ignored (subject/body must be strings)")
            return None
        return Template(subject=subject, body=body)
