"""CSV/TSV contacts -> one-at-a-time mail merge review tool.

Public API:
-----------
Extraction:
    is_valid_email(value) -> bool
    detect_email_column(headers, rows) -> str | None
    extract_emails(headers, rows, options) -> ExtractionResult
    parse_file_and_extract_emails(path, options) -> ExtractionResult

Template / review:
    apply_template(template, email=None, name=None) -> Template
    ReviewSession, SentStatusTracker, TemplateRepository
"""

from mailmerge.extraction.column_detector import detect_email_column
from mailmerge.extraction.pipeline import (
    EmptyTableError,
    extract_emails,
    parse_csv_and_extract_emails,
    parse_file_and_extract_emails,
    parse_tsv_and_extract_emails,
)
from mailmerge.extraction.validator import is_valid_email
from mailmerge.models import ExtractionOptions, ExtractionResult, ExtractionStats, Template
from mailmerge.services.sent_status import SentStatusTracker
from mailmerge.services.session import ReviewSession
from mailmerge.services.template import TemplateRepository, apply_template

__all__ = [
    # Extraction
    "is_valid_email",
    "detect_email_column",
    "extract_emails",
    "parse_csv_and_extract_emails",
    "parse_tsv_and_extract_emails",
    "parse_file_and_extract_emails",
    "EmptyTableError",
    # Models
    "ExtractionOptions",
    "ExtractionResult",
    "ExtractionStats",
    "Template",
    # Review
    "apply_template",
    "TemplateRepository",
    "SentStatusTracker",
    "ReviewSession",
]
