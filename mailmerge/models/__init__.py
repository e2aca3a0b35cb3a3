"""Domain models for the CSV mail merge tool.

Frozen dataclasses shared between the table reader, the extraction pipeline
and the review session.
"""

from .extraction_result import ExtractionOptions, ExtractionResult, ExtractionStats
from .table_data import TableData
from .template import ComposedMessage, Template

__all__ = [
    # Extraction models
    "ExtractionOptions",
    "ExtractionResult",
    "ExtractionStats",
    # Table models
    "TableData",
    # Template models
    "Template",
    "ComposedMessage",
]
