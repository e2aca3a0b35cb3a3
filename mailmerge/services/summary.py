from __future__ import annotations

from ..models.extraction_result import ExtractionResult

"""SUMMARY line rendering for extraction statistics."""


def render_summary_line(result: ExtractionResult) -> str:
    """Render a SUMMARY line from an ExtractionResult.

    Format:
    SUMMARY total={total} valid={valid} invalid={invalid} duplicates={duplicates} empty={empty}

    Examples:
        >>> from mailmerge.models import ExtractionResult, ExtractionStats
        >>> stats = ExtractionStats(total=2, valid=1, invalid=0, duplicates=1, empty=0)
        >>> render_summary_line(ExtractionResult(emails=["a@x.com"], stats=stats))
        'SUMMARY total=2 valid=1 invalid=0 duplicates=1 empty=0'
    """
    s = result.stats
    return (
        f"SUMMARY total={s.total} "
        f"valid={s.valid} "
        f"invalid={s.invalid} "
        f"duplicates={s.duplicates} "
        f"empty={s.empty}"
    )


def render_detected_column(result: ExtractionResult) -> str:
    if result.detected_column is None:
        return "no email column detected; scanned all cells"
    return f"detected column: {result.detected_column}"
