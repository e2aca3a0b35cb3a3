from __future__ import annotations

import pytest

from mailmerge.models.extraction_result import ExtractionResult, ExtractionStats
from mailmerge.models.template import ComposedMessage, Template
from mailmerge.services.sent_status import SentStatusTracker
from mailmerge.services.session import ReviewSession
from mailmerge.storage.kv_store import MemoryStore

TEMPLATE = Template(subject="Hello {{email}}", body="Dear {{email}},\nThanks.")


def _result(*emails: str) -> ExtractionResult:
    return ExtractionResult(
        emails=list(emails),
        detected_column="Email",
        stats=ExtractionStats(total=len(emails), valid=len(emails)),
    )


@pytest.fixture()
def tracker() -> SentStatusTracker:
    return SentStatusTracker(MemoryStore())


def test_initial_state(tracker):
    session = ReviewSession(_result("a@x.com", "b@x.com"), TEMPLATE, tracker)
    assert session.current_index == 0
    assert session.current_email == "a@x.com"
    assert session.position_label() == "1 / 2"


def test_paging_wraps_both_ways(tracker):
    session = ReviewSession(_result("a@x.com", "b@x.com", "c@x.com"), TEMPLATE, tracker)
    assert session.go_to_page("prev") is True
    assert session.current_email == "c@x.com"
    assert session.go_to_page("next") is True
    assert session.current_email == "a@x.com"
    session.go_to_page("next")
    assert session.current_index == 1


def test_paging_on_empty_list(tracker):
    session = ReviewSession(_result(), TEMPLATE, tracker)
    assert session.go_to_page("next") is False
    assert session.current_email == ""
    assert session.position_label() == "0 / 0"
    assert session.compose() == ComposedMessage(to="", subject="", body="")


def test_compose_applies_template(tracker):
    session = ReviewSession(_result("a@x.com"), TEMPLATE, tracker)
    message = session.compose()
    assert message == ComposedMessage(to="a@x.com", subject="Hello a@x.com", body="Dear a@x.com,\nThanks.")
    assert message.as_text().startswith("To: a@x.com\nSubject: Hello a@x.com\n\n")


def test_toggle_sent_and_counts(tracker):
    session = ReviewSession(_result("a@x.com", "b@x.com"), TEMPLATE, tracker)
    assert session.toggle_sent() is True
    assert session.current_is_sent
    assert session.sent_count == 1
    assert session.unsent_count == 1
    assert session.toggle_sent() is False
    assert session.sent_count == 0


def test_sent_count_ignores_addresses_outside_list(tracker):
    tracker.mark_as_sent("other@x.com")
    tracker.mark_as_sent("B@X.com")
    session = ReviewSession(_result("a@x.com", "b@x.com"), TEMPLATE, tracker)
    assert session.sent_count == 1


def test_unsent_only_skips_sent_addresses(tracker):
    tracker.mark_as_sent("b@x.com")
    session = ReviewSession(_result("a@x.com", "b@x.com", "c@x.com"), TEMPLATE, tracker, show_unsent_only=True)
    assert session.go_to_page("next") is True
    assert session.current_email == "c@x.com"
    assert session.go_to_page("prev") is True
    assert session.current_email == "a@x.com"
    assert session.position_label() == "1 / 3 (unsent: 2)"


def test_unsent_only_stays_when_everything_sent(tracker):
    for e in ("a@x.com", "b@x.com"):
        tracker.mark_as_sent(e)
    session = ReviewSession(_result("a@x.com", "b@x.com"), TEMPLATE, tracker, show_unsent_only=True)
    assert session.go_to_page("next") is False
    assert session.current_index == 0


def test_find_next_unsent_checks_start_last(tracker):
    tracker.mark_as_sent("b@x.com")
    tracker.mark_as_sent("c@x.com")
    session = ReviewSession(_result("a@x.com", "b@x.com", "c@x.com"), TEMPLATE, tracker)
    assert session.find_next_unsent(0, "next") == 0
    assert session.find_next_unsent(1, "next") == 0
    assert session.find_next_unsent(2, "prev") == 0


def test_find_next_unsent_empty(tracker):
    session = ReviewSession(_result(), TEMPLATE, tracker)
    assert session.find_next_unsent(0, "next") is None


def test_load_result_replaces_list_and_resets_index(tracker):
    session = ReviewSession(_result("a@x.com", "b@x.com"), TEMPLATE, tracker)
    session.go_to_page("next")
    session.load_result(_result("z@x.com"))
    assert session.current_index == 0
    assert session.emails == ["z@x.com"]
