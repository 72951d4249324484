"""Tests for IssueSource (cached fetch layer)."""

import pytest
from conftest import REPO, FakeTracker, hours_ago, make_comment, make_issue

from qa_retention.adapters.base import TrackerError
from qa_retention.adapters.cache import TimedCache
from qa_retention.services.issue_source import IssueSource


def _tracker() -> FakeTracker:
    return FakeTracker(
        [
            make_issue(1, hours_ago(10), comments=[make_comment(hours_ago(5))]),
            make_issue(2, hours_ago(10), title="Unrelated bug report"),
            make_issue(3, hours_ago(60), title="[deploy] QA-Instance ready for PR 17"),
        ]
    )


def test_qa_instances_filters_by_title_marker() -> None:
    """Only titles containing the marker are QA instances."""
    source = IssueSource(_tracker(), REPO)
    assert [i.number for i in source.open_issues()] == [1, 2, 3]
    assert [i.number for i in source.qa_instances()] == [1, 3]


def test_custom_title_marker() -> None:
    """The title marker is configurable."""
    source = IssueSource(_tracker(), REPO, title_marker="Unrelated")
    assert [i.number for i in source.qa_instances()] == [2]


def test_listing_is_cached() -> None:
    """Repeated reads within the TTL hit the tracker once."""
    tracker = _tracker()
    source = IssueSource(tracker, REPO, cache=TimedCache(300))
    source.open_issues()
    source.qa_instances()
    source.comments(1)
    source.comments(1)
    assert len(tracker.calls_for("list_issues")) == 1
    assert len(tracker.calls_for("get_issue_comments")) == 1


def test_with_comments_attaches_copies() -> None:
    """Comments are attached to copies; originals stay without comments."""
    tracker = _tracker()
    source = IssueSource(tracker, REPO)
    issues = source.qa_instances()
    attached = source.with_comments(issues)
    assert [len(i.comments) for i in attached] == [1, 0]
    assert all(i.comments is None for i in issues)


def test_comment_fetch_failure_skips_issue() -> None:
    """An issue whose comments cannot be fetched is left out."""
    tracker = _tracker()
    tracker.fail_on[("get_issue_comments", 1)] = TrackerError("500: Server Error", status_code=500)
    source = IssueSource(tracker, REPO)
    assert [i.number for i in source.qa_instances_with_comments()] == [3]


def test_listing_failure_propagates() -> None:
    """A failed issue listing is raised, not swallowed."""
    tracker = _tracker()

    def fail(repo: str, state: str = "all") -> list:
        raise TrackerError("401: Bad credentials", status_code=401)

    tracker.list_issues = fail
    source = IssueSource(tracker, REPO)
    with pytest.raises(TrackerError, match="Bad credentials"):
        source.qa_instances()
