"""End-to-end retention pass against an in-memory tracker."""

from unittest.mock import patch

import pytest
from conftest import (
    NOW,
    WARNING_LABEL,
    FakeTracker,
    hours_ago,
    make_comment,
    make_issue,
    warning_comment,
)

from qa_retention.adapters.base import TrackerError
from qa_retention.config import AppConfig, GitHubConfig
from qa_retention.exceptions import ConfigError
from qa_retention.runner import RunReport, run_retention_check


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(github=GitHubConfig(token="ghp_test", owner="owner", repo="repo"))


def _seeded_tracker() -> FakeTracker:
    return FakeTracker(
        [
            make_issue(1, hours_ago(1)),
            make_issue(2, hours_ago(50)),
            make_issue(3, hours_ago(100), labels=[WARNING_LABEL], comments=[warning_comment(hours_ago(25))]),
            make_issue(
                4,
                hours_ago(100),
                labels=[WARNING_LABEL],
                comments=[warning_comment(hours_ago(25)), make_comment(hours_ago(1))],
            ),
            make_issue(
                5,
                hours_ago(100),
                comments=[make_comment(hours_ago(80)), make_comment(hours_ago(60)), make_comment(hours_ago(10))],
            ),
            make_issue(6, hours_ago(500), title="Flaky login test"),
        ]
    )


def test_full_pass_applies_each_transition(config: AppConfig) -> None:
    """Fresh is untouched, expired is warned, stale warning closed, answered warning rescinded."""
    tracker = _seeded_tracker()

    report = run_retention_check(config, adapter=tracker, clock=lambda: NOW)

    assert report.total_open_issues == 6
    assert report.qa_instances == 5
    assert [r.issue_number for r in report.warnings] == [2]
    assert [r.issue_number for r in report.closures] == [3]
    assert [r.issue_number for r in report.rescinded] == [4]
    assert report.warnings_count == (1, 0)
    assert report.closures_count == (1, 0)
    assert report.failed == 0

    assert tracker.labels[2] == [WARNING_LABEL]
    assert tracker.states[3] == "closed"
    assert tracker.labels[4] == []
    assert tracker.states[4] == "open"
    for untouched in (1, 5, 6):
        assert [c for c in tracker.calls if c[1] == untouched and c[0] != "get_issue_comments"] == []


def test_second_pass_is_quiet(config: AppConfig) -> None:
    """Right after a pass, a new pass finds nothing to do."""
    tracker = _seeded_tracker()
    run_retention_check(config, adapter=tracker, clock=lambda: NOW)

    report = run_retention_check(config, adapter=tracker, clock=lambda: NOW)

    assert report.qa_instances == 4
    assert report.warnings == []
    assert report.closures == []
    assert report.rescinded == []


def test_per_issue_failure_is_reported(config: AppConfig) -> None:
    """A failing warning is counted; other transitions still happen."""
    tracker = _seeded_tracker()
    tracker.fail_on[("create_comment", 2)] = TrackerError("500: Server Error", status_code=500)

    report = run_retention_check(config, adapter=tracker, clock=lambda: NOW)

    assert report.warnings_count == (0, 1)
    assert report.closures_count == (1, 0)
    assert report.failed == 1
    assert tracker.states[3] == "closed"


def test_failed_rescind_is_reported(config: AppConfig) -> None:
    """Rescind failures land in the report without stopping the pass."""
    tracker = _seeded_tracker()
    tracker.fail_on[("remove_label", 4)] = TrackerError("404: Label does not exist", status_code=404)

    report = run_retention_check(config, adapter=tracker, clock=lambda: NOW)

    assert [r.success for r in report.rescinded] == [False]
    assert report.failed == 1
    assert [r.issue_number for r in report.warnings] == [2]


def test_issue_in_both_sets_is_only_warned(config: AppConfig) -> None:
    """An issue selected for warning is not closed in the same pass."""
    tracker = _seeded_tracker()
    with patch(
        "qa_retention.runner.select_issues_needing_closure",
        side_effect=lambda issues, classifier: [i for i in issues if i.number in (2, 3)],
    ):
        report = run_retention_check(config, adapter=tracker, clock=lambda: NOW)

    assert [r.issue_number for r in report.warnings] == [2]
    assert [r.issue_number for r in report.closures] == [3]
    assert tracker.states[2] == "open"


def test_listing_failure_is_fatal(config: AppConfig) -> None:
    """If issues cannot be listed the pass raises before any action."""
    tracker = _seeded_tracker()

    def fail(repo: str, state: str = "all") -> list:
        raise TrackerError("401: Bad credentials", status_code=401)

    tracker.list_issues = fail
    with pytest.raises(TrackerError):
        run_retention_check(config, adapter=tracker, clock=lambda: NOW)
    assert tracker.calls == []


def test_invalid_config_refused(config: AppConfig) -> None:
    """Config is validated before any tracker call."""
    tracker = _seeded_tracker()
    bad = config.model_copy(update={"github": GitHubConfig(token="ghp_test", owner="owner", repo="")})
    with pytest.raises(ConfigError):
        run_retention_check(bad, adapter=tracker, clock=lambda: NOW)
    assert tracker.calls == []


def test_run_report_counts() -> None:
    """RunReport counts succeeded and failed results."""
    report = RunReport.model_validate(
        {
            "warnings": [{"issue_number": 1, "success": True}, {"issue_number": 2, "success": False, "error": "x"}],
            "closures": [{"issue_number": 3, "success": False, "error": "y"}],
        }
    )
    assert report.warnings_count == (1, 1)
    assert report.closures_count == (0, 1)
    assert report.failed == 2
