"""Seed a live repository with retention test scenarios.

Creates one issue per scenario with real comments spaced a few seconds
apart, so a following retention run with tiny thresholds (e.g.
RETENTION_HOURS=0.02, INACTIVITY_THRESHOLD_HOURS=0.01) exercises every
transition. Previous scenario issues (title containing "[test-") are closed
first.
"""

import logging
import time
from typing import Callable, Dict, NamedTuple

from qa_retention.adapters.base import TrackerAdapter
from qa_retention.models import Issue
from qa_retention.retention.messages import WARNING_HEADER

LOG = logging.getLogger("qa_retention.services.scenarios")

TEST_TITLE_TAG = "[test-"
STEP_SECONDS = 5
SETTLE_SECONDS = 60


class Scenario(NamedTuple):
    tag: str
    body: str


SCENARIOS: Dict[str, Scenario] = {
    "fresh": Scenario("test-fresh", "Test scenario: Fresh instance that should not get warning"),
    "expired": Scenario("test-expired", "Test scenario: Old instance that should get warning"),
    "warned_inactive": Scenario(
        "test-warned-inactive",
        "Test scenario: Warned instance with no activity that should auto-close",
    ),
    "warned_active": Scenario(
        "test-warned-active",
        "Test scenario: Warned instance with recent activity that should have warning removed",
    ),
    "multiple_activities": Scenario(
        "test-multiple-activities",
        "Test scenario: Instance with multiple activities to test retention timer reset",
    ),
}


def cleanup_test_issues(adapter: TrackerAdapter, repo: str) -> int:
    """Close every open issue left over from earlier scenario runs."""
    closed = 0
    for issue in adapter.list_issues(repo, state="all"):
        if TEST_TITLE_TAG not in issue.title or issue.state != "open":
            continue
        adapter.set_issue_state(repo, issue.number, "closed")
        closed += 1
    LOG.info("Cleaned up %s test issues", closed)
    return closed


def setup_scenarios(
    adapter: TrackerAdapter,
    repo: str,
    title_marker: str,
    warning_label: str,
    step_seconds: float = STEP_SECONDS,
    settle_seconds: float = SETTLE_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
    human: TrackerAdapter | None = None,
) -> Dict[str, Issue]:
    """Create all scenarios and wait for their timestamps to settle.

    The adapter must authenticate as the bot identity, since the warnings it
    posts here have to be recognised as bot warnings. Follow-up comments
    that should count as human activity are posted through human (a second
    adapter with a non-bot token); without it they come from the bot too.

    Returns:
        Created issues keyed by scenario name.
    """
    human = human or adapter
    cleanup_test_issues(adapter, repo)

    def create(name: str) -> Issue:
        scenario = SCENARIOS[name]
        issue = adapter.create_issue(repo, f"{title_marker} [{scenario.tag}]", scenario.body)
        LOG.info("Created issue #%s for scenario %s", issue.number, name)
        return issue

    def warn(issue: Issue) -> None:
        adapter.create_comment(repo, issue.number, f"{WARNING_HEADER}\n\nTest warning comment")
        adapter.add_labels(repo, issue.number, [warning_label])
        LOG.info("Added warning to issue #%s", issue.number)

    created: Dict[str, Issue] = {}

    created["fresh"] = create("fresh")

    created["expired"] = create("expired")
    sleep(step_seconds)

    created["warned_inactive"] = create("warned_inactive")
    sleep(step_seconds)
    warn(created["warned_inactive"])

    created["warned_active"] = create("warned_active")
    sleep(step_seconds)
    warn(created["warned_active"])
    sleep(step_seconds)
    human.create_comment(repo, created["warned_active"].number, "Keeping this QA instance active!")

    created["multiple_activities"] = create("multiple_activities")
    for text in ("First activity", "Second activity", "Third activity"):
        sleep(step_seconds)
        human.create_comment(repo, created["multiple_activities"].number, text)

    LOG.info("All test scenarios created, waiting %ss for timestamps to settle", settle_seconds)
    if settle_seconds > 0:
        sleep(settle_seconds)
    return created
