"""Shared fixtures: fixed clock, issue/comment factories, in-memory tracker."""

import threading
from datetime import UTC, datetime, timedelta
from typing import List

import pytest

from qa_retention.adapters.base import TrackerAdapter, TrackerError
from qa_retention.models import Comment, Issue
from qa_retention.retention.classifier import IssueClassifier
from qa_retention.retention.identity import BotIdentity
from qa_retention.retention.messages import WARNING_HEADER
from qa_retention.retention.policy import RetentionPolicy

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)
REPO = "owner/repo"
BOT_LOGIN = "github-actions[bot]"
HUMAN_LOGIN = "test-user"
WARNING_LABEL = "retention-warning"
RETENTION_HOURS = 48
INACTIVITY_THRESHOLD_HOURS = 24


def hours_ago(hours: float) -> datetime:
    return NOW - timedelta(hours=hours)


def make_comment(created_at: datetime | str | None, author: str = HUMAN_LOGIN, body: str = "Test comment") -> Comment:
    return Comment(body=body, author=author, created_at=created_at)


def warning_comment(created_at: datetime) -> Comment:
    return make_comment(created_at, author=BOT_LOGIN, body=f"{WARNING_HEADER}\n\nTest warning comment")


def make_issue(
    number: int,
    created_at: datetime | str | None,
    labels: List[str] | None = None,
    comments: List[Comment] | None = None,
    author: str = HUMAN_LOGIN,
    title: str | None = None,
) -> Issue:
    return Issue(
        number=number,
        title=title if title is not None else f"QA-Instance ready [Test Issue #{number}]",
        author=author,
        labels=labels or [],
        created_at=created_at,
        updated_at=created_at,
        comments=comments if comments is not None else [],
    )


class FakeTracker(TrackerAdapter):
    """In-memory tracker; records calls and can fail chosen operations."""

    def __init__(self, issues: List[Issue] | None = None) -> None:
        self._lock = threading.Lock()
        self.issues = {i.number: i.model_copy(update={"comments": None}) for i in issues or []}
        self.comments = {i.number: list(i.comments or []) for i in issues or []}
        self.labels = {i.number: list(i.labels) for i in issues or []}
        self.states = {i.number: "open" for i in issues or []}
        self.calls: List[tuple] = []
        self.fail_on: dict[tuple[str, int], Exception] = {}
        self._next_number = max(self.issues, default=0) + 1

    def _record(self, op: str, issue_number: int, *args: object) -> None:
        with self._lock:
            self.calls.append((op, issue_number, *args))
        exc = self.fail_on.get((op, issue_number))
        if exc is not None:
            raise exc
        if issue_number not in self.issues:
            raise TrackerError(f"404: Issue #{issue_number} not found", status_code=404)

    def calls_for(self, op: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == op]

    def list_open_issues(self, repo: str) -> List[Issue]:
        return self.list_issues(repo, state="open")

    def list_issues(self, repo: str, state: str = "all") -> List[Issue]:
        with self._lock:
            self.calls.append(("list_issues", 0, state))
        return [
            issue.model_copy(update={"labels": list(self.labels[n]), "state": self.states[n]})
            for n, issue in self.issues.items()
            if state == "all" or self.states[n] == state
        ]

    def get_issue_comments(self, repo: str, issue_number: int) -> List[Comment]:
        self._record("get_issue_comments", issue_number)
        return list(self.comments[issue_number])

    def create_comment(self, repo: str, issue_number: int, body: str) -> Comment:
        self._record("create_comment", issue_number, body)
        comment = make_comment(NOW, author=BOT_LOGIN, body=body)
        with self._lock:
            self.comments[issue_number].append(comment)
        return comment

    def add_labels(self, repo: str, issue_number: int, labels: List[str]) -> None:
        self._record("add_labels", issue_number, tuple(labels))
        with self._lock:
            for label in labels:
                if label not in self.labels[issue_number]:
                    self.labels[issue_number].append(label)

    def remove_label(self, repo: str, issue_number: int, label: str) -> None:
        self._record("remove_label", issue_number, label)
        with self._lock:
            self.labels[issue_number] = [lb for lb in self.labels[issue_number] if lb != label]

    def set_issue_state(self, repo: str, issue_number: int, state: str, state_reason: str | None = None) -> None:
        self._record("set_issue_state", issue_number, state, state_reason)
        with self._lock:
            self.states[issue_number] = state

    def create_issue(self, repo: str, title: str, body: str) -> Issue:
        with self._lock:
            number = self._next_number
            self._next_number += 1
            issue = Issue(number=number, title=title, body=body, author=BOT_LOGIN, created_at=NOW)
            self.issues[number] = issue
            self.comments[number] = []
            self.labels[number] = []
            self.states[number] = "open"
            self.calls.append(("create_issue", number, title))
        return issue


@pytest.fixture
def policy() -> RetentionPolicy:
    return RetentionPolicy(
        retention_hours=RETENTION_HOURS,
        inactivity_threshold_hours=INACTIVITY_THRESHOLD_HOURS,
        warning_label=WARNING_LABEL,
    )


@pytest.fixture
def is_bot() -> BotIdentity:
    return BotIdentity([BOT_LOGIN])


@pytest.fixture
def classifier(policy: RetentionPolicy, is_bot: BotIdentity) -> IssueClassifier:
    return IssueClassifier(policy, is_bot, clock=lambda: NOW)


ENV_KEYS = (
    "GITHUB_TOKEN",
    "GITHUB_TOKEN_FILE",
    "GITHUB_OWNER",
    "GITHUB_REPO",
    "GITHUB_API_URL",
    "RETENTION_HOURS",
    "INACTIVITY_THRESHOLD_HOURS",
    "WARNING_LABEL",
    "TITLE_MARKER",
    "REWARN_AFTER_RESCIND",
    "BOT_USERNAME",
    "BOT_ALIASES",
    "RUNNER_MAX_WORKERS",
    "RUNNER_CACHE_TTL_SECONDS",
    "LOGGING_LEVEL",
    "LOGGING_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings read from the host environment (e.g. CI) out of tests."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
