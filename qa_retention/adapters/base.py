"""Abstract base for issue tracker adapters."""

from abc import ABC, abstractmethod
from typing import List

from qa_retention.models import Comment, Issue


class TrackerError(Exception):
    """Raised when an issue tracker API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TrackerAdapter(ABC):
    """Interface to the issue tracker holding QA instance issues."""

    @abstractmethod
    def list_open_issues(self, repo: str) -> List[Issue]:
        """List open issues (exclude PRs), without comments."""
        ...

    @abstractmethod
    def get_issue_comments(self, repo: str, issue_number: int) -> List[Comment]:
        """Fetch all comments on an issue."""
        ...

    @abstractmethod
    def create_comment(self, repo: str, issue_number: int, body: str) -> Comment:
        """Post a comment on an issue."""
        ...

    @abstractmethod
    def add_labels(self, repo: str, issue_number: int, labels: List[str]) -> None:
        """Add labels to an issue (keeps existing ones)."""
        ...

    @abstractmethod
    def remove_label(self, repo: str, issue_number: int, label: str) -> None:
        """Remove one label from an issue."""
        ...

    @abstractmethod
    def set_issue_state(
        self,
        repo: str,
        issue_number: int,
        state: str,
        state_reason: str | None = None,
    ) -> None:
        """Open or close an issue."""
        ...

    def create_issue(self, repo: str, title: str, body: str) -> Issue:
        """Create an issue. Override if needed."""
        raise NotImplementedError("create_issue")

    def list_issues(self, repo: str, state: str = "all") -> List[Issue]:
        """List issues in any state (exclude PRs). Override if needed."""
        raise NotImplementedError("list_issues")
