"""Fetch layer: open QA instance issues with their comments.

Listings go through a TimedCache owned by the caller, so one run never
fetches the same listing twice while the cache entry is alive.
"""

import logging
from typing import List

from qa_retention.adapters.base import TrackerAdapter, TrackerError
from qa_retention.adapters.cache import TimedCache
from qa_retention.models import Comment, Issue

LOG = logging.getLogger("qa_retention.services.issue_source")

DEFAULT_TITLE_MARKER = "QA-Instance ready"


class IssueSource:
    """Reads issues and comments for one repository through a cache."""

    def __init__(
        self,
        adapter: TrackerAdapter,
        repo: str,
        cache: TimedCache | None = None,
        title_marker: str = DEFAULT_TITLE_MARKER,
    ) -> None:
        self._adapter = adapter
        self._repo = repo
        self._cache = cache or TimedCache()
        self._title_marker = title_marker

    def open_issues(self) -> List[Issue]:
        """All open issues in the repository (raises TrackerError on failure)."""
        return list(self._cache.get_or_load(("issues", self._repo), self._fetch_issues))

    def qa_instances(self) -> List[Issue]:
        """Open issues whose title contains the QA instance marker."""
        return [issue for issue in self.open_issues() if self._title_marker in issue.title]

    def comments(self, issue_number: int) -> List[Comment]:
        key = ("comments", self._repo, issue_number)
        return list(self._cache.get_or_load(key, lambda: self._fetch_comments(issue_number)))

    def with_comments(self, issues: List[Issue]) -> List[Issue]:
        """Copies of issues with comments attached.

        An issue whose comments cannot be fetched is left out of the
        result: no action is taken on an issue with unknown history.
        """
        result: List[Issue] = []
        for issue in issues:
            try:
                comments = self.comments(issue.number)
            except TrackerError as e:
                LOG.warning("Skipping issue #%s, failed to fetch comments: %s", issue.number, e)
                continue
            result.append(issue.model_copy(update={"comments": comments}))
        return result

    def qa_instances_with_comments(self) -> List[Issue]:
        return self.with_comments(self.qa_instances())

    def _fetch_issues(self) -> List[Issue]:
        try:
            issues = self._adapter.list_open_issues(self._repo)
        except TrackerError as e:
            LOG.error("Failed to fetch issues for %s: %s", self._repo, e)
            raise
        LOG.debug("Fetched %s open issues for %s", len(issues), self._repo)
        return issues

    def _fetch_comments(self, issue_number: int) -> List[Comment]:
        comments = self._adapter.get_issue_comments(self._repo, issue_number)
        LOG.debug("Fetched %s comments for issue #%s", len(comments), issue_number)
        return comments
