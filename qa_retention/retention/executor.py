"""Side-effecting retention actions: warn, close, rescind.

Each issue is handled independently; one failure never blocks or rolls back
another issue's action. Within one issue the comment is always posted
before the label or state change. No retries here; rate-limit retry lives
in the adapter.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List

from qa_retention.adapters.base import TrackerAdapter
from qa_retention.models import Issue, OperationResult
from qa_retention.retention.classifier import IssueClassifier
from qa_retention.retention.messages import (
    DEFAULT_WARNING_TEMPLATE,
    render_close_message,
    render_warning_message,
)

LOG = logging.getLogger("qa_retention.retention.executor")

CLOSED = "closed"
CLOSE_REASON = "completed"


class TransitionExecutor:
    """Applies warn/close/rescind transitions to issues on the tracker."""

    def __init__(
        self,
        adapter: TrackerAdapter,
        repo: str,
        classifier: IssueClassifier,
        max_workers: int = 4,
    ) -> None:
        self._adapter = adapter
        self._repo = repo
        self._classifier = classifier
        self._max_workers = max(1, max_workers)

    @property
    def warning_label(self) -> str:
        return self._classifier.policy.warning_label

    def apply_warnings(
        self,
        issues: List[Issue],
        message_template: str = DEFAULT_WARNING_TEMPLATE,
    ) -> List[OperationResult]:
        """Post the warning comment, then add the warning label, on each issue."""
        policy = self._classifier.policy
        body = render_warning_message(message_template, policy.retention_hours, policy.inactivity_threshold_hours)

        def warn(issue: Issue) -> None:
            self._adapter.create_comment(self._repo, issue.number, body)
            self._adapter.add_labels(self._repo, issue.number, [self.warning_label])
            LOG.debug("Added warning to issue #%s", issue.number)

        return self._fan_out(issues, warn, "warn")

    def apply_closures(self, issues: List[Issue]) -> List[OperationResult]:
        """Post the closing comment, then close, each issue."""
        threshold = self._classifier.policy.inactivity_threshold_hours

        def close(issue: Issue) -> None:
            state = self._classifier.classify(issue)
            message = render_close_message(state.last_human_activity, threshold)
            self._adapter.create_comment(self._repo, issue.number, message)
            self._adapter.set_issue_state(self._repo, issue.number, CLOSED, state_reason=CLOSE_REASON)
            LOG.debug("Closed inactive issue #%s", issue.number)

        return self._fan_out(issues, close, "close")

    def rescind_warning(self, issue: Issue) -> OperationResult:
        """Remove the warning label after new human activity."""

        def rescind(issue: Issue) -> None:
            self._adapter.remove_label(self._repo, issue.number, self.warning_label)
            LOG.debug("Removed warning label from issue #%s", issue.number)

        return self._run_one(rescind, issue, "rescind")

    def _run_one(self, action: Callable[[Issue], None], issue: Issue, name: str) -> OperationResult:
        try:
            action(issue)
        except Exception as e:
            # Any failure is confined to this issue and reported in the result
            LOG.warning("Failed to %s issue #%s: %s", name, issue.number, e)
            return OperationResult(issue_number=issue.number, success=False, error=str(e) or type(e).__name__)
        return OperationResult(issue_number=issue.number, success=True)

    def _fan_out(self, issues: List[Issue], action: Callable[[Issue], None], name: str) -> List[OperationResult]:
        """Run action for every issue in parallel; results follow input order."""
        if not issues:
            return []
        results: Dict[int, OperationResult] = {}
        workers = min(self._max_workers, len(issues))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_index = {
                executor.submit(self._run_one, action, issue, name): index for index, issue in enumerate(issues)
            }
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()
        return [results[index] for index in range(len(issues))]
