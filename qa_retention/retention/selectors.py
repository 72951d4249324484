"""Selection of issues to warn and to close from one snapshot.

Both selectors read the same snapshot and never mutate it. The expiry
selector also rescinds stale warnings through the callback it is given.
"""

import logging
from typing import Callable, Iterable, List

from qa_retention.exceptions import ClassificationError
from qa_retention.models import Issue, IssueState, OperationResult
from qa_retention.retention.classifier import IssueClassifier

LOG = logging.getLogger("qa_retention.retention.selectors")

RescindAction = Callable[[Issue], OperationResult]


def _classify(classifier: IssueClassifier, issue: Issue) -> IssueState | None:
    try:
        state = classifier.classify(issue)
    except ClassificationError as e:
        LOG.warning("Skipping issue #%s: %s", issue.number, e)
        return None
    LOG.debug(
        "Issue #%s: %s, idle %.2fh",
        issue.number,
        classifier.lifecycle(state),
        state.hours_since_activity,
    )
    return state


def select_issues_needing_warning(
    issues: Iterable[Issue],
    classifier: IssueClassifier,
    rescind: RescindAction,
) -> List[Issue]:
    """Return issues idle past the retention threshold that have no warning.

    An issue whose warning is followed by human activity gets the warning
    rescinded (label removed) and, under the default policy, is not warned
    again in the same pass: the new activity restarts its retention clock.
    With policy.rewarn_after_rescind it is re-evaluated as unwarned right away.
    Rescind failures are logged and do not stop the batch.
    """
    policy = classifier.policy
    selected: List[Issue] = []
    for issue in issues:
        state = _classify(classifier, issue)
        if state is None:
            continue

        has_warning = state.has_warning
        if has_warning and state.activity_after_warning:
            LOG.info(
                "Issue #%s: activity at %s after warning at %s, removing warning",
                issue.number,
                state.last_human_activity.isoformat(),
                state.warning_date.isoformat() if state.warning_date else None,
            )
            result = rescind(issue)
            if not result.success:
                LOG.warning("Failed to remove warning label from issue #%s: %s", issue.number, result.error)
            if not policy.rewarn_after_rescind:
                continue
            has_warning = False

        if state.hours_since_activity > policy.retention_hours and not has_warning:
            LOG.debug("Issue #%s: idle %.2fh, needs warning", issue.number, state.hours_since_activity)
            selected.append(issue)
    return selected


def select_issues_needing_closure(issues: Iterable[Issue], classifier: IssueClassifier) -> List[Issue]:
    """Return warned issues with no human activity since the warning for at
    least the inactivity threshold."""
    threshold = classifier.policy.inactivity_threshold_hours
    selected: List[Issue] = []
    for issue in issues:
        state = _classify(classifier, issue)
        if state is None or not state.has_warning or state.activity_after_warning:
            continue
        if state.hours_since_warning is not None and state.hours_since_warning >= threshold:
            LOG.debug("Issue #%s: warned %.2fh ago, needs closing", issue.number, state.hours_since_warning)
            selected.append(issue)
    return selected


def exclude_issues(issues: Iterable[Issue], excluded: Iterable[Issue]) -> List[Issue]:
    """Drop issues whose number appears in excluded (e.g. just warned)."""
    excluded_numbers = {issue.number for issue in excluded}
    return [issue for issue in issues if issue.number not in excluded_numbers]
