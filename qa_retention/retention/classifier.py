"""Retention state of an issue from its timeline and labels.

Lifecycle (recomputed every run, never persisted):
fresh -> expired (idle past retention_hours) -> warned (label + bot warning
comment) -> closed. New human activity after the warning takes a warned
issue back to fresh by removing the label.
"""

import logging
from datetime import UTC, datetime
from typing import Callable

from qa_retention.exceptions import ClassificationError
from qa_retention.models import Issue, IssueState
from qa_retention.retention.identity import ActorClassifier
from qa_retention.retention.policy import RetentionPolicy
from qa_retention.retention.timeline import bot_warnings, build_timeline, human_activities
from qa_retention.utils import ensure_utc, hours_between

LOG = logging.getLogger("qa_retention.retention.classifier")

Clock = Callable[[], datetime]

FRESH = "fresh"
EXPIRED = "expired"
WARNED = "warned"


def utc_now() -> datetime:
    return datetime.now(UTC)


class IssueClassifier:
    """Derives IssueState for issues under one retention policy.

    Args:
        policy: Thresholds and warning label. Validated here; malformed
            thresholds raise RetentionConfigError before any issue is
            classified.
        is_bot: Tells the automation identity apart from humans.
        clock: Returns the current time; read once per classify call.
    """

    def __init__(self, policy: RetentionPolicy, is_bot: ActorClassifier, clock: Clock | None = None) -> None:
        policy.validate_thresholds()
        self.policy = policy
        self.is_bot = is_bot
        self._clock = clock or utc_now

    def classify(self, issue: Issue) -> IssueState:
        """Compute the retention state of one issue (comments attached).

        Raises:
            ClassificationError: If the issue has no readable creation
                timestamp.
        """
        if issue.created_at is None:
            raise ClassificationError(f"Issue #{issue.number} has no readable creation timestamp")

        now = ensure_utc(self._clock())
        timeline = build_timeline(issue, self.is_bot)

        warnings = bot_warnings(timeline)
        warning_date = warnings[-1].timestamp if warnings else None
        has_label = issue.has_label(self.policy.warning_label)

        humans = human_activities(timeline)
        last_human_activity = humans[-1].timestamp if humans else issue.created_at

        state = IssueState(
            last_human_activity=last_human_activity,
            warning_date=warning_date,
            has_warning=has_label and warning_date is not None,
            hours_since_activity=hours_between(last_human_activity, now),
            hours_since_warning=hours_between(warning_date, now) if warning_date is not None else None,
        )
        if has_label and warning_date is None:
            LOG.debug(
                "Issue #%s has label %s but no warning comment; treated as unwarned",
                issue.number,
                self.policy.warning_label,
            )
        return state

    def lifecycle(self, state: IssueState) -> str:
        """Name the lifecycle stage of an open issue for reporting."""
        if state.has_warning and not state.activity_after_warning:
            return WARNED
        if state.hours_since_activity > self.policy.retention_hours:
            return EXPIRED
        return FRESH
