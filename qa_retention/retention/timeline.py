"""Activity timeline of an issue: creation plus comments, oldest first."""

import logging
from typing import List

from qa_retention.models import Activity, Issue
from qa_retention.retention.identity import ActorClassifier
from qa_retention.retention.messages import is_warning_body

LOG = logging.getLogger("qa_retention.retention.timeline")


def build_timeline(issue: Issue, is_bot: ActorClassifier) -> List[Activity]:
    """Turn an issue's creation and comments into activities sorted by time.

    Comments without a readable timestamp are left out. The sort is stable,
    so activities with equal timestamps keep creation-then-comment order.
    """
    activities: List[Activity] = []
    if issue.created_at is not None:
        activities.append(Activity(timestamp=issue.created_at, kind="creation", is_bot=is_bot(issue.author)))

    for comment in issue.comments or []:
        if comment.created_at is None:
            LOG.debug("Issue #%s: ignoring comment by %s with unreadable timestamp", issue.number, comment.author)
            continue
        activities.append(
            Activity(
                timestamp=comment.created_at,
                kind="comment",
                is_bot=is_bot(comment.author),
                is_warning=is_warning_body(comment.body),
            )
        )

    activities.sort(key=lambda a: a.timestamp)
    return activities


def human_activities(timeline: List[Activity]) -> List[Activity]:
    """Activities that count as a human response.

    Warning comments are bot noise even when someone other than the bot
    posted them.
    """
    return [a for a in timeline if not a.is_bot and not a.is_warning]


def bot_warnings(timeline: List[Activity]) -> List[Activity]:
    """Warning comments posted by the bot, oldest first."""
    return [a for a in timeline if a.kind == "comment" and a.is_bot and a.is_warning]
