"""Retention decision engine: timeline, classifier, selectors, executor."""

from qa_retention.retention.classifier import IssueClassifier
from qa_retention.retention.executor import TransitionExecutor
from qa_retention.retention.identity import BotIdentity
from qa_retention.retention.messages import DEFAULT_WARNING_TEMPLATE, WARNING_MARKER
from qa_retention.retention.policy import RetentionPolicy
from qa_retention.retention.selectors import (
    exclude_issues,
    select_issues_needing_closure,
    select_issues_needing_warning,
)
from qa_retention.retention.timeline import build_timeline

__all__ = [
    "DEFAULT_WARNING_TEMPLATE",
    "WARNING_MARKER",
    "BotIdentity",
    "IssueClassifier",
    "RetentionPolicy",
    "TransitionExecutor",
    "build_timeline",
    "exclude_issues",
    "select_issues_needing_closure",
    "select_issues_needing_warning",
]
