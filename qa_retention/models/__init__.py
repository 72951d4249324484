"""Data models for issues, comments and retention state (Pydantic)."""

from qa_retention.models.activity import Activity, ActivityKind
from qa_retention.models.comment import Comment
from qa_retention.models.issue import Issue
from qa_retention.models.issue_state import IssueState
from qa_retention.models.operation_result import OperationResult

__all__ = ["Activity", "ActivityKind", "Comment", "Issue", "IssueState", "OperationResult"]
