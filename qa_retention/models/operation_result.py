"""Outcome of a warn, close or rescind action on one issue."""

from pydantic import BaseModel


class OperationResult(BaseModel):
    """Per-issue outcome; failures carry the error message."""

    issue_number: int
    success: bool
    error: str | None = None
