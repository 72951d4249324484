"""Retention state of an issue, computed on demand from its timeline."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class IssueState(BaseModel):
    """Derived retention state of one issue.

    has_warning is true only when the warning label and a bot-authored
    warning comment are both present.
    """

    model_config = ConfigDict(frozen=True)

    last_human_activity: datetime
    warning_date: datetime | None = None
    has_warning: bool = False
    hours_since_activity: float
    hours_since_warning: float | None = None

    @property
    def activity_after_warning(self) -> bool:
        """Human activity happened strictly after the warning comment."""
        if self.warning_date is None:
            return False
        return self.last_human_activity > self.warning_date
