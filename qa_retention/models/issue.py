"""QA instance issue model."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from qa_retention.models.comment import Comment
from qa_retention.utils import parse_timestamp


class Issue(BaseModel):
    """Issue representing one provisioned QA environment.

    Snapshot taken at the start of a run; never mutated in place. The
    comments list is None until the issue source attaches it.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    body: str = ""
    author: str
    labels: List[str] = Field(default_factory=list)
    state: str = "open"
    created_at: datetime | None
    updated_at: datetime | None = None
    comments: List[Comment] | None = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: object) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("body", mode="before")
    @classmethod
    def _body_or_empty(cls, value: object) -> object:
        return "" if value is None else value

    def has_label(self, name: str) -> bool:
        return name in self.labels
