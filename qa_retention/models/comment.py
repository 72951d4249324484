"""Comment on a QA instance issue."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from qa_retention.utils import parse_timestamp


class Comment(BaseModel):
    """Comment on an issue.

    created_at is None when the tracker returned an unreadable timestamp;
    such comments never count as activity.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    body: str = ""
    author: str
    created_at: datetime | None
    updated_at: datetime | None = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: object) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("body", mode="before")
    @classmethod
    def _body_or_empty(cls, value: object) -> object:
        return "" if value is None else value
