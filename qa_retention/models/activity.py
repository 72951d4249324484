"""Dated, actor-tagged activity derived from an issue's history."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

ActivityKind = Literal["creation", "comment"]


class Activity(BaseModel):
    """One entry of an issue's activity timeline (never persisted)."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    kind: ActivityKind
    is_bot: bool
    # Comment body carries the warning marker
    is_warning: bool = False
