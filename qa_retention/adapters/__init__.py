"""Issue tracker adapters (base, GitHub) and the fetch cache."""

from qa_retention.adapters.base import TrackerAdapter, TrackerError
from qa_retention.adapters.cache import TimedCache
from qa_retention.adapters.github import GitHubAdapter

__all__ = ["GitHubAdapter", "TimedCache", "TrackerAdapter", "TrackerError"]
