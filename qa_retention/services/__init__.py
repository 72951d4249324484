"""Services around the retention core (fetching, scenario seeding)."""

from qa_retention.services.issue_source import IssueSource

__all__ = ["IssueSource"]
