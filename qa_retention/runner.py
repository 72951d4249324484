"""One retention pass over the repository's QA instance issues.

Fetch a snapshot, rescind stale warnings, pick issues to warn and to close,
then run both batches concurrently and report success/failure counts.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List

from pydantic import BaseModel, Field

from qa_retention.adapters.base import TrackerAdapter
from qa_retention.adapters.cache import TimedCache
from qa_retention.adapters.github import GitHubAdapter
from qa_retention.config import AppConfig, validate_config
from qa_retention.models import Issue, OperationResult
from qa_retention.retention.classifier import Clock, IssueClassifier
from qa_retention.retention.executor import TransitionExecutor
from qa_retention.retention.identity import BotIdentity
from qa_retention.retention.messages import DEFAULT_WARNING_TEMPLATE
from qa_retention.retention.policy import RetentionPolicy
from qa_retention.retention.selectors import (
    exclude_issues,
    select_issues_needing_closure,
    select_issues_needing_warning,
)
from qa_retention.services.issue_source import IssueSource

LOG = logging.getLogger("qa_retention.runner")


class RunReport(BaseModel):
    """Outcome of one retention pass."""

    total_open_issues: int = 0
    qa_instances: int = 0
    rescinded: List[OperationResult] = Field(default_factory=list)
    warnings: List[OperationResult] = Field(default_factory=list)
    closures: List[OperationResult] = Field(default_factory=list)

    @staticmethod
    def _count(results: List[OperationResult]) -> tuple[int, int]:
        succeeded = sum(1 for r in results if r.success)
        return succeeded, len(results) - succeeded

    @property
    def warnings_count(self) -> tuple[int, int]:
        return self._count(self.warnings)

    @property
    def closures_count(self) -> tuple[int, int]:
        return self._count(self.closures)

    @property
    def failed(self) -> int:
        return sum(self._count(results)[1] for results in (self.rescinded, self.warnings, self.closures))


def _log_failures(results: List[OperationResult], action: str) -> None:
    for r in results:
        if not r.success:
            LOG.error("Failed to %s issue #%s: %s", action, r.issue_number, r.error)


def process_warnings(
    executor: TransitionExecutor,
    issues: List[Issue],
    message_template: str = DEFAULT_WARNING_TEMPLATE,
) -> List[OperationResult]:
    """Warn expired instances and log the outcome."""
    if not issues:
        LOG.info("No expired instances need warnings")
        return []
    LOG.info("Adding warnings to %s expired instances...", len(issues))
    results = executor.apply_warnings(issues, message_template)
    succeeded = sum(1 for r in results if r.success)
    LOG.info("Warning results: %s succeeded, %s failed", succeeded, len(results) - succeeded)
    _log_failures(results, "warn")
    return results


def process_closures(executor: TransitionExecutor, issues: List[Issue]) -> List[OperationResult]:
    """Close inactive warned instances and log the outcome."""
    if not issues:
        LOG.info("No inactive warned issues to close")
        return []
    LOG.info("Found %s inactive warned issues to close...", len(issues))
    results = executor.apply_closures(issues)
    succeeded = sum(1 for r in results if r.success)
    LOG.info("Closing results: %s succeeded, %s failed", succeeded, len(results) - succeeded)
    _log_failures(results, "close")
    return results


def run_retention_check(
    config: AppConfig,
    adapter: TrackerAdapter | None = None,
    clock: Clock | None = None,
    message_template: str = DEFAULT_WARNING_TEMPLATE,
) -> RunReport:
    """Run one retention pass.

    Per-issue failures are reported in the returned RunReport. Config
    errors and a failure to list issues propagate: the run cannot start.

    Args:
        config: Loaded application config (validated here).
        adapter: Tracker adapter; a GitHubAdapter from config when None.
        clock: Current-time source for the classifier.
        message_template: Warning comment template.
    """
    validate_config(config)
    repo = config.github.repository
    if adapter is None:
        adapter = GitHubAdapter(token=config.github_token_resolved or "", api_url=config.github.api_url)

    classifier = IssueClassifier(
        RetentionPolicy.from_config(config.retention),
        BotIdentity(config.bot.identities),
        clock=clock,
    )
    source = IssueSource(
        adapter,
        repo,
        cache=TimedCache(config.runner.cache_ttl_seconds),
        title_marker=config.retention.title_marker,
    )
    executor = TransitionExecutor(adapter, repo, classifier, max_workers=config.runner.max_workers)

    report = RunReport(total_open_issues=len(source.open_issues()))
    snapshot = source.qa_instances_with_comments()
    report.qa_instances = len(snapshot)
    LOG.info("Current state: total_open_issues=%s | qa_instances=%s", report.total_open_issues, report.qa_instances)

    def rescind(issue: Issue) -> OperationResult:
        result = executor.rescind_warning(issue)
        report.rescinded.append(result)
        return result

    need_warning = select_issues_needing_warning(snapshot, classifier, rescind)
    inactive = select_issues_needing_closure(snapshot, classifier)
    # An issue warned in this pass cannot also be closed in it
    to_close = exclude_issues(inactive, need_warning)

    with ThreadPoolExecutor(max_workers=2) as pool:
        warnings = pool.submit(process_warnings, executor, need_warning, message_template)
        closures = pool.submit(process_closures, executor, to_close)
        report.warnings = warnings.result()
        report.closures = closures.result()
    return report
