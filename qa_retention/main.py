"""QA retention entry point.

Two modes: run (one retention pass: warn idle QA instances, close warned
ones that stayed idle) and scenarios (seed a repository with test issues).
Usage: qa-retention [run] | qa-retention scenarios.
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from qa_retention.config import AppConfig, load_config, validate_config
from qa_retention.exceptions import ConfigError
from qa_retention.logging import RetentionLogging, log_section

LOG = logging.getLogger("qa_retention.main")

SUBCOMMANDS = ("run", "scenarios")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with optional subcommand (run | scenarios)."""
    argv = argv if argv is not None else sys.argv[1:]
    sub = "run"
    rest = list(argv)
    if argv and not argv[0].startswith("-") and argv[0] in SUBCOMMANDS:
        sub = argv[0]
        rest = argv[1:]

    parser = argparse.ArgumentParser(
        prog="qa-retention",
        description="QA instance retention - warn idle QA environments, then close them",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--settle-seconds",
        type=float,
        default=60,
        help="scenarios: seconds to wait after creating issues (default 60)",
    )
    parser.add_argument(
        "--human-token",
        default=None,
        help="scenarios: token of a non-bot account for comments that must count as human activity",
    )
    parsed = parser.parse_args(rest)
    parsed.subcommand = sub
    return parsed


def run_scenarios(config: AppConfig, settle_seconds: float, human_token: str | None = None) -> None:
    """Seed the configured repository with retention test scenarios."""
    from qa_retention.adapters.github import GitHubAdapter
    from qa_retention.services.scenarios import setup_scenarios

    adapter = GitHubAdapter(token=config.github_token_resolved or "", api_url=config.github.api_url)
    human = GitHubAdapter(token=human_token, api_url=config.github.api_url) if human_token else None
    setup_scenarios(
        adapter,
        config.github.repository,
        title_marker=config.retention.title_marker,
        warning_label=config.retention.warning_label,
        settle_seconds=settle_seconds,
        human=human,
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point: dispatch to run or scenarios."""
    args = parse_args(argv)

    config_path = args.config
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            config_path = Path("config.example.yaml")
            logging.basicConfig(level=logging.INFO)
            LOG.warning("config.yaml not found, using config.example.yaml")

    try:
        config = load_config(config_path)
    except (ConfigError, ValidationError, yaml.YAMLError, OSError) as e:
        logging.basicConfig(level=logging.INFO)
        LOG.error("Invalid config %s: %s", config_path, e)
        return 1

    RetentionLogging(config.logging, debug=args.debug).setup()

    if args.check:
        try:
            validate_config(config)
        except ConfigError as e:
            LOG.error("Config invalid: %s", e)
            return 1
        print(
            "Config OK:",
            config.github.repository,
            config.retention.retention_hours,
            config.retention.inactivity_threshold_hours,
        )
        return 0

    if args.subcommand == "scenarios":
        try:
            validate_config(config)
            run_scenarios(config, settle_seconds=args.settle_seconds, human_token=args.human_token)
        except KeyboardInterrupt:
            return 0
        except Exception as e:
            LOG.exception("Fatal error: %s", e)
            return 1
        return 0

    from qa_retention.runner import run_retention_check

    log_section(LOG, "Starting QA Instance Retention Check")
    try:
        report = run_retention_check(config)
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        LOG.exception("Fatal error: %s", e)
        log_section(LOG, "Retention Check Failed")
        return 1

    warned_ok, warned_failed = report.warnings_count
    closed_ok, closed_failed = report.closures_count
    LOG.info(
        "Summary: rescinded=%s | warned=%s ok, %s failed | closed=%s ok, %s failed",
        len(report.rescinded),
        warned_ok,
        warned_failed,
        closed_ok,
        closed_failed,
    )
    log_section(LOG, "Retention Check Completed Successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
