"""mergekeeper entry point.

Loads config (YAML + MERGE_*/GITHUB_*/LOGGING_* env), waits for the pull
request to become mergeable and merges it. Usage: mergekeeper [-c config.yaml].
Exit codes: 0 merged, dry run or soft exit; 1 failed; 2 invalid config.
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from mergekeeper.adapters.github import GitHubAdapter
from mergekeeper.config import load_config
from mergekeeper.logging import MergeKeeperLogging
from mergekeeper.merger import Merger
from mergekeeper.observer import GitHubOutputObserver


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="mergekeeper",
        description="Merge a pull request once its title and check runs are ready",
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
        "--dry-run",
        action="store_true",
        help="Skip the merge call regardless of config",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load config and run one gated merge."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except (ValidationError, yaml.YAMLError, OSError) as e:
        MergeKeeperLogging().setup().error("Invalid config %s: %s", args.config, e)
        return 2

    log = MergeKeeperLogging(config.logging).setup()

    if args.check:
        print("Config OK:", config.merge.full_name, f"#{config.merge.pull_request_number}")
        return 0

    try:
        token = config.github_token_resolved
    except OSError as e:
        log.error("Cannot read GitHub token file: %s", e)
        return 2
    if not token:
        log.error("GitHub token not set (GITHUB_TOKEN or GITHUB_TOKEN_FILE)")
        return 2

    merge_cfg = config.merge
    if args.dry_run:
        merge_cfg = merge_cfg.model_copy(update={"dry_run": True})

    adapter = GitHubAdapter(token=token, api_url=config.github.api_url)
    merger = Merger(merge_cfg, adapter, observer=GitHubOutputObserver(log=logging.getLogger("mergekeeper.merger")))
    log.info(
        "Waiting for PR #%s in %s | timeout=%ss interval=%ss",
        merge_cfg.pull_request_number,
        merge_cfg.full_name,
        merge_cfg.timeout_seconds,
        merge_cfg.interval_seconds,
    )
    try:
        merger.merge()
    except KeyboardInterrupt:
        return 1
    except Exception as e:
        log.exception("Fatal error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
