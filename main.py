#!/usr/bin/env python3
"""
lazy-devops - list active Azure DevOps pull requests in the terminal

Shows every active pull request in a project with its reviewer vote tally
and the overall outcome of its build/policy checks.

Usage:
    python main.py --org myorg --project myproject
    python main.py --org myorg --project myproject --repo api --top 20
    python main.py --org myorg --project myproject --top 0     # no limit

Environment:
    LAZY_DEV_OPS_PAT   Personal Access Token with Code (Read) scope (required)
    LOG_LEVEL          DEBUG, INFO, WARNING (default), ERROR or CRITICAL
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console

from display.table import filter_by_repository, render_pull_request_table, sort_pull_requests
from fetchers.azure_devops import AuthenticationError, AzureDevOpsError, AzureDevOpsFetcher
from models.config_models import Config
from utils.config_loader import load_config
from utils.logger import setup_logger

logger = logging.getLogger("lazy_devops")


def show_active_pull_requests(
    config: Config,
    fetcher: AzureDevOpsFetcher,
    console: Optional[Console] = None,
) -> bool:
    """
    Fetch active PRs and print them as a table, newest first.

    Args:
        config: Validated configuration
        fetcher: Azure DevOps client
        console: Where to print (stdout by default)

    Returns:
        True on success (including when there is nothing to show), False if
        the pull request list could not be fetched
    """
    console = console or Console()

    try:
        pull_requests = fetcher.list_active_pull_requests(top=config.top)
    except AuthenticationError as e:
        logger.error(f"Error: {e}")
        return False
    except AzureDevOpsError as e:
        logger.error(f"Error: failed to fetch pull requests: {e}")
        return False

    pull_requests = filter_by_repository(pull_requests, config.repo)
    if config.repo:
        logger.info(f"{len(pull_requests)} PRs in repository '{config.repo}'")

    if not pull_requests:
        console.print("No active pull requests found.")
        return True

    render_pull_request_table(
        sort_pull_requests(pull_requests),
        fetcher,
        console=console,
        title_width=config.title_width,
    )
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazydevops",
        description="List active Azure DevOps pull requests with votes and check status",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 50 most recent active PRs (default)
  lazydevops --org myorg --project myproject

  # Only PRs in one repository
  lazydevops --org myorg --project myproject --repo api

  # Everything, no limit
  lazydevops --org myorg --project myproject --top 0

Set LAZY_DEV_OPS_PAT to a Personal Access Token with Code (Read) scope.
        """
    )
    parser.add_argument(
        "--org",
        default="",
        help="Azure DevOps organization (e.g., myorg). Required."
    )
    parser.add_argument(
        "--project",
        default="",
        help="Azure DevOps project name. Required."
    )
    parser.add_argument(
        "--repo",
        default=None,
        help="Only show PRs from this repository (name or id)"
    )
    parser.add_argument(
        "--top",
        type=int,
        default=50,
        help="Max number of PRs to fetch, 0 or less for no limit (default: 50)"
    )
    parser.add_argument(
        "--api-version",
        default="7.1-preview.1",
        help="Azure DevOps API version (default: 7.1-preview.1)"
    )
    parser.add_argument(
        "--title-width",
        type=int,
        default=60,
        help="Truncate titles to this many characters, 0 to disable (default: 60)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=15.0,
        help="Timeout in seconds for each check status request (default: 15)"
    )
    return parser


def main(argv: Optional[list[str]] = None):
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)

    # Exits with code 2 before any network call if anything is missing
    config = load_config(
        org=args.org,
        project=args.project,
        repo=args.repo,
        top=args.top,
        api_version=args.api_version,
        title_width=args.title_width,
        status_timeout=args.timeout,
    )
    setup_logger(config.log_level)

    fetcher = AzureDevOpsFetcher(
        org=config.org,
        project=config.project,
        token=config.credentials.pat,
        api_version=config.api_version,
        status_timeout=config.status_timeout,
    )

    success = show_active_pull_requests(config, fetcher)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
