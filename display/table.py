"""Terminal table of active pull requests."""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from fetchers.azure_devops import AzureDevOpsFetcher
from models.data_models import PullRequest
from summary.checks import FAILED, IN_PROGRESS, PASSED, UNAUTHORIZED, overall_check_status
from summary.votes import summarize_votes

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

CHECK_STYLES = {
    PASSED: "green",
    FAILED: "red",
    IN_PROGRESS: "yellow",
    UNAUTHORIZED: "magenta",
}

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def sort_pull_requests(pull_requests: Sequence[PullRequest]) -> list[PullRequest]:
    """Sort newest first; ties keep fetch order, PRs without a date go last."""
    return sorted(
        pull_requests,
        key=lambda pr: _as_utc(pr.creation_date) if pr.creation_date else _OLDEST,
        reverse=True,
    )


def short_ref(ref: str) -> str:
    """Strip refs/heads/ (or refs/) from a branch reference.

    Examples:
        "refs/heads/main" -> "main"
        "refs/pull/3/merge" -> "pull/3/merge"
    """
    if ref.startswith("refs/heads/"):
        ref = ref[len("refs/heads/"):]
    if ref.startswith("refs/"):
        ref = ref[len("refs/"):]
    return ref


def truncate_title(title: str, width: int) -> str:
    """Cut a title to at most width characters, ending with an ellipsis."""
    if width <= 0 or len(title) <= width:
        return title
    if width <= len(ELLIPSIS):
        return title[:width]
    return title[:width - len(ELLIPSIS)] + ELLIPSIS


def humanize_created(created: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Format a creation time relative to now.

    Under a minute is "just now", then "Nm ago", "Nh ago" and "Nd ago" up to
    30 days; anything older is shown as a YYYY-MM-DD date.
    """
    if created is None:
        return ""

    created = _as_utc(created)
    now = _as_utc(now) if now else datetime.now(timezone.utc)
    seconds = (now - created).total_seconds()

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    if seconds < 30 * 86400:
        return f"{int(seconds // 86400)}d ago"
    return created.strftime("%Y-%m-%d")


def filter_by_repository(pull_requests: Sequence[PullRequest], repo: Optional[str]) -> list[PullRequest]:
    """Keep PRs whose repository name or id matches repo (case-insensitive)."""
    if not repo:
        return list(pull_requests)
    wanted = repo.lower()
    return [
        pr for pr in pull_requests
        if pr.repository.name.lower() == wanted or pr.repository.id.lower() == wanted
    ]


def build_table(
    pull_requests: Sequence[PullRequest],
    fetcher: AzureDevOpsFetcher,
    title_width: int = 60,
    now: Optional[datetime] = None,
) -> Table:
    """Build one row per pull request, fetching each PR's checks in turn.

    Rows follow the order of pull_requests; sort before calling.
    """
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("PR", style="cyan", justify="right")
    table.add_column("Title")
    table.add_column("Author", style="green")
    table.add_column("Repo", style="blue")
    table.add_column("Source->Target")
    table.add_column("Votes", justify="right")
    table.add_column("Checks")
    table.add_column("Created", style="dim")
    table.add_column("URL", style="dim", overflow="fold")

    for pr in pull_requests:
        checks = overall_check_status(fetcher, pr)
        # Text cells so titles like "[wip] ..." are not read as markup
        table.add_row(
            Text(str(pr.pull_request_id)),
            Text(truncate_title(pr.title, title_width)),
            Text(pr.created_by.display_name),
            Text(pr.repository.name),
            Text(f"{short_ref(pr.source_ref_name)}->{short_ref(pr.target_ref_name)}"),
            Text(summarize_votes(pr.reviewers)),
            Text(checks, style=CHECK_STYLES.get(checks, "")),
            Text(humanize_created(pr.creation_date, now)),
            Text(pr.web_url),
        )

    logger.debug(f"Built table with {len(pull_requests)} rows")
    return table


def render_pull_request_table(
    pull_requests: Sequence[PullRequest],
    fetcher: AzureDevOpsFetcher,
    console: Optional[Console] = None,
    title_width: int = 60,
    now: Optional[datetime] = None,
) -> None:
    """Print the pull request table to the console (stdout by default)."""
    console = console or Console()
    console.print(build_table(pull_requests, fetcher, title_width=title_width, now=now))
