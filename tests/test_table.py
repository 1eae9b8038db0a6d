"""Tests for the pull request table and its formatting helpers."""

import io
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock
import pytest
from rich.console import Console

from fetchers.azure_devops import AuthenticationError
from models.data_models import CheckStatus, PullRequest
from display.table import (
    filter_by_repository,
    humanize_created,
    render_pull_request_table,
    short_ref,
    sort_pull_requests,
    truncate_title,
)


NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_pr(pr_id, created=None, repo_name="api", repo_id="repo-guid-1", **extra):
    payload = {
        "pullRequestId": pr_id,
        "title": f"PR {pr_id}",
        "creationDate": created.isoformat() if created else None,
        "repository": {"id": repo_id, "name": repo_name},
    }
    payload.update(extra)
    return PullRequest.model_validate(payload)


def render(pull_requests, fetcher, title_width=60):
    buffer = io.StringIO()
    console = Console(file=buffer, width=400, color_system=None)
    render_pull_request_table(pull_requests, fetcher, console=console, title_width=title_width, now=NOW)
    return buffer.getvalue()


class TestShortRef:
    @pytest.mark.parametrize("ref,expected", [
        ("refs/heads/main", "main"),
        ("refs/heads/feature/retry", "feature/retry"),
        ("refs/pull/3/merge", "pull/3/merge"),
        ("main", "main"),
        ("", ""),
    ])
    def test_short_ref(self, ref, expected):
        assert short_ref(ref) == expected


class TestTruncateTitle:
    def test_short_title_untouched(self):
        assert truncate_title("Fix bug", 60) == "Fix bug"

    def test_long_title_cut_with_ellipsis(self):
        result = truncate_title("A" * 80, 20)
        assert result == "A" * 17 + "..."
        assert len(result) == 20

    def test_exact_width_untouched(self):
        assert truncate_title("A" * 20, 20) == "A" * 20

    @pytest.mark.parametrize("width", [0, -1])
    def test_disabled(self, width):
        assert truncate_title("A" * 200, width) == "A" * 200


class TestHumanizeCreated:
    @pytest.mark.parametrize("delta,expected", [
        (timedelta(seconds=0), "just now"),
        (timedelta(seconds=59), "just now"),
        (timedelta(minutes=1), "1m ago"),
        (timedelta(minutes=59, seconds=59), "59m ago"),
        (timedelta(hours=1), "1h ago"),
        (timedelta(hours=23, minutes=59), "23h ago"),
        (timedelta(days=1), "1d ago"),
        (timedelta(days=29, hours=23), "29d ago"),
    ])
    def test_relative(self, delta, expected):
        assert humanize_created(NOW - delta, NOW) == expected

    def test_older_than_30_days_is_date(self):
        assert humanize_created(datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc), NOW) == "2025-01-15"

    def test_missing_date(self):
        assert humanize_created(None, NOW) == ""

    def test_future_is_just_now(self):
        assert humanize_created(NOW + timedelta(hours=2), NOW) == "just now"

    def test_naive_timestamp_treated_as_utc(self):
        assert humanize_created(datetime(2025, 3, 1, 11, 0, 0), NOW) == "1h ago"


class TestSortPullRequests:
    def test_newest_first(self):
        t1 = NOW - timedelta(days=3)
        t2 = NOW - timedelta(days=2)
        t3 = NOW - timedelta(days=1)
        prs = [make_pr(2, t2), make_pr(1, t1), make_pr(3, t3)]

        assert [pr.pull_request_id for pr in sort_pull_requests(prs)] == [3, 2, 1]

    def test_ties_keep_fetch_order(self):
        t = NOW - timedelta(hours=1)
        prs = [make_pr(5, t), make_pr(9, t), make_pr(1, t)]

        assert [pr.pull_request_id for pr in sort_pull_requests(prs)] == [5, 9, 1]

    def test_missing_dates_last(self):
        prs = [make_pr(1), make_pr(2, NOW - timedelta(days=400))]

        assert [pr.pull_request_id for pr in sort_pull_requests(prs)] == [2, 1]


class TestFilterByRepository:
    def test_no_filter(self):
        prs = [make_pr(1), make_pr(2, repo_name="web")]
        assert filter_by_repository(prs, None) == prs

    def test_matches_name_case_insensitive(self):
        prs = [make_pr(1, repo_name="API"), make_pr(2, repo_name="web")]
        assert [pr.pull_request_id for pr in filter_by_repository(prs, "api")] == [1]

    def test_matches_id(self):
        prs = [make_pr(1, repo_id="guid-a"), make_pr(2, repo_id="guid-b")]
        assert [pr.pull_request_id for pr in filter_by_repository(prs, "guid-b")] == [2]


class TestRenderPullRequestTable:
    def test_row_contents(self, pr_payload):
        pr = PullRequest.model_validate(pr_payload)
        fetcher = Mock()
        fetcher.list_check_statuses.return_value = [CheckStatus(state="succeeded")]

        output = render([pr], fetcher)

        for header in ["PR", "Title", "Author", "Repo", "Source->Target", "Votes", "Checks", "Created", "URL"]:
            assert header in output
        assert "42" in output
        assert "Add retry to uploader" in output
        assert "Dana Lee" in output
        assert "feature/retry->main" in output
        assert "+1/2" in output
        assert "Passed" in output
        assert "2025-01-15" in output
        assert "https://dev.azure.com/myorg/myproject/_git/api/pullrequest/42" in output

    def test_checks_fetched_per_row_in_order(self):
        prs = [make_pr(3, repo_id="r3"), make_pr(1, repo_id="r1")]
        fetcher = Mock()
        fetcher.list_check_statuses.return_value = []

        output = render(prs, fetcher)

        assert [c.args for c in fetcher.list_check_statuses.call_args_list] == [("r3", 3), ("r1", 1)]
        assert "No checks" in output

    def test_failed_status_call_degrades_only_that_row(self):
        prs = [make_pr(1), make_pr(2)]
        fetcher = Mock()
        fetcher.list_check_statuses.side_effect = [
            AuthenticationError("403"),
            [CheckStatus(state="failed")],
        ]

        output = render(prs, fetcher)

        assert "Unauthorized" in output
        assert "Failed" in output

    def test_title_truncated(self):
        pr = make_pr(1, title="X" * 100)
        fetcher = Mock()
        fetcher.list_check_statuses.return_value = []

        output = render([pr], fetcher, title_width=10)

        assert "XXXXXXX..." in output
        assert "X" * 11 not in output

    def test_markup_in_title_is_literal(self):
        pr = make_pr(1, title="[bold]wip[/bold] refactor")
        fetcher = Mock()
        fetcher.list_check_statuses.return_value = []

        assert "[bold]wip[/bold] refactor" in render([pr], fetcher)
