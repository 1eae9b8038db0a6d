"""Reduce the check statuses of a pull request to one overall label."""

import logging
from typing import Iterable

from fetchers.azure_devops import AuthenticationError, AzureDevOpsError, AzureDevOpsFetcher
from models.data_models import CheckStatus, PullRequest

logger = logging.getLogger(__name__)

NO_CHECKS = "No checks"
FAILED = "Failed"
IN_PROGRESS = "In Progress"
PASSED = "Passed"
UNKNOWN = "Unknown"
UNAUTHORIZED = "Unauthorized"

SUCCEEDED_STATES = frozenset({"succeeded", "success"})
PENDING_STATES = frozenset({"pending", "inprogress", "in_progress"})
FAILED_STATES = frozenset({"failed", "failure"})
ERROR_STATES = frozenset({"error"})
NEUTRAL_STATES = frozenset({"notapplicable", "not_applicable", "notset"})


def reduce_check_statuses(statuses: Iterable[CheckStatus]) -> str:
    """Collapse check statuses into one label.

    Precedence is failed/error > pending > passed > unknown. Passed needs at
    least one succeeded check and every other check neutral; unrecognized
    states block Passed without forcing Failed.

    Args:
        statuses: Check statuses of one pull request (any order)

    Returns:
        One of "No checks", "Failed", "In Progress", "Passed", "Unknown"
    """
    states = [status.state.lower() for status in statuses]
    if not states:
        return NO_CHECKS

    if any(state in FAILED_STATES or state in ERROR_STATES for state in states):
        return FAILED
    if any(state in PENDING_STATES for state in states):
        return IN_PROGRESS

    any_succeeded = any(state in SUCCEEDED_STATES for state in states)
    all_succeeded_or_neutral = all(
        state in SUCCEEDED_STATES or state in NEUTRAL_STATES for state in states
    )
    if any_succeeded and all_succeeded_or_neutral:
        return PASSED

    return UNKNOWN


def overall_check_status(fetcher: AzureDevOpsFetcher, pull_request: PullRequest) -> str:
    """Fetch a pull request's checks and reduce them, degrading on failure.

    A failed fetch never aborts the run: 401/403 gives "Unauthorized" and any
    other failure gives "Unknown".
    """
    try:
        statuses = fetcher.list_check_statuses(
            pull_request.repository.id, pull_request.pull_request_id
        )
    except AuthenticationError as e:
        logger.warning(f"Checks for PR #{pull_request.pull_request_id} unavailable: {e}")
        return UNAUTHORIZED
    except AzureDevOpsError as e:
        logger.warning(f"Checks for PR #{pull_request.pull_request_id} unavailable: {e}")
        return UNKNOWN

    return reduce_check_statuses(statuses)
