"""Azure DevOps REST client for active pull requests and their check statuses.

Two read-only calls are made:
- List active pull requests in a project (one page, optionally capped by $top)
- List the statuses (builds, policies) posted to one pull request

Both authenticate with a personal access token sent as the password half of
HTTP Basic auth with an empty username.
"""

import base64
import logging
from typing import Any, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError

from models.config_models import PAT_ENV_VAR
from models.data_models import CheckStatus, CheckStatusList, PullRequest, PullRequestList

logger = logging.getLogger(__name__)


class AzureDevOpsError(Exception):
    """Base error for failed Azure DevOps calls."""


class AuthenticationError(AzureDevOpsError):
    """The service answered 401 or 403."""


class RequestError(AzureDevOpsError):
    """Transport failure or a non-2xx response other than 401/403."""


class DecodeError(AzureDevOpsError):
    """The response body is not JSON or does not match the expected shape."""


def decode_pull_requests_strict(payload: Any) -> list[PullRequest]:
    """Decode a pull request list, rejecting any field the models do not know.

    Raises:
        DecodeError: If the payload has unknown fields or the wrong shape
    """
    try:
        parsed = PullRequestList.model_validate(payload, context={"forbid_extra": True})
    except ValidationError as e:
        raise DecodeError(f"strict decode failed: {e.error_count()} error(s): {e.errors()[0]['msg']}") from e
    return list(parsed.value)


def decode_pull_requests_permissive(payload: Any) -> list[PullRequest]:
    """Decode a pull request list, ignoring unknown fields.

    Raises:
        DecodeError: If the payload still cannot be read as a pull request list
    """
    try:
        parsed = PullRequestList.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(f"decode failed: {e.error_count()} error(s): {e.errors()[0]['msg']}") from e
    return list(parsed.value)


def decode_check_statuses(payload: Any) -> list[CheckStatus]:
    try:
        parsed = CheckStatusList.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(f"decode failed: {e.error_count()} error(s): {e.errors()[0]['msg']}") from e
    return list(parsed.value)


class AzureDevOpsFetcher:
    """Fetch active pull requests and their check statuses from Azure DevOps."""

    def __init__(
        self,
        org: str,
        project: str,
        token: str,
        api_version: str = "7.1-preview.1",
        status_timeout: Optional[float] = 15.0,
    ):
        """Initialize Azure DevOps API client.

        Args:
            org: Azure DevOps organization
            project: Project name inside the organization
            token: Personal access token for authentication
            api_version: REST API version sent with every request
            status_timeout: Timeout in seconds for each check status request
        """
        self.org = org
        self.project = project
        self.token = token
        self.api_version = api_version
        self.status_timeout = status_timeout
        self.base_url = (
            f"https://dev.azure.com/{quote(org, safe='')}/{quote(project, safe='')}/_apis/git"
        )
        basic = base64.b64encode(f":{token}".encode("utf-8")).decode("ascii")
        self.headers = {
            "Authorization": f"Basic {basic}",
            "Accept": "application/json",
        }

    def _get_json(
        self,
        url: str,
        params: dict[str, str],
        timeout: Optional[float] = None,
    ) -> Any:
        """Issue one GET and return the parsed JSON body.

        Raises:
            AuthenticationError: On 401/403
            RequestError: On transport failures and other non-2xx responses
            DecodeError: If the body is not valid JSON
        """
        try:
            response = requests.get(url, headers=self.headers, params=params, timeout=timeout)
        except requests.RequestException as e:
            raise RequestError(f"request to {url} failed: {e}") from e

        if response.status_code in (401, 403):
            logger.debug(f"Authentication error: {response.status_code} for {url}")
            raise AuthenticationError(
                f"authentication failed ({response.status_code}). "
                f"Ensure {PAT_ENV_VAR} is valid and has Code (Read) scope"
            )

        if response.status_code < 200 or response.status_code >= 300:
            raise RequestError(f"request failed: {response.status_code} {response.reason}")

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"response from {url} is not valid JSON: {e}") from e

    def list_active_pull_requests(self, top: int = 50) -> list[PullRequest]:
        """Fetch active pull requests in the project.

        The body is decoded strictly first. If that fails (typically a preview
        API version returning fields the models do not know), the identical
        request is issued once more and decoded permissively.

        Args:
            top: Max number of pull requests to return; <= 0 means no limit

        Returns:
            List of PullRequest in the order the service returned them

        Raises:
            AuthenticationError: On 401/403
            RequestError: On transport or HTTP failures
            DecodeError: If the permissive retry also cannot be decoded
        """
        url = f"{self.base_url}/pullrequests"
        params = {"searchCriteria.status": "active"}
        if top > 0:
            params["$top"] = str(top)
        params["api-version"] = self.api_version

        logger.info(f"Fetching active PRs from {self.org}/{self.project} (top={top})")

        try:
            payload = self._get_json(url, params)
            pull_requests = decode_pull_requests_strict(payload)
        except DecodeError as e:
            logger.warning(f"Strict decode of pull request list failed, retrying permissively: {e}")
            pull_requests = self._refetch_permissive(url, params)

        logger.info(f"Fetched {len(pull_requests)} active PRs")
        return pull_requests

    def _refetch_permissive(self, url: str, params: dict[str, str]) -> list[PullRequest]:
        """Re-issue the pull request list request and decode it permissively."""
        payload = self._get_json(url, params)
        return decode_pull_requests_permissive(payload)

    def list_check_statuses(self, repository_id: str, pull_request_id: int) -> list[CheckStatus]:
        """Fetch the check statuses posted to one pull request.

        Failures are raised, never retried; callers decide how to degrade.

        Args:
            repository_id: Id of the repository the pull request belongs to
            pull_request_id: Pull request id

        Returns:
            List of CheckStatus (possibly empty)

        Raises:
            AuthenticationError: On 401/403
            RequestError: On transport failures, timeouts or HTTP errors
            DecodeError: If the body cannot be decoded
        """
        url = (
            f"{self.base_url}/repositories/{quote(repository_id, safe='')}"
            f"/pullRequests/{pull_request_id}/statuses"
        )
        params = {"api-version": self.api_version}

        payload = self._get_json(url, params, timeout=self.status_timeout)
        statuses = decode_check_statuses(payload)

        logger.debug(f"Fetched {len(statuses)} statuses for PR #{pull_request_id}")
        return statuses
