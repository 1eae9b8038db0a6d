"""Data models for lazy-devops."""

from models.config_models import PAT_ENV_VAR, Config, CredentialsConfig
from models.data_models import (
    CheckStatus,
    CheckStatusList,
    Identity,
    PullRequest,
    PullRequestList,
    Repository,
    Reviewer,
)

__all__ = [
    "PAT_ENV_VAR",
    "Config",
    "CredentialsConfig",
    "CheckStatus",
    "CheckStatusList",
    "Identity",
    "PullRequest",
    "PullRequestList",
    "Repository",
    "Reviewer",
]
