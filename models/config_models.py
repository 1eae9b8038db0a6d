"""Configuration models for validation using Pydantic."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


PAT_ENV_VAR = "LAZY_DEV_OPS_PAT"


class CredentialsConfig(BaseModel):
    """API credentials loaded from environment variables."""

    pat: str = Field(..., description=f"Azure DevOps personal access token ({PAT_ENV_VAR})")

    @field_validator("pat")
    @classmethod
    def validate_pat(cls, v: str) -> str:
        """Validate the personal access token is set."""
        if not v or not v.strip():
            raise ValueError(
                f"Environment variable {PAT_ENV_VAR} is required for authentication"
            )
        return v.strip()


class Config(BaseModel):
    """Application configuration."""

    credentials: CredentialsConfig
    org: str = Field(..., description="Azure DevOps organization (e.g., myorg)")
    project: str = Field(..., description="Azure DevOps project name")
    repo: Optional[str] = Field(None, description="Only show PRs from this repository (name or id)")
    top: int = Field(default=50, description="Max number of PRs to fetch, <= 0 for no limit")
    api_version: str = Field(default="7.1-preview.1", description="Azure DevOps API version")
    title_width: int = Field(default=60, description="Truncate titles to this width, <= 0 to disable")
    status_timeout: float = Field(default=15.0, gt=0, description="Timeout in seconds for each check status request")
    log_level: str = Field(default="WARNING", description="Logging level")

    @field_validator("org", "project")
    @classmethod
    def validate_required_name(cls, v: str) -> str:
        """Validate org and project are non-empty."""
        if not v or not v.strip():
            raise ValueError("--org and --project are required")
        return v.strip()

    @field_validator("repo")
    @classmethod
    def normalize_repo(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty repository filter as no filter."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("api_version")
    @classmethod
    def validate_api_version(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("API version must not be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper
