"""Configuration loader that reads from .env and validates with Pydantic."""

import os
import sys
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import ValidationError

from models.config_models import PAT_ENV_VAR, Config


USAGE = (
    "Usage: lazydevops --org <org> --project <project> [--repo <repo>] [--top N]\n"
    f"Set {PAT_ENV_VAR} environment variable with a Personal Access Token (Code: Read)."
)


def load_config(
    org: Optional[str],
    project: Optional[str],
    repo: Optional[str] = None,
    top: int = 50,
    api_version: str = "7.1-preview.1",
    title_width: int = 60,
    status_timeout: float = 15.0,
) -> Config:
    """
    Load and validate configuration from command-line values and environment.

    Reads the .env file in the project root, then picks up the personal
    access token and log level from the environment. This is the only place
    the environment is read; everything downstream receives the Config.

    Args:
        org: Azure DevOps organization
        project: Azure DevOps project name
        repo: Optional repository name or id to filter on
        top: Max number of PRs to fetch (<= 0 means unlimited)
        api_version: Azure DevOps REST API version
        title_width: Title truncation width (<= 0 disables truncation)
        status_timeout: Per-request timeout for check status calls

    Returns:
        Config: Validated configuration object

    Raises:
        SystemExit: With code 2 if configuration is invalid or missing required fields
    """
    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    try:
        # Credentials validate in the same pass as the flags
        config = Config(
            credentials={"pat": os.getenv(PAT_ENV_VAR, "")},
            org=org or "",
            project=project or "",
            repo=repo,
            top=top,
            api_version=api_version,
            title_width=title_width,
            status_timeout=status_timeout,
            log_level=os.getenv("LOG_LEVEL", "WARNING"),
        )

        return config

    except ValidationError as e:
        print("Error: configuration is invalid:", file=sys.stderr)

        for error in e.errors():
            field_path = " -> ".join(str(x) for x in error["loc"])
            message = error["msg"]
            print(f"  - {field_path}: {message}", file=sys.stderr)

        print(f"\n{USAGE}", file=sys.stderr)
        sys.exit(2)
