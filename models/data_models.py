"""Data models for Azure DevOps pull request and check status payloads."""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator
from pydantic.alias_generators import to_camel


class AzureDevOpsModel(BaseModel):
    """Base for all wire models.

    Fields are declared in snake_case and read from the camelCase keys the
    service returns. Unknown keys are ignored unless validation runs with
    ``context={"forbid_extra": True}``, in which case they are rejected at
    every nesting level (strict decode). Keys sent as ``null`` fall back to
    the field default in both modes.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_wire_fields(cls, data: Any, info: ValidationInfo) -> Any:
        """Reject unknown keys when strict decoding is requested, then drop nulls."""
        if not isinstance(data, dict):
            return data

        if info.context and info.context.get("forbid_extra"):
            known = set()
            for name, field in cls.model_fields.items():
                known.add(name)
                if field.alias:
                    known.add(field.alias)

            unknown = sorted(set(data) - known)
            if unknown:
                raise ValueError(f"unexpected fields: {', '.join(unknown)}")

        return {key: value for key, value in data.items() if value is not None}


class Identity(AzureDevOpsModel):
    display_name: str = ""
    unique_name: str = ""


class Repository(AzureDevOpsModel):
    id: str = ""
    name: str = ""


class Reviewer(AzureDevOpsModel):
    """A reviewer and their vote.

    Vote is signed: positive means approve-like (10, 5), negative means
    reject-like (-5, -10), zero means no vote yet.
    """
    display_name: str = ""
    vote: int = 0


class WebLink(AzureDevOpsModel):
    href: str = ""


class Links(AzureDevOpsModel):
    web: WebLink = Field(default_factory=WebLink)


class PullRequest(AzureDevOpsModel):
    """Active pull request as returned by the pull request list endpoint."""

    pull_request_id: int = 0
    title: str = ""
    status: str = ""  # informational only
    creation_date: Optional[datetime] = None
    repository: Repository = Field(default_factory=Repository)
    created_by: Identity = Field(default_factory=Identity)
    source_ref_name: str = ""
    target_ref_name: str = ""
    reviewers: list[Reviewer] = Field(default_factory=list)
    links: Links = Field(default_factory=Links, alias="_links")

    @property
    def web_url(self) -> str:
        return self.links.web.href


class StatusContext(AzureDevOpsModel):
    name: str = ""
    genre: str = ""


class CheckStatus(AzureDevOpsModel):
    """One build or policy status posted to a pull request."""

    state: str = ""
    description: str = ""
    context: StatusContext = Field(default_factory=StatusContext)
    target_url: str = ""
    creation_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None


class PullRequestList(AzureDevOpsModel):
    value: list[PullRequest] = Field(default_factory=list)
    count: int = 0


class CheckStatusList(AzureDevOpsModel):
    value: list[CheckStatus] = Field(default_factory=list)
    count: int = 0
