from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, Field, field_validator

DEFAULT_ROLE = "Contributor"


def _sorted_unique(values: list[str]) -> list[str]:
    return sorted({v for v in values if v})


class ContributorRole(BaseModel):
    role: str = DEFAULT_ROLE
    permissions: list[str] = Field(default_factory=list)

    @field_validator("permissions")
    @classmethod
    def _dedupe_permissions(cls, value: list[str]) -> list[str]:
        return _sorted_unique(value)


class ContributorActivity(BaseModel):
    commit_count: int = Field(default=0, ge=0)


class ExternalRepo(BaseModel):
    full_name: str
    url: str
    role: str


class ContributorRecord(BaseModel):
    """One roster row. ``external_repos`` keeps API order; ``emails`` is a sorted set."""

    username: str = Field(min_length=1)
    role: ContributorRole = Field(default_factory=ContributorRole)
    activity: ContributorActivity = Field(default_factory=ContributorActivity)
    external_repos: list[ExternalRepo] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)

    @field_validator("emails")
    @classmethod
    def _dedupe_emails(cls, value: list[str]) -> list[str]:
        return _sorted_unique(value)


class FetchContributorsRequest(BaseModel):
    """Body for POST /api/contributors/fetch. Emptiness is checked by the service."""

    repository: str = ""
    token: str = ""


class FetchContributorsSuccess(BaseModel):
    success: Literal[True] = True
    data: list[ContributorRecord]


class FetchContributorsFailure(BaseModel):
    success: Literal[False] = False
    error: str


FetchContributorsResult = Union[FetchContributorsSuccess, FetchContributorsFailure]
