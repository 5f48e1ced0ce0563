"""Pydantic models."""

from roster.models.contributor import (
    ContributorActivity,
    ContributorRecord,
    ContributorRole,
    ExternalRepo,
    FetchContributorsFailure,
    FetchContributorsRequest,
    FetchContributorsResult,
    FetchContributorsSuccess,
)
from roster.models.error import ErrorDetail

__all__ = [
    "ContributorActivity",
    "ContributorRecord",
    "ContributorRole",
    "ErrorDetail",
    "ExternalRepo",
    "FetchContributorsFailure",
    "FetchContributorsRequest",
    "FetchContributorsResult",
    "FetchContributorsSuccess",
]
