"""Contributor roster: list fetch, per-contributor fan-out, and the result boundary.

Only the contributor-list call can fail a run. The three per-contributor lookups
(profile, collaborator permission, public repos) each degrade to a default and
a ``partial_data`` event.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from roster import config
from roster.models.contributor import (
    DEFAULT_ROLE,
    ContributorActivity,
    ContributorRecord,
    ContributorRole,
    ExternalRepo,
    FetchContributorsFailure,
    FetchContributorsResult,
    FetchContributorsSuccess,
)
from roster.models.github import CollaboratorPermission, ContributorEntry, UserProfile, UserRepo
from roster.services.fetch_events import PARTIAL_DATA, FetchEventLog
from roster.services.github_client import GitHubClient
from roster.services.github_errors import InvalidInputError, MalformedResponseError, RosterError
from roster.services.repository_name import RepositoryName, parse_repository

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred while fetching contributors."

_ROLE_BY_PERMISSION = {
    "admin": "Admin",
    "write": "Maintainer",
    "read": "Read",
}

_FLAGS_BY_PERMISSION = {
    "admin": {"admin", "push", "pull"},
    "write": {"push", "pull"},
    "read": {"pull"},
}


def role_label(permission: CollaboratorPermission) -> str:
    role_name = (permission.role_name or "").strip()
    if role_name:
        return role_name[:1].upper() + role_name[1:]
    level = (permission.permission or "").strip().lower()
    return _ROLE_BY_PERMISSION.get(level, "Collaborator")


def permission_set(permission: CollaboratorPermission) -> set[str]:
    flags = permission.permission_flags()
    if flags:
        return {name for name, granted in flags.items() if granted}
    level = (permission.permission or "").strip().lower()
    return set(_FLAGS_BY_PERMISSION.get(level, set()))


def external_repo_role(flags: Optional[dict[str, bool]]) -> str:
    flags = flags or {}
    if flags.get("admin"):
        return "Admin"
    if flags.get("push"):
        return "Write"
    return "Read"


def _failure_reason(outcome: Any) -> Optional[str]:
    """None when the outcome is a 2xx response; otherwise a short reason for the log."""
    if isinstance(outcome, BaseException):
        return getattr(outcome, "message", None) or str(outcome) or type(outcome).__name__
    if not outcome.is_success:
        return f"status={outcome.status_code}"
    return None


def _fold_profile(outcome: Any, username: str, events: FetchEventLog) -> set[str]:
    reason = _failure_reason(outcome)
    if reason is not None:
        events.warning(PARTIAL_DATA, facet="profile", username=username, reason=reason)
        return set()
    try:
        profile = UserProfile.model_validate(outcome.json())
    except ValidationError:
        events.warning(PARTIAL_DATA, facet="profile", username=username, reason="unexpected payload")
        return set()
    return profile.public_emails()


def _fold_permission(outcome: Any, username: str, events: FetchEventLog) -> ContributorRole:
    if isinstance(outcome, httpx.Response) and outcome.status_code == 404:
        events.debug("collaborator_not_explicit", username=username)
        return ContributorRole(role=DEFAULT_ROLE)
    reason = _failure_reason(outcome)
    if reason is not None:
        events.warning(PARTIAL_DATA, facet="permission", username=username, reason=reason)
        return ContributorRole(role=DEFAULT_ROLE)
    try:
        permission = CollaboratorPermission.model_validate(outcome.json())
    except ValidationError:
        events.warning(PARTIAL_DATA, facet="permission", username=username, reason="unexpected payload")
        return ContributorRole(role=DEFAULT_ROLE)
    return ContributorRole(role=role_label(permission), permissions=sorted(permission_set(permission)))


def _fold_external_repos(
    outcome: Any,
    username: str,
    repository: RepositoryName,
    limit: int,
    events: FetchEventLog,
) -> list[ExternalRepo]:
    reason = _failure_reason(outcome)
    if reason is not None:
        events.warning(PARTIAL_DATA, facet="external_repos", username=username, reason=reason)
        return []
    rows = outcome.json()
    if not isinstance(rows, list):
        events.warning(PARTIAL_DATA, facet="external_repos", username=username, reason="expected a list")
        return []
    repos: list[ExternalRepo] = []
    for row in rows:
        if len(repos) >= limit:
            break
        try:
            repo = UserRepo.model_validate(row)
        except ValidationError:
            events.debug("external_repo_skipped", username=username, reason="unexpected payload")
            continue
        if repository.matches(repo.full_name):
            continue
        repos.append(
            ExternalRepo(full_name=repo.full_name, url=repo.html_url, role=external_repo_role(repo.permissions))
        )
    return repos


async def fetch_contributor_details(
    client: GitHubClient,
    repository: RepositoryName,
    username: str,
    contributions: int,
    events: FetchEventLog,
    max_external_repos: int = config.DEFAULT_MAX_EXTERNAL_REPOS,
) -> Optional[ContributorRecord]:
    """Build one record from three concurrent lookups.

    Each lookup's failure only blanks its own facet. None is returned only when
    folding the results raises, e.g. a 2xx body that is not JSON.
    """
    profile, permission, repos = await asyncio.gather(
        client.get_user(username),
        client.get_collaborator_permission(repository.full_name, username),
        client.list_user_repos(username, per_page=max_external_repos),
        return_exceptions=True,
    )
    try:
        return ContributorRecord(
            username=username,
            role=_fold_permission(permission, username, events),
            activity=ContributorActivity(commit_count=contributions),
            external_repos=_fold_external_repos(repos, username, repository, max_external_repos, events),
            emails=sorted(_fold_profile(profile, username, events)),
        )
    except Exception as exc:
        events.error("contributor_dropped", username=username, error=f"{type(exc).__name__}: {exc}")
        return None


def _invalid_fields(exc: ValidationError) -> str:
    fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
    return f"invalid {', '.join(fields)}" if fields else "not an object"


def _select_entries(rows: list[Any], limit: int, events: FetchEventLog) -> list[ContributorEntry]:
    if len(rows) > limit:
        events.warning("contributors_truncated", kept=limit, dropped=len(rows) - limit)
    entries: list[ContributorEntry] = []
    seen: set[str] = set()
    for index, row in enumerate(rows[:limit]):
        try:
            entry = ContributorEntry.model_validate(row)
        except ValidationError as exc:
            events.warning("contributor_entry_skipped", index=index, reason=_invalid_fields(exc))
            continue
        key = entry.login.lower()
        if key in seen:
            events.warning("contributor_entry_skipped", index=index, reason=f"duplicate login {entry.login}")
            continue
        seen.add(key)
        entries.append(entry)
    return entries


async def aggregate_contributors(
    repository: RepositoryName,
    token: str,
    *,
    events: Optional[FetchEventLog] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    max_contributors: Optional[int] = None,
    max_external_repos: Optional[int] = None,
) -> list[ContributorRecord]:
    """Fetch the contributor list (fail-fast) and fan out detail lookups.

    Output order follows the contributor list, not completion order.
    """
    events = events or FetchEventLog()
    limit = max_contributors if max_contributors is not None else config.max_contributors()
    repo_limit = max_external_repos if max_external_repos is not None else config.max_external_repos()

    async with GitHubClient(token=token, transport=transport) as client:
        rows = await client.list_contributors(repository.full_name)
        if not isinstance(rows, list):
            raise MalformedResponseError(f"the contributor list of '{repository.full_name}'")
        entries = _select_entries(rows, limit, events)
        results = await asyncio.gather(
            *(
                fetch_contributor_details(
                    client,
                    repository,
                    entry.login,
                    entry.contributions,
                    events,
                    max_external_repos=repo_limit,
                )
                for entry in entries
            )
        )
    records = [record for record in results if record is not None]
    events.info(
        "contributors_aggregated",
        repository=repository.full_name,
        listed=len(rows),
        processed=len(entries),
        returned=len(records),
    )
    return records


def _validate_inputs(repository: str, token: str) -> RepositoryName:
    errors: list[str] = []
    parsed: Optional[RepositoryName] = None
    if not (repository or "").strip():
        errors.append("Repository name is required.")
    else:
        try:
            parsed = parse_repository(repository)
        except InvalidInputError as exc:
            errors.append(exc.message)
    if not (token or "").strip():
        errors.append("GitHub token is required.")
    if errors or parsed is None:
        raise InvalidInputError(" ".join(errors))
    return parsed


async def fetch_contributors(
    repository: str,
    token: str,
    *,
    events: Optional[FetchEventLog] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FetchContributorsResult:
    """Entry point for callers: never raises, always returns a success or failure result."""
    events = events or FetchEventLog()
    try:
        parsed = _validate_inputs(repository, token)
        records = await aggregate_contributors(parsed, token.strip(), events=events, transport=transport)
    except RosterError as exc:
        events.warning("fetch_contributors_failed", repository=(repository or "").strip(), error=type(exc).__name__)
        return FetchContributorsFailure(error=exc.message)
    except Exception:
        logger.exception("fetch_contributors unexpected failure repository=%s", (repository or "").strip())
        return FetchContributorsFailure(error=UNEXPECTED_ERROR_MESSAGE)
    return FetchContributorsSuccess(data=records)
