"""Failure taxonomy for roster fetches and the GitHub response classifier.

Inner layers raise these; the orchestration boundary and the routers
translate them into a result message or an HTTP status.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import httpx


class RosterError(Exception):
    """Base error. ``message`` is safe to show to the person who asked."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(RosterError):
    status_code = 400


class TransportFailureError(RosterError):
    """GitHub could not be reached at all."""

    status_code = 502

    def __init__(self, context: str, reason: str) -> None:
        super().__init__(f"Could not reach the GitHub API while fetching {context}: {reason}")
        self.context = context
        self.reason = reason


class MalformedResponseError(RosterError):
    status_code = 502

    def __init__(self, context: str) -> None:
        super().__init__(f"GitHub returned an unexpected response format for {context}.")
        self.context = context


class GitHubApiError(RosterError):
    """A non-2xx response, as classified by :func:`classify_response`."""

    status_code = 502


class NotFoundError(GitHubApiError):
    status_code = 404

    def __init__(self, context: str) -> None:
        super().__init__(
            f"{context} not found. Check the name and that your token can access it."
        )
        self.context = context


class UnauthenticatedError(GitHubApiError):
    status_code = 401

    def __init__(self) -> None:
        super().__init__("GitHub rejected the token. Check that the personal access token is valid.")


class ForbiddenError(GitHubApiError):
    status_code = 403

    def __init__(self, context: str) -> None:
        super().__init__(
            f"Access to {context} is forbidden. The token may lack the required scopes or permissions."
        )
        self.context = context


class RateLimitedError(GitHubApiError):
    status_code = 429

    def __init__(self, reset_at: Optional[datetime]) -> None:
        super().__init__(f"GitHub API rate limit exceeded. Try again after {format_reset_time(reset_at)}.")
        self.reset_at = reset_at


class ApiError(GitHubApiError):
    def __init__(self, status: int, status_text: str, context: str) -> None:
        reason = f"{status} {status_text}".strip()
        super().__init__(f"GitHub API error {reason} while fetching {context}.")
        self.status = status
        self.status_text = status_text
        self.context = context


def parse_reset_header(value: Optional[str]) -> Optional[datetime]:
    """``X-RateLimit-Reset`` is epoch seconds; anything else yields None."""
    if not value:
        return None
    try:
        return datetime.fromtimestamp(int(value.strip()), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None


def format_reset_time(reset_at: Optional[datetime]) -> str:
    if reset_at is None:
        return "an unknown time"
    return reset_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def classify_response(response: httpx.Response, context: str) -> Optional[GitHubApiError]:
    """Return None for 2xx, otherwise the typed failure for the response."""
    status = response.status_code
    if 200 <= status < 300:
        return None
    if status == 404:
        return NotFoundError(context)
    if status == 401:
        return UnauthenticatedError()
    if status == 403:
        if response.headers.get("X-RateLimit-Remaining") == "0":
            return RateLimitedError(parse_reset_header(response.headers.get("X-RateLimit-Reset")))
        return ForbiddenError(context)
    return ApiError(status, response.reason_phrase, context)


def raise_for_github_status(response: httpx.Response, context: str) -> None:
    error = classify_response(response, context)
    if error is not None:
        raise error
