"""Async GitHub REST client bound to a single caller-supplied token.

- every request sends Bearer auth, the v3 Accept header and a pinned API version
- no caching, no retries, no rate-limit sleeping: callers decide what a failure means
- redirects are followed, so renamed repositories and users still resolve
- ``get_json`` is the fail-fast path; the ``get_*`` helpers return raw responses
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from roster import config
from roster.services.github_errors import (
    InvalidInputError,
    MalformedResponseError,
    TransportFailureError,
    raise_for_github_status,
)


class GitHubClient:
    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        user_agent: str = config.USER_AGENT,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        token = (token or "").strip()
        if not token:
            raise InvalidInputError("GitHub token is required.")
        self._base_url = (base_url or config.github_api_base_url()).rstrip("/")
        self._timeout = timeout if timeout is not None else config.github_timeout_seconds()
        self._transport = transport
        self._headers = {
            "Accept": config.GITHUB_ACCEPT,
            "Authorization": f"Bearer {token}",
            "User-Agent": user_agent,
            "X-GitHub-Api-Version": config.GITHUB_API_VERSION,
        }
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GitHubClient":
        # Fan-out queues on the pool; only connect/read/write are bounded.
        connections = config.github_max_connections()
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=httpx.Timeout(self._timeout, pool=None),
            limits=httpx.Limits(
                max_connections=connections,
                max_keepalive_connections=connections,
            ),
            transport=self._transport,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> httpx.Response:
        """GET a path relative to the API root. Network failures raise TransportFailureError."""
        if self._client is None:
            raise RuntimeError("GitHubClient must be used as an async context manager")
        try:
            return await self._client.get(path, params=params)
        except httpx.TransportError as exc:
            raise TransportFailureError(path, str(exc) or type(exc).__name__) from exc

    async def get_json(self, path: str, *, context: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET and decode JSON, raising the classified error for any non-2xx status."""
        try:
            r = await self.get(path, params=params)
        except TransportFailureError as exc:
            raise TransportFailureError(context, exc.reason) from exc
        raise_for_github_status(r, context)
        try:
            return r.json()
        except ValueError as exc:
            raise MalformedResponseError(context) from exc

    async def list_contributors(self, full_name: str, per_page: int = config.CONTRIBUTORS_PER_PAGE) -> Any:
        """First page of repository contributors. Only page one is ever fetched."""
        return await self.get_json(
            f"/repos/{full_name}/contributors",
            context=f"Repository '{full_name}'",
            params={"per_page": per_page},
        )

    async def get_user(self, username: str) -> httpx.Response:
        return await self.get(f"/users/{username}")

    async def get_collaborator_permission(self, full_name: str, username: str) -> httpx.Response:
        return await self.get(f"/repos/{full_name}/collaborators/{username}/permission")

    async def list_user_repos(self, username: str, per_page: int) -> httpx.Response:
        return await self.get(
            f"/users/{username}/repos",
            params={"type": "all", "per_page": per_page, "sort": "pushed"},
        )
