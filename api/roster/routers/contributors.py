from __future__ import annotations

from typing import Optional

import httpx
from fastapi import APIRouter, Header, HTTPException, Request

from roster.models.contributor import ContributorRecord, FetchContributorsRequest, FetchContributorsResult
from roster.models.error import ErrorDetail
from roster.services import contributor_service
from roster.services.github_errors import InvalidInputError, RosterError
from roster.services.repository_name import parse_repository

router = APIRouter()


def get_github_transport(request: Request) -> Optional[httpx.AsyncBaseTransport]:
    """Outbound transport override; None in production, a mock transport in tests."""
    return getattr(request.app.state, "github_transport", None)


def _bearer_token(authorization: Optional[str]) -> str:
    raw = (authorization or "").strip()
    scheme, _, token = raw.partition(" ")
    if scheme.lower() in {"bearer", "token"} and token.strip():
        return token.strip()
    raise HTTPException(status_code=401, detail="Authorization header with a GitHub token is required")


@router.post("/contributors/fetch", response_model=FetchContributorsResult)
async def fetch_contributors(body: FetchContributorsRequest, request: Request) -> FetchContributorsResult:
    """Fetch the contributor roster. Always 200; check ``success`` in the body."""
    return await contributor_service.fetch_contributors(
        body.repository,
        body.token,
        transport=get_github_transport(request),
    )


@router.get(
    "/repos/{owner}/{repo}/contributors",
    response_model=list[ContributorRecord],
    responses={
        400: {"model": ErrorDetail},
        401: {"model": ErrorDetail},
        403: {"model": ErrorDetail},
        404: {"model": ErrorDetail},
        429: {"model": ErrorDetail},
        502: {"model": ErrorDetail},
    },
)
async def list_repository_contributors(
    owner: str,
    repo: str,
    request: Request,
    authorization: Optional[str] = Header(None),
) -> list[ContributorRecord]:
    """Contributor roster for owner/repo, with GitHub failures mapped to HTTP status codes."""
    token = _bearer_token(authorization)
    try:
        repository = parse_repository(f"{owner}/{repo}")
    except InvalidInputError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    try:
        return await contributor_service.aggregate_contributors(
            repository,
            token,
            transport=get_github_transport(request),
        )
    except RosterError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
