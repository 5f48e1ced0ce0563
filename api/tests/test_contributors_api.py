from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from github_fakes import FakeGitHub, repo_row
from roster.main import app

REPO = "octocat/Hello-World"


@pytest_asyncio.fixture
async def client(fake_github: FakeGitHub):
    """ASGI client; outbound GitHub calls go to the fake."""
    app.state.github_transport = fake_github.transport()
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_fetch_endpoint_returns_success_result(client: AsyncClient, fake_github: FakeGitHub) -> None:
    fake_github.contributors(REPO, [{"login": "alice", "contributions": 42}])
    fake_github.user("alice", email="alice@example.com")
    fake_github.permission(REPO, "alice", permission="write", role_name="write")
    fake_github.repos("alice", [repo_row("alice/tools", admin=True)])

    resp = await client.post("/api/contributors/fetch", json={"repository": REPO, "token": "ghp_x"})

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "data": [
            {
                "username": "alice",
                "role": {"role": "Write", "permissions": ["pull", "push"]},
                "activity": {"commit_count": 42},
                "external_repos": [
                    {"full_name": "alice/tools", "url": "https://github.com/alice/tools", "role": "Admin"}
                ],
                "emails": ["alice@example.com"],
            }
        ],
    }
    assert fake_github.calls[0].headers["authorization"] == "Bearer ghp_x"


@pytest.mark.asyncio
async def test_fetch_endpoint_reports_failures_in_body(client: AsyncClient) -> None:
    resp = await client.post("/api/contributors/fetch", json={"repository": REPO, "token": "ghp_x"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is False
    assert "not found" in body["error"]


@pytest.mark.asyncio
async def test_fetch_endpoint_validates_inputs(client: AsyncClient, fake_github: FakeGitHub) -> None:
    resp = await client.post("/api/contributors/fetch", json={"repository": "", "token": ""})

    assert resp.status_code == 200
    assert resp.json() == {
        "success": False,
        "error": "Repository name is required. GitHub token is required.",
    }
    assert fake_github.calls == []


@pytest.mark.asyncio
async def test_fetch_endpoint_empty_roster(client: AsyncClient, fake_github: FakeGitHub) -> None:
    fake_github.contributors(REPO, [])

    resp = await client.post(
        "/api/contributors/fetch",
        json={"repository": "https://github.com/octocat/Hello-World", "token": "ghp_x"},
    )

    assert resp.json() == {"success": True, "data": []}


@pytest.mark.asyncio
async def test_repo_contributors_endpoint_lists_records(client: AsyncClient, fake_github: FakeGitHub) -> None:
    fake_github.contributors(REPO, [{"login": "a", "contributions": 1}, {"login": "b", "contributions": 2}])

    resp = await client.get(f"/api/repos/{REPO}/contributors", headers={"Authorization": "Bearer ghp_x"})

    assert resp.status_code == 200
    assert [row["username"] for row in resp.json()] == ["a", "b"]
    assert "x-roster-runtime-ms" in resp.headers


@pytest.mark.asyncio
async def test_repo_contributors_endpoint_requires_token(client: AsyncClient, fake_github: FakeGitHub) -> None:
    resp = await client.get(f"/api/repos/{REPO}/contributors")

    assert resp.status_code == 401
    assert set(resp.json().keys()) == {"detail"}
    assert fake_github.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, headers, expected",
    [
        (404, {}, 404),
        (401, {}, 401),
        (403, {}, 403),
        (403, {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"}, 429),
        (500, {}, 502),
    ],
)
async def test_repo_contributors_endpoint_maps_github_errors(
    client: AsyncClient, fake_github: FakeGitHub, status: int, headers: dict, expected: int
) -> None:
    fake_github.respond(f"/repos/{REPO}/contributors", status=status, json={"message": "x"}, headers=headers)

    resp = await client.get(f"/api/repos/{REPO}/contributors", headers={"Authorization": "Bearer ghp_x"})

    assert resp.status_code == expected
    data = resp.json()
    assert set(data.keys()) == {"detail"}
    assert isinstance(data["detail"], str)


@pytest.mark.asyncio
async def test_repo_contributors_endpoint_rejects_bad_owner(client: AsyncClient, fake_github: FakeGitHub) -> None:
    resp = await client.get("/api/repos/-bad-/repo/contributors", headers={"Authorization": "Bearer ghp_x"})

    assert resp.status_code == 400
    assert fake_github.calls == []


@pytest.mark.asyncio
async def test_fetch_endpoint_422_for_wrong_body_type(client: AsyncClient) -> None:
    resp = await client.post("/api/contributors/fetch", json={"repository": ["a"], "token": "t"})

    assert resp.status_code == 422
    assert isinstance(resp.json()["detail"], list)
