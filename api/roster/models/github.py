"""Decoders for the GitHub payloads the roster consumes.

Only the fields we read are declared; everything else is ignored.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ContributorEntry(_Payload):
    """One row of GET /repos/{repo}/contributors."""

    login: str = Field(min_length=1)
    contributions: int = Field(default=0, ge=0)

    @field_validator("login")
    @classmethod
    def _strip_login(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("login must not be blank")
        return value

    @field_validator("contributions", mode="before")
    @classmethod
    def _null_contributions(cls, value: object) -> object:
        return 0 if value is None else value


class UserProfile(_Payload):
    """GET /users/{username}."""

    email: Optional[str] = None

    def public_emails(self) -> set[str]:
        email = (self.email or "").strip()
        return {email} if email else set()


class CollaboratorUser(_Payload):
    permissions: Optional[dict[str, bool]] = None


class CollaboratorPermission(_Payload):
    """GET /repos/{repo}/collaborators/{username}/permission."""

    permission: Optional[str] = None
    role_name: Optional[str] = None
    permissions: Optional[dict[str, bool]] = None
    user: Optional[CollaboratorUser] = None

    def permission_flags(self) -> Optional[dict[str, bool]]:
        if self.permissions:
            return self.permissions
        if self.user is not None and self.user.permissions:
            return self.user.permissions
        return None


class UserRepo(_Payload):
    """One row of GET /users/{username}/repos."""

    full_name: str = Field(min_length=1)
    html_url: str
    permissions: Optional[dict[str, bool]] = None
