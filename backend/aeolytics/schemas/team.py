"""
Team collaboration schemas.
"""
from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import EmailStr, Field

from aeolytics.models.team import TeamRole
from aeolytics.schemas.common import BaseSchema, IDSchema


class TeamCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)


class TeamResponse(IDSchema):
    """Team response. ``user_id`` is the owner."""

    user_id: UUID
    name: str
    plan: str
    created_at: datetime


class MemberProfile(BaseSchema):
    email: str
    full_name: str | None = None


class TeamMemberResponse(IDSchema):
    team_id: UUID
    user_id: UUID
    role: TeamRole
    permissions: dict[str, Any] = {}
    invited_by: UUID | None = None
    joined_at: datetime
    user: MemberProfile | None = None


class InvitationCreate(BaseSchema):
    """Invite someone by e-mail. The owner role cannot be handed out."""

    email: EmailStr
    role: Literal["admin", "editor", "viewer"] = "viewer"


class TeamInvitationResponse(IDSchema):
    team_id: UUID
    email: str
    role: TeamRole
    invited_by: UUID
    token: str
    expires_at: datetime
    accepted_at: datetime | None = None
    created_at: datetime


class TeamOverview(BaseSchema):
    """The owner's team with its members and pending invitations."""

    team: TeamResponse | None = None
    members: list[TeamMemberResponse] = []
    invitations: list[TeamInvitationResponse] = []
