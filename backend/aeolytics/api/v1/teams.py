"""
Team collaboration endpoints.
"""
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from aeolytics.core.deps import CurrentUser, DbSession, require_entitlement
from aeolytics.core.exceptions import NotFoundError
from aeolytics.models.user import User
from aeolytics.schemas.common import MessageResponse
from aeolytics.schemas.team import (
    InvitationCreate,
    TeamCreate,
    TeamInvitationResponse,
    TeamMemberResponse,
    TeamOverview,
    TeamResponse,
)
from aeolytics.services.entitlements import Feature
from aeolytics.services.team_service import TeamService

router = APIRouter(prefix="/teams", tags=["Teams"])

TeamOwner = Annotated[User, Depends(require_entitlement(Feature.TEAM_COLLABORATION))]


@router.get("", response_model=TeamOverview)
async def get_team(current_user: TeamOwner, db: DbSession):
    """Get the current user's team with members and pending invitations."""
    service = TeamService(db)
    team = await service.get_team(current_user)
    if team is None:
        return TeamOverview()

    members = await service.list_members(current_user)
    invitations = await service.list_invitations(current_user)
    return TeamOverview(
        team=TeamResponse.model_validate(team),
        members=[TeamMemberResponse.model_validate(m) for m in members],
        invitations=[TeamInvitationResponse.model_validate(i) for i in invitations],
    )


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(data: TeamCreate, current_user: TeamOwner, db: DbSession):
    """Create the current user's team."""
    team = await TeamService(db).create_team(current_user, data)
    return TeamResponse.model_validate(team)


@router.post(
    "/invitations",
    response_model=TeamInvitationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def invite_member(data: InvitationCreate, current_user: TeamOwner, db: DbSession):
    """Invite someone to the current user's team."""
    invitation = await TeamService(db).invite_member(current_user, data)
    return TeamInvitationResponse.model_validate(invitation)


@router.delete("/invitations/{invitation_id}", response_model=MessageResponse)
async def delete_invitation(invitation_id: UUID, current_user: TeamOwner, db: DbSession):
    """Cancel a pending invitation."""
    if not await TeamService(db).delete_invitation(current_user, invitation_id):
        raise NotFoundError("Invitation")
    return MessageResponse(message="Invitation cancelled")


@router.delete("/members/{member_id}", response_model=MessageResponse)
async def remove_member(member_id: UUID, current_user: TeamOwner, db: DbSession):
    """Remove a member from the current user's team."""
    if not await TeamService(db).remove_member(current_user, member_id):
        raise NotFoundError("Team member")
    return MessageResponse(message="Member removed from team")


@router.post("/join/{token}", response_model=TeamMemberResponse)
async def join_team(token: str, current_user: CurrentUser, db: DbSession):
    """
    Join a team with an invitation token.

    Any plan may join; the team's owner holds the entitlement.
    """
    member = await TeamService(db).accept_invitation(current_user, token)
    return TeamMemberResponse.model_validate(member)
