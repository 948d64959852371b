"""
Team service for business logic.

Each owner runs at most one team. The owner is added as its first member
with the owner role; everyone else joins by redeeming an e-mailed invitation.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from aeolytics.core.exceptions import (
    DuplicateEntityError,
    NotFoundError,
    ValidationFailureError,
    store_errors,
)
from aeolytics.models.team import Team, TeamInvitation, TeamMember, TeamRole
from aeolytics.models.user import User
from aeolytics.schemas.team import InvitationCreate, TeamCreate

logger = logging.getLogger(__name__)

INVITATION_TTL = timedelta(days=7)


class TeamService:
    """Service for team operations. Management calls are scoped to ``owner``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_team(self, owner: User) -> Team | None:
        """Get the team the owner runs, if any."""
        with store_errors("load team"):
            result = await self.db.execute(select(Team).where(Team.user_id == owner.id))
        return result.scalar_one_or_none()

    async def _require_team(self, owner: User) -> Team:
        team = await self.get_team(owner)
        if team is None:
            raise NotFoundError("Team")
        return team

    async def create_team(self, owner: User, data: TeamCreate) -> Team:
        """
        Create the owner's team and its owner membership.

        Raises ValidationFailureError for a blank name and
        DuplicateEntityError when the owner already has a team.
        """
        name = data.name.strip()
        if not name:
            raise ValidationFailureError("Team name must not be empty")
        if await self.get_team(owner):
            raise DuplicateEntityError("You already have a team")

        team = Team(user_id=owner.id, name=name, plan=owner.plan)
        with store_errors("create team"):
            self.db.add(team)
            await self.db.flush()
            await self.db.refresh(team)
            self.db.add(
                TeamMember(
                    team_id=team.id,
                    user_id=owner.id,
                    user=owner,
                    role=TeamRole.OWNER,
                    permissions={},
                    joined_at=datetime.now(timezone.utc),
                )
            )
            await self.db.flush()

        logger.info(f"Created team {team.id} for user {owner.id}")
        return team

    async def list_members(self, owner: User) -> list[TeamMember]:
        """Members of the owner's team, oldest first."""
        with store_errors("load team members"):
            result = await self.db.execute(
                select(TeamMember)
                .join(Team, TeamMember.team_id == Team.id)
                .where(Team.user_id == owner.id)
                .order_by(TeamMember.joined_at)
            )
        return list(result.scalars().all())

    async def list_invitations(
        self, owner: User, now: datetime | None = None
    ) -> list[TeamInvitation]:
        """Invitations of the owner's team that are neither accepted nor expired."""
        now = now or datetime.now(timezone.utc)
        with store_errors("load invitations"):
            result = await self.db.execute(
                select(TeamInvitation)
                .join(Team, TeamInvitation.team_id == Team.id)
                .where(
                    Team.user_id == owner.id,
                    TeamInvitation.accepted_at.is_(None),
                    TeamInvitation.expires_at > now,
                )
                .order_by(TeamInvitation.created_at)
            )
        return list(result.scalars().all())

    async def invite_member(self, owner: User, data: InvitationCreate) -> TeamInvitation:
        """
        Invite an e-mail address to the owner's team.

        Raises NotFoundError without a team and DuplicateEntityError when the
        address already has a pending invitation or belongs to a member.
        """
        team = await self._require_team(owner)
        email = data.email.strip().lower()

        if any(i.email == email for i in await self.list_invitations(owner)):
            raise DuplicateEntityError(f"{email} already has a pending invitation")
        members = await self.list_members(owner)
        if any(m.user is not None and m.user.email.lower() == email for m in members):
            raise DuplicateEntityError(f"{email} is already a team member")

        invitation = TeamInvitation(
            team_id=team.id,
            email=email,
            role=TeamRole(data.role),
            invited_by=owner.id,
            token=secrets.token_urlsafe(32),
            expires_at=datetime.now(timezone.utc) + INVITATION_TTL,
        )
        with store_errors("create invitation"):
            self.db.add(invitation)
            await self.db.flush()
            await self.db.refresh(invitation)

        logger.info(f"Invited {email} to team {team.id} as {data.role}")
        return invitation

    async def remove_member(self, owner: User, member_id: UUID) -> bool:
        """Remove a member from the owner's team. The owner cannot be removed."""
        with store_errors("load team member"):
            result = await self.db.execute(
                select(TeamMember)
                .join(Team, TeamMember.team_id == Team.id)
                .where(TeamMember.id == member_id, Team.user_id == owner.id)
            )
        member = result.scalar_one_or_none()
        if member is None:
            return False
        if member.role == TeamRole.OWNER:
            raise ValidationFailureError("The team owner cannot be removed")

        with store_errors("remove team member"):
            await self.db.delete(member)
            await self.db.flush()
        return True

    async def delete_invitation(self, owner: User, invitation_id: UUID) -> bool:
        """Cancel one of the owner's invitations."""
        with store_errors("load invitation"):
            result = await self.db.execute(
                select(TeamInvitation)
                .join(Team, TeamInvitation.team_id == Team.id)
                .where(TeamInvitation.id == invitation_id, Team.user_id == owner.id)
            )
        invitation = result.scalar_one_or_none()
        if invitation is None:
            return False

        with store_errors("delete invitation"):
            await self.db.delete(invitation)
            await self.db.flush()
        return True

    async def accept_invitation(
        self, user: User, token: str, now: datetime | None = None
    ) -> TeamMember:
        """
        Join a team with an invitation token.

        The invitation must be pending, unexpired and addressed to the
        user's e-mail; otherwise NotFoundError is raised.
        """
        now = now or datetime.now(timezone.utc)
        with store_errors("load invitation"):
            result = await self.db.execute(
                select(TeamInvitation).where(
                    TeamInvitation.token == token,
                    TeamInvitation.accepted_at.is_(None),
                    TeamInvitation.expires_at > now,
                )
            )
        invitation = result.scalar_one_or_none()
        if invitation is None or invitation.email != user.email.lower():
            raise NotFoundError("Invitation")

        with store_errors("load team member"):
            result = await self.db.execute(
                select(TeamMember.id).where(
                    TeamMember.team_id == invitation.team_id,
                    TeamMember.user_id == user.id,
                )
            )
        if result.scalar_one_or_none() is not None:
            raise DuplicateEntityError("You are already a member of this team")

        member = TeamMember(
            team_id=invitation.team_id,
            user_id=user.id,
            user=user,
            role=invitation.role,
            permissions={},
            invited_by=invitation.invited_by,
            joined_at=now,
        )
        with store_errors("join team"):
            self.db.add(member)
            invitation.accepted_at = now
            await self.db.flush()

        logger.info(f"User {user.id} joined team {invitation.team_id}")
        return member
