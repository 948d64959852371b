"""
Team collaboration models: a team per owner, its members and pending invitations.
"""
from enum import Enum as PyEnum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship

from aeolytics.models.base import Base, BaseModel, OwnedBaseModel


class TeamRole(str, PyEnum):
    OWNER = "owner"
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class Team(Base, OwnedBaseModel):
    """A collaboration team. ``user_id`` is the owner; each owner has one team."""

    __tablename__ = "teams"
    __table_args__ = (UniqueConstraint("user_id", name="uq_teams_owner"),)

    name = Column(String(255), nullable=False)
    plan = Column(String(50), nullable=False)

    # Relationships
    members = relationship("TeamMember", back_populates="team", cascade="all, delete-orphan")
    invitations = relationship(
        "TeamInvitation", back_populates="team", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Team {self.name}>"


class TeamMember(Base, BaseModel):
    """A user's membership in a team."""

    __tablename__ = "team_members"
    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_members_user"),)

    team_id = Column(
        UUID(as_uuid=True),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = Column(Enum(TeamRole), default=TeamRole.VIEWER, nullable=False)
    permissions = Column(JSONB, default=dict)
    invited_by = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    team = relationship("Team", back_populates="members")
    user = relationship("User", foreign_keys=[user_id], lazy="selectin")

    def __repr__(self) -> str:
        return f"<TeamMember {self.user_id} ({self.role.value})>"


class TeamInvitation(Base, BaseModel):
    """An e-mailed invitation to join a team, redeemed with its token."""

    __tablename__ = "team_invitations"

    team_id = Column(
        UUID(as_uuid=True),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email = Column(String(255), nullable=False, index=True)
    role = Column(Enum(TeamRole), default=TeamRole.VIEWER, nullable=False)
    invited_by = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    token = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    accepted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    team = relationship("Team", back_populates="invitations")

    def __repr__(self) -> str:
        return f"<TeamInvitation {self.email} ({self.role.value})>"
