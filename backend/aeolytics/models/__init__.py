"""
SQLAlchemy models for AEOlytics.
"""
from aeolytics.models.base import Base, BaseModel, OwnedBaseModel
from aeolytics.models.user import User, Plan, SubscriptionStatus
from aeolytics.models.domain import Domain, DomainStatus
from aeolytics.models.query import Query, QueryStatus, Engine, MONITORED_ENGINES
from aeolytics.models.citation import Citation, CitationPosition
from aeolytics.models.brief import FixItBrief, BriefStatus
from aeolytics.models.team import Team, TeamMember, TeamInvitation, TeamRole

__all__ = [
    "Base",
    "BaseModel",
    "OwnedBaseModel",
    "User",
    "Plan",
    "SubscriptionStatus",
    "Domain",
    "DomainStatus",
    "Query",
    "QueryStatus",
    "Engine",
    "MONITORED_ENGINES",
    "Citation",
    "CitationPosition",
    "FixItBrief",
    "BriefStatus",
    "Team",
    "TeamMember",
    "TeamInvitation",
    "TeamRole",
]
