"""
User profile model carrying the subscription plan.
"""
from enum import Enum as PyEnum

from sqlalchemy import Column, Enum, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from aeolytics.models.base import Base, BaseModel


class Plan(str, PyEnum):
    FREE = "free"
    PRO = "pro"
    AGENCY = "agency"


class SubscriptionStatus(str, PyEnum):
    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    UNPAID = "unpaid"


class User(Base, BaseModel):
    """User profile. The id matches the subject of the auth provider's token."""

    __tablename__ = "users"

    email = Column(String(255), nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    # Written by the billing webhook; stored as a plain string so an
    # unexpected value degrades to the free tier instead of failing to load.
    plan = Column(String(50), default=Plan.FREE.value, nullable=False)
    usage_queries = Column(Integer, default=0, nullable=False)
    usage_domains = Column(Integer, default=0, nullable=False)
    subscription_status = Column(Enum(SubscriptionStatus), nullable=True)
    email_notifications = Column(JSONB, default=dict)

    # Relationships
    domains = relationship("Domain", back_populates="user", cascade="all, delete-orphan")
    queries = relationship("Query", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.plan})>"
