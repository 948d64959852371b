"""
Domain model for monitored brands.
"""
from enum import Enum as PyEnum

from sqlalchemy import Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from aeolytics.models.base import Base, OwnedBaseModel


class DomainStatus(str, PyEnum):
    PENDING = "pending"
    ACTIVE = "active"
    ERROR = "error"


class Domain(Base, OwnedBaseModel):
    """A brand domain whose mentions are tracked."""

    __tablename__ = "domains"

    domain = Column(String(255), nullable=False, index=True)
    status = Column(
        Enum(DomainStatus),
        default=DomainStatus.PENDING,
        nullable=False,
    )
    queries_count = Column(Integer, default=0, nullable=False)
    citations_count = Column(Integer, default=0, nullable=False)
    last_check = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="domains")
    queries = relationship("Query", back_populates="domain")

    def __repr__(self) -> str:
        return f"<Domain {self.domain} ({self.status.value})>"
