"""
Query model for the prompts checked against AI engines.
"""
from enum import Enum as PyEnum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship

from aeolytics.models.base import Base, OwnedBaseModel


class Engine(str, PyEnum):
    CHATGPT = "ChatGPT"
    PERPLEXITY = "Perplexity"
    GEMINI = "Gemini"
    COPILOT = "Copilot"


# Engines the processing pipeline can run today
MONITORED_ENGINES = [Engine.CHATGPT.value, Engine.PERPLEXITY.value, Engine.GEMINI.value]


class QueryStatus(str, PyEnum):
    ACTIVE = "active"
    PAUSED = "paused"
    DELETED = "deleted"


class Query(Base, OwnedBaseModel):
    """A search query monitored across AI engines.

    Deletion is soft: the status moves to ``deleted`` and every read path
    filters those rows out.
    """

    __tablename__ = "queries"

    query_text = Column(Text, nullable=False)
    domain_id = Column(
        UUID(as_uuid=True),
        ForeignKey("domains.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    intent_tags = Column(JSONB, default=list)
    engines = Column(JSONB, default=list)
    status = Column(
        Enum(QueryStatus),
        default=QueryStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    last_run = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="queries")
    domain = relationship("Domain", back_populates="queries")
    citations = relationship("Citation", back_populates="query", cascade="all, delete-orphan")
    briefs = relationship("FixItBrief", back_populates="query", cascade="all, delete-orphan")

    @property
    def is_deleted(self) -> bool:
        return self.status == QueryStatus.DELETED

    def __repr__(self) -> str:
        return f"<Query {self.query_text[:30]}... ({self.status.value})>"
