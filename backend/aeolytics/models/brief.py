"""
Fix-It brief model.
"""
from enum import Enum as PyEnum

from sqlalchemy import Column, Enum, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship

from aeolytics.models.base import Base, OwnedBaseModel


class BriefStatus(str, PyEnum):
    GENERATED = "generated"
    DOWNLOADED = "downloaded"
    IMPLEMENTED = "implemented"


class FixItBrief(Base, OwnedBaseModel):
    """Content optimization brief generated for one query."""

    __tablename__ = "fix_it_briefs"

    query_id = Column(
        UUID(as_uuid=True),
        ForeignKey("queries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    meta_description = Column(String(500), nullable=True)
    schema_markup = Column(Text, nullable=True)
    content_brief = Column(Text, nullable=True)
    faq_entries = Column(JSONB, default=list)
    status = Column(
        Enum(BriefStatus),
        default=BriefStatus.GENERATED,
        nullable=False,
    )

    # Relationships
    query = relationship("Query", back_populates="briefs")

    def __repr__(self) -> str:
        return f"<FixItBrief {self.title[:30]} ({self.status.value})>"
