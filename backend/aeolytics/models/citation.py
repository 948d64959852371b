"""
Citation model: one engine's answer to one query on one run date.
"""
from enum import Enum as PyEnum

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from aeolytics.models.base import Base, OwnedBaseModel


class CitationPosition(str, PyEnum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


class Citation(Base, OwnedBaseModel):
    """Citation check result written by the processing pipeline."""

    __tablename__ = "citations"

    query_id = Column(
        UUID(as_uuid=True),
        ForeignKey("queries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Not constrained to the Engine enum; the pipeline may report new engines
    engine = Column(String(50), nullable=False, index=True)
    response_text = Column(Text, nullable=False, default="")
    cited = Column(Boolean, default=False, nullable=False)
    position = Column(String(20), nullable=True)
    confidence_score = Column(Float, default=0.0, nullable=False)
    run_date = Column(DateTime(timezone=True), nullable=False, index=True)

    # Relationships
    query = relationship("Query", back_populates="citations")

    def __repr__(self) -> str:
        return f"<Citation {self.engine} cited={self.cited}>"
