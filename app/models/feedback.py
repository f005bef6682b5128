"""Feedback item model: ingested customer feedback and its triage state."""

import enum
from datetime import datetime
from typing import Optional, Type

from sqlalchemy import String, Text, Enum, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Source(str, enum.Enum):
    """Where a feedback item was collected."""
    DISCORD = "discord"
    TWITTER = "twitter"
    GITHUB = "github"
    SUPPORT = "support"


class Urgency(str, enum.Enum):
    """Enrichment-provided urgency."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Sentiment(str, enum.Enum):
    """Enrichment-provided sentiment."""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class Category(str, enum.Enum):
    """Enrichment-provided category."""
    BUG = "bug"
    FEATURE_REQUEST = "feature_request"
    QUESTION = "question"
    COMPLAINT = "complaint"
    PRAISE = "praise"
    OTHER = "other"


class TriageStatus(str, enum.Enum):
    """Disposition assigned by a reviewer. NULL in the table means pending."""
    ESCALATE = "escalate"
    BACKLOG = "backlog"
    DUPLICATE = "duplicate"
    NOISE = "noise"


# Queue priority: lower rank is served first, unclassified items go last
URGENCY_RANK = {
    Urgency.CRITICAL: 1,
    Urgency.HIGH: 2,
    Urgency.MEDIUM: 3,
    Urgency.LOW: 4,
}
UNCLASSIFIED_RANK = 5

# Review list grouping order
DISPOSITION_RANK = {
    TriageStatus.ESCALATE: 1,
    TriageStatus.BACKLOG: 2,
    TriageStatus.DUPLICATE: 3,
    TriageStatus.NOISE: 4,
}


def _enum_column(enum_cls: Type[enum.Enum]) -> Enum:
    # Store lowercase values as plain VARCHAR so raw-SQL migrations and CHECK
    # constraints line up with what the ORM writes
    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class FeedbackItem(Base):
    """
    A single piece of customer feedback.

    Lifecycle: created pending (triage_status NULL) -> triaged with one of four
    dispositions (triaged_at stamped) -> optionally resolved / unresolved.
    Everything except the three triage fields and the enrichment fields is
    write-once at ingestion.
    """

    __tablename__ = "feedback"
    __table_args__ = (
        UniqueConstraint("source", "source_id", name="uq_feedback_source_source_id"),
    )

    source: Mapped[Source] = mapped_column(_enum_column(Source), nullable=False, index=True)
    source_id: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    author: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Enrichment fields
    urgency: Mapped[Optional[Urgency]] = mapped_column(
        _enum_column(Urgency), nullable=True, index=True,
    )
    sentiment: Mapped[Optional[Sentiment]] = mapped_column(
        _enum_column(Sentiment), nullable=True,
    )
    category: Mapped[Optional[Category]] = mapped_column(
        _enum_column(Category), nullable=True,
    )

    # Triage fields
    triage_status: Mapped[Optional[TriageStatus]] = mapped_column(
        _enum_column(TriageStatus), nullable=True, index=True,
    )
    triaged_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    resolved_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    def __repr__(self) -> str:
        status = self.triage_status.value if self.triage_status else "pending"
        return f"<FeedbackItem {self.id} ({self.source.value}) - {status}>"
