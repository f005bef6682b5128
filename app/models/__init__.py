"""Sift database models."""

from app.models.base import Base, utcnow
from app.models.feedback import (
    FeedbackItem,
    Source,
    Urgency,
    Sentiment,
    Category,
    TriageStatus,
    URGENCY_RANK,
    UNCLASSIFIED_RANK,
    DISPOSITION_RANK,
)

__all__ = [
    "Base",
    "utcnow",
    "FeedbackItem",
    "Source",
    "Urgency",
    "Sentiment",
    "Category",
    "TriageStatus",
    "URGENCY_RANK",
    "UNCLASSIFIED_RANK",
    "DISPOSITION_RANK",
]
