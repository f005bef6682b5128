"""Feedback ingestion and enrichment endpoints."""

from datetime import datetime
from typing import Optional

from litestar import Controller, get, patch, post
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Source, Urgency, Sentiment, Category, TriageStatus
from app.triage import apply_enrichment, get_feedback, ingest_feedback


# --- Request/Response Schemas ---

class IngestFeedbackRequest(BaseModel):
    """Feedback captured from an external source."""
    source: str = Field(..., description="discord, twitter, github or support")
    source_id: Optional[str] = Field(default=None, max_length=200, description="ID in the source system")
    author: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    created_at: Optional[datetime] = None
    urgency: Optional[str] = None
    sentiment: Optional[str] = None
    category: Optional[str] = None


class EnrichmentRequest(BaseModel):
    """Classification output from the enrichment provider. Omitted fields are left as-is."""
    urgency: Optional[str] = None
    sentiment: Optional[str] = None
    category: Optional[str] = None


class FeedbackItemResponse(BaseModel):
    """Feedback item as returned to clients."""
    id: int
    source: Source
    source_id: Optional[str]
    author: str
    content: str
    created_at: Optional[datetime]
    urgency: Optional[Urgency]
    sentiment: Optional[Sentiment]
    category: Optional[Category]
    triage_status: Optional[TriageStatus]
    triaged_at: Optional[datetime]
    resolved_at: Optional[datetime]

    class Config:
        from_attributes = True


class IngestFeedbackResponse(BaseModel):
    """Result of an ingestion; ``created`` is false for a deduplicated event."""
    item: FeedbackItemResponse
    created: bool


# --- Controller ---

class FeedbackController(Controller):
    """API endpoints for feeding items into the triage queue."""

    path = "/api/feedback"
    tags = ["feedback"]

    @post("/")
    async def ingest(
        self,
        data: IngestFeedbackRequest,
        session: AsyncSession,
    ) -> IngestFeedbackResponse:
        """Ingest a feedback item (idempotent per source event)."""
        item, created = await ingest_feedback(
            session,
            source=data.source,
            author=data.author,
            content=data.content,
            source_id=data.source_id,
            created_at=data.created_at,
            urgency=data.urgency,
            sentiment=data.sentiment,
            category=data.category,
        )
        return IngestFeedbackResponse(
            item=FeedbackItemResponse.model_validate(item),
            created=created,
        )

    @get("/{item_id:int}")
    async def get_item(
        self,
        item_id: int,
        session: AsyncSession,
    ) -> FeedbackItemResponse:
        """Get a single feedback item."""
        item = await get_feedback(session, item_id)
        return FeedbackItemResponse.model_validate(item)

    @patch("/{item_id:int}/enrichment")
    async def enrich(
        self,
        item_id: int,
        data: EnrichmentRequest,
        session: AsyncSession,
    ) -> FeedbackItemResponse:
        """Store urgency/sentiment/category for an item."""
        item = await apply_enrichment(session, item_id, **data.model_dump(exclude_unset=True))
        return FeedbackItemResponse.model_validate(item)
