"""Ingestion and enrichment write paths.

Ingestion creates pending items and deduplicates on ``(source, source_id)``.
Enrichment fills in urgency/sentiment/category whenever the provider gets to it;
triage never waits on it.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import FeedbackItem, Source, Urgency, Sentiment, Category
from app.triage.decisions import get_feedback
from app.triage.errors import InvalidInput, parse_choice
from app.utils.logging import error_log

logger = logging.getLogger("Sift.ingest")

ENRICHMENT_FIELDS = {
    "urgency": Urgency,
    "sentiment": Sentiment,
    "category": Category,
}


async def find_by_source_id(
    session: AsyncSession,
    source: Source,
    source_id: str,
) -> Optional[FeedbackItem]:
    result = await session.execute(
        select(FeedbackItem).where(
            FeedbackItem.source == source,
            FeedbackItem.source_id == source_id,
        )
    )
    return result.scalar_one_or_none()


async def ingest_feedback(
    session: AsyncSession,
    source: Any,
    author: str,
    content: str,
    source_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
    urgency: Any = None,
    sentiment: Any = None,
    category: Any = None,
) -> Tuple[FeedbackItem, bool]:
    """
    Store a new pending feedback item.

    Returns ``(item, created)``. If ``source_id`` matches an existing row for the
    same source, that row is returned untouched with ``created=False``.
    """
    parsed_source = parse_choice(Source, source, "source")
    if parsed_source is None:
        raise InvalidInput(detail="Missing feedback source")
    if not author or not content:
        raise InvalidInput(detail="Feedback requires an author and content")

    enrichment = {
        name: parse_choice(enum_cls, value, name)
        for name, enum_cls, value in (
            ("urgency", Urgency, urgency),
            ("sentiment", Sentiment, sentiment),
            ("category", Category, category),
        )
    }

    if source_id is not None:
        existing = await find_by_source_id(session, parsed_source, source_id)
        if existing:
            logger.debug(f"Skipping duplicate {parsed_source.value} event {source_id} (feedback {existing.id})")
            return existing, False

    item = FeedbackItem(
        source=parsed_source,
        source_id=source_id,
        author=author,
        content=content,
        **enrichment,
    )
    if created_at is not None:
        # Naive timestamps are taken as UTC; SQLite drops offsets on write
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        item.created_at = created_at.astimezone(timezone.utc)
    session.add(item)

    try:
        await session.commit()
    except IntegrityError as e:
        # Lost a race with another ingester for the same external event
        await session.rollback()
        existing = None
        if source_id is not None:
            existing = await find_by_source_id(session, parsed_source, source_id)
        if existing is None:
            error_log(
                "Failed to ingest feedback",
                exc=e,
                context={"source": parsed_source.value, "source_id": source_id},
            )
            raise
        return existing, False

    await session.refresh(item)
    logger.info(f"Ingested feedback {item.id} from {parsed_source.value} ({author})")
    return item, True


async def apply_enrichment(session: AsyncSession, item_id: int, **fields: Any) -> FeedbackItem:
    """
    Record enrichment output for an item.

    Only the given fields are written; an explicit ``None`` clears a field.
    """
    unknown = set(fields) - set(ENRICHMENT_FIELDS)
    if unknown:
        raise InvalidInput(detail=f"Unknown enrichment field(s): {', '.join(sorted(unknown))}")

    values = {
        name: parse_choice(ENRICHMENT_FIELDS[name], value, name)
        for name, value in fields.items()
    }
    item = await get_feedback(session, item_id)
    for name, value in values.items():
        setattr(item, name, value)
    await session.commit()
    await session.refresh(item)

    logger.info(f"Enriched feedback {item_id}: {', '.join(sorted(values)) or 'no changes'}")
    return item
