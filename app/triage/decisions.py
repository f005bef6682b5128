"""Triage transitions: recording a reviewer's disposition for an item."""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import FeedbackItem, TriageStatus, utcnow
from app.triage.errors import FeedbackNotFound, InvalidStatus, parse_choice

logger = logging.getLogger("Sift.decisions")


async def get_feedback(session: AsyncSession, item_id: int) -> FeedbackItem:
    """Fetch a feedback item by id or raise FeedbackNotFound."""
    result = await session.execute(
        select(FeedbackItem).where(FeedbackItem.id == item_id)
    )
    item = result.scalar_one_or_none()
    if not item:
        raise FeedbackNotFound(item_id)
    return item


def parse_disposition(value: Any) -> TriageStatus:
    if value is None:
        raise InvalidStatus(detail="Missing triage status")
    return parse_choice(TriageStatus, value, "status", error_cls=InvalidStatus)


async def apply_decision(
    session: AsyncSession,
    item_id: int,
    status: Any,
    now: Optional[datetime] = None,
) -> FeedbackItem:
    """
    Set an item's disposition and stamp ``triaged_at``.

    This is an unconditional overwrite: an already-triaged item is re-triaged
    and its timestamp reset. Concurrent decisions are last-write-wins.
    ``resolved_at`` is left as it is.
    """
    disposition = parse_disposition(status)
    item = await get_feedback(session, item_id)

    previous = item.triage_status
    item.triage_status = disposition
    item.triaged_at = now or utcnow()
    await session.commit()
    await session.refresh(item)

    if previous is not None and previous != disposition:
        logger.info(f"Feedback {item_id} re-triaged: {previous.value} -> {disposition.value}")
    else:
        logger.info(f"Feedback {item_id} triaged as {disposition.value}")
    return item
