"""Resolution tracking for triaged items."""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import FeedbackItem, utcnow
from app.triage.decisions import get_feedback
from app.triage.errors import InvalidInput

logger = logging.getLogger("Sift.resolution")


async def set_resolved(
    session: AsyncSession,
    item_id: int,
    resolved: Any,
    now: Optional[datetime] = None,
) -> FeedbackItem:
    """Mark an item resolved (stamp ``resolved_at``) or unresolved (clear it).

    Only a pending item cannot be resolved; clearing is always accepted.
    Repeating ``True`` refreshes the timestamp.
    """
    # bool only: 1/"true" are rejected rather than coerced
    if not isinstance(resolved, bool):
        raise InvalidInput(detail="'resolved' must be a boolean")

    item = await get_feedback(session, item_id)
    if resolved and item.triage_status is None:
        raise InvalidInput(detail=f"Feedback item {item_id} must be triaged before it can be resolved")

    item.resolved_at = (now or utcnow()) if resolved else None
    await session.commit()
    await session.refresh(item)

    logger.info(f"Feedback {item_id} marked {'resolved' if resolved else 'unresolved'}")
    return item
