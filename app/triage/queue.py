"""Queue selection: which pending item the reviewer sees next."""

import logging
from typing import Optional, Tuple

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import FeedbackItem, URGENCY_RANK, UNCLASSIFIED_RANK
from app.utils.logging import debug_log

logger = logging.getLogger("Sift.queue")

urgency_rank = case(
    {urgency.value: rank for urgency, rank in URGENCY_RANK.items()},
    value=FeedbackItem.urgency,
    else_=UNCLASSIFIED_RANK,
)


async def count_pending(session: AsyncSession) -> int:
    result = await session.execute(
        select(func.count(FeedbackItem.id)).where(FeedbackItem.triage_status.is_(None))
    )
    return result.scalar() or 0


async def next_pending(session: AsyncSession) -> Tuple[Optional[FeedbackItem], int]:
    """
    Return the highest-priority pending item and the current queue depth.

    Priority is urgency (critical first, unclassified last), then oldest
    ``created_at``. Nothing is reserved: two callers may receive the same item.
    The count is taken separately and includes the returned item.
    """
    stmt = (
        select(FeedbackItem)
        .where(FeedbackItem.triage_status.is_(None))
        .order_by(urgency_rank, FeedbackItem.created_at.asc(), FeedbackItem.id.asc())
        .limit(1)
    )
    result = await session.execute(stmt)
    item = result.scalar_one_or_none()

    remaining = await count_pending(session)
    debug_log(
        "Next pending item: %s (%d remaining)",
        item.id if item else None,
        remaining,
        logger=logger,
    )
    return item, remaining
