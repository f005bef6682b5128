"""Dashboard statistics over the feedback table."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import FeedbackItem, TriageStatus, Category, Source, utcnow
from app.triage.queue import count_pending

logger = logging.getLogger("Sift.stats")

EMERGING_THEMES_LIMIT = 5


@dataclass
class StatsSnapshot:
    """
    Point-in-time dashboard numbers.

    The five figures come from independent queries and are not guaranteed to be
    mutually consistent if writes land while they run.
    """
    triaged_today: int = 0
    pending: int = 0
    by_decision: List[Tuple[TriageStatus, int]] = field(default_factory=list)
    emerging_themes: List[Tuple[Category, int]] = field(default_factory=list)
    by_source: List[Tuple[Source, int]] = field(default_factory=list)

    def decision_counts(self) -> Dict[TriageStatus, int]:
        """Counts for every disposition, defaulting absent groups to 0."""
        counts = {status: 0 for status in TriageStatus}
        counts.update(dict(self.by_decision))
        return counts

    @property
    def triaged_total(self) -> int:
        return sum(count for _, count in self.by_decision)


def local_day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """UTC bounds of the server-local calendar day containing ``now``."""
    local_now = now.astimezone()
    start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    # Re-resolve the offset so DST transitions land on real midnights
    start = start.replace(tzinfo=None).astimezone()
    end = (start.replace(tzinfo=None) + timedelta(days=1)).astimezone()
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


async def count_triaged_between(session: AsyncSession, start: datetime, end: datetime) -> int:
    result = await session.execute(
        select(func.count(FeedbackItem.id)).where(
            FeedbackItem.triaged_at >= start,
            FeedbackItem.triaged_at < end,
        )
    )
    return result.scalar() or 0


async def count_by_decision(session: AsyncSession) -> List[Tuple[TriageStatus, int]]:
    result = await session.execute(
        select(FeedbackItem.triage_status, func.count(FeedbackItem.id))
        .where(FeedbackItem.triage_status.is_not(None))
        .group_by(FeedbackItem.triage_status)
    )
    return [(status, count) for status, count in result.all()]


async def top_emerging_themes(
    session: AsyncSession,
    limit: int = EMERGING_THEMES_LIMIT,
) -> List[Tuple[Category, int]]:
    """Most common categories among items still needing attention (pending or escalated)."""
    count = func.count(FeedbackItem.id).label("count")
    result = await session.execute(
        select(FeedbackItem.category, count)
        .where(
            or_(
                FeedbackItem.triage_status.is_(None),
                FeedbackItem.triage_status == TriageStatus.ESCALATE,
            ),
            FeedbackItem.category.is_not(None),
        )
        .group_by(FeedbackItem.category)
        .order_by(desc(count))
        .limit(limit)
    )
    return [(category, n) for category, n in result.all()]


async def pending_by_source(session: AsyncSession) -> List[Tuple[Source, int]]:
    result = await session.execute(
        select(FeedbackItem.source, func.count(FeedbackItem.id))
        .where(FeedbackItem.triage_status.is_(None))
        .group_by(FeedbackItem.source)
    )
    return [(source, count) for source, count in result.all()]


async def compute_stats(session: AsyncSession, now: Optional[datetime] = None) -> StatsSnapshot:
    """Run the dashboard sub-queries. Read-only."""
    start, end = local_day_bounds(now or utcnow())

    snapshot = StatsSnapshot(
        triaged_today=await count_triaged_between(session, start, end),
        pending=await count_pending(session),
        by_decision=await count_by_decision(session),
        emerging_themes=await top_emerging_themes(session),
        by_source=await pending_by_source(session),
    )
    logger.debug(
        "Stats computed: %d pending, %d triaged today",
        snapshot.pending,
        snapshot.triaged_today,
    )
    return snapshot
