"""Review list of already-triaged feedback."""

from typing import Any, List

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import FeedbackItem, TriageStatus, DISPOSITION_RANK
from app.triage.errors import InvalidStatus, parse_choice

disposition_rank = case(
    {status.value: rank for status, rank in DISPOSITION_RANK.items()},
    value=FeedbackItem.triage_status,
)


async def list_triaged(
    session: AsyncSession,
    status: Any = None,
    include_resolved: bool = False,
) -> List[FeedbackItem]:
    """
    Triaged items grouped by disposition (escalate, backlog, duplicate, noise),
    most recently triaged first within each group.

    ``status`` narrows to one disposition; resolved items are dropped unless
    ``include_resolved`` is set. An empty match is an empty list.
    """
    disposition = parse_choice(TriageStatus, status, "status", error_cls=InvalidStatus)

    stmt = select(FeedbackItem).where(FeedbackItem.triage_status.is_not(None))
    if disposition is not None:
        stmt = stmt.where(FeedbackItem.triage_status == disposition)
    if not include_resolved:
        stmt = stmt.where(FeedbackItem.resolved_at.is_(None))
    stmt = stmt.order_by(
        disposition_rank,
        FeedbackItem.triaged_at.desc(),
        FeedbackItem.id.desc(),
    )

    result = await session.execute(stmt)
    return list(result.scalars().all())
