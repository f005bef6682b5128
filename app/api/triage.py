"""Triage workflow endpoints: queue, decisions, stats, review list, resolution."""

from typing import Any, List, Optional

from litestar import Controller, get, post
from litestar.status_codes import HTTP_200_OK
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import TriageStatus, Category, Source
from app.api.feedback import FeedbackItemResponse
from app.triage import (
    apply_decision,
    compute_stats,
    list_triaged,
    next_pending,
    set_resolved,
)


# --- Request Schemas ---

class TriageRequest(BaseModel):
    """Disposition for one item. ``status`` is validated by the triage core."""
    id: int
    status: Optional[str] = None


class ResolveRequest(BaseModel):
    """Resolution toggle. ``resolved`` must be a JSON boolean."""
    id: int
    resolved: Any = None


# --- Response Schemas ---

class QueueResponse(BaseModel):
    """Next item to review and the pending queue depth."""
    item: Optional[FeedbackItemResponse]
    remaining: int


class SuccessResponse(BaseModel):
    success: bool = True


class DecisionCount(BaseModel):
    triage_status: TriageStatus
    count: int


class ThemeCount(BaseModel):
    category: Category
    count: int


class SourceCount(BaseModel):
    source: Source
    count: int


class StatsResponse(BaseModel):
    """Dashboard statistics."""
    triaged_today: int
    pending: int
    by_decision: List[DecisionCount]
    emerging_themes: List[ThemeCount]
    by_source: List[SourceCount]


class TriagedListResponse(BaseModel):
    items: List[FeedbackItemResponse]


# --- Controller ---

class TriageController(Controller):
    """API endpoints for the reviewer workflow."""

    path = "/api"
    tags = ["triage"]

    @get("/queue")
    async def get_queue(
        self,
        session: AsyncSession,
    ) -> QueueResponse:
        """Fetch the next untriaged feedback item."""
        item, remaining = await next_pending(session)
        return QueueResponse(
            item=FeedbackItemResponse.model_validate(item) if item else None,
            remaining=remaining,
        )

    @post("/triage", status_code=HTTP_200_OK)
    async def triage(
        self,
        data: TriageRequest,
        session: AsyncSession,
    ) -> SuccessResponse:
        """Record a triage decision (re-triaging overwrites)."""
        await apply_decision(session, data.id, data.status)
        return SuccessResponse()

    @get("/stats")
    async def get_stats(
        self,
        session: AsyncSession,
    ) -> StatsResponse:
        """Triage stats and emerging themes."""
        snapshot = await compute_stats(session)
        return StatsResponse(
            triaged_today=snapshot.triaged_today,
            pending=snapshot.pending,
            by_decision=[
                DecisionCount(triage_status=status, count=count)
                for status, count in snapshot.by_decision
            ],
            emerging_themes=[
                ThemeCount(category=category, count=count)
                for category, count in snapshot.emerging_themes
            ],
            by_source=[
                SourceCount(source=source, count=count)
                for source, count in snapshot.by_source
            ],
        )

    @get("/triaged")
    async def get_triaged(
        self,
        session: AsyncSession,
        status: Optional[str] = None,
        resolved: bool = False,
    ) -> TriagedListResponse:
        """Triaged feedback, optionally filtered by disposition; resolved items only on request."""
        items = await list_triaged(session, status=status or None, include_resolved=resolved)
        return TriagedListResponse(
            items=[FeedbackItemResponse.model_validate(item) for item in items]
        )

    @post("/resolve", status_code=HTTP_200_OK)
    async def resolve(
        self,
        data: ResolveRequest,
        session: AsyncSession,
    ) -> SuccessResponse:
        """Mark feedback as resolved or reopen it."""
        await set_resolved(session, data.id, data.resolved)
        return SuccessResponse()
