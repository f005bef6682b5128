"""Feedback triage core: queue selection, decisions, resolution, stats, review list."""

from app.triage.errors import TriageError, FeedbackNotFound, InvalidStatus, InvalidInput
from app.triage.queue import next_pending, count_pending
from app.triage.decisions import apply_decision, get_feedback
from app.triage.resolution import set_resolved
from app.triage.stats import StatsSnapshot, compute_stats
from app.triage.listing import list_triaged
from app.triage.ingest import ingest_feedback, apply_enrichment

__all__ = [
    "TriageError",
    "FeedbackNotFound",
    "InvalidStatus",
    "InvalidInput",
    "next_pending",
    "count_pending",
    "apply_decision",
    "get_feedback",
    "set_resolved",
    "StatsSnapshot",
    "compute_stats",
    "list_triaged",
    "ingest_feedback",
    "apply_enrichment",
]
