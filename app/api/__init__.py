"""Sift API routes."""

from app.api.triage import TriageController
from app.api.feedback import FeedbackController

__all__ = ["TriageController", "FeedbackController"]
