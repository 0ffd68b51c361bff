"""Use cases: event workflow, comments and analytics."""

from engage.application.use_cases.analytics import EventAnalyticsService
from engage.application.use_cases.events import EventCommentService, EventWorkflowEngine

__all__ = ["EventAnalyticsService", "EventCommentService", "EventWorkflowEngine"]
