"""Event use cases: workflow engine and comment threads."""

from engage.application.use_cases.events.comments import EventCommentService
from engage.application.use_cases.events.event_workflow import EventWorkflowEngine

__all__ = ["EventCommentService", "EventWorkflowEngine"]
