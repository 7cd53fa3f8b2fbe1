"""Composite services - Higher-level orchestration services that use the host client."""
from gitflowfinish.services.composite.finish_service import FinishWorkflowService

__all__ = [
    "FinishWorkflowService",
]
