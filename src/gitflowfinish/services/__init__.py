"""Service Layer - Organized by architectural role

Composite: Higher-level orchestration services that drive the host client
"""
from gitflowfinish.services.composite import FinishWorkflowService

__all__ = [
    "FinishWorkflowService",
]
