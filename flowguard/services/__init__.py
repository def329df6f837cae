"""Service modules - Business logic layer"""
from .workflow_service import WorkflowQualityService

__all__ = [
    "WorkflowQualityService",
]
