"""API module - Routes and dependencies"""
from .deps import get_correlation_id_dep, get_quality_service_dep, get_registry_dep

__all__ = ["get_correlation_id_dep", "get_quality_service_dep", "get_registry_dep"]
