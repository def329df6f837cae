"""API Dependencies - Common dependencies for routes"""
from typing import Optional
from fastapi import Depends, Header, Request

from ..registry.loader import load_configured_registry
from ..registry.node_registry import NodeRegistry
from ..services.workflow_service import WorkflowQualityService
from ..utils.logger import set_correlation_id
from ..utils.idgen import generate_correlation_id


async def get_correlation_id_dep(
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-Id")
) -> str:
    """
    Get or generate correlation ID for request tracing

    If client provides X-Correlation-Id, use it.
    Otherwise generate a new one.
    """
    correlation_id = x_correlation_id or generate_correlation_id()
    set_correlation_id(correlation_id)
    return correlation_id


def get_registry_dep(request: Request) -> NodeRegistry:
    """
    Process-wide node type registry

    Loaded once by the application lifespan; loaded lazily when the app is
    used without running its lifespan.
    """
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        registry = load_configured_registry()
        request.app.state.registry = registry
    return registry


def get_quality_service_dep(
    registry: NodeRegistry = Depends(get_registry_dep)
) -> WorkflowQualityService:
    """Workflow quality service bound to the process-wide registry"""
    return WorkflowQualityService(registry)
