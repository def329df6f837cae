"""API Routes module"""
from fastapi import APIRouter

from .workflows import router as workflows_router
from .node_types import router as node_types_router

# Main API router
api_router = APIRouter()

# Include all route modules
api_router.include_router(workflows_router, prefix="/workflows", tags=["Workflows"])
api_router.include_router(node_types_router, prefix="/node-types", tags=["Node Types"])

__all__ = ["api_router"]
