"""Node Type API Routes - read-only registry catalogue"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..deps import get_correlation_id_dep, get_quality_service_dep
from ...domain.errors import DomainError
from ...domain.models import NodeTypeDefinition
from ...services.workflow_service import WorkflowQualityService

router = APIRouter()


class NodeTypeListResponse(BaseModel):
    """Response for node type list"""
    items: List[NodeTypeDefinition]
    total: int


@router.get("", response_model=NodeTypeListResponse)
async def list_node_types(
    category: Optional[str] = Query(None, description="Filter by catalogue category"),
    service: WorkflowQualityService = Depends(get_quality_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """List registered node types in type order"""
    items = service.list_node_types(category=category)
    return NodeTypeListResponse(items=items, total=len(items))


@router.get("/{node_type:path}", response_model=NodeTypeDefinition)
async def get_node_type(
    node_type: str,
    service: WorkflowQualityService = Depends(get_quality_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Get one node type definition

    Types contain dots (n8n-nodes-base.webhook), so the path is matched whole.
    """
    try:
        return service.get_node_type(node_type)

    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
