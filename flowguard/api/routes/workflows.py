"""Workflow API Routes - validation, repair and export endpoints"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..deps import get_correlation_id_dep, get_quality_service_dep
from ...domain.errors import DomainError
from ...domain.models import AppliedFix, ValidationIssue, ValidationResult, Workflow
from ...services.workflow_service import WorkflowQualityService
from ...utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================

class WorkflowRequest(BaseModel):
    """Workflow submitted for analysis, as native graph JSON or n8n JSON"""
    workflow: Dict[str, Any]
    auto_fix: Optional[bool] = Field(
        None, description="Overrides the server's auto-fix setting"
    )


class ValidationResponse(BaseModel):
    """Analysis of a workflow"""
    result: ValidationResult
    error_count: int
    warning_count: int
    suggestion_count: int


class AutoFixResponse(BaseModel):
    """Repaired workflow with its audit trail"""
    repaired_workflow: Workflow
    applied_fixes: List[AppliedFix] = Field(default_factory=list)
    remaining_issues: List[ValidationIssue] = Field(default_factory=list)


# ============================================================================
# Routes
# ============================================================================

@router.post("/validate", response_model=ValidationResponse)
async def validate_workflow(
    request: WorkflowRequest,
    service: WorkflowQualityService = Depends(get_quality_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Validate and score a workflow

    When auto-fix runs, issues and scores describe the repaired graph,
    which is returned in result.repaired_graph.
    """
    try:
        result = service.analyze(request.workflow, auto_fix=request.auto_fix)
        return ValidationResponse(
            result=result,
            error_count=len(result.errors),
            warning_count=len(result.warnings),
            suggestion_count=len(result.suggestions),
        )

    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.post("/auto-fix", response_model=AutoFixResponse)
async def auto_fix_workflow(
    request: WorkflowRequest,
    service: WorkflowQualityService = Depends(get_quality_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Apply every supported repair to a workflow

    Issues that could not be repaired are returned in remaining_issues.
    """
    try:
        fixed = service.auto_fix(request.workflow)

        logger.info(
            f"Auto-fix request applied {len(fixed.applied_fixes)} fix(es)",
            extra={
                "workflow_id": fixed.repaired_graph.id,
                "fix_count": len(fixed.applied_fixes),
                "issue_count": len(fixed.remaining_issues),
            }
        )

        return AutoFixResponse(
            repaired_workflow=fixed.repaired_graph,
            applied_fixes=fixed.applied_fixes,
            remaining_issues=fixed.remaining_issues,
        )

    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.post("/export")
async def export_workflow(
    request: WorkflowRequest,
    service: WorkflowQualityService = Depends(get_quality_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
) -> Dict[str, Any]:
    """
    Export a workflow as n8n JSON

    The workflow is repaired first unless auto_fix is false.
    """
    try:
        auto_fix = True if request.auto_fix is None else request.auto_fix
        return service.export(request.workflow, auto_fix=auto_fix)

    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
