"""Result Assembler - validate, score, repair and re-validate a workflow"""
from typing import Optional

from ..config.settings import Settings, settings as default_settings
from ..domain.models import ValidationResult, Workflow
from ..registry.node_registry import NodeRegistry
from ..utils.logger import get_logger
from .auto_fixer import AutoFixer
from .scoring import WorkflowScorer
from .validator import WorkflowValidator

logger = get_logger(__name__)


class ResultAssembler:
    """
    Compose validator, scorer and auto-fixer into one ValidationResult

    Flow:
    1. Validate the graph
    2. If auto-fix is enabled and any issue is fixable, repair a copy
    3. Re-validate and re-score the repaired copy once, so the returned
       issues and scores describe the graph that is handed back
    """

    def __init__(
        self,
        registry: NodeRegistry,
        scorer: Optional[WorkflowScorer] = None,
        auto_fix_enabled: Optional[bool] = None,
        config: Optional[Settings] = None,
    ):
        self.registry = registry
        self.config = config or default_settings
        self.validator = WorkflowValidator(registry, self.config)
        self.fixer = AutoFixer(registry, self.config)
        self.scorer = scorer or WorkflowScorer(self.config)
        self.auto_fix_enabled = self.config.auto_fix_enabled if auto_fix_enabled is None else auto_fix_enabled

    def assemble(self, graph: Workflow) -> ValidationResult:
        """
        Produce the final result for a workflow

        Returns:
            ValidationResult; repaired_graph is set only when auto-fix ran
        """
        validation = self.validator.validate(graph)

        needs_fix = self.auto_fix_enabled and any(i.auto_fixable for i in validation.issues)
        if not needs_fix:
            card = self.scorer.score(graph, validation.issues)
            result = ValidationResult(
                is_valid=validation.is_valid,
                issues=validation.issues,
                quality_score=card.quality_score,
                complexity_score=card.complexity_score,
            )
            self._log(graph, result)
            return result

        fixed = self.fixer.fix(graph, validation.issues)
        repaired = fixed.repaired_graph
        revalidation = self.validator.validate(repaired)
        card = self.scorer.score(repaired, revalidation.issues)

        result = ValidationResult(
            is_valid=revalidation.is_valid,
            issues=revalidation.issues,
            quality_score=card.quality_score,
            complexity_score=card.complexity_score,
            repaired_graph=repaired,
            applied_fixes=fixed.applied_fixes,
        )
        self._log(graph, result)
        return result

    @staticmethod
    def _log(graph: Workflow, result: ValidationResult) -> None:
        logger.info(
            f"Workflow {graph.id or graph.name!r} assessed: valid={result.is_valid}, "
            f"quality={result.quality_score}, complexity={result.complexity_score}",
            extra={
                "workflow_id": graph.id,
                "node_count": len(graph.nodes),
                "issue_count": len(result.issues),
                "error_count": len(result.errors),
                "fix_count": len(result.applied_fixes),
                "quality_score": result.quality_score,
                "complexity_score": result.complexity_score,
            }
        )


def assemble(
    graph: Workflow,
    registry: NodeRegistry,
    auto_fix_enabled: Optional[bool] = None,
) -> ValidationResult:
    """Validate, score and (when needed) repair a workflow"""
    return ResultAssembler(registry, auto_fix_enabled=auto_fix_enabled).assemble(graph)
