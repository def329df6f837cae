"""Workflow Quality Service - raw payload entry points for the API and scripts"""
from typing import Any, Dict, List, Optional

from ..config.settings import Settings, settings as default_settings
from ..domain.errors import NodeTypeNotFoundError
from ..domain.models import AutoFixResult, NodeTypeDefinition, ValidationResult, Workflow
from ..engine.assembler import ResultAssembler
from ..engine.auto_fixer import AutoFixer
from ..engine.scoring import WorkflowScorer
from ..engine.validator import WorkflowValidator, ensure_valid_input
from ..interchange.n8n_format import parse_workflow_payload, workflow_to_n8n
from ..registry.node_registry import NodeRegistry
from ..utils.logger import get_logger

logger = get_logger(__name__)


class WorkflowQualityService:
    """Service for workflow validation, repair and export"""

    def __init__(self, registry: NodeRegistry, config: Optional[Settings] = None):
        self.registry = registry
        self.config = config or default_settings
        self.validator = WorkflowValidator(registry, self.config)
        self.fixer = AutoFixer(registry, self.config)
        self.scorer = WorkflowScorer(self.config)

    def parse(self, payload: Any) -> Workflow:
        """
        Parse a native or n8n payload and check it against the input limits

        Raises:
            InterchangeFormatError: If the payload is not a workflow
            WorkflowTooLargeError: If the graph exceeds max_graph_nodes
        """
        graph = parse_workflow_payload(payload)
        ensure_valid_input(graph, self.registry, self.config.max_graph_nodes)
        return graph

    def analyze(self, payload: Any, auto_fix: Optional[bool] = None) -> ValidationResult:
        """
        Validate and score a workflow, repairing it when auto-fix is enabled

        Args:
            payload: Workflow, native graph JSON or n8n workflow JSON
            auto_fix: Overrides settings.auto_fix_enabled when given
        """
        graph = self.parse(payload)
        enabled = self.config.auto_fix_enabled if auto_fix is None else auto_fix
        assembler = ResultAssembler(
            self.registry, scorer=self.scorer, auto_fix_enabled=enabled, config=self.config
        )
        return assembler.assemble(graph)

    def auto_fix(self, payload: Any) -> AutoFixResult:
        """Validate a workflow and apply every supported repair"""
        graph = self.parse(payload)
        validation = self.validator.validate(graph)
        return self.fixer.fix(graph, validation.issues)

    def export(self, payload: Any, auto_fix: bool = True) -> Dict[str, Any]:
        """
        Export a workflow as n8n JSON

        The repaired graph is exported when auto-fix ran; otherwise the
        parsed graph is exported unchanged.
        """
        graph = self.parse(payload)
        result = ResultAssembler(
            self.registry, scorer=self.scorer, auto_fix_enabled=auto_fix, config=self.config
        ).assemble(graph)
        exported = result.repaired_graph or graph

        logger.info(
            f"Exported workflow {exported.id or exported.name!r}",
            extra={
                "workflow_id": exported.id,
                "node_count": len(exported.nodes),
                "fix_count": len(result.applied_fixes),
            }
        )
        return workflow_to_n8n(exported)

    def list_node_types(self, category: Optional[str] = None) -> List[NodeTypeDefinition]:
        """List registry definitions in type order, optionally filtered by category"""
        definitions = [self.registry.get(node_type) for node_type in self.registry.types()]
        if category:
            wanted = category.lower()
            definitions = [d for d in definitions if d.category.lower() == wanted]
        return definitions

    def get_node_type(self, node_type: str) -> NodeTypeDefinition:
        """
        Get a registry definition

        Raises:
            NodeTypeNotFoundError: If the type is not registered
        """
        definition = self.registry.get(node_type)
        if definition is None:
            raise NodeTypeNotFoundError(
                f"Node type not found: {node_type}",
                details={
                    "node_type": node_type,
                    "similar": self.registry.suggest_similar(node_type),
                }
            )
        return definition
