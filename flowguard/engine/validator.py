"""Workflow Validator - Rule evaluation over a workflow graph

Rules run in a fixed order and every rule reports independently:

Structural:
1. empty_workflow - the graph has no nodes
2. duplicate_node_id - two nodes share an ID
3. missing_trigger - no node type is flagged as an entry point
Per node:
4. node_type - unknown, deprecated, outdated or unsupported type version
5. required_parameters - required parameters absent or empty
6. parameter_values - declared parameters holding a value of the wrong kind
7. orphan_node - non trigger/terminal node with no connections
Per connection:
8. dangling_connection - endpoint references a missing node
9. duplicate_connection - identical edge listed twice
Improvements:
10. consolidate_set_nodes - more Set nodes than settings.max_set_nodes
11. unhandled_http_errors - HTTP requests with no If or Switch node
"""
from typing import Any, Dict, List, Optional

from ..config.settings import Settings, settings as default_settings
from ..domain.enums import IssueCode, IssueKind, ParameterType, ValueKind
from ..domain.errors import InvalidInputError, WorkflowTooLargeError
from ..domain.models import Node, ParameterDefinition, ValidationIssue, ValidationResult, Workflow
from ..domain.values import is_empty_value, value_kind
from ..registry.catalog import BRANCH_NODE_TYPES, HTTP_REQUEST_NODE_TYPE, SET_NODE_TYPE
from ..registry.node_registry import NodeRegistry
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Value kinds accepted for each declared parameter type; JSON accepts any
ACCEPTED_KINDS = {
    ParameterType.STRING: (ValueKind.STRING,),
    ParameterType.NUMBER: (ValueKind.NUMBER,),
    ParameterType.BOOLEAN: (ValueKind.BOOL,),
    ParameterType.OPTIONS: (ValueKind.STRING, ValueKind.NUMBER, ValueKind.BOOL),
    ParameterType.COLLECTION: (ValueKind.MAPPING, ValueKind.SEQUENCE),
}

# n8n evaluates string values starting with "=" as expressions at run time
EXPRESSION_PREFIX = "="


def ensure_valid_input(graph: Any, registry: Any, max_nodes: int) -> None:
    """
    Reject programmer errors before any rule runs

    Raises:
        InvalidInputError: If the graph or registry is missing or malformed
        WorkflowTooLargeError: If the graph exceeds the node limit
    """
    if graph is None:
        raise InvalidInputError("Workflow graph is required")
    if not isinstance(graph, Workflow):
        raise InvalidInputError(
            f"Expected a Workflow, got {type(graph).__name__}",
            details={"received_type": type(graph).__name__}
        )
    if registry is None:
        raise InvalidInputError("Node type registry is required")
    if not isinstance(registry, NodeRegistry):
        raise InvalidInputError(
            f"Registry does not implement the NodeRegistry interface: {type(registry).__name__}",
            details={"received_type": type(registry).__name__}
        )

    if len(graph.nodes) > max_nodes:
        raise WorkflowTooLargeError(
            f"Workflow has {len(graph.nodes)} nodes, limit is {max_nodes}",
            details={"node_count": len(graph.nodes), "max_graph_nodes": max_nodes}
        )


class WorkflowValidator:
    """Validates workflow graphs against a node type registry"""

    def __init__(self, registry: NodeRegistry, config: Optional[Settings] = None):
        self.registry = registry
        self.config = config or default_settings

    def validate(self, graph: Workflow) -> ValidationResult:
        """
        Run all validation rules on a workflow

        Args:
            graph: Workflow to inspect, never modified

        Returns:
            ValidationResult with issues and is_valid; scores are left at
            their defaults for the scorer to fill in

        Raises:
            InvalidInputError: If graph or registry is malformed
            WorkflowTooLargeError: If the graph exceeds max_graph_nodes
        """
        ensure_valid_input(graph, self.registry, self.config.max_graph_nodes)

        issues: List[ValidationIssue] = []

        if not graph.nodes:
            issues.append(ValidationIssue(
                kind=IssueKind.ERROR,
                code=IssueCode.EMPTY_WORKFLOW,
                message="Workflow contains no nodes",
                suggested_fix="Add at least a trigger node",
            ))
            return ValidationResult(is_valid=False, issues=issues)

        # Structural rules
        self._check_duplicate_ids(graph, issues)
        self._check_trigger_present(graph, issues)

        # Per-node rules
        incident = graph.incident_counts()
        for index, node in enumerate(graph.nodes):
            self._check_node_type(index, node, issues)
            self._check_required_parameters(index, node, issues)
            self._check_parameter_values(index, node, issues)
            self._check_orphan(index, node, incident[index], issues)

        # Per-connection rules
        self._check_connections(graph, issues)

        # Improvement suggestions
        self._check_set_node_count(graph, issues)
        self._check_http_error_handling(graph, issues)

        is_valid = not any(i.kind == IssueKind.ERROR for i in issues)

        logger.debug(
            f"Validated workflow {graph.id or graph.name!r}: {len(issues)} issue(s)",
            extra={"workflow_id": graph.id, "issue_count": len(issues)}
        )
        return ValidationResult(is_valid=is_valid, issues=issues)

    # ------------------------------------------------------------------
    # Structural rules
    # ------------------------------------------------------------------

    def _check_duplicate_ids(self, graph: Workflow, issues: List[ValidationIssue]) -> None:
        """One error for every later occurrence of an ID"""
        first_seen: Dict[str, int] = {}
        for index, node in enumerate(graph.nodes):
            if node.id not in first_seen:
                first_seen[node.id] = index
                continue
            issues.append(ValidationIssue(
                kind=IssueKind.ERROR,
                code=IssueCode.DUPLICATE_NODE_ID,
                node_id=node.id,
                node_name=node.name,
                node_index=index,
                message=(
                    f"Node {node.label!r} reuses ID {node.id!r} "
                    f"(first used by node at position {first_seen[node.id]})"
                ),
                suggested_fix="Give the node a unique ID",
                auto_fixable=True,
                details={"first_index": first_seen[node.id]},
            ))

    def _check_trigger_present(self, graph: Workflow, issues: List[ValidationIssue]) -> None:
        if any(self.registry.is_trigger(node.type) for node in graph.nodes):
            return
        issues.append(ValidationIssue(
            kind=IssueKind.WARNING,
            code=IssueCode.MISSING_TRIGGER,
            message="Workflow has no trigger node and cannot start on its own",
            suggested_fix="Add a trigger such as a Webhook, Schedule Trigger or Manual Trigger",
        ))

    # ------------------------------------------------------------------
    # Per-node rules
    # ------------------------------------------------------------------

    def _check_node_type(self, index: int, node: Node, issues: List[ValidationIssue]) -> None:
        """Unknown types are errors; deprecated, outdated or too new versions are warnings"""
        definition = self.registry.get(node.type)
        migration = self.registry.find_migration(node.type, node.version)

        if definition is None:
            similar = self.registry.suggest_similar(node.type)
            if migration:
                suggestion = f"Replace with {migration.to_type} v{migration.to_version}"
            elif similar:
                suggestion = f"Did you mean {similar[0]!r}?"
            else:
                suggestion = None
            issues.append(ValidationIssue(
                kind=IssueKind.ERROR,
                code=IssueCode.UNKNOWN_NODE_TYPE,
                node_id=node.id,
                node_name=node.name,
                node_index=index,
                message=f"Node {node.label!r} uses unknown type {node.type!r}",
                suggested_fix=suggestion,
                auto_fixable=migration is not None,
                details={"node_type": node.type, "similar_types": similar},
            ))
            return

        if definition.deprecated:
            replacement = migration.to_type if migration else definition.replaced_by
            issues.append(ValidationIssue(
                kind=IssueKind.WARNING,
                code=IssueCode.DEPRECATED_NODE_TYPE,
                node_id=node.id,
                node_name=node.name,
                node_index=index,
                message=f"Node {node.label!r} uses deprecated type {node.type!r}",
                suggested_fix=f"Replace with {replacement}" if replacement else None,
                auto_fixable=migration is not None,
                details={"node_type": node.type, "replaced_by": replacement},
            ))
        elif node.version < definition.current_version:
            issues.append(ValidationIssue(
                kind=IssueKind.WARNING,
                code=IssueCode.OUTDATED_NODE_VERSION,
                node_id=node.id,
                node_name=node.name,
                node_index=index,
                message=(
                    f"Node {node.label!r} uses {node.type} v{node.version}, "
                    f"current version is v{definition.current_version}"
                ),
                suggested_fix=f"Upgrade to v{definition.current_version}",
                auto_fixable=migration is not None,
                details={
                    "node_type": node.type,
                    "version": node.version,
                    "current_version": definition.current_version,
                },
            ))
        elif node.version > definition.current_version:
            issues.append(ValidationIssue(
                kind=IssueKind.WARNING,
                code=IssueCode.UNSUPPORTED_NODE_VERSION,
                node_id=node.id,
                node_name=node.name,
                node_index=index,
                message=(
                    f"Node {node.label!r} uses {node.type} v{node.version}, "
                    f"newest known version is v{definition.current_version}"
                ),
                details={
                    "node_type": node.type,
                    "version": node.version,
                    "current_version": definition.current_version,
                },
            ))

    def _check_required_parameters(self, index: int, node: Node, issues: List[ValidationIssue]) -> None:
        definition = self.registry.get(node.type)
        if not definition:
            return

        for param in definition.required_parameters():
            if param.name in node.parameters and not is_empty_value(node.parameters[param.name]):
                continue

            fixable = param.has_default and not is_empty_value(param.default)
            issues.append(ValidationIssue(
                kind=IssueKind.WARNING if fixable else IssueKind.SUGGESTION,
                code=IssueCode.MISSING_REQUIRED_PARAMETER,
                node_id=node.id,
                node_name=node.name,
                node_index=index,
                message=f"Node {node.label!r} ({node.type}) is missing required parameter {param.name!r}",
                suggested_fix=(
                    f"Use the default value for {param.name}" if fixable
                    else f"Add a value for {param.name}: {param.description or 'no description available'}"
                ),
                auto_fixable=fixable,
                details={"parameter": param.name},
            ))

    def _check_parameter_values(self, index: int, node: Node, issues: List[ValidationIssue]) -> None:
        """Declared, non-empty parameters must match their type and options"""
        definition = self.registry.get(node.type)
        if not definition:
            return

        for param in definition.parameters:
            value = node.parameters.get(param.name)
            if is_empty_value(value):
                continue
            problem = self._value_problem(param, value)
            if problem is None:
                continue

            details: Dict[str, Any] = {
                "parameter": param.name,
                "expected": param.type.value,
                "received": value_kind(value).value,
            }
            if param.options:
                details["options"] = list(param.options)
            issues.append(ValidationIssue(
                kind=IssueKind.WARNING,
                code=IssueCode.INVALID_PARAMETER_VALUE,
                node_id=node.id,
                node_name=node.name,
                node_index=index,
                message=f"Node {node.label!r} has an invalid value for parameter {param.name!r}: {problem}",
                suggested_fix=(
                    f"Choose one of: {', '.join(str(o) for o in param.options)}" if param.options
                    else f"Provide a {param.type.value} value"
                ),
                details=details,
            ))

    @staticmethod
    def _value_problem(param: ParameterDefinition, value: Any) -> Optional[str]:
        """Describe why a value does not fit its parameter, or None when it does"""
        kind = value_kind(value)
        if kind == ValueKind.STRING and value.startswith(EXPRESSION_PREFIX):
            return None

        accepted = ACCEPTED_KINDS.get(param.type)
        if accepted is not None and kind not in accepted:
            return f"expected {param.type.value}, got {kind.value}"
        if param.options and value not in param.options:
            return f"{value!r} is not an allowed option"
        return None

    def _check_orphan(
        self, index: int, node: Node, incident_count: int, issues: List[ValidationIssue]
    ) -> None:
        if incident_count > 0:
            return
        if self.registry.is_trigger(node.type) or self.registry.is_terminal(node.type):
            return
        issues.append(ValidationIssue(
            kind=IssueKind.SUGGESTION,
            code=IssueCode.ORPHAN_NODE,
            node_id=node.id,
            node_name=node.name,
            node_index=index,
            message=f"Node {node.label!r} is not connected to any other node",
            suggested_fix="Connect the node or remove it",
        ))

    # ------------------------------------------------------------------
    # Per-connection rules
    # ------------------------------------------------------------------

    def _check_connections(self, graph: Workflow, issues: List[ValidationIssue]) -> None:
        node_ids = graph.node_ids()
        seen = set()

        for index, connection in enumerate(graph.connections):
            missing = [
                endpoint for endpoint in (connection.from_node_id, connection.to_node_id)
                if endpoint not in node_ids
            ]
            if missing:
                issues.append(ValidationIssue(
                    kind=IssueKind.ERROR,
                    code=IssueCode.DANGLING_CONNECTION,
                    connection_index=index,
                    message=(
                        f"Connection {connection.from_node_id!r} -> {connection.to_node_id!r} "
                        f"references non-existent node(s): {', '.join(repr(m) for m in sorted(set(missing)))}"
                    ),
                    suggested_fix="Remove invalid connection or add missing node",
                    auto_fixable=True,
                    details={
                        "from_node_id": connection.from_node_id,
                        "to_node_id": connection.to_node_id,
                        "missing_node_ids": sorted(set(missing)),
                    },
                ))
                continue

            if connection in seen:
                issues.append(ValidationIssue(
                    kind=IssueKind.SUGGESTION,
                    code=IssueCode.DUPLICATE_CONNECTION,
                    connection_index=index,
                    message=f"Connection {connection.from_node_id!r} -> {connection.to_node_id!r} is listed twice",
                    suggested_fix="Remove the duplicate connection",
                    auto_fixable=True,
                    details={
                        "from_node_id": connection.from_node_id,
                        "to_node_id": connection.to_node_id,
                    },
                ))
            seen.add(connection)

    # ------------------------------------------------------------------
    # Improvement suggestions
    # ------------------------------------------------------------------

    def _check_set_node_count(self, graph: Workflow, issues: List[ValidationIssue]) -> None:
        set_nodes = [node.id for node in graph.nodes if node.type == SET_NODE_TYPE]
        if len(set_nodes) <= self.config.max_set_nodes:
            return
        issues.append(ValidationIssue(
            kind=IssueKind.SUGGESTION,
            code=IssueCode.CONSOLIDATE_SET_NODES,
            message=f"Workflow uses {len(set_nodes)} Set nodes; a single Code node performs better",
            suggested_fix="Combine the field operations into one Code node",
            details={"node_ids": set_nodes, "max_set_nodes": self.config.max_set_nodes},
        ))

    def _check_http_error_handling(self, graph: Workflow, issues: List[ValidationIssue]) -> None:
        http_nodes = [node.id for node in graph.nodes if node.type == HTTP_REQUEST_NODE_TYPE]
        if not http_nodes or any(node.type in BRANCH_NODE_TYPES for node in graph.nodes):
            return
        issues.append(ValidationIssue(
            kind=IssueKind.SUGGESTION,
            code=IssueCode.UNHANDLED_HTTP_ERRORS,
            message="HTTP requests have no error handling",
            suggested_fix="Add If or Switch nodes to handle failed API calls",
            details={"node_ids": http_nodes},
        ))


def validate(graph: Workflow, registry: NodeRegistry) -> ValidationResult:
    """Validate a workflow against a registry"""
    return WorkflowValidator(registry).validate(graph)
