"""Auto Fixer - Deterministic, idempotent repair of fixable issues

Fixes run in a fixed order on a working copy of the graph:
1. duplicate node IDs are renamed
2. dangling and duplicate connections are removed
3. unknown, deprecated or outdated node types are migrated
4. missing required parameters are filled from registry defaults

An issue the registry cannot support is downgraded to not fixable and
returned in remaining_issues. Auto-fix never raises for a well-formed graph.
"""
from typing import Dict, List, Optional, Set, Tuple

from ..config.settings import Settings, settings as default_settings
from ..domain.enums import FixAction, IssueCode
from ..domain.models import (
    AppliedFix, AutoFixResult, Connection, Node, NodeMigration, ValidationIssue, Workflow
)
from ..domain.values import clone_value, is_empty_value
from ..registry.node_registry import NodeRegistry
from ..utils.idgen import next_free_suffixed_id
from ..utils.logger import get_logger
from .validator import ensure_valid_input

logger = get_logger(__name__)

NODE_TYPE_CODES = (
    IssueCode.UNKNOWN_NODE_TYPE,
    IssueCode.DEPRECATED_NODE_TYPE,
    IssueCode.OUTDATED_NODE_VERSION,
)
CONNECTION_CODES = (
    IssueCode.DANGLING_CONNECTION,
    IssueCode.DUPLICATE_CONNECTION,
)


class FixAuditTrail:
    """Accumulates applied fixes in application order"""

    def __init__(self):
        self._fixes: List[AppliedFix] = []

    def __len__(self) -> int:
        return len(self._fixes)

    def record(
        self,
        action: FixAction,
        issue_code: IssueCode,
        description: str,
        **fields
    ) -> AppliedFix:
        fix = AppliedFix(action=action, issue_code=issue_code, description=description, **fields)
        self._fixes.append(fix)
        return fix

    def fixes(self) -> List[AppliedFix]:
        return list(self._fixes)


class AutoFixer:
    """Applies registry-backed repairs to a workflow"""

    def __init__(self, registry: NodeRegistry, config: Optional[Settings] = None):
        self.registry = registry
        self.config = config or default_settings

    def fix(self, graph: Workflow, issues: List[ValidationIssue]) -> AutoFixResult:
        """
        Repair every auto-fixable issue the registry supports

        Args:
            graph: Workflow the issues were produced for, never modified
            issues: Output of the validator for this graph

        Returns:
            AutoFixResult with the repaired copy, the audit trail and the
            issues that were not repaired
        """
        ensure_valid_input(graph, self.registry, self.config.max_graph_nodes)

        trail = FixAuditTrail()
        remaining: List[Tuple[int, ValidationIssue]] = []
        by_code: Dict[IssueCode, List[Tuple[int, ValidationIssue]]] = {}

        for position, issue in enumerate(issues):
            if issue.auto_fixable:
                by_code.setdefault(issue.code, []).append((position, issue))
            else:
                remaining.append((position, issue))

        def degrade(position: int, issue: ValidationIssue, reason: str) -> None:
            logger.debug(f"Cannot auto-fix {issue.code.value}: {reason}")
            remaining.append((position, issue.model_copy(update={"auto_fixable": False})))

        nodes = list(graph.nodes)
        connections = list(graph.connections)

        # 1. Duplicate IDs
        taken: Set[str] = {node.id for node in nodes}
        for position, issue in self._sorted_by(by_code.get(IssueCode.DUPLICATE_NODE_ID, []), "node_index"):
            index = issue.node_index
            if not self._node_matches(graph, issue):
                degrade(position, issue, "issue does not match a node")
                continue
            old_id = nodes[index].id
            new_id = next_free_suffixed_id(old_id, taken)
            taken.add(new_id)
            update = {"id": new_id}
            if nodes[index].name == old_id:
                # name was defaulted from the ID; keep n8n node names unique too
                update["name"] = new_id
            nodes[index] = nodes[index].model_copy(update=update)
            trail.record(
                FixAction.RENAME_NODE_ID, issue.code,
                f"Renamed duplicate node ID {old_id!r} to {new_id!r}",
                node_id=new_id, node_index=index, before=old_id, after=new_id,
            )

        # 2. Connection removal
        to_remove: Dict[int, IssueCode] = {}
        connection_issues = [
            item for code in CONNECTION_CODES for item in by_code.get(code, [])
        ]
        for position, issue in connection_issues:
            index = issue.connection_index
            if index is None or not 0 <= index < len(connections):
                degrade(position, issue, "issue does not match a connection")
                continue
            to_remove.setdefault(index, issue.code)
        for index in sorted(to_remove):
            removed = connections[index]
            trail.record(
                FixAction.REMOVE_CONNECTION, to_remove[index],
                f"Removed connection {removed.from_node_id!r} -> {removed.to_node_id!r}",
                connection_index=index, before=removed.model_dump(mode="json"),
            )
        connections = [c for i, c in enumerate(connections) if i not in to_remove]

        # 3. Type and version migration
        migrated: Set[int] = set()
        node_type_issues = [
            item for code in NODE_TYPE_CODES for item in by_code.get(code, [])
        ]
        for position, issue in self._sorted_by(node_type_issues, "node_index"):
            if not self._node_matches(graph, issue) or issue.node_index in migrated:
                degrade(position, issue, "issue does not match a node")
                continue
            index = issue.node_index
            upgraded = self._migrate(nodes[index])
            if upgraded is None:
                degrade(position, issue, "registry has no usable migration")
                continue
            before = nodes[index]
            nodes[index] = upgraded
            migrated.add(index)
            trail.record(
                FixAction.MIGRATE_NODE, issue.code,
                f"Migrated node {before.label!r} from {before.type} v{before.version} "
                f"to {upgraded.type} v{upgraded.version}",
                node_id=upgraded.id, node_index=index,
                before={"type": before.type, "version": before.version},
                after={"type": upgraded.type, "version": upgraded.version},
            )
            for param_name in self._missing_required_with_default(upgraded):
                nodes[index] = self._fill_default(
                    nodes[index], index, param_name, IssueCode.MISSING_REQUIRED_PARAMETER, trail
                )

        # 4. Default parameters
        for position, issue in self._sorted_by(by_code.get(IssueCode.MISSING_REQUIRED_PARAMETER, []), "node_index"):
            index = issue.node_index
            param_name = issue.details.get("parameter")
            if index in migrated:
                # defaults were refilled against the migrated type above
                definition = self.registry.get(nodes[index].type)
                param = definition.get_parameter(param_name) if definition else None
                if param and param.required and is_empty_value(nodes[index].parameters.get(param_name)):
                    degrade(position, issue, "migrated type has no default value")
                continue
            if not self._node_matches(graph, issue):
                degrade(position, issue, "issue does not match a node")
                continue
            if param_name not in self._missing_required_with_default(nodes[index]):
                degrade(position, issue, "registry has no default value")
                continue
            nodes[index] = self._fill_default(nodes[index], index, param_name, issue.code, trail)

        # Any other code marked fixable has no repair strategy
        handled = {
            IssueCode.DUPLICATE_NODE_ID,
            IssueCode.MISSING_REQUIRED_PARAMETER,
            *NODE_TYPE_CODES,
            *CONNECTION_CODES,
        }
        for code, items in by_code.items():
            if code not in handled:
                for position, issue in items:
                    degrade(position, issue, "no repair strategy")

        repaired = graph.model_copy(update={"nodes": nodes, "connections": connections})
        remaining.sort(key=lambda item: item[0])

        logger.info(
            f"Auto-fix applied {len(trail)} fix(es), {len(remaining)} issue(s) remaining",
            extra={"workflow_id": graph.id, "fix_count": len(trail), "issue_count": len(remaining)}
        )
        return AutoFixResult(
            repaired_graph=repaired,
            applied_fixes=trail.fixes(),
            remaining_issues=[issue for _, issue in remaining],
        )

    @staticmethod
    def _sorted_by(
        items: List[Tuple[int, ValidationIssue]], attribute: str
    ) -> List[Tuple[int, ValidationIssue]]:
        def key(item):
            value = getattr(item[1], attribute)
            return (value is None, value if value is not None else 0, item[0])
        return sorted(items, key=key)

    @staticmethod
    def _node_matches(graph: Workflow, issue: ValidationIssue) -> bool:
        """An issue can only be fixed if it still points at the node it was raised for"""
        index = issue.node_index
        if index is None or not 0 <= index < len(graph.nodes):
            return False
        return issue.node_id is None or graph.nodes[index].id == issue.node_id

    def _migrate(self, node: Node) -> Optional[Node]:
        """
        Follow registry migrations until the node reaches a current type

        Returns None when no migration applies, when the chain loops or when
        it ends on a type the registry does not know.
        """
        current = node
        visited = {(node.type, node.version)}
        max_steps = len(self.registry.types()) + 1

        for _ in range(max_steps):
            migration = self.registry.find_migration(current.type, current.version)
            if migration is None:
                break
            current = self._apply_migration(current, migration)
            if (current.type, current.version) in visited:
                return None
            visited.add((current.type, current.version))

            definition = self.registry.get(current.type)
            if definition and not definition.deprecated and current.version >= definition.current_version:
                break
        else:
            return None

        if current is node or self.registry.get(current.type) is None:
            return None
        return current

    @staticmethod
    def _apply_migration(node: Node, migration: NodeMigration) -> Node:
        params = dict(node.parameters)
        for old_name, new_name in migration.rename_parameters.items():
            if old_name not in params:
                continue
            value = params.pop(old_name)
            if new_name not in params or is_empty_value(params[new_name]):
                params[new_name] = value
        for name, value in migration.set_parameters.items():
            if name not in params:
                params[name] = clone_value(value)
        return node.model_copy(update={
            "type": migration.to_type,
            "version": migration.to_version,
            "parameters": params,
        })

    def _missing_required_with_default(self, node: Node) -> List[str]:
        """Required parameters of the node's type that are empty and have a usable default"""
        definition = self.registry.get(node.type)
        if not definition:
            return []
        return [
            param.name for param in definition.required_parameters()
            if is_empty_value(node.parameters.get(param.name))
            and param.has_default and not is_empty_value(param.default)
        ]

    def _fill_default(
        self, node: Node, index: int, param_name: str, issue_code: IssueCode, trail: FixAuditTrail
    ) -> Node:
        param = self.registry.get(node.type).get_parameter(param_name)
        value = clone_value(param.default)
        before = node.parameters.get(param_name)
        trail.record(
            FixAction.FILL_DEFAULT_PARAMETER, issue_code,
            f"Set {param_name!r} on node {node.label!r} to its default value",
            node_id=node.id, node_index=index, before=before, after=value,
        )
        return node.model_copy(update={"parameters": {**node.parameters, param_name: value}})


def auto_fix(graph: Workflow, issues: List[ValidationIssue], registry: NodeRegistry) -> AutoFixResult:
    """Repair the auto-fixable issues of a workflow"""
    return AutoFixer(registry).fix(graph, issues)
