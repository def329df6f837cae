"""Domain Models - Pydantic schemas for graphs, registry entries and findings"""
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, JsonValue, model_validator

from .enums import FixAction, IssueCode, IssueKind, NodeRole, ParameterType


# ============================================================================
# Graph Model
# ============================================================================

class Node(BaseModel):
    """A typed, versioned unit of work inside a workflow"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Unique node ID within the workflow")
    name: str = Field(..., description="Display name")
    type: str = Field(..., min_length=1, description="Node type, e.g. n8n-nodes-base.code")
    version: int = Field(default=1, ge=1, description="Node type version")
    parameters: Dict[str, JsonValue] = Field(default_factory=dict)
    position: Optional[Tuple[float, float]] = Field(None, description="Canvas position")
    credentials: Optional[Dict[str, JsonValue]] = None
    webhook_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name") and data.get("id"):
            data = {**data, "name": data["id"]}
        return data

    @property
    def label(self) -> str:
        """Name used in human readable messages"""
        return self.name or self.id


class Connection(BaseModel):
    """Directed edge between two nodes' ports"""
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    from_node_id: str = Field(..., alias="fromNodeId")
    to_node_id: str = Field(..., alias="toNodeId")
    from_port: Optional[str] = Field(None, alias="fromPort")
    to_port: Optional[str] = Field(None, alias="toPort")


class Workflow(BaseModel):
    """
    A named collection of nodes and connections

    Node order is presentation order. Duplicate IDs and dangling
    connections are accepted here and reported by the validator.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default="", description="Workflow ID")
    name: str = Field(default="Untitled workflow")
    description: str = Field(default="")
    nodes: List[Node] = Field(default_factory=list)
    connections: List[Connection] = Field(default_factory=list)

    def node_ids(self) -> set:
        """Set of node IDs present in the graph"""
        return {node.id for node in self.nodes}

    def first_index_by_id(self) -> Dict[str, int]:
        """Map each node ID to the index of its first occurrence"""
        index: Dict[str, int] = {}
        for i, node in enumerate(self.nodes):
            index.setdefault(node.id, i)
        return index

    def resolved_connections(self) -> List[Connection]:
        """Connections whose endpoints both exist"""
        ids = self.node_ids()
        return [
            c for c in self.connections
            if c.from_node_id in ids and c.to_node_id in ids
        ]

    def incident_counts(self) -> Dict[int, int]:
        """
        Number of resolved connections touching each node, keyed by node index

        Connections attach to the first node carrying an ID.
        """
        first = self.first_index_by_id()
        counts = {i: 0 for i in range(len(self.nodes))}
        for c in self.resolved_connections():
            counts[first[c.from_node_id]] += 1
            if c.to_node_id != c.from_node_id:
                counts[first[c.to_node_id]] += 1
        return counts

    def out_degrees(self) -> Dict[str, int]:
        """Number of distinct outgoing resolved connections per node ID"""
        degrees: Counter = Counter()
        for c in set(self.resolved_connections()):
            degrees[c.from_node_id] += 1
        return dict(degrees)

    def max_branching_factor(self) -> int:
        """Maximum out-degree over all nodes"""
        degrees = self.out_degrees()
        return max(degrees.values()) if degrees else 0

    def distinct_node_types(self) -> int:
        return len({node.type for node in self.nodes})


# ============================================================================
# Node Type Registry Entries
# ============================================================================

class ParameterDefinition(BaseModel):
    """Schema of a single node parameter"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    type: ParameterType = Field(default=ParameterType.STRING)
    required: bool = Field(default=False)
    default: JsonValue = Field(default=None, description="Default value, if any")
    options: Optional[List[JsonValue]] = Field(None, description="Allowed values for options parameters")
    description: str = Field(default="")

    @property
    def has_default(self) -> bool:
        """True when the catalogue declared a default, even a null one"""
        return "default" in self.model_fields_set


class NodeMigration(BaseModel):
    """How a node of an older type or version is upgraded"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    from_type: str = Field(..., min_length=1)
    from_version: Optional[int] = Field(None, description="None matches every older version")
    to_type: str = Field(..., min_length=1)
    to_version: int = Field(..., ge=1)
    rename_parameters: Dict[str, str] = Field(default_factory=dict)
    set_parameters: Dict[str, JsonValue] = Field(default_factory=dict)

    def matches(self, node_type: str, version: int) -> bool:
        """Check whether this migration upgrades the given type and version"""
        if node_type != self.from_type:
            return False
        if self.from_version is not None:
            return version == self.from_version
        return node_type != self.to_type or version < self.to_version


class NodeTypeDefinition(BaseModel):
    """Catalogue entry for a node type"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str = Field(..., min_length=1)
    display_name: str = Field(default="")
    category: str = Field(default="")
    description: str = Field(default="")
    current_version: int = Field(default=1, ge=1)
    role: NodeRole = Field(default=NodeRole.REGULAR)
    deprecated: bool = Field(default=False)
    replaced_by: Optional[str] = None
    parameters: List[ParameterDefinition] = Field(default_factory=list)
    migrations: List[NodeMigration] = Field(
        default_factory=list,
        description="Migrations that upgrade other types or versions into this one"
    )

    def get_parameter(self, name: str) -> Optional[ParameterDefinition]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def required_parameters(self) -> List[ParameterDefinition]:
        return [p for p in self.parameters if p.required]


# ============================================================================
# Findings, Fixes and Results
# ============================================================================

class ValidationIssue(BaseModel):
    """A structured finding about a workflow"""
    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    code: IssueCode
    message: str
    node_id: Optional[str] = None
    node_name: Optional[str] = None
    node_index: Optional[int] = Field(None, description="Position of the node in Workflow.nodes")
    connection_index: Optional[int] = Field(None, description="Position of the connection in Workflow.connections")
    suggested_fix: Optional[str] = None
    auto_fixable: bool = False
    details: Dict[str, JsonValue] = Field(default_factory=dict)


class AppliedFix(BaseModel):
    """Audit trail entry for a repair made by the auto-fixer"""
    model_config = ConfigDict(frozen=True)

    action: FixAction
    issue_code: IssueCode
    description: str
    node_id: Optional[str] = None
    node_index: Optional[int] = None
    connection_index: Optional[int] = None
    before: JsonValue = None
    after: JsonValue = None


class AutoFixResult(BaseModel):
    """Output of one auto-fix pass"""
    model_config = ConfigDict(frozen=True)

    repaired_graph: Workflow
    applied_fixes: List[AppliedFix] = Field(default_factory=list)
    remaining_issues: List[ValidationIssue] = Field(default_factory=list)


class ScoreCard(BaseModel):
    """Quality and complexity metrics for a workflow"""
    model_config = ConfigDict(frozen=True)

    quality_score: float = Field(..., ge=0, le=100)
    complexity_score: float = Field(..., ge=0, le=10)


class ValidationResult(BaseModel):
    """Combined validation, scoring and repair outcome"""
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    issues: List[ValidationIssue] = Field(default_factory=list)
    quality_score: float = Field(default=100.0, ge=0, le=100)
    complexity_score: float = Field(default=0.0, ge=0, le=10)
    repaired_graph: Optional[Workflow] = None
    applied_fixes: List[AppliedFix] = Field(default_factory=list)

    def issues_of(self, kind: IssueKind) -> List[ValidationIssue]:
        return [i for i in self.issues if i.kind == kind]

    @property
    def errors(self) -> List[ValidationIssue]:
        return self.issues_of(IssueKind.ERROR)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return self.issues_of(IssueKind.WARNING)

    @property
    def suggestions(self) -> List[ValidationIssue]:
        return self.issues_of(IssueKind.SUGGESTION)
