"""Domain Enumerations - Issue, fix and registry type definitions"""
from enum import Enum


class IssueKind(str, Enum):
    """Severity of a validation finding"""
    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"


class IssueCode(str, Enum):
    """Rule that produced a validation finding"""
    EMPTY_WORKFLOW = "EMPTY_WORKFLOW"
    DUPLICATE_NODE_ID = "DUPLICATE_NODE_ID"
    MISSING_TRIGGER = "MISSING_TRIGGER"
    UNKNOWN_NODE_TYPE = "UNKNOWN_NODE_TYPE"
    OUTDATED_NODE_VERSION = "OUTDATED_NODE_VERSION"
    DEPRECATED_NODE_TYPE = "DEPRECATED_NODE_TYPE"
    UNSUPPORTED_NODE_VERSION = "UNSUPPORTED_NODE_VERSION"
    MISSING_REQUIRED_PARAMETER = "MISSING_REQUIRED_PARAMETER"
    INVALID_PARAMETER_VALUE = "INVALID_PARAMETER_VALUE"
    ORPHAN_NODE = "ORPHAN_NODE"
    DANGLING_CONNECTION = "DANGLING_CONNECTION"
    DUPLICATE_CONNECTION = "DUPLICATE_CONNECTION"
    CONSOLIDATE_SET_NODES = "CONSOLIDATE_SET_NODES"
    UNHANDLED_HTTP_ERRORS = "UNHANDLED_HTTP_ERRORS"


class FixAction(str, Enum):
    """Repair applied by the auto-fixer"""
    RENAME_NODE_ID = "RENAME_NODE_ID"
    REMOVE_CONNECTION = "REMOVE_CONNECTION"
    MIGRATE_NODE = "MIGRATE_NODE"
    FILL_DEFAULT_PARAMETER = "FILL_DEFAULT_PARAMETER"


class NodeRole(str, Enum):
    """Structural role of a node type in a workflow"""
    TRIGGER = "trigger"      # Entry point, starts an execution
    TERMINAL = "terminal"    # Sink, may legitimately have no outgoing edges
    REGULAR = "regular"


class ParameterType(str, Enum):
    """Declared type of a node parameter in the registry"""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OPTIONS = "options"
    COLLECTION = "collection"
    JSON = "json"


class ValueKind(str, Enum):
    """Tag of a parameter value"""
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
