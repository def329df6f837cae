"""Node Type Registry - catalogue of known node types, versions and parameters"""
from .node_registry import NodeRegistry, StaticNodeRegistry
from .loader import (
    default_registry,
    definition_from_row,
    load_configured_registry,
    load_registry_from_definitions,
    load_registry_from_file,
)

__all__ = [
    "NodeRegistry",
    "StaticNodeRegistry",
    "default_registry",
    "definition_from_row",
    "load_configured_registry",
    "load_registry_from_definitions",
    "load_registry_from_file",
]
