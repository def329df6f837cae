"""Node Type Registry - Read-only catalogue of known node types

The engine never reaches for a global catalogue: every call receives a
NodeRegistry handle. StaticNodeRegistry is immutable after construction and
can be shared by any number of concurrent validations without locking.
"""
from difflib import get_close_matches
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Protocol, Tuple, runtime_checkable

from ..domain.enums import NodeRole
from ..domain.errors import DuplicateNodeTypeError
from ..domain.models import NodeMigration, NodeTypeDefinition


@runtime_checkable
class NodeRegistry(Protocol):
    """Lookup interface the engine depends on"""

    def get(self, node_type: str) -> Optional[NodeTypeDefinition]: ...

    def is_trigger(self, node_type: str) -> bool: ...

    def is_terminal(self, node_type: str) -> bool: ...

    def find_migration(self, node_type: str, version: int) -> Optional[NodeMigration]: ...

    def suggest_similar(self, node_type: str, n: int = 3) -> List[str]: ...

    def types(self) -> List[str]: ...


class StaticNodeRegistry:
    """
    In-memory registry built once from catalogue definitions

    Migrations are declared on their target definition and indexed here in
    type order, so lookups are deterministic regardless of input order.
    """

    def __init__(self, definitions: Iterable[NodeTypeDefinition]):
        nodes = {}
        for definition in definitions:
            if definition.type in nodes:
                raise DuplicateNodeTypeError(
                    f"Node type defined twice: {definition.type}",
                    details={"node_type": definition.type}
                )
            nodes[definition.type] = definition

        self._nodes: Mapping[str, NodeTypeDefinition] = MappingProxyType(dict(sorted(nodes.items())))
        self._migrations: Tuple[NodeMigration, ...] = tuple(
            migration
            for definition in self._nodes.values()
            for migration in definition.migrations
        )

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_type: object) -> bool:
        return node_type in self._nodes

    def get(self, node_type: str) -> Optional[NodeTypeDefinition]:
        """Get a node definition by type"""
        return self._nodes.get(node_type)

    def is_trigger(self, node_type: str) -> bool:
        definition = self._nodes.get(node_type)
        return definition is not None and definition.role == NodeRole.TRIGGER

    def is_terminal(self, node_type: str) -> bool:
        definition = self._nodes.get(node_type)
        return definition is not None and definition.role == NodeRole.TERMINAL

    def find_migration(self, node_type: str, version: int) -> Optional[NodeMigration]:
        """
        Find the migration that upgrades a node of this type and version

        Only migrations whose target type is in the registry are returned.
        An exact from_version match wins over a catch-all migration.
        """
        candidates = [
            m for m in self._migrations
            if m.matches(node_type, version) and m.to_type in self._nodes
        ]
        if not candidates:
            return None
        exact = [m for m in candidates if m.from_version is not None]
        return (exact or candidates)[0]

    def suggest_similar(self, node_type: str, n: int = 3) -> List[str]:
        """Find similar type names using fuzzy matching"""
        return get_close_matches(node_type, list(self._nodes.keys()), n=n, cutoff=0.6)

    def types(self) -> List[str]:
        """All registered types, sorted"""
        return list(self._nodes.keys())
