"""n8n Interchange Format - convert between n8n workflow JSON and the graph model

n8n keys connections by source node *name*:

    {"Webhook": {"main": [[{"node": "Code", "type": "main", "index": 0}]]}}

The outer list index is the output slot, stored on a Connection as
from_port "main:<slot>"; the target's input becomes to_port "main:<index>".
"""
import json
from collections import Counter
from typing import Any, Dict, List, Mapping, Set, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from ..domain.errors import InterchangeFormatError
from ..domain.models import Connection, Workflow
from ..utils.idgen import next_free_suffixed_id
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PORT = "main"

# Layout used when a node has no canvas position
_ORIGIN_X = 240
_ORIGIN_Y = 300
_STEP_X = 220


def _parse_port(port: Union[str, None]) -> Tuple[str, int]:
    """Split 'main:1' into ('main', 1)"""
    if not port:
        return DEFAULT_PORT, 0
    kind, _, index = port.partition(":")
    try:
        return kind or DEFAULT_PORT, int(index) if index else 0
    except ValueError:
        return kind or DEFAULT_PORT, 0


def _type_version(raw: Any) -> int:
    """n8n allows minor versions such as 4.2; the graph model tracks the major"""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return 1
    return max(int(raw), 1)


def is_n8n_payload(data: Any) -> bool:
    """
    True when data looks like n8n workflow JSON rather than the native graph

    Nodes carrying typeVersion or a non-empty connections object mark n8n
    JSON. An empty connections object is n8n unless the nodes carry the
    native version key.
    """
    if not isinstance(data, Mapping):
        return False
    nodes = data.get("nodes")
    raw_nodes = [n for n in nodes if isinstance(n, Mapping)] if isinstance(nodes, list) else []
    if any("typeVersion" in n for n in raw_nodes):
        return True
    connections = data.get("connections")
    if not isinstance(connections, Mapping):
        return False
    return bool(connections) or not any("version" in n for n in raw_nodes)


def workflow_from_n8n(data: Mapping[str, Any]) -> Workflow:
    """
    Parse n8n workflow JSON into a Workflow

    Node IDs default to node names. Connection endpoints naming unknown
    nodes are kept as-is so the validator can report them. A node whose
    explicit ID repeats an earlier one but whose name is unique is imported
    under `<id>_<n>`.

    Raises:
        InterchangeFormatError: If the payload is not a workflow
    """
    if not isinstance(data, Mapping):
        raise InterchangeFormatError("Workflow JSON must be an object")

    raw_nodes = data.get("nodes") or []
    raw_connections = data.get("connections") or {}
    if not isinstance(raw_nodes, list) or not isinstance(raw_connections, Mapping):
        raise InterchangeFormatError(
            "Workflow JSON must contain a nodes array and a connections object"
        )

    for i, raw in enumerate(raw_nodes):
        if not isinstance(raw, Mapping):
            raise InterchangeFormatError(
                f"Node at index {i} is not an object",
                details={"node_index": i}
            )

    # A uniquely named node repeating an earlier explicit ID gets a free ID
    # so the name-keyed connections stay on it
    name_counts = Counter(raw.get("name") or "" for raw in raw_nodes)
    taken: Set[str] = {str(raw.get("id") or raw.get("name") or "") for raw in raw_nodes}
    seen_ids: Set[str] = set()

    name_to_id: Dict[str, str] = {}
    nodes: List[Dict[str, Any]] = []
    for raw in raw_nodes:
        name = raw.get("name") or ""
        node_id = str(raw.get("id") or name)
        if node_id in seen_ids and name and name_counts[name] == 1:
            new_id = next_free_suffixed_id(node_id, taken)
            logger.debug(f"Node {name!r} reuses ID {node_id!r}, imported as {new_id!r}")
            taken.add(new_id)
            node_id = new_id
        seen_ids.add(node_id)
        name_to_id.setdefault(name, node_id)
        nodes.append({
            "id": node_id,
            "name": name,
            "type": raw.get("type") or "",
            "version": _type_version(raw.get("typeVersion")),
            "parameters": raw.get("parameters") or {},
            "position": raw.get("position"),
            "credentials": raw.get("credentials"),
            "webhook_id": raw.get("webhookId"),
        })

    connections: List[Connection] = []
    for source_name, outputs in raw_connections.items():
        if not isinstance(outputs, Mapping):
            raise InterchangeFormatError(
                f"Connections of node {source_name!r} must be an object",
                details={"node_name": source_name}
            )
        for port_type, slots in outputs.items():
            for slot_index, targets in enumerate(slots or []):
                for target in targets or []:
                    if not isinstance(target, Mapping) or "node" not in target:
                        raise InterchangeFormatError(
                            f"Invalid connection target from node {source_name!r}",
                            details={"node_name": source_name}
                        )
                    target_name = target["node"]
                    connections.append(Connection(
                        from_node_id=name_to_id.get(source_name, source_name),
                        to_node_id=name_to_id.get(target_name, target_name),
                        from_port=f"{port_type}:{slot_index}",
                        to_port=f"{target.get('type', port_type)}:{target.get('index', 0)}",
                    ))

    try:
        return Workflow(
            id=str(data.get("id") or ""),
            name=data.get("name") or "Untitled workflow",
            description=data.get("description") or "",
            nodes=nodes,
            connections=connections,
        )
    except PydanticValidationError as e:
        raise InterchangeFormatError(
            "Workflow JSON does not describe a valid graph",
            details={"errors": json.loads(e.json(include_url=False, include_input=False))}
        )


def workflow_to_n8n(graph: Workflow) -> Dict[str, Any]:
    """
    Serialize a Workflow to n8n workflow JSON

    Output is stable: nodes keep their order, connections are grouped by
    source node in first-seen order and slots are ordered by index.
    """
    id_to_name: Dict[str, str] = {}
    for node in graph.nodes:
        id_to_name.setdefault(node.id, node.name)

    nodes: List[Dict[str, Any]] = []
    for i, node in enumerate(graph.nodes):
        position = list(node.position) if node.position else [_ORIGIN_X + i * _STEP_X, _ORIGIN_Y]
        entry: Dict[str, Any] = {
            "id": node.id,
            "name": node.name,
            "type": node.type,
            "typeVersion": node.version,
            "position": position,
            "parameters": node.parameters,
        }
        if node.credentials:
            entry["credentials"] = node.credentials
        if node.webhook_id:
            entry["webhookId"] = node.webhook_id
        nodes.append(entry)

    connections: Dict[str, Dict[str, List[List[Dict[str, Any]]]]] = {}
    for connection in graph.connections:
        out_type, out_index = _parse_port(connection.from_port)
        in_type, in_index = _parse_port(connection.to_port)
        source = id_to_name.get(connection.from_node_id, connection.from_node_id)
        target = id_to_name.get(connection.to_node_id, connection.to_node_id)

        slots = connections.setdefault(source, {}).setdefault(out_type, [])
        while len(slots) <= out_index:
            slots.append([])
        slots[out_index].append({"node": target, "type": in_type, "index": in_index})

    return {
        "name": graph.name,
        "nodes": nodes,
        "connections": connections,
        "active": False,
        "settings": {},
    }


def export_workflow_json(graph: Workflow, indent: int = 2) -> str:
    """Export a workflow as n8n JSON text"""
    return json.dumps(workflow_to_n8n(graph), indent=indent)


def parse_workflow_payload(data: Any) -> Workflow:
    """
    Accept either a Workflow, native graph JSON or n8n workflow JSON

    Raises:
        InterchangeFormatError: If the payload matches neither shape
    """
    if isinstance(data, Workflow):
        return data
    if is_n8n_payload(data):
        return workflow_from_n8n(data)
    if not isinstance(data, Mapping):
        raise InterchangeFormatError("Workflow payload must be an object")
    if isinstance(data.get("connections"), Mapping) and not data["connections"]:
        data = {**data, "connections": []}
    try:
        return Workflow.model_validate(data)
    except PydanticValidationError as e:
        raise InterchangeFormatError(
            "Workflow payload does not describe a valid graph",
            details={"errors": json.loads(e.json(include_url=False, include_input=False))}
        )
