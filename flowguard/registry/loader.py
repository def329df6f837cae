"""Registry Loader - Build a NodeRegistry from catalogue rows or files"""
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..config.settings import Settings, settings as default_settings
from ..domain.enums import NodeRole, ParameterType
from ..domain.errors import RegistryLoadError
from ..domain.models import NodeTypeDefinition, ParameterDefinition
from ..utils.logger import get_logger
from .catalog import DEFAULT_CATALOG
from .node_registry import StaticNodeRegistry

logger = get_logger(__name__)

# Catalogue parameter types that do not map one to one onto ParameterType
_PARAMETER_TYPE_ALIASES = {
    "object": ParameterType.JSON,
    "fixedCollection": ParameterType.COLLECTION,
    "multiOptions": ParameterType.OPTIONS,
    "bool": ParameterType.BOOLEAN,
}


def _parameter_type(raw: Any) -> ParameterType:
    if raw in _PARAMETER_TYPE_ALIASES:
        return _PARAMETER_TYPE_ALIASES[raw]
    try:
        return ParameterType(raw)
    except ValueError:
        return ParameterType.JSON


def _parse_text_default(raw: str) -> Any:
    """node_parameters.default_value is text; JSON literals are decoded"""
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return raw


def _parameter_from_schema(name: str, schema: Mapping[str, Any]) -> ParameterDefinition:
    """Parse one entry of a parameters_schema mapping"""
    fields: Dict[str, Any] = {
        "name": name,
        "type": _parameter_type(schema.get("type", "string")),
        "required": bool(schema.get("required", False)),
        "description": schema.get("description") or "",
    }
    if "default" in schema:
        fields["default"] = schema["default"]
    if isinstance(schema.get("options"), list):
        fields["options"] = schema["options"]
    return ParameterDefinition(**fields)


def _parameter_from_table_row(row: Mapping[str, Any]) -> ParameterDefinition:
    """Parse a node_parameters table row"""
    fields: Dict[str, Any] = {
        "name": row["parameter_name"],
        "type": _parameter_type(row.get("parameter_type", "string")),
        "required": bool(row.get("required", False)),
        "description": row.get("description") or "",
    }
    if row.get("default_value") is not None:
        fields["default"] = _parse_text_default(row["default_value"])
    if isinstance(row.get("options"), list):
        fields["options"] = row["options"]
    return ParameterDefinition(**fields)


def definition_from_row(row: Mapping[str, Any]) -> NodeTypeDefinition:
    """
    Build a NodeTypeDefinition from a catalogue row

    Accepts the native shape (`type`, `current_version`, `parameters`) and
    the catalogue table shape (`node_type`, `version`, `parameters_schema`).

    Raises:
        RegistryLoadError: If the row cannot be parsed
    """
    try:
        if "type" in row:
            return NodeTypeDefinition.model_validate(dict(row))

        category = row.get("category") or ""
        role = row.get("role") or (
            NodeRole.TRIGGER if category == "Trigger Nodes" else NodeRole.REGULAR
        )

        parameters: List[ParameterDefinition] = [
            _parameter_from_schema(name, schema)
            for name, schema in (row.get("parameters_schema") or {}).items()
        ]
        seen = {p.name for p in parameters}
        for param_row in row.get("parameters") or []:
            param = _parameter_from_table_row(param_row)
            if param.name not in seen:
                parameters.append(param)
                seen.add(param.name)

        return NodeTypeDefinition(
            type=row["node_type"],
            display_name=row.get("display_name") or "",
            category=category,
            description=row.get("description") or "",
            current_version=int(row.get("version") or 1),
            role=role,
            deprecated=bool(row.get("deprecated", False)),
            replaced_by=row.get("replaced_by"),
            parameters=parameters,
            migrations=row.get("migrations") or [],
        )
    except (KeyError, TypeError, ValueError, PydanticValidationError) as e:
        raise RegistryLoadError(
            f"Invalid node catalogue row: {e}",
            details={"node_type": row.get("node_type") or row.get("type")}
        )


def load_registry_from_definitions(rows: Iterable[Mapping[str, Any]]) -> StaticNodeRegistry:
    """Build an immutable registry from catalogue rows"""
    return StaticNodeRegistry(definition_from_row(row) for row in rows)


def load_registry_from_file(path: Union[str, Path]) -> StaticNodeRegistry:
    """
    Load a registry from a JSON file

    The file holds either a list of rows or {"node_types": [...]}.

    Raises:
        RegistryLoadError: If the file cannot be read or parsed
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as e:
        raise RegistryLoadError(
            f"Could not read node catalogue: {e}",
            details={"path": str(path)}
        )

    rows = data.get("node_types") if isinstance(data, dict) else data
    if not isinstance(rows, list):
        raise RegistryLoadError(
            "Node catalogue must be a list of node types",
            details={"path": str(path)}
        )

    registry = load_registry_from_definitions(rows)
    logger.info(
        f"Loaded node registry from {path}",
        extra={"registry_size": len(registry)}
    )
    return registry


@lru_cache()
def default_registry() -> StaticNodeRegistry:
    """Registry built from the built-in n8n catalogue"""
    return load_registry_from_definitions(DEFAULT_CATALOG)


def load_configured_registry(config: Optional[Settings] = None) -> StaticNodeRegistry:
    """Load the registry named by settings, falling back to the built-in catalogue"""
    config = config or default_settings
    if config.registry_path:
        return load_registry_from_file(config.registry_path)

    registry = default_registry()
    logger.info("Using built-in node registry", extra={"registry_size": len(registry)})
    return registry
