"""Interchange formats understood by the external automation engine"""
from .n8n_format import (
    export_workflow_json,
    is_n8n_payload,
    parse_workflow_payload,
    workflow_from_n8n,
    workflow_to_n8n,
)

__all__ = [
    "export_workflow_json",
    "is_n8n_payload",
    "parse_workflow_payload",
    "workflow_from_n8n",
    "workflow_to_n8n",
]
