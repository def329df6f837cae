"""
Pytest Configuration and Fixtures

This file contains shared fixtures and configuration for all tests.
"""

import pytest

from flowguard.config.settings import Settings
from flowguard.registry.loader import default_registry, load_registry_from_definitions
from flowguard.registry.node_registry import StaticNodeRegistry


# Small catalogue in the native definition shape. Types are chosen so each
# validation rule and each auto-fix path can be triggered in isolation.
FAKE_DEFINITIONS = [
    {"type": "test.trigger", "display_name": "Trigger", "role": "trigger"},
    {"type": "webhookTrigger", "display_name": "Webhook Trigger", "role": "trigger"},
    {
        "type": "test.action",
        "display_name": "Action",
        "parameters": [
            {"name": "target", "type": "string", "required": True, "default": "https://example.com"},
            {"name": "note", "type": "string"},
        ],
        "migrations": [
            {
                "from_type": "test.legacy",
                "to_type": "test.action",
                "to_version": 1,
                "rename_parameters": {"endpoint": "target"},
                "set_parameters": {"note": "migrated"},
            },
        ],
    },
    {
        "type": "test.versioned",
        "display_name": "Versioned",
        "current_version": 3,
        "parameters": [
            {"name": "mode", "type": "options", "required": True, "default": "fast", "options": ["fast", "safe"]},
        ],
        "migrations": [
            {"from_type": "test.versioned", "to_type": "test.versioned", "to_version": 3,
             "rename_parameters": {"speed": "mode"}},
        ],
    },
    {"type": "test.frozen", "display_name": "Frozen", "current_version": 2},
    {
        "type": "test.legacy",
        "display_name": "Legacy Action",
        "deprecated": True,
        "replaced_by": "test.action",
        "parameters": [{"name": "endpoint", "type": "string", "required": True}],
    },
    {
        "type": "test.manual",
        "display_name": "Manual Input",
        "parameters": [{"name": "body", "type": "json", "required": True}],
    },
    {"type": "test.sink", "display_name": "Sink", "role": "terminal"},
    # Two deprecated types that migrate into each other
    {
        "type": "test.loopA",
        "deprecated": True,
        "migrations": [{"from_type": "test.loopB", "to_type": "test.loopA", "to_version": 1}],
    },
    {
        "type": "test.loopB",
        "deprecated": True,
        "migrations": [{"from_type": "test.loopA", "to_type": "test.loopB", "to_version": 1}],
    },
]


@pytest.fixture
def fake_registry() -> StaticNodeRegistry:
    """Registry over the small test catalogue"""
    return load_registry_from_definitions(FAKE_DEFINITIONS)


@pytest.fixture
def n8n_registry() -> StaticNodeRegistry:
    """Registry over the built-in n8n catalogue"""
    return default_registry()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with the default policy, isolated from the environment"""
    return Settings(_env_file=None, registry_path=None, auto_fix_enabled=True, max_graph_nodes=500)


@pytest.fixture
def n8n_workflow_json() -> dict:
    """Small n8n export: webhook -> if -> two HTTP requests"""
    return {
        "name": "Webhook router",
        "nodes": [
            {
                "id": "w1", "name": "Webhook", "type": "n8n-nodes-base.webhook",
                "typeVersion": 2, "position": [240, 300],
                "parameters": {"path": "incoming", "httpMethod": "POST"},
                "webhookId": "abc-123",
            },
            {
                "id": "i1", "name": "Check", "type": "n8n-nodes-base.if",
                "typeVersion": 2, "position": [460, 300],
                "parameters": {"conditions": {"boolean": []}},
            },
            {
                "id": "h1", "name": "Notify", "type": "n8n-nodes-base.httpRequest",
                "typeVersion": 4.2, "position": [680, 200],
                "parameters": {"url": "https://example.com/yes", "method": "POST"},
            },
            {
                "id": "h2", "name": "Log", "type": "n8n-nodes-base.httpRequest",
                "typeVersion": 4, "position": [680, 400],
                "parameters": {"url": "https://example.com/no"},
            },
        ],
        "connections": {
            "Webhook": {"main": [[{"node": "Check", "type": "main", "index": 0}]]},
            "Check": {
                "main": [
                    [{"node": "Notify", "type": "main", "index": 0}],
                    [{"node": "Log", "type": "main", "index": 0}],
                ]
            },
        },
        "active": True,
        "settings": {"executionOrder": "v1"},
    }
