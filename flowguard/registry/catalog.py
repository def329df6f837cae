"""Built-in n8n node catalogue

Rows use the catalogue table layout (node_type, display_name, version,
deprecated, replaced_by, parameters_schema) plus the optional `role` and
`migrations` columns understood by the loader.
"""
from typing import Any, Dict, List, Tuple

# Types the improvement suggestions look for
SET_NODE_TYPE = "n8n-nodes-base.set"
HTTP_REQUEST_NODE_TYPE = "n8n-nodes-base.httpRequest"
BRANCH_NODE_TYPES: Tuple[str, ...] = ("n8n-nodes-base.if", "n8n-nodes-base.switch")


DEFAULT_CATALOG: List[Dict[str, Any]] = [
    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------
    {
        "node_type": "n8n-nodes-base.webhook",
        "display_name": "Webhook",
        "category": "Trigger Nodes",
        "description": "Receive HTTP requests",
        "version": 2,
        "parameters_schema": {
            "path": {"type": "string", "required": True, "description": "Webhook path"},
            "httpMethod": {
                "type": "options",
                "options": ["GET", "POST", "PUT", "DELETE", "PATCH"],
                "default": "GET",
            },
            "responseMode": {
                "type": "options",
                "options": ["onReceived", "lastNode", "responseNode"],
                "default": "onReceived",
            },
        },
        "migrations": [
            {"from_type": "n8n-nodes-base.webhook", "to_type": "n8n-nodes-base.webhook", "to_version": 2},
        ],
    },
    {
        "node_type": "n8n-nodes-base.manualTrigger",
        "display_name": "Manual Trigger",
        "category": "Trigger Nodes",
        "description": "Start the workflow manually",
        "version": 1,
        "parameters_schema": {},
    },
    {
        "node_type": "n8n-nodes-base.scheduleTrigger",
        "display_name": "Schedule Trigger",
        "category": "Trigger Nodes",
        "description": "Start the workflow on a schedule",
        "version": 1,
        "parameters_schema": {
            "rule": {
                "type": "collection",
                "required": True,
                "default": {"interval": [{"field": "hours"}]},
                "description": "Schedule rules",
            },
        },
        "migrations": [
            {
                "from_type": "n8n-nodes-base.cron",
                "to_type": "n8n-nodes-base.scheduleTrigger",
                "to_version": 1,
                "rename_parameters": {"triggerTimes": "rule"},
            },
        ],
    },
    {
        "node_type": "n8n-nodes-base.cron",
        "display_name": "Cron",
        "category": "Trigger Nodes",
        "description": "Start the workflow at fixed times (deprecated)",
        "version": 1,
        "deprecated": True,
        "replaced_by": "n8n-nodes-base.scheduleTrigger",
        "parameters_schema": {
            "triggerTimes": {"type": "collection", "required": True},
        },
    },
    # ------------------------------------------------------------------
    # Core nodes
    # ------------------------------------------------------------------
    {
        "node_type": "n8n-nodes-base.code",
        "display_name": "Code",
        "category": "Core Nodes",
        "description": "Execute custom JavaScript code",
        "version": 2,
        "parameters_schema": {
            "jsCode": {
                "type": "string",
                "required": True,
                "default": "// Add your code here\nreturn $input.all();",
                "description": "JavaScript code to execute",
            },
            "mode": {
                "type": "options",
                "options": ["runOnceForAllItems", "runOnceForEachItem"],
                "default": "runOnceForAllItems",
            },
        },
        "migrations": [
            {
                "from_type": "n8n-nodes-base.function",
                "to_type": "n8n-nodes-base.code",
                "to_version": 2,
                "rename_parameters": {"functionCode": "jsCode"},
                "set_parameters": {"mode": "runOnceForAllItems"},
            },
            {"from_type": "n8n-nodes-base.code", "to_type": "n8n-nodes-base.code", "to_version": 2},
        ],
    },
    {
        "node_type": "n8n-nodes-base.function",
        "display_name": "Function",
        "category": "Core Nodes",
        "description": "Execute custom JavaScript code (deprecated)",
        "version": 1,
        "deprecated": True,
        "replaced_by": "n8n-nodes-base.code",
        "parameters_schema": {
            "functionCode": {"type": "string", "required": True, "description": "JavaScript function code"},
        },
    },
    {
        "node_type": "n8n-nodes-base.set",
        "display_name": "Edit Fields (Set)",
        "category": "Core Nodes",
        "description": "Set values on items",
        "version": 3,
        "parameters_schema": {
            "mode": {"type": "options", "options": ["manual", "raw"], "default": "manual"},
            "fields": {
                "type": "collection",
                "required": True,
                "default": {"values": []},
                "description": "Fields to set",
            },
            "options": {"type": "json", "description": "Additional options"},
        },
        "migrations": [
            {
                "from_type": "n8n-nodes-base.set",
                "to_type": "n8n-nodes-base.set",
                "to_version": 3,
                "rename_parameters": {"values": "fields"},
            },
        ],
    },
    {
        "node_type": "n8n-nodes-base.httpRequest",
        "display_name": "HTTP Request",
        "category": "Regular Nodes",
        "description": "Make HTTP requests to any URL",
        "version": 4,
        "parameters_schema": {
            "url": {"type": "string", "required": True},
            "method": {
                "type": "options",
                "options": ["GET", "POST", "PUT", "DELETE", "PATCH"],
                "default": "GET",
            },
            "authentication": {
                "type": "options",
                "options": ["none", "basicAuth", "oAuth2Api", "bearerToken", "predefinedCredentialType"],
                "default": "none",
            },
        },
        "migrations": [
            {
                "from_type": "n8n-nodes-base.httpRequest",
                "to_type": "n8n-nodes-base.httpRequest",
                "to_version": 4,
                "rename_parameters": {"requestMethod": "method"},
            },
        ],
    },
    {
        "node_type": "n8n-nodes-base.if",
        "display_name": "If",
        "category": "Core Nodes",
        "description": "Split workflow based on conditions",
        "version": 2,
        "parameters_schema": {
            "conditions": {
                "type": "collection",
                "required": True,
                "default": {
                    "options": {
                        "caseSensitive": True,
                        "leftValue": "",
                        "operation": "equal",
                        "rightValue": "",
                    }
                },
                "description": "Conditions to check",
            },
            "combineOperation": {"type": "options", "options": ["any", "all"], "default": "all"},
        },
        "migrations": [
            {"from_type": "n8n-nodes-base.if", "to_type": "n8n-nodes-base.if", "to_version": 2},
        ],
    },
    {
        "node_type": "n8n-nodes-base.switch",
        "display_name": "Switch",
        "category": "Core Nodes",
        "description": "Route items to different outputs based on rules",
        "version": 3,
        "parameters_schema": {
            "mode": {"type": "options", "options": ["rules", "expression"], "default": "rules"},
            "rules": {
                "type": "collection",
                "required": True,
                "default": {"values": []},
                "description": "Rules for routing",
            },
            "fallbackOutput": {"type": "number", "default": 3},
        },
    },
    {
        "node_type": "n8n-nodes-base.merge",
        "display_name": "Merge",
        "category": "Core Nodes",
        "description": "Merge data of multiple streams",
        "version": 3,
        "parameters_schema": {
            "mode": {
                "type": "options",
                "options": ["append", "combine", "chooseBranch"],
                "required": True,
                "default": "append",
            },
        },
    },
    {
        "node_type": "n8n-nodes-base.itemLists",
        "display_name": "Item Lists",
        "category": "Core Nodes",
        "description": "Manipulate lists of items",
        "version": 3,
        "parameters_schema": {
            "operation": {
                "type": "options",
                "options": ["aggregateItems", "splitOutItems", "sort", "limit"],
                "required": True,
                "default": "aggregateItems",
            },
            "fieldToSplitOut": {"type": "string"},
            "sortFieldsUi": {"type": "collection"},
        },
    },
    # ------------------------------------------------------------------
    # Sinks
    # ------------------------------------------------------------------
    {
        "node_type": "n8n-nodes-base.respondToWebhook",
        "display_name": "Respond to Webhook",
        "category": "Core Nodes",
        "description": "Return data to the webhook caller",
        "version": 1,
        "role": "terminal",
        "parameters_schema": {
            "respondWith": {
                "type": "options",
                "options": ["allIncomingItems", "firstIncomingItem", "json", "text", "noData"],
                "required": True,
                "default": "firstIncomingItem",
            },
        },
    },
    {
        "node_type": "n8n-nodes-base.noOp",
        "display_name": "No Operation, do nothing",
        "category": "Core Nodes",
        "description": "Placeholder that passes items through",
        "version": 1,
        "role": "terminal",
        "parameters_schema": {},
    },
]
