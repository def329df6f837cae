"""
Scripts Module

Command-line utilities around the workflow quality engine.

Available scripts:
    - validate_workflow.py: Validates, scores and repairs a workflow JSON file

Usage:
    python -m scripts.validate_workflow workflow.json
"""
