"""Workflow Quality Engine - validation, scoring and auto-fix"""
from .validator import WorkflowValidator, ensure_valid_input, validate
from .scoring import WorkflowScorer, score
from .auto_fixer import AutoFixer, FixAuditTrail, auto_fix
from .assembler import ResultAssembler, assemble

__all__ = [
    "WorkflowValidator",
    "WorkflowScorer",
    "AutoFixer",
    "FixAuditTrail",
    "ResultAssembler",
    "ensure_valid_input",
    "validate",
    "score",
    "auto_fix",
    "assemble",
]
