"""Workflow Scorer - Quality and complexity metrics

quality    = clamp(100 - E*errors - W*warnings - S*suggestions, 0, 100)
complexity = clamp(a*(nodes-1) + b*connections + c*(types-1) + d*(branching-1), 0, 10)

Both are pure functions of the graph and the issue list. Every term is
non-negative and non-decreasing in its input, so adding an issue never
raises quality and growing the graph never lowers complexity.
"""
from typing import Iterable, Optional

from ..config.settings import Settings, settings as default_settings
from ..domain.enums import IssueKind
from ..domain.models import ScoreCard, ValidationIssue, Workflow


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class WorkflowScorer:
    """Computes quality and complexity scores"""

    def __init__(self, config: Optional[Settings] = None):
        config = config or default_settings
        self.error_penalty = config.error_penalty
        self.warning_penalty = config.warning_penalty
        self.suggestion_penalty = config.suggestion_penalty
        self.node_weight = config.complexity_node_weight
        self.connection_weight = config.complexity_connection_weight
        self.type_weight = config.complexity_type_weight
        self.branching_weight = config.complexity_branching_weight

    def quality_score(self, issues: Iterable[ValidationIssue]) -> float:
        penalties = {
            IssueKind.ERROR: self.error_penalty,
            IssueKind.WARNING: self.warning_penalty,
            IssueKind.SUGGESTION: self.suggestion_penalty,
        }
        total = sum(penalties[issue.kind] for issue in issues)
        return round(_clamp(100.0 - total, 0.0, 100.0), 2)

    def complexity_score(self, graph: Workflow) -> float:
        node_count = len(graph.nodes)
        if node_count == 0:
            return 0.0

        raw = (
            self.node_weight * (node_count - 1)
            + self.connection_weight * len(graph.connections)
            + self.type_weight * (graph.distinct_node_types() - 1)
            + self.branching_weight * max(graph.max_branching_factor() - 1, 0)
        )
        return round(_clamp(raw, 0.0, 10.0), 1)

    def score(self, graph: Workflow, issues: Iterable[ValidationIssue]) -> ScoreCard:
        """Score a workflow and its issues"""
        return ScoreCard(
            quality_score=self.quality_score(issues),
            complexity_score=self.complexity_score(graph),
        )


def score(graph: Workflow, issues: Iterable[ValidationIssue]) -> ScoreCard:
    """Score a workflow with the configured weights"""
    return WorkflowScorer().score(graph, issues)
