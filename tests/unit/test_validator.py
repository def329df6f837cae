"""Tests for the workflow validator.

Covers:
- Input errors raised before any rule runs
- Empty workflows
- Each validation rule
- Issue ordering and purity
- Reference scenarios (single trigger, duplicate ID, dangling connection,
  missing parameter with default)
"""

import pytest

from flowguard.config.settings import Settings
from flowguard.domain.enums import IssueCode, IssueKind
from flowguard.domain.errors import InvalidInputError, WorkflowTooLargeError
from flowguard.domain.models import Workflow
from flowguard.engine.assembler import assemble
from flowguard.engine.validator import WorkflowValidator, ensure_valid_input, validate
from flowguard.registry.loader import load_registry_from_definitions
from tests.factories import chain, link, node, workflow


def codes(result):
    return [issue.code for issue in result.issues]


# =========================================================================
# Input errors
# =========================================================================


class TestInputErrors:

    def test_none_graph_rejected(self, fake_registry):
        with pytest.raises(InvalidInputError):
            validate(None, fake_registry)

    def test_raw_dict_rejected(self, fake_registry):
        with pytest.raises(InvalidInputError) as exc:
            validate({"nodes": []}, fake_registry)
        assert exc.value.details["received_type"] == "dict"

    def test_missing_registry_rejected(self):
        with pytest.raises(InvalidInputError):
            validate(workflow(node("t", "test.trigger")), None)

    def test_node_limit(self, fake_registry):
        graph = workflow(node("a", "test.trigger"), node("b", "test.sink"))
        with pytest.raises(WorkflowTooLargeError) as exc:
            ensure_valid_input(graph, fake_registry, max_nodes=1)
        assert exc.value.http_status == 413
        assert exc.value.details == {"node_count": 2, "max_graph_nodes": 1}

    def test_validator_applies_its_own_node_limit(self, fake_registry):
        graph = workflow(node("a", "test.trigger"), node("b", "test.sink"))
        validator = WorkflowValidator(fake_registry, Settings(_env_file=None, max_graph_nodes=1))
        with pytest.raises(WorkflowTooLargeError):
            validator.validate(graph)


# =========================================================================
# Empty workflow
# =========================================================================


class TestEmptyWorkflow:

    def test_single_error_issue(self, fake_registry):
        result = validate(Workflow(), fake_registry)
        assert result.is_valid is False
        assert codes(result) == [IssueCode.EMPTY_WORKFLOW]
        assert result.issues[0].kind == IssueKind.ERROR
        assert result.issues[0].auto_fixable is False

    def test_no_other_rules_run(self, fake_registry):
        # dangling connection on an empty graph is not reported separately
        graph = Workflow(connections=[link("a", "b")])
        assert codes(validate(graph, fake_registry)) == [IssueCode.EMPTY_WORKFLOW]


# =========================================================================
# Structural rules
# =========================================================================


class TestDuplicateIds:

    def test_reported_on_later_occurrences(self, fake_registry):
        graph = workflow(
            node("n1", "test.trigger"),
            node("n1", "test.trigger"),
            node("n1", "test.trigger"),
        )
        dupes = [i for i in validate(graph, fake_registry).issues if i.code == IssueCode.DUPLICATE_NODE_ID]
        assert [i.node_index for i in dupes] == [1, 2]
        assert all(i.kind == IssueKind.ERROR and i.auto_fixable for i in dupes)
        assert dupes[0].details == {"first_index": 0}


class TestTriggerPresent:

    def test_missing_trigger_is_warning(self, fake_registry):
        graph = workflow(
            node("a", "test.action", target="x"),
            node("s", "test.sink"),
            connections=chain("a", "s"),
        )
        result = validate(graph, fake_registry)
        assert codes(result) == [IssueCode.MISSING_TRIGGER]
        assert result.issues[0].kind == IssueKind.WARNING
        assert result.is_valid is True


# =========================================================================
# Per-node rules
# =========================================================================


class TestNodeType:

    def test_unknown_type_without_migration(self, fake_registry):
        graph = workflow(node("t", "test.trigger"), node("x", "test.actoin"), connections=chain("t", "x"))
        issue = validate(graph, fake_registry).issues[0]
        assert issue.code == IssueCode.UNKNOWN_NODE_TYPE
        assert issue.kind == IssueKind.ERROR
        assert issue.auto_fixable is False
        assert issue.node_index == 1
        assert "test.action" in issue.details["similar_types"]
        assert issue.suggested_fix == "Did you mean 'test.action'?"

    def test_unknown_type_with_migration_is_fixable(self):
        registry = load_registry_from_definitions([
            {"type": "test.start", "role": "trigger"},
            {
                "type": "test.new",
                "migrations": [{"from_type": "test.gone", "to_type": "test.new", "to_version": 1}],
            },
        ])
        graph = workflow(node("s", "test.start"), node("g", "test.gone"), connections=chain("s", "g"))
        issue = validate(graph, registry).issues[0]
        assert issue.code == IssueCode.UNKNOWN_NODE_TYPE
        assert issue.auto_fixable is True
        assert issue.suggested_fix == "Replace with test.new v1"

    def test_deprecated_type(self, fake_registry):
        graph = workflow(
            node("t", "test.trigger"),
            node("l", "test.legacy", endpoint="https://example.org"),
            connections=chain("t", "l"),
        )
        result = validate(graph, fake_registry)
        assert codes(result) == [IssueCode.DEPRECATED_NODE_TYPE]
        issue = result.issues[0]
        assert issue.kind == IssueKind.WARNING
        assert issue.auto_fixable is True
        assert issue.details["replaced_by"] == "test.action"

    def test_outdated_version_with_migration(self, fake_registry):
        graph = workflow(node("t", "test.trigger"), node("v", "test.versioned", mode="safe"), connections=chain("t", "v"))
        issue = validate(graph, fake_registry).issues[0]
        assert issue.code == IssueCode.OUTDATED_NODE_VERSION
        assert issue.auto_fixable is True
        assert issue.details == {"node_type": "test.versioned", "version": 1, "current_version": 3}

    def test_outdated_version_without_migration(self, fake_registry):
        graph = workflow(node("t", "test.trigger"), node("f", "test.frozen"), connections=chain("t", "f"))
        issue = validate(graph, fake_registry).issues[0]
        assert issue.code == IssueCode.OUTDATED_NODE_VERSION
        assert issue.auto_fixable is False

    def test_version_newer_than_registry(self, fake_registry):
        graph = workflow(
            node("t", "test.trigger"),
            node("v", "test.versioned", version=4, mode="fast"),
            connections=chain("t", "v"),
        )
        issue = validate(graph, fake_registry).issues[0]
        assert issue.code == IssueCode.UNSUPPORTED_NODE_VERSION
        assert issue.kind == IssueKind.WARNING
        assert issue.auto_fixable is False


class TestRequiredParameters:

    def test_missing_with_default_is_fixable_warning(self, fake_registry):
        graph = workflow(node("t", "test.trigger"), node("a", "test.action"), connections=chain("t", "a"))
        issue = validate(graph, fake_registry).issues[0]
        assert issue.code == IssueCode.MISSING_REQUIRED_PARAMETER
        assert issue.kind == IssueKind.WARNING
        assert issue.auto_fixable is True
        assert issue.details == {"parameter": "target"}

    def test_missing_without_default_is_suggestion(self, fake_registry):
        graph = workflow(node("t", "test.trigger"), node("m", "test.manual"), connections=chain("t", "m"))
        issue = validate(graph, fake_registry).issues[0]
        assert issue.code == IssueCode.MISSING_REQUIRED_PARAMETER
        assert issue.kind == IssueKind.SUGGESTION
        assert issue.auto_fixable is False

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_empty_values_count_as_missing(self, fake_registry, value):
        graph = workflow(node("t", "test.trigger"), node("a", "test.action", target=value), connections=chain("t", "a"))
        assert codes(validate(graph, fake_registry)) == [IssueCode.MISSING_REQUIRED_PARAMETER]

    @pytest.mark.parametrize("value", [0, False, "x", [1], {"k": None}])
    def test_falsy_but_present_values_accepted(self, fake_registry, value):
        graph = workflow(node("t", "test.trigger"), node("m", "test.manual", body=value), connections=chain("t", "m"))
        assert validate(graph, fake_registry).issues == []


class TestParameterValues:

    def test_wrong_kind_is_warning(self, fake_registry):
        graph = workflow(node("t", "test.trigger"), node("a", "test.action", target=42), connections=chain("t", "a"))
        issue = validate(graph, fake_registry).issues[0]
        assert issue.code == IssueCode.INVALID_PARAMETER_VALUE
        assert issue.kind == IssueKind.WARNING
        assert issue.auto_fixable is False
        assert issue.details == {"parameter": "target", "expected": "string", "received": "number"}

    def test_value_outside_options(self, fake_registry):
        graph = workflow(
            node("t", "test.trigger"),
            node("v", "test.versioned", version=3, mode="slow"),
            connections=chain("t", "v"),
        )
        issue = validate(graph, fake_registry).issues[0]
        assert issue.code == IssueCode.INVALID_PARAMETER_VALUE
        assert issue.details["options"] == ["fast", "safe"]
        assert issue.suggested_fix == "Choose one of: fast, safe"

    def test_optional_parameter_checked_too(self, fake_registry):
        graph = workflow(
            node("t", "test.trigger"),
            node("a", "test.action", target="x", note=["a", "b"]),
            connections=chain("t", "a"),
        )
        assert codes(validate(graph, fake_registry)) == [IssueCode.INVALID_PARAMETER_VALUE]

    def test_expressions_accepted_for_any_type(self, fake_registry):
        graph = workflow(
            node("t", "test.trigger"),
            node("v", "test.versioned", version=3, mode="={{ $json.mode }}"),
            connections=chain("t", "v"),
        )
        assert validate(graph, fake_registry).issues == []

    def test_undeclared_parameters_ignored(self, fake_registry):
        graph = workflow(
            node("t", "test.trigger"),
            node("a", "test.action", target="x", extra=1),
            connections=chain("t", "a"),
        )
        assert validate(graph, fake_registry).issues == []

    def test_builtin_webhook_method(self, n8n_registry):
        graph = workflow(node("w", "n8n-nodes-base.webhook", version=2, path="in", httpMethod="FETCH"))
        result = assemble(graph, n8n_registry, auto_fix_enabled=True)
        assert codes(result) == [IssueCode.INVALID_PARAMETER_VALUE]
        assert result.repaired_graph is None
        assert result.quality_score == 95

    def test_builtin_collection_accepts_sequence_and_mapping(self, n8n_registry):
        graph = workflow(
            node("c", "n8n-nodes-base.cron", triggerTimes={"item": []}),
            node("d", "n8n-nodes-base.cron", triggerTimes=[{"mode": "everyHour"}]),
        )
        assert IssueCode.INVALID_PARAMETER_VALUE not in codes(validate(graph, n8n_registry))


class TestOrphans:

    def test_unconnected_regular_node(self, fake_registry):
        graph = workflow(node("t", "test.trigger"), node("a", "test.action", target="x"), node("s", "test.sink"))
        result = validate(graph, fake_registry)
        assert codes(result) == [IssueCode.ORPHAN_NODE]
        assert result.issues[0].node_id == "a"
        assert result.issues[0].kind == IssueKind.SUGGESTION

    def test_dangling_connection_does_not_count(self, fake_registry):
        graph = workflow(
            node("t", "test.trigger"),
            node("a", "test.action", target="x"),
            connections=[link("a", "ghost")],
        )
        assert codes(validate(graph, fake_registry)) == [IssueCode.ORPHAN_NODE, IssueCode.DANGLING_CONNECTION]

    def test_connections_attach_to_first_duplicate(self, fake_registry):
        graph = workflow(
            node("t", "test.trigger"),
            node("a", "test.action", target="x"),
            node("a", "test.action", target="y"),
            connections=chain("t", "a"),
        )
        orphans = [i for i in validate(graph, fake_registry).issues if i.code == IssueCode.ORPHAN_NODE]
        assert [i.node_index for i in orphans] == [2]

    def test_self_loop_connects_node(self, fake_registry):
        graph = workflow(
            node("t", "test.trigger"),
            node("a", "test.action", target="x"),
            connections=[link("a", "a")],
        )
        assert validate(graph, fake_registry).issues == []


# =========================================================================
# Per-connection rules
# =========================================================================


class TestConnections:

    def test_dangling_connection(self, fake_registry):
        graph = workflow(node("t", "test.trigger"), connections=[link("t", "gone"), link("nope", "gone")])
        issues = validate(graph, fake_registry).issues
        assert [i.connection_index for i in issues] == [0, 1]
        assert issues[0].details["missing_node_ids"] == ["gone"]
        assert issues[1].details["missing_node_ids"] == ["gone", "nope"]
        assert all(i.auto_fixable for i in issues)

    def test_duplicate_connection(self, fake_registry):
        graph = workflow(
            node("t", "test.trigger"),
            node("s", "test.sink"),
            connections=[link("t", "s"), link("t", "s"), link("t", "s", from_port="main:1")],
        )
        issues = validate(graph, fake_registry).issues
        assert len(issues) == 1
        assert issues[0].code == IssueCode.DUPLICATE_CONNECTION
        assert issues[0].connection_index == 1
        assert issues[0].kind == IssueKind.SUGGESTION


# =========================================================================
# Improvement suggestions
# =========================================================================


class TestImprovementSuggestions:

    def _set_chain(self, count):
        nodes = [node("t", "n8n-nodes-base.manualTrigger")]
        nodes += [node(f"s{i}", "n8n-nodes-base.set", version=3, fields={"values": []}) for i in range(count)]
        ids = [n.id for n in nodes]
        return workflow(*nodes, connections=chain(*ids))

    def test_three_set_nodes_allowed(self, n8n_registry):
        assert validate(self._set_chain(3), n8n_registry).issues == []

    def test_many_set_nodes(self, n8n_registry):
        result = validate(self._set_chain(4), n8n_registry)
        assert codes(result) == [IssueCode.CONSOLIDATE_SET_NODES]
        issue = result.issues[0]
        assert issue.kind == IssueKind.SUGGESTION
        assert issue.auto_fixable is False
        assert issue.details == {"node_ids": ["s0", "s1", "s2", "s3"], "max_set_nodes": 3}

    def test_set_node_limit_from_settings(self, n8n_registry):
        validator = WorkflowValidator(n8n_registry, Settings(_env_file=None, max_set_nodes=1))
        assert codes(validator.validate(self._set_chain(2))) == [IssueCode.CONSOLIDATE_SET_NODES]

    def test_http_request_without_branching(self, n8n_registry):
        graph = workflow(
            node("t", "n8n-nodes-base.manualTrigger"),
            node("h", "n8n-nodes-base.httpRequest", version=4, url="https://example.com"),
            connections=chain("t", "h"),
        )
        result = validate(graph, n8n_registry)
        assert codes(result) == [IssueCode.UNHANDLED_HTTP_ERRORS]
        assert result.issues[0].details == {"node_ids": ["h"]}
        assert result.is_valid is True

    def test_switch_counts_as_error_handling(self, n8n_registry):
        graph = workflow(
            node("t", "n8n-nodes-base.manualTrigger"),
            node("h", "n8n-nodes-base.httpRequest", version=4, url="https://example.com"),
            node("s", "n8n-nodes-base.switch", version=3, rules={"values": [{"output": 0}]}),
            connections=chain("t", "h", "s"),
        )
        assert validate(graph, n8n_registry).issues == []

    def test_suggestions_follow_connection_rules(self, n8n_registry):
        graph = workflow(
            node("h", "n8n-nodes-base.httpRequest", version=4, url="https://example.com"),
            connections=[link("h", "gone")],
        )
        assert codes(validate(graph, n8n_registry)) == [
            IssueCode.MISSING_TRIGGER,
            IssueCode.ORPHAN_NODE,
            IssueCode.DANGLING_CONNECTION,
            IssueCode.UNHANDLED_HTTP_ERRORS,
        ]


# =========================================================================
# Ordering and purity
# =========================================================================


class TestOrderingAndPurity:

    def test_structural_then_node_then_connection(self, fake_registry):
        graph = workflow(
            node("a", "test.unknown"),
            node("a", "test.sink"),
            node("v", "test.versioned", version=3, mode="slow"),
            connections=[link("a", "missing")],
        )
        assert codes(validate(graph, fake_registry)) == [
            IssueCode.DUPLICATE_NODE_ID,
            IssueCode.MISSING_TRIGGER,
            IssueCode.UNKNOWN_NODE_TYPE,
            IssueCode.ORPHAN_NODE,
            IssueCode.INVALID_PARAMETER_VALUE,
            IssueCode.ORPHAN_NODE,
            IssueCode.DANGLING_CONNECTION,
        ]

    def test_graph_not_modified(self, fake_registry):
        graph = workflow(node("t", "test.trigger"), node("a", "test.action"), connections=chain("t", "a"))
        snapshot = graph.model_dump()
        WorkflowValidator(fake_registry).validate(graph)
        assert graph.model_dump() == snapshot

    def test_valid_workflow_has_no_issues(self, fake_registry):
        graph = workflow(
            node("t", "test.trigger"),
            node("a", "test.action", target="x"),
            node("s", "test.sink"),
            connections=chain("t", "a", "s"),
        )
        result = validate(graph, fake_registry)
        assert result.issues == []
        assert result.is_valid is True


# =========================================================================
# Reference scenarios
# =========================================================================


class TestScenarios:

    def test_single_trigger_without_connections(self, fake_registry):
        graph = workflow(node("n1", "webhookTrigger"))
        result = assemble(graph, fake_registry)
        assert result.issues == []
        assert result.is_valid is True
        assert result.quality_score == 100

    def test_duplicate_id_renamed(self, fake_registry):
        graph = workflow(node("n1", "test.trigger"), node("n1", "test.trigger"))
        before = assemble(graph, fake_registry, auto_fix_enabled=False)
        assert len(before.errors) == 1
        assert before.quality_score <= 85

        after = assemble(graph, fake_registry, auto_fix_enabled=True)
        assert [n.id for n in after.repaired_graph.nodes] == ["n1", "n1_2"]
        assert after.errors == []
        assert after.quality_score == 100

    def test_dangling_connection_removed(self, fake_registry):
        graph = workflow(node("n1", "test.trigger"), connections=[link("n1", "missing")])
        before = validate(graph, fake_registry)
        assert len(before.errors) == 1
        assert before.errors[0].auto_fixable is True
        assert before.is_valid is False

        after = assemble(graph, fake_registry, auto_fix_enabled=True)
        assert after.is_valid is True
        assert after.repaired_graph.connections == []

    def test_missing_parameter_filled_with_default(self, fake_registry):
        graph = workflow(node("t", "test.trigger"), node("a", "test.action"), connections=chain("t", "a"))
        before = validate(graph, fake_registry)
        assert [i.kind for i in before.issues] == [IssueKind.WARNING]

        after = assemble(graph, fake_registry, auto_fix_enabled=True)
        assert after.repaired_graph.nodes[1].parameters["target"] == "https://example.com"
        assert after.issues == []
