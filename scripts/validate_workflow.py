"""Script to validate a workflow JSON file (native graph or n8n export)

Usage:
    python -m scripts.validate_workflow path/to/workflow.json
    python -m scripts.validate_workflow workflow.json --no-fix
    python -m scripts.validate_workflow workflow.json --export fixed.json
"""
import argparse
import io
import json
import sys
sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
sys.path.insert(0, ".")

from flowguard.domain.errors import DomainError
from flowguard.domain.models import ValidationResult
from flowguard.interchange.n8n_format import export_workflow_json
from flowguard.registry.loader import load_configured_registry
from flowguard.services.workflow_service import WorkflowQualityService

KIND_ICONS = {"error": "❌", "warning": "⚠️", "suggestion": "💡"}


def print_report(result: ValidationResult) -> None:
    print("=" * 60)
    print("VALIDATION RESULTS")
    print("=" * 60)
    print(f"   Valid: {'✅ yes' if result.is_valid else '❌ no'}")
    print(f"   Quality score: {result.quality_score}")
    print(f"   Complexity score: {result.complexity_score}")
    print(
        f"   Issues: {len(result.errors)} error(s), {len(result.warnings)} warning(s), "
        f"{len(result.suggestions)} suggestion(s)"
    )

    if result.issues:
        print()
        for issue in result.issues:
            icon = KIND_ICONS.get(issue.kind.value, "•")
            where = f" [{issue.node_name or issue.node_id}]" if issue.node_id else ""
            print(f"   {icon} {issue.code.value}{where}: {issue.message}")
            if issue.suggested_fix:
                print(f"      → {issue.suggested_fix}")

    if result.applied_fixes:
        print("\n" + "=" * 60)
        print(f"APPLIED FIXES ({len(result.applied_fixes)})")
        print("=" * 60)
        for i, fix in enumerate(result.applied_fixes, 1):
            print(f"   {i}. [{fix.action.value}] {fix.description}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate, score and repair a workflow JSON file")
    parser.add_argument("path", help="Workflow JSON file")
    parser.add_argument(
        "--no-fix",
        action="store_true",
        help="Report issues without applying auto-fixes"
    )
    parser.add_argument(
        "--export",
        metavar="OUT",
        help="Write the (repaired) workflow as n8n JSON to OUT"
    )
    args = parser.parse_args()

    with open(args.path, encoding="utf-8") as f:
        payload = json.load(f)

    service = WorkflowQualityService(load_configured_registry())
    try:
        result = service.analyze(payload, auto_fix=not args.no_fix)
    except DomainError as e:
        print(f"❌ {e.error_code}: {e.message}")
        return 2

    print_report(result)

    if args.export:
        graph = result.repaired_graph or service.parse(payload)
        with open(args.export, "w", encoding="utf-8") as f:
            f.write(export_workflow_json(graph))
        print(f"\n✅ Exported to {args.export}")

    return 0 if result.is_valid else 1


if __name__ == "__main__":
    sys.exit(main())
