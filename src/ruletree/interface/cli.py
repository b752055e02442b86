"""CLI commands for building a rule index and classifying objects."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from ..adapters.json_source import JsonFileObjectSource, JsonFileRuleSource
from ..config.runtime import RuntimeSettings, get_settings
from ..domain.errors import BuildDiagnostic
from ..domain.index_builder import UnknownAttributePolicy
from ..domain.records import AttributeOrder
from ..observability import configure_logging
from ..services.classification_service import ClassificationService


def _print_diagnostics(diagnostics: list[BuildDiagnostic]) -> None:
    for diag in diagnostics:
        where = f"#{diag.index}" if diag.index is not None else "?"
        label = f" ({diag.code})" if diag.code else ""
        print(f"warning: {diag.kind.value} at {where}{label}: {diag.message}", file=sys.stderr)


def _build_service(args: argparse.Namespace, settings: RuntimeSettings) -> ClassificationService:
    attrs = AttributeOrder(names=args.attrs) if args.attrs else AttributeOrder(names=settings.attribute_order)
    if not len(attrs):
        print("Error: no attribute order; pass --attrs or set RULETREE_ATTRIBUTE_ORDER.", file=sys.stderr)
        sys.exit(2)
    policy = UnknownAttributePolicy(args.policy) if args.policy else settings.unknown_attribute_policy
    return ClassificationService(attribute_order=attrs, unknown_attribute_policy=policy)


def _load(service: ClassificationService, args: argparse.Namespace, settings: RuntimeSettings):
    path = args.rules or settings.rules_path
    if path is None:
        print("Error: no rules file; pass --rules or set RULETREE_RULES_PATH.", file=sys.stderr)
        sys.exit(2)
    try:
        source = JsonFileRuleSource(path)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    report = service.load_from(source)
    _print_diagnostics(report.diagnostics)
    return report


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ruletree", description="Classify objects against attribute rules")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--rules", type=Path, default=None, help="JSON file with rule records")
    common.add_argument("--attrs", type=str, default=None, help="Comma-separated attribute order")
    common.add_argument(
        "--policy",
        choices=[p.value for p in UnknownAttributePolicy],
        default=None,
        help="How to treat rule attributes outside the attribute order",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("build", parents=[common], help="Build the index and print a build report")

    match_parser = subparsers.add_parser("match", parents=[common], help="Match objects and print codes per object")
    match_parser.add_argument("--objects", type=Path, required=True, help="JSON file with object records")
    match_parser.add_argument("--only-matched", action="store_true", help="Omit objects with no matching rule")

    subparsers.add_parser("dump", parents=[common], help="Print the built index as JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    settings = get_settings()
    configure_logging(settings.log_level)
    service = _build_service(args, settings)
    report = _load(service, args, settings)

    if args.command == "build":
        print(json.dumps(report.model_dump(mode="json"), indent=2))
    elif args.command == "dump":
        print(json.dumps(service.dump(), indent=2))
    elif args.command == "match":
        try:
            source = JsonFileObjectSource(args.objects)
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        objects = source.load_objects()
        _print_diagnostics(source.diagnostics)
        results = service.match_objects(objects)
        out = {
            object_id: sorted(codes)
            for object_id, codes in sorted(results.items())
            if codes or not args.only_matched
        }
        print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
