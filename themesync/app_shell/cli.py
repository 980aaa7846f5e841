import argparse
import json
import logging
import sys

from themesync.components.pipeline import Pipeline
from themesync.components.registry import SchemaRegistry
from themesync.errors import Violation
from themesync.formats import ArtifactFormat
from themesync.rules import SyncPolicy

logger = logging.getLogger("cli")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_LOAD_FAILED = 2
EXIT_WRITE_FAILED = 3


def get_registry(args: argparse.Namespace) -> SchemaRegistry | None:
    try:
        registry = SchemaRegistry.from_file(args.schema)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot load schema: {e}")
        return None

    if getattr(args, "sync_language", False):
        registry = registry.with_sync_policy("Language", SyncPolicy.IN_SYNC)
    return registry


def print_violations(violations: list[Violation]) -> None:
    for violation in violations:
        print(violation)


def load_and_validate(pipeline: Pipeline, args: argparse.Namespace) -> int:
    output = pipeline.load(args.input)
    if not output.success:
        print_violations(output.errors)
        logger.error(f"Load failed with {len(output.errors)} errors.")
        return EXIT_LOAD_FAILED

    report = pipeline.validate()
    if not report.is_valid:
        print_violations(list(report.violations))
        logger.error(f"Validation failed with {len(report.violations)} violations.")
        return EXIT_INVALID
    return EXIT_OK


def handle_validate(pipeline: Pipeline, args: argparse.Namespace) -> int:
    code = load_and_validate(pipeline, args)
    if code == EXIT_OK:
        print("Valid.")
    return code


def handle_export(pipeline: Pipeline, args: argparse.Namespace) -> int:
    code = load_and_validate(pipeline, args)
    if code != EXIT_OK:
        return code

    try:
        output = pipeline.export(args.output, fmt=ArtifactFormat(args.format))
    except OSError as e:
        logger.error(f"Cannot write artifacts to {args.output}: {e}")
        return EXIT_WRITE_FAILED

    for path in output.written:
        print(f"Exported: {path}")
    if not output.written:
        logger.warning("No collection is in-sync; nothing was exported.")
    return EXIT_OK


def handle_list(pipeline: Pipeline, args: argparse.Namespace) -> int:
    output = pipeline.load(args.input)
    if not output.success or output.tree is None:
        print_violations(output.errors)
        return EXIT_LOAD_FAILED

    tree = output.tree
    for path, variable in tree.walk():
        line = f"{path}  {variable.type.value}"
        if variable.alias is not None:
            line += f"  -> {variable.alias}"
        if variable.values:
            line += f"  {json.dumps(variable.values, ensure_ascii=False)}"
        print(line)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="themesync",
        description="Validate design variable snapshots and export theme files",
    )
    parser.add_argument("--schema", help="Schema file (default: $THEMESYNC_SCHEMA or built-in)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate a snapshot")
    validate_parser.add_argument("input", help="Snapshot file or artifact directory")

    # export
    export_parser = subparsers.add_parser("export", help="Validate and export theme files")
    export_parser.add_argument("input", help="Snapshot file or artifact directory")
    export_parser.add_argument("-o", "--output", required=True, help="Output directory")
    export_parser.add_argument(
        "--format",
        choices=[f.value for f in ArtifactFormat],
        default=ArtifactFormat.JSON.value,
        help="Artifact format",
    )
    export_parser.add_argument(
        "--sync-language", action="store_true", help="Export the Language collection too"
    )

    # list
    list_parser = subparsers.add_parser("list", help="List variables in traversal order")
    list_parser.add_argument("input", help="Snapshot file or artifact directory")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    registry = get_registry(args)
    if registry is None:
        return EXIT_LOAD_FAILED

    pipeline = Pipeline(registry)

    if args.command == "validate":
        return handle_validate(pipeline, args)
    elif args.command == "export":
        return handle_export(pipeline, args)
    elif args.command == "list":
        return handle_list(pipeline, args)
    return EXIT_LOAD_FAILED


if __name__ == "__main__":
    sys.exit(main())
