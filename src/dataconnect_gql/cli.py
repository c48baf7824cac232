"""Command line front end for scanning GraphQL documents."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from dataconnect_gql.codegen import (
    ConnectorConfigError,
    codegen_for_saved_file,
    find_connector_yaml,
    load_connector_config,
)
from dataconnect_gql.parsing import Field, GraphQLParser, Operation, TypeDefinition


def _field_dict(f: Field) -> dict[str, Any]:
    return {"name": f.name, "type": f.type}


def operation_to_dict(operation: Operation, parser: GraphQLParser) -> dict[str, Any]:
    """Convert an operation and its nested selection types to plain data."""
    nested = {
        name: [_field_dict(f) for f in parser.get_nested_fields(name) or []]
        for name in parser.nested_fields.names()
    }
    return {
        "kind": operation.kind.value,
        "name": operation.name,
        "variables": [asdict(v) for v in operation.variables],
        "fields": [_field_dict(f) for f in operation.fields],
        "nested": nested,
    }


def schema_to_list(definitions: list[TypeDefinition]) -> list[dict[str, Any]]:
    return [
        {
            "name": d.name,
            "is_table": d.is_table,
            "fields": [_field_dict(f) for f in d.fields],
        }
        for d in definitions
    ]


def format_operation(operation: Operation, parser: GraphQLParser) -> str:
    """Render an operation as indented text."""
    lines = [f"{operation.kind.value} {operation.name}"]
    if operation.variables:
        lines.append("  variables:")
        lines.extend(f"    ${v.name}: {v.type}" for v in operation.variables)
    lines.append("  fields:")

    def add_fields(fields: tuple[Field, ...] | list[Field], indent: int) -> None:
        for f in fields:
            lines.append(f"{' ' * indent}{f.name}: {f.type}")
            nested = parser.get_nested_fields(f.type)
            if nested:
                add_fields(nested, indent + 2)

    add_fields(operation.fields, 4)
    return "\n".join(lines)


def format_schema(definitions: list[TypeDefinition]) -> str:
    """Render schema type blocks as indented text."""
    lines: list[str] = []
    for d in definitions:
        lines.append(f"type {d.name} @table" if d.is_table else f"type {d.name}")
        lines.extend(f"  {f.name}: {f.type}" for f in d.fields)
    return "\n".join(lines)


def _run_codegen(file: Path, project_dir: Path) -> int:
    connector = find_connector_yaml(project_dir)
    if connector is not None:
        try:
            config = load_connector_config(connector)
        except ConnectorConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        for output_dir in config.output_dirs():
            print(f"Output: {output_dir}")

    result = codegen_for_saved_file(file, project_dir)
    if result is None:
        print(f"Error: Not a .gql document: {file}", file=sys.stderr)
        return 1
    print(result.message)
    return 0 if result.success else 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Scan GraphQL operations and schema types in a .gql document"
    )
    arg_parser.add_argument(
        "file",
        type=Path,
        help="Path to the GraphQL document",
    )
    arg_parser.add_argument(
        "-s", "--schema",
        action="store_true",
        help="Scan schema type blocks instead of an operation",
    )
    arg_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    arg_parser.add_argument(
        "--codegen",
        action="store_true",
        help="Run the Data Connect code generator for the project after scanning",
    )
    arg_parser.add_argument(
        "-p", "--project-dir",
        type=Path,
        default=Path.cwd(),
        help="Project directory holding connector.yaml (default: current directory)",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = arg_parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.file.exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1

    try:
        content = args.file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser = GraphQLParser()
    if args.schema:
        definitions = parser.parse_schema(content)
        if not definitions:
            print(f"Error: No type definitions found in {args.file}", file=sys.stderr)
            return 1
        if args.json:
            print(json.dumps(schema_to_list(definitions), indent=2))
        else:
            print(format_schema(definitions))
    else:
        operation = parser.parse(content)
        if operation is None:
            print(f"Error: No operation found in {args.file}", file=sys.stderr)
            return 1
        if args.json:
            print(json.dumps(operation_to_dict(operation, parser), indent=2))
        else:
            print(format_operation(operation, parser))

    if args.codegen:
        return _run_codegen(args.file, args.project_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
