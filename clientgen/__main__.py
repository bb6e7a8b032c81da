#!/usr/bin/env python3
"""
Go client generator CLI.

Usage:
    python -m clientgen <command> [options]

Commands:
    generate    Load all API definitions and write the Go client
    schemas     Load all API definitions and list schema type names

Examples:
    python -m clientgen generate --manifest codegen/apis.json
    python -m clientgen generate --manifest apis.yaml --no-patches
    python -m clientgen schemas --manifest codegen/apis.json
"""

from __future__ import annotations

import sys


def cmd_generate(args: list[str]) -> int:
    """Generate the Go client."""
    from clientgen.codegen import main as codegen
    try:
        codegen.main(args)
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


def cmd_schemas(args: list[str]) -> int:
    """List schema type names."""
    from clientgen.codegen import main as codegen
    try:
        codegen.schemas_main(args)
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


COMMANDS = {
    "generate": (cmd_generate, "Load all API definitions and write the Go client"),
    "schemas": (cmd_schemas, "Load all API definitions and list schema type names"),
}


def main() -> int:
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(__doc__)
        print("Available commands:")
        for name, (_, desc) in COMMANDS.items():
            print(f"  {name:12} {desc}")
        print("\nUse '<command> --help' for command-specific options.")
        return 0

    command = sys.argv[1]
    args = sys.argv[2:]

    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS.keys())}")
        return 1

    handler, _ = COMMANDS[command]
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
