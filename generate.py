#!/usr/bin/env python3
"""
Convenience wrapper for the Go client generator.

This forwards to the clientgen module.
Run with --help to see available commands.

Usage:
    python generate.py <command> [options]
    ./generate.py <command> [options]  (on Unix with execute permission)

Commands:
    generate    Load all API definitions and write the Go client
    schemas     Load all API definitions and list schema type names

Examples:
    python generate.py generate --manifest codegen/apis.json
    python generate.py schemas --manifest codegen/apis.json --no-patches
"""

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent


def main() -> int:
    """Forward all arguments to the clientgen module."""
    return subprocess.call(
        [sys.executable, "-m", "clientgen"] + sys.argv[1:],
        cwd=ROOT,
    )


if __name__ == "__main__":
    sys.exit(main())
