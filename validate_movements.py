#!/usr/bin/env python3
"""Bank movement validation tool.

This is the main entry point script for the movement reconciler.
It wraps the package CLI for convenient execution.

Usage:
    python validate_movements.py --input request.json --output verdict.json

For full documentation and options:
    python validate_movements.py --help
"""

import sys
from pathlib import Path

# Add src to path for development installs
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from movement_reconciler.cli import main

if __name__ == "__main__":
    sys.exit(main())
