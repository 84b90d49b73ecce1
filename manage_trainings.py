#!/usr/bin/env python3
"""Training schedule and income ledger.

This is the main entry point script for the training ledger.
It wraps the package CLI for convenient execution.

Usage:
    python manage_trainings.py login
    python manage_trainings.py summary --from 2026-01 --to 2026-06

For full documentation and options:
    python manage_trainings.py --help
"""

import sys
from pathlib import Path

# Add src to path for development installs
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from training_ledger.cli import main

if __name__ == "__main__":
    sys.exit(main())
