#!/usr/bin/env python3
"""CDK entry point for the BFF gateway stacks."""

from __future__ import annotations

import sys
from pathlib import Path

# Add backend source to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent / "backend" / "src"))

from bff.infra.app import build_app  # noqa: E402
from bff.utils.logging import configure_logging  # noqa: E402


def main() -> None:
    configure_logging()
    bff_app = build_app()
    bff_app.app.synth()


if __name__ == "__main__":
    main()
