#!/usr/bin/env python3
"""Rewards contract diagnostics.

Checks connectivity, network, signer balance, contract status, owner
permissions, distribution timing and rewards pool, then dry-runs the
distribution call. Read-only: nothing is sent.

Usage:
    python scripts/diagnose.py
"""

import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv

load_dotenv()

from rewards_distributor.config import get_settings
from rewards_distributor.exceptions import ConfigurationError
from rewards_distributor.factory import create_components
from rewards_distributor.main import configure_logging

# Colors for output
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
RESET = "\033[0m"


async def main() -> int:
    """Run diagnostics and print a summary."""
    configure_logging()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        print(f"{RED}{e}{RESET}")
        return 2

    components = create_components(settings)
    try:
        report = await components.diagnostics.diagnose()
    finally:
        await components.client.close()

    print("\n" + "=" * 60)
    print("     SUMMARY")
    print("=" * 60)
    for check in report.checks:
        print(f"  {check.render()}")

    print()
    if report.passed:
        print(f"  {GREEN}No failing checks{RESET}")
        return 0

    print(f"  {YELLOW}{len(report.failures)}/{len(report.checks)} checks failed{RESET}")
    return 1


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
