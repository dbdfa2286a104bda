#!/usr/bin/env python3
"""Trigger one reward distribution outside the schedule.

Runs the same pipeline as the scheduled job (pre-flight, simulation, gas,
send) and waits for the receipt.

Usage:
    python scripts/manual_distribute.py
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv

load_dotenv()

from rewards_distributor.config import get_settings
from rewards_distributor.exceptions import ConfigurationError, DistributorError
from rewards_distributor.factory import create_components
from rewards_distributor.main import configure_logging

logger = logging.getLogger("manual_distribute")


async def main() -> int:
    configure_logging()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    components = create_components(settings)
    try:
        receipt = await components.diagnostics.manual_distribute()
    except DistributorError:
        return 1
    finally:
        await components.client.close()

    if receipt is None:
        logger.warning("Transaction sent but not confirmed; check it on the explorer")
        return 1
    return 0 if receipt.succeeded else 1


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
