"""Main entry point - runs the daily distribution scheduler."""

import asyncio
import logging
import signal
import sys
from typing import Optional

from rewards_distributor.config import Settings, get_settings
from rewards_distributor.exceptions import ConfigurationError
from rewards_distributor.factory import Components, create_components
from rewards_distributor.scheduler import DailyScheduler

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    """Configure root logging for the process."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class Application:
    """Long-running service that fires the distribution on schedule."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.components: Optional[Components] = None
        self.scheduler: Optional[DailyScheduler] = None
        self._shutdown_event = asyncio.Event()

    async def start(self):
        """Start the scheduler and block until shutdown."""
        logger.info("Starting daily rewards distributor...")
        logger.info(f"Settings: {self.settings.get_safe_dict()}")

        self.components = create_components(self.settings)
        logger.info(f"Contract address: {self.components.gateway.contract_address}")
        logger.info(f"Signer address: {self.components.gateway.signer_address}")

        self.scheduler = DailyScheduler(
            self.components.job,
            hour=self.settings.schedule_hour,
            minute=self.settings.schedule_minute,
            every_minute=self.settings.schedule_every_minute,
        )
        scheduler_task = asyncio.create_task(self.scheduler.run())

        # Wait for shutdown signal
        await self._shutdown_event.wait()

        scheduler_task.cancel()
        await asyncio.gather(scheduler_task, return_exceptions=True)

        await self._cleanup()

    async def _cleanup(self):
        """Cleanup resources."""
        logger.info("Shutting down...")

        if self.scheduler:
            await self.scheduler.shutdown()
        if self.components:
            await self.components.client.close()

        logger.info("Service stopped")

    def shutdown(self):
        """Signal shutdown."""
        logger.info("Shutdown requested")
        self._shutdown_event.set()


def main():
    """Main entry point."""
    configure_logging()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    if settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    app = Application(settings)
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, app.shutdown)

    try:
        loop.run_until_complete(app.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        loop.close()


if __name__ == "__main__":
    main()
