"""Entry point for the calendar context refresh service."""

import asyncio
import logging
import sys

from calendar_context.config import load_settings
from calendar_context.manager import IntegrationManager

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


async def run_service() -> None:
    """Probe once, refresh now, then refresh on an interval until stopped."""
    manager = IntegrationManager(load_settings())
    await manager.start()
    await manager.refresh()
    await manager.run_scheduler()
    try:
        await asyncio.Event().wait()
    finally:
        manager.shutdown()


def main() -> None:
    """Main entry point."""
    logger.info("Starting calendar context service...")

    try:
        asyncio.run(run_service())
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
