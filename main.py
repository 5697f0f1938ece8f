"""
SportsBuddy - Main entry point.

Restores the user's session (backend or local mock mode) and serves the
local web adapter that the UI talks to.
"""

import asyncio
import logging
import sys
from aiohttp import web
from adapters.web.loader import auth_service, user_data_service, server_client, context
from adapters.web import create_app
from config.settings import settings
from config.features import features

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("sportsbuddy.log", encoding="utf-8"),
    ],
)
logger = logging.getLogger(__name__)

# Set DEBUG level only for our app loggers, not for noisy libraries
if features.DEBUG_MODE:
    for name in ['adapters', 'core', 'infrastructure', '__main__']:
        logging.getLogger(name).setLevel(logging.DEBUG)
    # Silence noisy HTTP debug logs
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('hpack').setLevel(logging.WARNING)


async def run_web_server() -> web.AppRunner:
    """Run the local aiohttp adapter."""
    app = create_app(auth_service, user_data_service, context)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, settings.web_host, settings.web_port)
    await site.start()
    logger.info(f"Web adapter running on http://{settings.web_host}:{settings.web_port}")
    return runner


async def main():
    """Main function - bootstraps the session and serves until stopped."""

    logger.info("=== SportsBuddy Starting ===")
    logger.info("Feature Flags:")
    for key, value in features.to_dict().items():
        logger.info(f"  {key}: {value}")

    state = await auth_service.bootstrap()
    logger.info(
        f"Session bootstrap finished: {state.bootstrap_state.value} "
        f"(mode={context.mode.value}, user={state.user.id if state.user else None})"
    )

    runner = await run_web_server()
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
        await server_client.aclose()
        logger.info("SportsBuddy stopped.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Stopped by user (Ctrl+C)")
